import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the ``haven`` logger tree.

    Calling this more than once only updates the level, so app reloads
    and test clients do not stack duplicate handlers.
    """
    root = logging.getLogger("haven")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(getattr(h, "_haven_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._haven_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
