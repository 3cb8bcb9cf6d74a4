class IncompleteAssessmentError(ValueError):
    """Raised when a questionnaire is submitted with unanswered items."""

    def __init__(self, missing: list[int]) -> None:
        self.missing = missing
        numbers = ", ".join(str(n) for n in missing)
        super().__init__(f"Please answer all questions to complete the assessment (unanswered: {numbers}).")


class HistoryPersistenceError(RuntimeError):
    """Raised when the assessment history could not be written."""

    def __init__(self, operation: str, cause: Exception | None = None) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation} assessment history.")
