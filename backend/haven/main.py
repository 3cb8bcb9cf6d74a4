import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from haven.api.routes_assessment import router as assessment_router
from haven.core.config import settings
from haven.core.logging import configure_logging
from haven.db.session import close_db, init_db
from haven.services.scoring import DISCLAIMER_TEXT

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(settings.log_level)
    if settings.storage_backend != "memory":
        await init_db()
    logger.info("%s started (storage backend: %s)", settings.app_name, settings.storage_backend)
    yield
    await close_db()


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(assessment_router)


class RootResponse(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    message: str
    disclaimer: str


@app.get("/", response_model=RootResponse)
async def root() -> RootResponse:
    # Request Example:
    # GET /
    #
    # Response Example:
    # 200
    # {"message":"Haven Assessment API","disclaimer":"This result is for self-reflection only ..."}
    return RootResponse(message=settings.app_name, disclaimer=DISCLAIMER_TEXT)
