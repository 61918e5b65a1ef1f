from fastapi import HTTPException, Request

from app.core.config import Settings, settings
from app.services.orchestrator import DocumentPipeline


def get_pipeline(request: Request) -> DocumentPipeline:
    """Dependency to inject the pipeline built during app startup."""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Recognition engine not initialized")
    return pipeline


def get_settings() -> Settings:
    return settings
