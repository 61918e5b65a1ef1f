from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from app.core.logging import logger
from app.core.config import settings
from app.api.v1.endpoints.passport import router as passport_v1_router
from app.services.orchestrator import DocumentPipeline
from app.services.recognition import RecognitionClient, TesseractRecognitionClient
from prometheus_fastapi_instrumentator import Instrumentator


def create_app(recognition_client: Optional[RecognitionClient] = None) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One recognition engine per process, owned by the app
        client = recognition_client or TesseractRecognitionClient(settings)
        client.initialize()
        app.state.pipeline = DocumentPipeline(client, settings=settings)
        logger.info("Passport OCR pipeline ready")
        try:
            yield
        finally:
            app.state.pipeline = None
            client.shutdown()
            logger.info("Passport OCR pipeline stopped")

    app = FastAPI(title="Passport OCR API", lifespan=lifespan)

    # Include all API routes
    app.include_router(passport_v1_router, prefix="/api/v1", tags=["v1"])

    # Health check route (Prometheus can also use this)
    @app.get("/healthz")
    def health_check():
        return {"status": "ok"}

    # Initialize Prometheus metrics
    Instrumentator().instrument(app).expose(app, endpoint="/metrics")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
