from fastapi import APIRouter, UploadFile, File, HTTPException, Depends
from fastapi.concurrency import run_in_threadpool
from typing import List
import logging

from app.api.v1.deps import get_pipeline, get_settings
from app.core.config import Settings
from app.core.errors import RecognitionError
from app.schemas.request import ParseTextRequest
from app.schemas.response import BatchExtractionResponse, BatchItemResponse, ExtractionResponse
from app.services.orchestrator import DocumentPipeline
from app.utils.image_io import read_image_upload

logger = logging.getLogger(__name__)

router = APIRouter()


def _extraction_response(fields, origins, text: str = "") -> ExtractionResponse:
    message = "Passport fields extracted" if not fields.is_empty() else "No passport fields detected"
    return ExtractionResponse(
        success=True,
        message=message,
        fields=fields,
        sources=origins,
        text=text,
        character_count=len(text),
    )


@router.post("/extract", response_model=ExtractionResponse)
async def extract_passport(
    file: UploadFile = File(...),
    pipeline: DocumentPipeline = Depends(get_pipeline),
    app_settings: Settings = Depends(get_settings),
):
    """
    Extract identity fields from a photographed passport data page.

    Parameters:
    - file: The uploaded passport image (required)

    Returns:
    - Extracted fields plus the source (mrz / visual / none) of each one
    - The raw recognized text and its character count
    - 400 error if the upload is not a readable image
    - 502 error if the recognition engine fails
    - 500 error for unexpected internal failures
    """
    try:
        contents = await read_image_upload(file, app_settings.MAX_UPLOAD_MB)
        result = await run_in_threadpool(pipeline.process_document, contents, 0, file.filename or "")

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    except RecognitionError as e:
        logger.error(f"Recognition failed: {e}")
        raise HTTPException(status_code=502, detail=e.to_dict())

    except Exception as e:
        logger.error(f"Passport extraction endpoint error: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Internal error: {e}")

    return _extraction_response(result.fields, result.sources, result.text)


@router.post("/extract-batch", response_model=BatchExtractionResponse)
async def extract_passport_batch(
    files: List[UploadFile] = File(...),
    pipeline: DocumentPipeline = Depends(get_pipeline),
    app_settings: Settings = Depends(get_settings),
):
    """
    Extract fields from several passport images, processed one at a time in
    upload order. A failing file is reported in its slot and does not stop
    the rest of the batch.
    """
    documents = []
    results: List[BatchItemResponse] = [None] * len(files)

    for index, upload in enumerate(files):
        name = upload.filename or ""
        try:
            documents.append((index, name, await read_image_upload(upload, app_settings.MAX_UPLOAD_MB)))
        except ValueError as e:
            results[index] = BatchItemResponse(index=index, filename=name, success=False, error=str(e))

    batch = await run_in_threadpool(pipeline.run_batch, [(name, data) for _, name, data in documents])

    for (index, name, _), outcome in zip(documents, batch):
        results[index] = BatchItemResponse(
            index=index,
            filename=name,
            success=outcome.ok,
            fields=outcome.fields,
            sources=outcome.sources,
            text=outcome.text,
            error=outcome.error,
        )

    return BatchExtractionResponse(
        total=len(results),
        succeeded=sum(1 for item in results if item.success),
        results=results,
    )


@router.post("/parse-text", response_model=ExtractionResponse)
def parse_recognized_text(
    payload: ParseTextRequest,
    pipeline: DocumentPipeline = Depends(get_pipeline),
):
    """Run only the MRZ and visual-zone decoders on already recognized text."""
    fields, origins = pipeline.parse_text_with_origin(payload.text)
    return _extraction_response(fields, origins, payload.text)
