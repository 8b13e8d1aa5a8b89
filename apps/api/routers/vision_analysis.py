"""
Vision Analysis API Endpoints

Upload a clip or photo for one of the camera-based assessments. Returns
503 until an inference backend is configured for that analysis type.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from core.exceptions import NotFoundError, ValidationError
from schemas import VisionAnalysisResponse, VisionAnalyzerInfo
from services.vision_analysis import (
    InvalidMediaError,
    MediaUpload,
    VisionAnalysisUnavailable,
    VisionAnalyzerRegistry,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/vision", tags=["vision_analysis"])

CHUNK_BYTES = 1024 * 1024


@router.get("/analyzers", response_model=List[VisionAnalyzerInfo])
def list_analyzers():
    return VisionAnalyzerRegistry.list_analysis_types()


@router.post("/{analysis_type}", response_model=VisionAnalysisResponse)
async def analyze_upload(
    analysis_type: str,
    file: UploadFile = File(...),
    height_cm: Optional[float] = Form(None),
):
    """
    Analyze an uploaded video/photo.

    height_cm is required for body_metrics.
    """
    analyzer = VisionAnalyzerRegistry.get_analyzer(analysis_type)
    if analyzer is None:
        raise NotFoundError("Analysis type", analysis_type)

    # Reject on declared type before reading the body
    try:
        analyzer.validate_media(MediaUpload(file.filename or "", file.content_type or "", 0))
    except InvalidMediaError as e:
        raise ValidationError(str(e), field="file")

    chunks = []
    total = 0
    try:
        while True:
            chunk = await file.read(CHUNK_BYTES)
            if not chunk:
                break
            total += len(chunk)
            if total > analyzer.max_upload_bytes:
                raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="file_too_large")
            chunks.append(chunk)
    finally:
        await file.close()

    media = MediaUpload(
        filename=file.filename or "",
        content_type=file.content_type or "",
        size_bytes=total,
        content=b"".join(chunks),
    )
    context = {"height_cm": height_cm} if height_cm is not None else {}

    try:
        result = analyzer.analyze(media, **context)
    except InvalidMediaError as e:
        raise ValidationError(str(e), field="file")
    except VisionAnalysisUnavailable as e:
        logger.info(f"Vision analysis requested but unavailable: {analysis_type}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except ValueError as e:
        raise ValidationError(str(e))

    return VisionAnalysisResponse(**result.to_dict())
