"""
API Layer for Companion Service

This module provides FastAPI endpoints for emotion analysis.
"""

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from fusion.models import AnalyzeEmotionRequest, AnalyzeEmotionResponse, ErrorResponse
from fusion.orchestrator import EmotionAnalysisService, get_analysis_service
from utils.errors import ConfigurationError, InputValidationError, ServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/emotion", tags=["emotion"])


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/analyze",
    response_model=AnalyzeEmotionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}
)
async def analyze_emotion(
    request: AnalyzeEmotionRequest,
    service: EmotionAnalysisService = Depends(get_analysis_service)
):
    """
    Classify the text emotion, fuse it with the vision emotion and generate a reply.

    This endpoint:
    1. Validates the text
    2. Asks the AI gateway for the text emotion
    3. Applies the negative-priority fusion rule
    4. Asks the AI gateway for an empathetic response keyed on the final emotion
    5. Returns textEmotion, finalEmotion and empatheticResponse

    Returns:
        AnalyzeEmotionResponse, or {"error": ...} with 400/500/502 on failure
    """
    logger.info("POST /emotion/analyze - Endpoint called")

    try:
        result = await service.analyze(request)
        logger.info(f"POST /emotion/analyze - Success: {result.final_emotion.value}")
        return result

    except InputValidationError as e:
        logger.warning(f"POST /emotion/analyze - Validation error: {e}")
        return error_response(400, str(e))
    except ServiceError as e:
        logger.error(f"POST /emotion/analyze - Upstream error: {e}")
        return error_response(502, str(e))
    except Exception as e:
        logger.error(f"POST /emotion/analyze - Unexpected error: {e}", exc_info=True)
        return error_response(500, str(e) or "Unknown error occurred")


@router.get("/health")
async def health():
    """
    Health check endpoint for the analyze service.

    Returns:
        Dictionary with health status and whether the gateway credential is configured
    """
    logger.info("GET /emotion/health - Health check called")

    try:
        get_analysis_service()
    except ConfigurationError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "service": "emotion",
                "gateway": "not configured",
                "error": str(e)
            }
        )

    return {
        "status": "healthy",
        "service": "emotion",
        "gateway": "configured"
    }
