"""
Credibility analysis API endpoints
"""

from contextlib import aclosing

from fastapi import APIRouter, Depends, HTTPException, Request, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
import logging

from .. import __version__
from .models import AnalyzeRequest, AnalyzeResponse, CancelResponse, HealthResponse, MemoryStatus
from ..errors import (
    AnalysisCancelled,
    AnalysisInProgress,
    InsufficientResources,
    InvalidAnalysisText,
)
from ..service import AnalysisService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["analysis"])


def get_service(request: Request) -> AnalysisService:
    """Analysis service created at application startup"""
    return request.app.state.service


@router.get("/health", response_model=HealthResponse)
async def health_check(service: AnalysisService = Depends(get_service)):
    """Health check endpoint"""
    inference_up = await service.pipeline.client.ping()
    memory = service.memory_guard.check()

    return HealthResponse(
        status="healthy" if inference_up else "degraded",
        services={
            "api": "running",
            "inference": "running" if inference_up else "unreachable",
        },
        memory=MemoryStatus(
            free_gb=memory.free_gb,
            total_gb=memory.total_gb,
            is_critical=memory.is_critical,
        ),
        analysis_in_progress=service.busy,
        version=__version__,
    )


@router.post("/analyze", response_model=AnalyzeResponse, response_model_exclude_none=True)
async def analyze_text(
    request: AnalyzeRequest,
    service: AnalysisService = Depends(get_service),
):
    """
    Analyze copied text and return the credibility verdict
    """
    logger.info(f"Analysis requested: {len(request.text)} chars from {request.source}")

    try:
        result = await service.analyze(request.text, request.source)
    except InvalidAnalysisText as e:
        raise HTTPException(status_code=422, detail=e.message)
    except InsufficientResources as e:
        raise HTTPException(status_code=503, detail=e.message)
    except AnalysisInProgress as e:
        raise HTTPException(status_code=409, detail=e.message)
    except AnalysisCancelled as e:
        raise HTTPException(status_code=409, detail=e.message)

    return result.to_json_dict()


@router.post("/analyze/cancel", response_model=CancelResponse)
async def cancel_analysis(service: AnalysisService = Depends(get_service)):
    """Cancel the active analysis at its next stage boundary"""
    return CancelResponse(cancelled=service.cancel())


@router.websocket("/analyze/stream")
async def analyze_text_stream(websocket: WebSocket):
    """
    Analyze text with stage-by-stage progress updates via WebSocket
    """
    await websocket.accept()
    service: AnalysisService = websocket.app.state.service

    try:
        # Receive request data
        request_data = await websocket.receive_json()

        try:
            request = AnalyzeRequest(**request_data)
        except (TypeError, ValidationError) as e:
            await websocket.send_json({
                "type": "error",
                "message": f"Invalid request: {str(e)}"
            })
            await websocket.close()
            return

        try:
            async with aclosing(service.analyze_stream(request.text, request.source)) as stream:
                async for message in stream:
                    await websocket.send_json(message)
        except (InvalidAnalysisText, InsufficientResources, AnalysisInProgress) as e:
            await websocket.send_json({"type": "error", "message": e.message})
        except AnalysisCancelled as e:
            await websocket.send_json({"type": "cancelled", "message": e.message})

        await websocket.close()
        logger.info("Stream completed")

    except WebSocketDisconnect:
        logger.info("WebSocket disconnected by client")
