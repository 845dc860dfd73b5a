"""
Doodle Animator Main Application
================================

FastAPI entry point for the doodle animation service.

Endpoints:
    GET  /                  - Service information
    GET  /health            - Liveness probe
    GET  /metrics           - Validator and generation counters
    POST /animations        - Assemble a GIF from caller-provided parts
    POST /generate          - Generate frames from a prompt, then assemble
    GET  /animations/latest - Last built GIF as a download
"""

import base64
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional, Sequence

from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response

from doodle_animator.config import settings
from doodle_animator.encoding.asset import AnimationAsset, download_name
from doodle_animator.errors import (
    AnimationError,
    GenerationError,
    InsufficientFrames,
    describe_failure,
)
from doodle_animator.frames.validator import FrameValidator
from doodle_animator.generation import (
    FrameSource,
    GeminiFrameSource,
    ReferenceImage,
    _GENAI_AVAILABLE,
)
from doodle_animator.models.failure_codes import FailureCode
from doodle_animator.models.input import AnimateRequest, GenerateRequest
from doodle_animator.models.output import AnimationResponse, ErrorResponse
from doodle_animator.models.parts import RawPart
from doodle_animator.pipeline import AnimationBuilder


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

_builder: Optional[AnimationBuilder] = None
_frame_source: Optional[FrameSource] = None
_startup_time: float = 0.0

# Last successful build
_latest_asset: Optional[AnimationAsset] = None
_latest_name: Optional[str] = None

# Counters
_build_count: int = 0
_failure_count: int = 0

# Remote failures are 502; everything else the caller can fix is 422
_STATUS_BY_CODE = {
    FailureCode.GENERATION_FAILED: 502,
    FailureCode.ALREADY_FINALIZED: 500,
}


# =============================================================================
# Getters
# =============================================================================

def get_builder() -> Optional[AnimationBuilder]:
    return _builder

def get_frame_source() -> Optional[FrameSource]:
    return _frame_source

def get_latest_asset() -> Optional[AnimationAsset]:
    return _latest_asset


# =============================================================================
# Frame Source Factory
# =============================================================================

def create_frame_source() -> Optional[FrameSource]:
    """
    Create the production frame source based on config.

    Returns None (generation disabled) when google-genai is not installed
    or no API key is configured; /animations keeps working either way.
    """
    if not _GENAI_AVAILABLE:
        logger.warning("google-genai not installed, /generate disabled")
        return None

    if not settings.generation.api_key:
        logger.warning("API_KEY not set, /generate disabled")
        return None

    return GeminiFrameSource(
        api_key=settings.generation.api_key,
        model=settings.generation.model,
        temperature=settings.generation.temperature,
    )


def create_builder() -> AnimationBuilder:
    return AnimationBuilder(
        max_colors=settings.animation.max_colors,
        color_format=settings.animation.color_format,
        decode_timeout=settings.animation.decode_timeout_seconds,
        min_frames=settings.generation.min_frames,
        skip_bad_frames=settings.animation.skip_bad_frames,
    )


# =============================================================================
# Build Helpers
# =============================================================================

def _frame_urls(parts: Sequence[RawPart]) -> List[str]:
    """Accepted frames of a response as data: URLs, for preview."""
    result = FrameValidator().validate(parts)
    return [
        f"data:{frame.mime_type};base64,{base64.b64encode(frame.data).decode('ascii')}"
        for frame in result.frames
    ]


def _error_response(error: AnimationError) -> JSONResponse:
    global _failure_count
    _failure_count += 1

    body = ErrorResponse(
        code=error.code,
        message=describe_failure(error),
        frame_index=error.frame_index,
        observed_count=error.count if isinstance(error, InsufficientFrames) else None,
    )
    status_code = _STATUS_BY_CODE.get(error.code, 422)
    logger.error(f"Build failed ({error.code.value}): {body.message}")
    return JSONResponse(body.model_dump(mode="json"), status_code=status_code)


async def _assemble(
    parts: Sequence[RawPart],
    label: str,
    frame_rate_hz: Optional[float] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> JSONResponse:
    """Run the assembly pipeline and package the result."""
    global _latest_asset, _latest_name, _build_count

    builder = _builder or create_builder()
    try:
        asset = await builder.build(
            parts,
            frame_rate_hz=frame_rate_hz or settings.animation.frame_rate_hz,
            width=settings.animation.width if width is None else width,
            height=settings.animation.height if height is None else height,
        )
    except AnimationError as e:
        return _error_response(e)

    name = download_name(label, asset.media_type)
    _latest_asset = asset
    _latest_name = name
    _build_count += 1

    body = AnimationResponse(
        message="Done!",
        frame_count=asset.frame_count,
        width=asset.width,
        height=asset.height,
        delay_ms=asset.delay_ms,
        media_type=asset.media_type,
        data_url=asset.url,
        download_name=name,
        frames=_frame_urls(parts),
    )
    return JSONResponse(body.model_dump(mode="json"))


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    global _builder, _frame_source, _startup_time

    _startup_time = time.time()
    logger.info(f"Starting {settings.app.name} {settings.app.version}")

    _builder = create_builder()
    _frame_source = create_frame_source()

    logger.info(
        f"Canvas {settings.animation.width}x{settings.animation.height} "
        f"at {settings.animation.frame_rate_hz} Hz, "
        f"generation={'enabled' if _frame_source else 'disabled'}"
    )

    yield

    logger.info("Shutdown complete")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="DoodleAnimator",
    description="Turns generated doodle frames into looping GIF animations",
    version=settings.app.version,
    lifespan=lifespan,
)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "DoodleAnimator",
        "name": settings.app.name,
        "version": settings.app.version,
        "status": "running",
        "generation_enabled": _frame_source is not None,
        "model": settings.generation.model,
    })


@app.get("/health")
async def health() -> JSONResponse:
    """Liveness probe. Always 200 while the process is up."""
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
        "builds": _build_count,
        "failures": _failure_count,
    })


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Detailed metrics for observability."""
    builder = get_builder()
    validator_metrics = {}
    if builder:
        validator_metrics = builder.validator.metrics.to_dict()

    source = get_frame_source()
    generation_metrics = {}
    if source:
        generation_metrics = source.get_metrics()

    return JSONResponse({
        "uptime_seconds": round(time.time() - _startup_time, 1),
        "builds": _build_count,
        "failures": _failure_count,
        "generation_enabled": source is not None,
        "validator": validator_metrics,
        "generation": generation_metrics,
    })


@app.post("/animations")
async def create_animation(request: AnimateRequest) -> JSONResponse:
    """Assemble a GIF from parts the caller already has."""
    parts = request.raw_parts()
    logger.info(f"Animation request with {len(parts)} part(s)")
    return await _assemble(
        parts,
        label=request.name or "",
        frame_rate_hz=request.frame_rate_hz,
        width=request.width,
        height=request.height,
    )


@app.post("/generate")
async def generate(request: GenerateRequest) -> JSONResponse:
    """Generate doodle frames for a prompt, then assemble them."""
    prompt = request.prompt.strip()
    if not prompt:
        return JSONResponse(
            {"status": "error", "message": "Please enter a prompt."},
            status_code=422,
        )

    if _frame_source is None:
        return JSONResponse(
            {
                "status": "error",
                "message": "Frame generation is not configured. Set API_KEY.",
            },
            status_code=503,
        )

    try:
        reference = None
        if request.reference_image is not None:
            reference = ReferenceImage.from_base64(
                request.reference_image.data,
                request.reference_image.mime_type,
                max_size_mb=settings.reference_image.max_size_mb,
            )

        logger.info(f"Generating frames for prompt: {prompt[:80]!r}")
        parts = await _frame_source.generate(prompt, reference)
    except AnimationError as e:
        return _error_response(e)
    except Exception as e:
        return _error_response(GenerationError(str(e) or type(e).__name__))

    return await _assemble(parts, label=prompt)


@app.get("/animations/latest")
async def latest_animation() -> Response:
    """Last successfully built animation, as a file download."""
    asset = get_latest_asset()

    if asset is None:
        return JSONResponse(
            {"status": "error", "message": "No animation available yet"},
            status_code=404,
        )

    return Response(
        content=asset.data,
        media_type=asset.media_type,
        headers={"Content-Disposition": f'attachment; filename="{_latest_name}"'},
    )


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    # Cloud Run uses PORT env var
    port = int(os.environ.get("PORT", settings.server.port))

    uvicorn.run(
        "doodle_animator.main:app",
        host=settings.server.host,
        port=port,
        reload=False,
    )
