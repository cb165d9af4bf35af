"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

import httpx
import openai
from fastapi import FastAPI, File, Form, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse

from meal_coach.api.models import (
    TryOnRequest,
    VideoScriptRequest,
    analysis_payload,
    summary_payload,
)
from meal_coach.app_logging import configure_logging
from meal_coach.containers import AppContainer
from meal_coach.services.try_on import TryOnError
from meal_coach.services.video import VideoGenerationError, VideoTimeoutError
from meal_coach.services.vision import VisionExtractionError


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/analyze", response_model=None)
    async def analyze(
        request: Request,
        image: UploadFile | None = File(default=None),
        user_email: str | None = Form(default=None, alias="userEmail"),
    ) -> dict[str, object] | JSONResponse:
        """Analyze a meal photo, score it and log it."""
        state_container: AppContainer = request.app.state.container
        if image is None or not user_email:
            return _error(
                status.HTTP_400_BAD_REQUEST, "Image and user email are required"
            )
        image_bytes = await image.read()
        logger.info(
            "Received image: type=%s size=%s name=%s",
            image.content_type,
            len(image_bytes),
            image.filename,
        )
        try:
            analysis = await state_container.food_track_service.analyze_meal(
                user_email, image_bytes
            )
        except (VisionExtractionError, httpx.HTTPError, openai.APIError) as exc:
            logger.exception("Meal analysis failed")
            return _error(status.HTTP_502_BAD_GATEWAY, str(exc))
        except Exception as exc:
            logger.exception("Meal analysis failed")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
        return analysis_payload(analysis)

    @app.get("/api/food-data", response_model=None)
    async def food_data(
        request: Request,
        user_email: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> dict[str, object] | JSONResponse:
        """Return food and health averages for a period."""
        state_container: AppContainer = request.app.state.container
        if not user_email or not start_date or not end_date:
            return _error(
                status.HTTP_400_BAD_REQUEST,
                "user_email, start_date, and end_date are required",
            )
        period = _parse_period(start_date, end_date)
        if period is None:
            return _error(status.HTTP_400_BAD_REQUEST, "Dates must be YYYY-MM-DD")
        try:
            summary = state_container.summary_service.build_summary(
                user_email, *period
            )
        except Exception as exc:
            logger.exception("Failed to build summary")
            return _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc)
            )
        return summary_payload(summary)

    @app.post("/api/video-script", response_model=None)
    async def video_script(
        payload: VideoScriptRequest, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Generate and publish a motivational avatar video."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.video_service.generate(
                payload.user_email, payload.start_date, payload.end_date
            )
        except VideoTimeoutError as exc:
            logger.warning("Video generation timed out: %s", exc)
            return _error(status.HTTP_504_GATEWAY_TIMEOUT, "Video generation timed out")
        except (VideoGenerationError, httpx.HTTPError, openai.APIError) as exc:
            logger.exception("Video generation failed")
            return _error(
                status.HTTP_502_BAD_GATEWAY, "Video generation failed", str(exc)
            )
        except Exception as exc:
            logger.exception("Video generation failed")
            return _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", str(exc)
            )
        return {"supabase_url": result.video_url, "script": result.script}

    @app.post("/api/try-on", response_model=None)
    async def try_on(
        payload: TryOnRequest, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Run a virtual try-on and wait for the generated image."""
        state_container: AppContainer = request.app.state.container
        try:
            task = await state_container.try_on_service.try_on(
                str(payload.human_image_url),
                str(payload.cloth_image_url),
                str(payload.callback_url) if payload.callback_url else None,
            )
        except (TryOnError, httpx.HTTPError) as exc:
            logger.exception("Virtual try-on failed")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Virtual try-on failed", "message": str(exc)},
            )
        return {
            "status": "success",
            "task_id": task.task_id,
            "generated_image_url": task.image_url,
        }

    @app.get("/api/try-on/status", response_model=None)
    async def try_on_status(
        request: Request, task_id: str | None = Query(default=None, alias="taskId")
    ) -> dict[str, object] | JSONResponse:
        """Report the state of a try-on task."""
        state_container: AppContainer = request.app.state.container
        if not task_id:
            return _error(status.HTTP_400_BAD_REQUEST, "Task ID is required")
        try:
            task = await state_container.try_on_service.get_status(task_id)
        except (TryOnError, httpx.HTTPError) as exc:
            logger.exception("Failed to check try-on status")
            return _error(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Failed to check task status",
                str(exc),
            )
        if task.status == "succeed":
            return {"status": "success", "generated_image_url": task.image_url}
        if task.status == "failed":
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "status": "failed",
                    "error": task.status_message or "Task failed",
                },
            )
        return JSONResponse(
            status_code=status.HTTP_202_ACCEPTED,
            content={"status": "pending", "message": "Task is still processing"},
        )

    @app.post("/api/upload", response_model=None)
    async def upload(
        request: Request,
        file: UploadFile | None = File(default=None),
        folder: str | None = Form(default=None),
    ) -> dict[str, object] | JSONResponse:
        """Upload an image to public storage."""
        state_container: AppContainer = request.app.state.container
        if file is None or not folder:
            return _error(status.HTTP_400_BAD_REQUEST, "File and folder are required")
        content = await file.read()
        try:
            url = state_container.upload_service.upload(
                folder, file.filename or "upload", content, file.content_type
            )
        except Exception:
            logger.exception("Upload failed")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Upload failed")
        return {"url": url}

    return app


def _error(status_code: int, message: str, details: str | None = None) -> JSONResponse:
    content: dict[str, object] = {"error": message}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _parse_period(start_date: str, end_date: str) -> tuple[date, date] | None:
    """Parse ISO dates, accepting full timestamps."""
    try:
        return date.fromisoformat(start_date[:10]), date.fromisoformat(end_date[:10])
    except ValueError:
        return None
