from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import Body, FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates

from thumbly.assembly.render import export_filename, export_thumbnail
from thumbly.catalog import COLOR_SCHEMES, FONT_PAIRINGS, RESOLUTIONS, STYLES
from thumbly.config import settings
from thumbly.errors import DecodeError
from thumbly.models import FitMode
from thumbly.prompts import PromptPolicy
from thumbly.providers.gemini_provider import GeminiProvider
from thumbly.providers.base import UnconfiguredModel
from thumbly.service import ThumbnailService
from thumbly.session import SessionRegistry, ThumbnailSession
from thumbly.storage import PreferenceStore

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


SESSION_COOKIE = "thumbly_session"


def _build_service() -> ThumbnailService:
    policy = PromptPolicy(
        target=RESOLUTIONS[settings.prompt_target_resolution],
        strict_literal_guard=settings.prompt_strict_literal_guard,
    )
    if not settings.gemini_api_key:
        # Input is still validated; only the model call fails.
        logger.warning("GEMINI_API_KEY is not set; generation is disabled")
        model = UnconfiguredModel("GEMINI_API_KEY is not set", model=settings.gemini_image_model)
        return ThumbnailService(model, policy=policy, timeout_s=settings.request_timeout_s)
    provider = GeminiProvider(
        api_key=settings.gemini_api_key,
        model=settings.gemini_image_model,
        timeout_s=settings.request_timeout_s,
    )
    return ThumbnailService(provider, policy=policy, timeout_s=settings.request_timeout_s)


def _session(request: Request) -> tuple[str, ThumbnailSession]:
    return request.app.state.sessions.get(request.cookies.get(SESSION_COOKIE))


def _with_session(payload: dict[str, Any], session_id: str) -> JSONResponse:
    resp = JSONResponse(payload)
    resp.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return resp


def _parse_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_fit_mode(value: str | None) -> FitMode:
    raw = (value or settings.export_fit_mode).strip().lower()
    try:
        return FitMode(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"mode must be one of: {', '.join(m.value for m in FitMode)}")


def create_app(
    service: ThumbnailService | None = None,
    preferences: PreferenceStore | None = None,
) -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="thumbly")
    app.state.service = service if service is not None else _build_service()
    app.state.preferences = preferences if preferences is not None else PreferenceStore()
    app.state.sessions = SessionRegistry(app.state.service)

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request):
        return templates.TemplateResponse(
            request=request,
            name="index.html",
            context={
                "color_schemes": COLOR_SCHEMES,
                "font_pairings": FONT_PAIRINGS,
                "styles": STYLES,
                "resolutions": RESOLUTIONS,
                "default_mode": settings.export_fit_mode,
            },
        )

    @app.post("/api/generate")
    async def generate(request: Request, payload: Any = Body(None)):
        session_id, session = _session(request)
        result = await session.generate(payload)
        return _with_session(result.to_payload("thumbnailDataUri"), session_id)

    @app.post("/api/regenerate")
    async def regenerate(request: Request, payload: Any = Body(None)):
        # previousThumbnail may be omitted; the session's current thumbnail is used.
        session_id, session = _session(request)
        result = await session.regenerate(payload)
        return _with_session(result.to_payload("thumbnail"), session_id)

    @app.get("/api/session")
    def session_state(request: Request):
        session_id, session = _session(request)
        return _with_session(session.snapshot(), session_id)

    @app.post("/api/export")
    def export(
        image: str = Form(...),
        resolution: str = Form("FHD"),
        topic: str = Form(""),
        mode: str = Form(""),
    ):
        target = RESOLUTIONS.get(resolution.strip().upper())
        if target is None:
            raise HTTPException(status_code=400, detail=f"resolution must be one of: {', '.join(RESOLUTIONS)}")
        fit_mode = _parse_fit_mode(mode)
        try:
            png = export_thumbnail(image, target, fit_mode)
        except DecodeError as exc:
            logger.info("export rejected: %s", exc.message)
            raise HTTPException(status_code=422, detail=exc.message) from exc
        filename = export_filename(topic, target)
        headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
        return Response(content=png, media_type="image/png", headers=headers)

    @app.get("/api/theme")
    def get_theme(request: Request, system_prefers_dark: str | None = None):
        theme = request.app.state.preferences.initial_theme(_parse_bool(system_prefers_dark))
        return {"theme": theme}

    @app.post("/api/theme")
    def set_theme(request: Request, theme: str = Form(...)):
        try:
            stored = request.app.state.preferences.set_theme(theme.strip().lower())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"theme": stored}

    @app.post("/api/theme/toggle")
    def toggle_theme(request: Request, system_prefers_dark: str | None = None):
        theme = request.app.state.preferences.toggle_theme(_parse_bool(system_prefers_dark))
        return {"theme": theme}

    return app
