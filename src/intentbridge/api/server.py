"""
FastAPI application factory.

Exposes health and capability endpoints, platform status, message
injection, direct remote action calls, and the inbound webhooks of the
platforms that push to us (Teams, WhatsApp). Anything else falls back to
the single-page client.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from intentbridge import __version__
from intentbridge.actions.client import RemoteActionClient
from intentbridge.actions.exceptions import NotConnectedError
from intentbridge.actions.models import ActionRequest
from intentbridge.config.schema import Config
from intentbridge.platforms.adapters.teams import TeamsAdapter
from intentbridge.platforms.adapters.whatsapp import WhatsAppAdapter
from intentbridge.platforms.models import Message, PlatformType
from intentbridge.platforms.router import MessageRouter

logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({"/", "/health"})


class MessageBody(BaseModel):
    platform: Optional[str] = None
    chatId: Optional[Union[str, int]] = None
    text: Optional[str] = None


class ActionBody(BaseModel):
    method: Optional[str] = None
    params: Optional[dict[str, Any]] = None
    context: Optional[dict[str, Any]] = None


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Require `Authorization: Bearer <secret>` outside the exempt paths."""

    def __init__(self, app, secret: str, exempt_paths: frozenset[str]):
        super().__init__(app)
        self._expected = f"Bearer {secret}"
        self._exempt_paths = exempt_paths

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self._exempt_paths:
            return await call_next(request)

        if request.headers.get("Authorization") != self._expected:
            logger.warning(f"Rejected unauthenticated request to {request.url.path}")
            return JSONResponse(status_code=401, content={"error": "Unauthorized"})

        return await call_next(request)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _static_file(static_dir: Optional[str], path: str) -> Optional[Path]:
    """Resolve a client file, falling back to index.html. None if unavailable."""
    if not static_dir:
        return None

    root = Path(static_dir).expanduser().resolve()
    if path:
        candidate = (root / path).resolve()
        if candidate.is_relative_to(root) and candidate.is_file():
            return candidate

    index = root / "index.html"
    return index if index.is_file() else None


def create_app(
    config: Config,
    router: MessageRouter,
    action_client: Optional[RemoteActionClient] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Loaded configuration
        router: Message router used for injected messages and webhooks
        action_client: Remote action client (None = /api/mcp returns 503)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="IntentBridge",
        description="Multi-Platform AI Integration API",
        version=__version__,
    )

    teams = router.get_adapter(PlatformType.TEAMS.value)
    whatsapp = router.get_adapter(PlatformType.WHATSAPP.value)
    webhook_paths: set[str] = set()

    if config.api.auth_enabled and config.api.secret_key:
        if isinstance(teams, TeamsAdapter):
            webhook_paths.add(config.platforms.teams.webhook_path)
        if isinstance(whatsapp, WhatsAppAdapter):
            webhook_paths.add(config.platforms.whatsapp.webhook_path)
        app.add_middleware(
            BearerAuthMiddleware,
            secret=config.api.secret_key,
            exempt_paths=PUBLIC_PATHS | webhook_paths,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.debug(f"Invalid request body for {request.url.path}: {exc.errors()}")
        return _error(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = "Not found" if exc.status_code == 404 else exc.detail
        return _error(exc.status_code, detail)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
        return _error(500, "Internal server error")

    @app.get("/health")
    async def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/")
    async def root():
        return {
            "name": "Multi-Platform AI Integration API",
            "version": __version__,
            "description": "AI-powered integration for WhatsApp, Telegram, Slack, and Microsoft Teams",
            "endpoints": {
                "health": "GET /health",
                "mcp": "POST /api/mcp",
                "message": "POST /api/message",
                "platforms": "GET /api/platforms",
            },
        }

    @app.get("/api/platforms")
    async def platforms():
        return {name: {"enabled": section.enable} for name, section in config.platforms.items()}

    @app.post("/api/message")
    async def inject_message(body: MessageBody, background_tasks: BackgroundTasks):
        if not body.platform or body.chatId in (None, "") or not body.text:
            return _error(400, "Missing required fields: platform, chatId, text")

        try:
            platform = PlatformType(body.platform)
        except ValueError:
            return _error(400, f"Unknown platform: {body.platform}")

        chat_id = str(body.chatId)
        message = Message(
            id=f"api-{int(datetime.now(timezone.utc).timestamp() * 1000)}",
            platform=platform,
            user_id="api",
            user_name="api",
            chat_id=chat_id,
            text=body.text,
            metadata={"source": "api"},
        )
        background_tasks.add_task(router.handle_message, message)
        logger.info(f"Accepted API message for {platform.value} chat {chat_id}")

        return {
            "success": True,
            "message": "Message accepted",
            "data": {"platform": platform.value, "chatId": chat_id, "text": body.text},
        }

    @app.post("/api/mcp")
    async def remote_action(body: ActionBody):
        if action_client is None:
            return _error(503, "Remote action client not enabled")
        if not body.method:
            return _error(400, "Missing required field: method")

        try:
            result = await action_client.request(
                ActionRequest(
                    method=body.method,
                    params=body.params or {},
                    context=body.context or {},
                )
            )
        except NotConnectedError as e:
            return _error(500, str(e))

        return JSONResponse(
            status_code=200 if result.success else 500,
            content=result.to_payload(),
        )

    if isinstance(teams, TeamsAdapter):
        teams_adapter = teams

        @app.post(config.platforms.teams.webhook_path)
        async def teams_webhook(request: Request):
            body = await request.json()
            invoke_response = await teams_adapter.process_webhook(
                body, request.headers.get("Authorization", "")
            )
            if invoke_response is not None:
                return JSONResponse(
                    status_code=invoke_response.status, content=invoke_response.body
                )
            return Response(status_code=200)

        logger.info(f"Teams webhook endpoint set up at {config.platforms.teams.webhook_path}")

    if isinstance(whatsapp, WhatsAppAdapter):
        whatsapp_adapter = whatsapp

        @app.get(config.platforms.whatsapp.webhook_path)
        async def whatsapp_verify(request: Request):
            params = request.query_params
            challenge = whatsapp_adapter.verify_webhook(
                params.get("hub.mode"),
                params.get("hub.verify_token"),
                params.get("hub.challenge"),
            )
            if challenge is None:
                return _error(403, "Verification failed")
            return PlainTextResponse(challenge)

        @app.post(config.platforms.whatsapp.webhook_path)
        async def whatsapp_webhook(request: Request):
            count = whatsapp_adapter.handle_webhook(await request.json())
            return {"received": count}

        logger.info(
            f"WhatsApp webhook endpoint set up at {config.platforms.whatsapp.webhook_path}"
        )

    @app.api_route("/{full_path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    async def client_app(request: Request, full_path: str):
        if request.method != "GET" or full_path == "api" or full_path.startswith("api/"):
            return _error(404, "Not found")

        file_path = _static_file(config.server.static_dir, full_path)
        if file_path is None:
            return _error(404, "Not found")
        return FileResponse(file_path)

    return app
