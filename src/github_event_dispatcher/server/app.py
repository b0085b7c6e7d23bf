"""FastAPI app factory.

Endpoints are thin wrappers over `EventDispatcher`; webhook signature
verification is expected to happen in front of this service.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, HTTPException, Query, Request, Response
from fastapi.concurrency import run_in_threadpool

from github_event_dispatcher import __version__
from github_event_dispatcher.config import DispatcherSettings
from github_event_dispatcher.dispatcher import EventDispatcher
from github_event_dispatcher.errors import DispatchError, InvalidPayload
from github_event_dispatcher.events.models import resolve_event_kind
from github_event_dispatcher.factory import build_dispatcher
from github_event_dispatcher.server.models import WebhookResponse
from github_event_dispatcher.storage.log_store import LogRecord

logger = logging.getLogger(__name__)


def create_app(
    settings: DispatcherSettings | None = None,
    dispatcher: EventDispatcher | None = None,
) -> FastAPI:
    settings = settings or DispatcherSettings()
    dispatcher = dispatcher or build_dispatcher(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        dispatcher.close()
        logger.info("Dispatcher collaborators closed")

    app = FastAPI(
        title="GitHub Event Dispatcher",
        version=__version__,
        description="Receives GitHub webhooks, records them, notifies and triggers CI/CD.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.dispatcher = dispatcher

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.post("/api/webhooks/github", response_model=WebhookResponse)
    async def github_webhook(
        request: Request,
        response: Response,
        x_github_event: str | None = Header(default=None),
        x_github_delivery: str | None = Header(default=None),
    ) -> WebhookResponse:
        if not x_github_event:
            raise HTTPException(status_code=400, detail="Missing X-GitHub-Event header")

        try:
            payload = json.loads(await request.body())
        except ValueError:
            raise HTTPException(status_code=400, detail="Request body must be JSON") from None

        log_extra = {"github_event": x_github_event, "delivery": x_github_delivery}

        if x_github_event == "ping":
            logger.info("Webhook ping received", extra=log_extra)
            return WebhookResponse(status="pong", delivery=x_github_delivery)

        kind = resolve_event_kind(x_github_event, payload if isinstance(payload, dict) else None)
        if kind is None:
            logger.info("Ignoring unsupported webhook event", extra=log_extra)
            response.status_code = 202
            return WebhookResponse(status="ignored", delivery=x_github_delivery)

        logger.info("Dispatching webhook", extra={**log_extra, "event": kind.value})
        try:
            result = await run_in_threadpool(dispatcher.dispatch, kind, payload)
        except InvalidPayload as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except DispatchError as e:
            raise HTTPException(status_code=502, detail=str(e)) from e

        return WebhookResponse(
            status="processed",
            event=result.event,
            delivery=x_github_delivery,
            recorded=result.recorded,
            notified=result.notified,
            notification=result.notification,
            triggered=result.triggered,
        )

    @app.get("/api/logs", response_model=list[LogRecord])
    def list_logs(limit: int = Query(default=100, ge=1, le=1000)) -> list[LogRecord]:
        return dispatcher.log_store.tail(limit)

    return app
