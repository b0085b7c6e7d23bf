"""Pydantic models for the REST server."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

WebhookStatus = Literal["processed", "ignored", "pong"]


class WebhookResponse(BaseModel):
    status: WebhookStatus
    event: str | None = None
    delivery: str | None = None

    recorded: bool = False
    notified: bool = False
    notification: str | None = None
    triggered: bool = False
