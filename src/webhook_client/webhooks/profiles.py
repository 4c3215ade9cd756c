"""Webhook profiles decide whether a validated call is stored and processed."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from webhook_client.webhooks.webhook_config import WebhookConfig


class WebhookProfile(Protocol):
    def should_process(self, raw_body: bytes, headers: Mapping[str, str], config: WebhookConfig) -> bool:
        ...


class ProcessEverythingWebhookProfile:
    def should_process(self, raw_body: bytes, headers: Mapping[str, str], config: WebhookConfig) -> bool:
        return True


class ProcessNothingWebhookProfile:
    def should_process(self, raw_body: bytes, headers: Mapping[str, str], config: WebhookConfig) -> bool:
        return False


WEBHOOK_PROFILES: dict[str, type] = {
    "process_everything": ProcessEverythingWebhookProfile,
    "process_nothing": ProcessNothingWebhookProfile,
}
