"""Webhook source configuration and the config registry."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from webhook_client.errors.exceptions import ConfigNotFoundError, InvalidConfigError
from webhook_client.webhooks.headers import HeaderStorage
from webhook_client.webhooks.profiles import (
    WEBHOOK_PROFILES,
    ProcessEverythingWebhookProfile,
    WebhookProfile,
)
from webhook_client.webhooks.record_models import RECORD_MODELS
from webhook_client.webhooks.responses import (
    RESPONSE_STRATEGIES,
    DefaultRespondsToWebhook,
    RespondsToWebhook,
)
from webhook_client.webhooks.signature_validators import (
    SIGNATURE_VALIDATORS,
    DefaultSignatureValidator,
    SignatureValidator,
)


class WebhookConfigOptions(BaseModel):
    """Raw options for one webhook source, as read from settings."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field("default", min_length=1)
    signing_secret: str = ""
    signature_header_name: str = Field("Signature", min_length=1)
    signature_validator: str = "default"
    webhook_profile: str = "process_everything"
    store_headers: str | list[str] | None = None
    process_task_ref: str = "process_webhook"
    record_model_ref: str = "default"
    response_strategy: str = "default"


@dataclass(frozen=True)
class WebhookConfig:
    name: str
    signing_secret: str = ""
    signature_header_name: str = "Signature"
    signature_validator: SignatureValidator = field(default_factory=DefaultSignatureValidator)
    webhook_profile: WebhookProfile = field(default_factory=ProcessEverythingWebhookProfile)
    store_headers: HeaderStorage = field(default_factory=HeaderStorage.none)
    process_task_ref: str = "process_webhook"
    record_model_ref: str = "default"
    response_strategy: RespondsToWebhook = field(default_factory=DefaultRespondsToWebhook)


def _lookup(table: dict[str, type], ref: str, kind: str, config_name: str):
    cls = table.get(ref)
    if cls is None:
        raise InvalidConfigError(
            f"Unknown {kind} '{ref}' in webhook config '{config_name}' "
            f"(expected one of: {', '.join(sorted(table))})"
        )
    return cls()


def build_config(options: WebhookConfigOptions | dict[str, Any]) -> WebhookConfig:
    """Turn raw options into a WebhookConfig, resolving every reference up front."""
    from webhook_client.workers.registry import is_registered

    if isinstance(options, dict):
        try:
            options = WebhookConfigOptions(**options)
        except PydanticValidationError as exc:
            raise InvalidConfigError(f"Invalid webhook config: {exc}") from exc

    if not is_registered(options.process_task_ref):
        raise InvalidConfigError(
            f"Unknown process_task_ref '{options.process_task_ref}' in webhook config '{options.name}'"
        )
    if options.record_model_ref not in RECORD_MODELS:
        raise InvalidConfigError(
            f"Unknown record_model_ref '{options.record_model_ref}' in webhook config '{options.name}'"
        )

    return WebhookConfig(
        name=options.name,
        signing_secret=options.signing_secret,
        signature_header_name=options.signature_header_name,
        signature_validator=_lookup(
            SIGNATURE_VALIDATORS, options.signature_validator, "signature_validator", options.name
        ),
        webhook_profile=_lookup(WEBHOOK_PROFILES, options.webhook_profile, "webhook_profile", options.name),
        store_headers=HeaderStorage.parse(options.store_headers),
        process_task_ref=options.process_task_ref,
        record_model_ref=options.record_model_ref,
        response_strategy=_lookup(
            RESPONSE_STRATEGIES, options.response_strategy, "response_strategy", options.name
        ),
    )


class WebhookConfigRegistry:
    """Named webhook configs.

    Writes replace the whole mapping, so concurrent readers always see a
    complete snapshot without locking.
    """

    def __init__(self, configs: Iterable[WebhookConfig] = ()) -> None:
        self._configs: dict[str, WebhookConfig] = {c.name: c for c in configs}

    def register(self, config: WebhookConfig) -> None:
        """Add a config, replacing any existing one with the same name."""
        self._configs = {**self._configs, config.name: config}

    def resolve(self, name: str) -> WebhookConfig:
        config = self._configs.get(name)
        if config is None:
            raise ConfigNotFoundError(name)
        return config

    def names(self) -> list[str]:
        return list(self._configs)

    def __contains__(self, name: object) -> bool:
        return name in self._configs

    def __len__(self) -> int:
        return len(self._configs)


def build_registry(raw_configs: Iterable[dict[str, Any]]) -> WebhookConfigRegistry:
    """Build a registry from settings; duplicate names keep the last entry."""
    registry = WebhookConfigRegistry()
    for raw in raw_configs:
        registry.register(build_config(raw))
    return registry
