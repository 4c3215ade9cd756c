"""Signature validators decide whether an inbound webhook is authentic."""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

from webhook_client.errors.exceptions import InvalidConfigError
from webhook_client.webhooks.headers import find_header

if TYPE_CHECKING:
    from webhook_client.webhooks.webhook_config import WebhookConfig


class SignatureValidator(Protocol):
    def is_valid(self, raw_body: bytes, headers: Mapping[str, str], config: WebhookConfig) -> bool:
        ...


def compute_signature(raw_body: bytes, secret: str) -> str:
    """HMAC-SHA256 hex digest of the exact request bytes."""
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


class DefaultSignatureValidator:
    """Compares the configured signature header against HMAC-SHA256(body, secret)."""

    def is_valid(self, raw_body: bytes, headers: Mapping[str, str], config: WebhookConfig) -> bool:
        signature = find_header(headers, config.signature_header_name)
        if not signature:
            return False

        if not config.signing_secret:
            raise InvalidConfigError(f"Signing secret is not set for webhook config '{config.name}'")

        expected = compute_signature(raw_body, config.signing_secret)
        # Header values arrive latin-1 decoded; compare bytes so non-ASCII input is just a mismatch
        return hmac.compare_digest(expected.encode("ascii"), signature.strip().encode("utf-8", "surrogateescape"))


class EverythingIsValidSignatureValidator:
    def is_valid(self, raw_body: bytes, headers: Mapping[str, str], config: WebhookConfig) -> bool:
        return True


class NothingIsValidSignatureValidator:
    def is_valid(self, raw_body: bytes, headers: Mapping[str, str], config: WebhookConfig) -> bool:
        return False


SIGNATURE_VALIDATORS: dict[str, type] = {
    "default": DefaultSignatureValidator,
    "everything_is_valid": EverythingIsValidSignatureValidator,
    "nothing_is_valid": NothingIsValidSignatureValidator,
}
