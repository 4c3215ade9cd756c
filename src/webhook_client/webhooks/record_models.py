"""Persistence shapes for stored webhook calls."""

from typing import Any

from webhook_client.db.models.webhook_call import WebhookCallRow


class DefaultRecordShape:
    """Stores the parsed payload alongside the filtered headers."""

    row_class = WebhookCallRow

    def build_row(
        self,
        webhook_call_id: str,
        config_name: str,
        url: str,
        headers: dict[str, str],
        payload: Any,
    ) -> WebhookCallRow:
        return self.row_class(
            id=webhook_call_id,
            name=config_name,
            url=url,
            headers=headers,
            payload=self.payload_to_store(payload),
        )

    def payload_to_store(self, payload: Any) -> Any:
        return payload


class WithoutPayloadRecordShape(DefaultRecordShape):
    """Keeps only the call's metadata; the payload is never written."""

    def payload_to_store(self, payload: Any) -> Any:
        return {}


RECORD_MODELS: dict[str, type[DefaultRecordShape]] = {
    "default": DefaultRecordShape,
    "without_payload": WithoutPayloadRecordShape,
}
