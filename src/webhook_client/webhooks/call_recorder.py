"""Persists accepted webhook calls."""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from webhook_client.db.models.webhook_call import WebhookCallRow
from webhook_client.errors.exceptions import PersistenceError
from webhook_client.services.id_generator import generate_id
from webhook_client.webhooks.headers import HeaderStorage
from webhook_client.webhooks.record_models import RECORD_MODELS

logger = logging.getLogger(__name__)


class WebhookCallRecorder:
    """Stores one immutable row per accepted call and commits before returning."""

    def __init__(self, session_factory) -> None:
        self.session_factory = session_factory

    async def record(
        self,
        config_name: str,
        payload: Any,
        headers: Mapping[str, str],
        store_headers: HeaderStorage,
        record_model_ref: str = "default",
        url: str = "",
    ) -> WebhookCallRow:
        model_cls = RECORD_MODELS.get(record_model_ref)
        if model_cls is None:
            raise PersistenceError(f"Unknown record model '{record_model_ref}'")

        row = model_cls().build_row(
            webhook_call_id=generate_id("whc_"),
            config_name=config_name,
            url=url,
            headers=store_headers.filter(headers),
            payload=payload,
        )

        try:
            async with self.session_factory() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Failed to store webhook call for config %s", config_name)
            raise PersistenceError(f"Could not store webhook call: {exc}") from exc

        logger.info("Stored webhook call %s (config=%s)", row.id, config_name)
        return row
