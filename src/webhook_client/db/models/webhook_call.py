"""Stored webhook calls."""

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from webhook_client.db.base import Base, TimestampMixin


class WebhookCallRow(Base, TimestampMixin):
    __tablename__ = "webhook_calls"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    headers: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    payload: Mapped[dict | list | None] = mapped_column(JSON, nullable=True)
    exception: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return a stored header value, matching the name case-insensitively."""
        wanted = name.lower()
        for key, value in (self.headers or {}).items():
            if key.lower() == wanted:
                return value
        return default
