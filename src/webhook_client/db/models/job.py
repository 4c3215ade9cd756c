"""Job table."""

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from webhook_client.db.base import Base, TimestampMixin


class JobRow(Base, TimestampMixin):
    __tablename__ = "jobs"

    job_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    job_type: Mapped[str] = mapped_column(String(100), nullable=False)
    webhook_call_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("webhook_calls.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    errors: Mapped[list | None] = mapped_column(JSON, nullable=True)
    trace_id: Mapped[str] = mapped_column(String(128), nullable=False)
