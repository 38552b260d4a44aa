"""Local key/value table used when no Backendless app is configured."""

from datetime import datetime
from typing import Any

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column


class LocalEntry(Base):
    """One JSON document stored under a fixed key ("account", "profile")."""

    __tablename__ = "console_local_entries"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<LocalEntry {self.key}>"
