# File: /taskviews/models/view_state.py | Version: 1.0 | Title: SQLAlchemy model for per-user dashboard view state
from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Dict
from uuid import uuid4

from sqlalchemy import JSON, DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from taskviews.db.base_class import Base


def gen_uuid() -> str:
    return str(uuid4())


class ViewState(Base):
    __tablename__ = "view_state"
    __table_args__ = (
        UniqueConstraint("owner_id", "store_key", name="uq_view_state_owner_key"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=gen_uuid)
    owner_id: Mapped[str] = mapped_column(String, index=True, nullable=False)
    # Dashboard identity, e.g. "receivedTasks"
    store_key: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    state: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )
