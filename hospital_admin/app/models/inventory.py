from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from hospital_admin.app.core.database import Base


class StockItem(Base):
    """Pharmacy stock batch.

    ``expiry_date`` is kept as the text entered on the GRN ("2027-03-31",
    "03/2027", "N/A", ...); readers parse it with ``services.expiry.parse_expiry``.
    """

    __tablename__ = "stock_items"

    item_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    batch_no: Mapped[str | None] = mapped_column(String(100), nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    expiry_date: Mapped[str | None] = mapped_column(String(20), nullable=True)
    current_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_stock_items_name", "name"),
        Index("ix_stock_items_expiry", "expiry_date"),
    )
