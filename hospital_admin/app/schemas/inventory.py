from __future__ import annotations

from pydantic import BaseModel, field_validator


class StockItemCreate(BaseModel):
    name: str
    batch_no: str | None = None
    category: str | None = None
    expiry_date: str | None = None
    current_stock: int = 0

    @field_validator("current_stock")
    @classmethod
    def stock_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock must be non-negative")
        return v


class StockItemUpdate(BaseModel):
    name: str | None = None
    batch_no: str | None = None
    category: str | None = None
    expiry_date: str | None = None
    current_stock: int | None = None

    @field_validator("current_stock")
    @classmethod
    def stock_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("Stock must be non-negative")
        return v


class StockItemOut(BaseModel):
    item_id: int
    name: str
    batch_no: str | None
    category: str | None
    expiry_date: str | None
    current_stock: int

    class Config:
        from_attributes = True
