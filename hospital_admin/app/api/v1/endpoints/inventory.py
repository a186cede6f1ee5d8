from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hospital_admin.app.core.database import get_db
from hospital_admin.app.models.inventory import StockItem
from hospital_admin.app.schemas.inventory import StockItemCreate, StockItemOut, StockItemUpdate
from hospital_admin.app.services.expiry import invalidate_stock_cache, list_stock_rows

router = APIRouter()


def _get_item(db: Session, item_id: int) -> StockItem:
    item = db.query(StockItem).filter(StockItem.item_id == item_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Stock item not found")
    return item


@router.get("/stock-items", response_model=list[StockItemOut])
def list_stock_items(db: Session = Depends(get_db)) -> list[dict]:
    return list_stock_rows(db)


@router.post(
    "/stock-items", response_model=StockItemOut, status_code=status.HTTP_201_CREATED
)
def create_stock_item(
    payload: StockItemCreate,
    db: Session = Depends(get_db),
) -> StockItem:
    item = StockItem(**payload.model_dump())
    db.add(item)
    db.commit()
    db.refresh(item)
    invalidate_stock_cache()
    return item


@router.patch("/stock-items/{item_id}", response_model=StockItemOut)
def update_stock_item(
    item_id: int,
    payload: StockItemUpdate,
    db: Session = Depends(get_db),
) -> StockItem:
    item = _get_item(db, item_id)
    update_data = payload.model_dump(exclude_unset=True)
    for required in ("name", "current_stock"):
        if required in update_data and update_data[required] is None:
            raise HTTPException(status_code=400, detail=f"{required} cannot be cleared")
    for field, value in update_data.items():
        setattr(item, field, value)
    db.commit()
    db.refresh(item)
    invalidate_stock_cache()
    return item


@router.delete("/stock-items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stock_item(item_id: int, db: Session = Depends(get_db)) -> None:
    item = _get_item(db, item_id)
    db.delete(item)
    db.commit()
    invalidate_stock_cache()
