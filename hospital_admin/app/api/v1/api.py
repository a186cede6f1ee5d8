from fastapi import APIRouter

from hospital_admin.app.api.v1.endpoints import (
    inventory,
    purchase_orders,
    reports,
    supplier_payments,
    suppliers,
)

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(suppliers.router, prefix="/suppliers", tags=["suppliers"])
api_router.include_router(purchase_orders.router, prefix="/purchase-orders", tags=["purchase-orders"])
api_router.include_router(supplier_payments.router, prefix="/supplier-payments", tags=["supplier-payments"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
