from fastapi import APIRouter

from .dashboard import router as dashboard_router
from .fuels import router as fuels_router
from .invoices import router as invoices_router
from .orders import router as orders_router
from .organizations import router as organizations_router
from .vehicles import router as vehicles_router

api_router = APIRouter()
api_router.include_router(
    organizations_router, prefix="/api/organizations", tags=["organizations"]
)
api_router.include_router(vehicles_router, prefix="/api/vehicles", tags=["vehicles"])
api_router.include_router(fuels_router, prefix="/api/fuels", tags=["fuels"])
api_router.include_router(orders_router, prefix="/api/orders", tags=["orders"])
api_router.include_router(dashboard_router, prefix="/api/dashboard", tags=["dashboard"])
api_router.include_router(invoices_router, tags=["invoices"])
