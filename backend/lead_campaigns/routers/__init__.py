"""
API routers.
"""
from .campaigns import router as campaigns_router
from .csv_import import router as csv_import_router

__all__ = ["campaigns_router", "csv_import_router"]
