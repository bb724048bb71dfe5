from .auth import router as auth_router
from .batches import router as batches_router
from .operators import router as operators_router
from .orders import router as orders_router
from .reports import router as reports_router

__all__ = ["auth_router", "batches_router", "operators_router", "orders_router", "reports_router"]
