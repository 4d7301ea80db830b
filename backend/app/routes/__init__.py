from .comparison import router as comparison_router
from .partners import router as partners_router

__all__ = [
    "comparison_router",
    "partners_router",
]
