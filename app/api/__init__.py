# API endpoints and routers

from .phrases_endpoints import router as phrases_router
from .translation_endpoints import router as translation_router

__all__ = [
    "phrases_router",
    "translation_router",
]
