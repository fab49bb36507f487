"""
ROUTERS - FastAPI Router Modules

Usage:
    from routers import sports_router

    app.include_router(sports_router)
"""

from .sports import router as sports_router

__all__ = [
    'sports_router',
]
