"""
app/api/routers package marker.
"""

from app.api.routers.crux_router import router as crux_router

__all__ = [
    "crux_router",
]
