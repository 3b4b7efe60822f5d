"""
Router package for the Training Analytics API.

This package contains all API routers organized by domain:
- health: Health check endpoint
- analytics: Personal records, progress history and exercise suggestions
"""

from api.routers.analytics import router as analytics_router
from api.routers.health import router as health_router

__all__ = [
    "analytics_router",
    "health_router",
]
