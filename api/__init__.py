"""
API package for the Training Analytics API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_settings,
    get_record_repo,
    get_memory_repo,
    get_library_repo,
    get_analytics_engine,
)

__all__ = [
    # Settings
    "get_settings",
    # Repositories
    "get_record_repo",
    "get_memory_repo",
    "get_library_repo",
    # Engine
    "get_analytics_engine",
]
