"""
Web UI Module - FastAPI-based web interface
===========================================

This module provides the web interface of the assistant:
- Chat page
- Chat session API with typing delay
- Rule table listing
- Interview prep API
"""

from .app import create_app, run_app
from .routes import router

__all__ = [
    "create_app",
    "run_app",
    "router",
]
