"""
API Layer - HTTP facade over the action dispatcher

Structure:
- routes/     : Endpoint handlers (gpio, notifications, system)
- schemas/    : Pydantic request / reply models
- middleware/ : Error handling
"""

from api.main import create_app

__all__ = ["create_app"]
