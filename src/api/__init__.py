"""
RGB Relay - API Layer

HTTP and Socket.IO interfaces over the relay services.

Structure:
- routes/     : Endpoint handlers
- schemas/    : Pydantic schemas
- middleware/ : Error handling
- socketio/   : Push channel (set-color ingress, device/discovery broadcasts)
"""

from api.main import create_app

__all__ = ["create_app"]
