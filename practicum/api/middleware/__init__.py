"""
ASGI middleware.
"""

from practicum.api.middleware.request_id import RequestIdMiddleware

__all__ = ["RequestIdMiddleware"]
