"""FastAPI middleware for the headcount analytics service."""

from src.api.middleware.security import RequestIDMiddleware, RequestLoggingMiddleware

__all__ = [
    "RequestIDMiddleware",
    "RequestLoggingMiddleware",
]
