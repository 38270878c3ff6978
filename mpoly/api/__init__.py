"""API package exports."""

from mpoly.api.middleware import CorrelationIdMiddleware, DelayMiddleware

__all__ = ["CorrelationIdMiddleware", "DelayMiddleware"]
