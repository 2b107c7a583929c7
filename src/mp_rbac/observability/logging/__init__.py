"""Observability – structured logging helpers."""
from mp_rbac.observability.logging.factory import configure_logging
from mp_rbac.observability.logging.processors import AccessContextProcessor, get_logger

__all__ = ["AccessContextProcessor", "configure_logging", "get_logger"]
