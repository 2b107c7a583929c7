"""Kernel time – Clock port and implementations."""
from mp_rbac.kernel.time.clock import Clock, FrozenClock, SystemClock

__all__ = ["Clock", "FrozenClock", "SystemClock"]
