"""hookline: before/after/error hooks around service methods."""

from hookline.application import Application
from hookline.config import HooksConfig
from hookline.errors import (
    HookError,
    InvalidArguments,
    InvalidHookMethod,
    InvalidHookResult,
    InvalidHookType,
    ServiceNotFound,
    UnknownHook,
)
from hookline.hooks import HookContext, HookType, configure
from hookline.trace import TraceContext, TraceEvent

__all__ = [
    "Application",
    "HookContext",
    "HookError",
    "HookType",
    "HooksConfig",
    "InvalidArguments",
    "InvalidHookMethod",
    "InvalidHookResult",
    "InvalidHookType",
    "ServiceNotFound",
    "TraceContext",
    "TraceEvent",
    "UnknownHook",
    "configure",
]
