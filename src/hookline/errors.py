"""Errors raised by the hookline engine itself.

Errors raised by hooks or by service methods are never wrapped; they travel
through the error hook chain unchanged.
"""


class HookError(Exception):
    """Base class for hookline errors."""


class InvalidHookType(HookError):
    """Raised when registering hooks for an unknown hook type."""


class InvalidHookMethod(HookError):
    """Raised when registering hooks for a method the target does not expose."""


class InvalidHookResult(HookError):
    """Raised when a hook returns something other than None, a dict or a context."""


class InvalidArguments(HookError):
    """Raised when a verb is called with arguments that cannot be normalized."""


class ServiceNotFound(HookError, LookupError):
    """Raised when no service is registered under the requested path."""

    def __init__(self, path: str):
        super().__init__(f"No service registered at '{path}'")
        self.path = path


class UnknownHook(HookError, LookupError):
    """Raised when a hook name is missing from a hook catalog."""

    def __init__(self, name: str):
        super().__init__(f"No hook named '{name}' in the catalog")
        self.name = name
