"""Hook system types for hookline.

Defines the core data structures threaded through a hook pipeline:
- HookType: the pipeline stage (before, after, error)
- HookContext: runtime state passed to every hook function
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from hookline.trace import TraceContext

VERBS = ("find", "get", "create", "update", "patch", "remove")


class HookType(Enum):
    """The pipeline stage a hook runs in."""

    BEFORE = "before"
    AFTER = "after"
    ERROR = "error"


@dataclass
class HookContext:
    """Runtime context for one method invocation.

    A context is built once per call in the ``before`` stage. The ``after``
    and ``error`` stages work on shallow copies made with :meth:`derive`.

    Attributes:
        method: The verb being called (find, get, create, ...)
        type: Current stage
        app: The application, wrapped so nested calls inherit the trace
        service: The service, wrapped so nested calls inherit the trace
        params: Request parameters (never carries the trace marker)
        id: Record id for get, update, patch and remove
        data: Payload for create, update and patch
        result: Outcome of the call; None until set. Setting it in a
            before hook skips the remaining before hooks and the method.
        error: The failure being handled (error stage only)
        original: Context active when the failure occurred (error stage only)
        trace: Timing log for this call and the calls nested in it
    """

    method: str
    type: HookType = HookType.BEFORE
    app: Any = None
    service: Any = None
    params: dict[str, Any] = field(default_factory=dict)
    id: Any = None
    data: Any = None
    result: Any = None
    error: BaseException | None = None
    original: "HookContext | None" = None
    trace: TraceContext | None = None

    @property
    def path(self) -> str | None:
        """The key under which the service is registered on the app."""
        from hookline.hooks.propagation import unwrap

        services = getattr(self.app, "services", None) or {}
        target = unwrap(self.service)
        for path, service in services.items():
            if unwrap(service) is target:
                return path
        return None

    def arguments(self) -> list[Any]:
        """Rebuild the positional arguments for the underlying method."""
        from hookline.hooks.arguments import make_arguments

        return make_arguments(self)

    def derive(self, **changes: Any) -> "HookContext":
        """Return a shallow copy with ``changes`` applied."""
        return replace(self, **changes)
