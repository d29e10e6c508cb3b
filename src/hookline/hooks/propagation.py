"""Trace propagation into calls made from inside hooks.

A hook context exposes the app and the service through thin wrappers. Verb
calls made through them carry the current trace in their params, so the
called pipeline joins the caller's trace instead of starting a new one.
"""

from typing import Any

from hookline.hooks.arguments import ARGUMENT_NAMES, PARAMS_INDEX
from hookline.trace import TRACE_KEY, TraceContext


def unwrap(obj: Any) -> Any:
    """Return the object behind a TracedApp or TracedService."""
    while isinstance(obj, (TracedApp, TracedService)):
        obj = obj.target
    return obj


def inject_trace(
    method: str,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
    trace: TraceContext,
) -> tuple[list[Any], dict[str, Any]]:
    """Return verb arguments whose params carry ``trace``.

    The caller's params dict is copied, never modified. Missing positional
    slots up to the params slot are padded with None.
    """
    args = list(args)
    kwargs = dict(kwargs)

    if "params" in kwargs:
        kwargs["params"] = {**(kwargs["params"] or {}), TRACE_KEY: trace}
        return args, kwargs

    index = PARAMS_INDEX[method]
    if len(args) > index and callable(args[index]):
        # Trailing callback sits where params would go
        args.insert(index, None)

    names = ARGUMENT_NAMES[method]
    for name in names[len(args) : index]:
        if name in kwargs:
            args.append(kwargs.pop(name))
        else:
            args.append(None)

    if len(args) == index:
        args.append(None)

    params = args[index]
    if params is None:
        args[index] = {TRACE_KEY: trace}
    elif isinstance(params, dict):
        args[index] = {**params, TRACE_KEY: trace}

    return args, kwargs


class TracedService:
    """A service whose verb calls join an existing trace.

    Only the verbs are wrapped; any other attribute is read from the
    underlying service.
    """

    def __init__(self, target: Any, trace: TraceContext):
        self.target = target
        self.trace = trace

    def _call(self, method: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        args, kwargs = inject_trace(method, args, kwargs, self.trace)
        return getattr(self.target, method)(*args, **kwargs)

    def find(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("find", args, kwargs)

    def get(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("get", args, kwargs)

    def create(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("create", args, kwargs)

    def update(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("update", args, kwargs)

    def patch(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("patch", args, kwargs)

    def remove(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("remove", args, kwargs)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.target, name)

    def __repr__(self) -> str:
        return f"TracedService({self.target!r})"


class TracedApp:
    """An app whose ``service(path)`` lookups return traced services."""

    def __init__(self, target: Any, trace: TraceContext):
        self.target = target
        self.trace = trace

    def service(self, path: str) -> TracedService:
        return TracedService(self.target.service(path), self.trace)

    def __getattr__(self, name: str) -> Any:
        return getattr(self.target, name)

    def __repr__(self) -> str:
        return f"TracedApp({self.target!r})"
