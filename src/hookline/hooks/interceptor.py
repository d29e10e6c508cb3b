"""Method interception for hookline.

Replaces every verb method of a service with a wrapper that runs the hook
pipeline around the service's own method:

    before hooks -> original method -> after hooks -> result
              \\___________ any failure ___________/-> error hooks

The wrapper keeps the verb's external signature. Callers either await it or
pass a trailing ``callback(error, result)``.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from hookline.config import HooksConfig
from hookline.hooks.adapter import accepts_callback, call_method
from hookline.hooks.arguments import normalize_arguments
from hookline.hooks.processor import process_hooks
from hookline.hooks.propagation import TracedApp, TracedService
from hookline.hooks.registry import attach_registry, get_hooks
from hookline.hooks.types import HookContext, HookType
from hookline.mixins import Override, apply_mixin
from hookline.trace import TRACE_KEY, TraceContext

logger = logging.getLogger(__name__)


def hooks(self: Any, all_hooks: dict[str, Any]) -> Any:
    """Register hooks for several stages, e.g. {"before": ..., "after": ...}."""
    self._hook_registry.register_all(all_hooks)
    return self


def before(self: Any, before_hooks: Any) -> Any:
    return self.hooks({"before": before_hooks})


def after(self: Any, after_hooks: Any) -> Any:
    return self.hooks({"after": after_hooks})


def error(self: Any, error_hooks: Any) -> Any:
    return self.hooks({"error": error_hooks})


BASE_MIXIN = {"hooks": hooks, "before": before, "after": after, "error": error}


def _take_trace(context: HookContext) -> TraceContext:
    """Adopt an inherited trace from params, or start a new one.

    The marker key never reaches hooks or the service method, whatever it
    holds. Only a real trace is adopted.
    """
    if TRACE_KEY not in context.params:
        return TraceContext()

    marker = context.params[TRACE_KEY]
    context.params = {k: v for k, v in context.params.items() if k != TRACE_KEY}
    if not isinstance(marker, TraceContext):
        logger.debug(
            "Ignoring %s marker of type %s", TRACE_KEY, type(marker).__name__
        )
        return TraceContext()
    return marker.inherit()


def _finish(trace: TraceContext, config: HooksConfig) -> None:
    trace.insert("pop")
    if config.trace and not trace.inherited:
        trace.dump()


async def run_pipeline(
    app: Any,
    service: Any,
    method: str,
    original: Callable,
    uses_callback: bool,
    values: dict[str, Any],
    config: HooksConfig,
) -> Any:
    """Run before, method, after and, on failure, error for one call."""
    context = HookContext(method=method, type=HookType.BEFORE, **values)
    trace = _take_trace(context)
    context.trace = trace
    context.app = TracedApp(app, trace)
    context.service = TracedService(service, trace)

    before_hooks = get_hooks(app, service, HookType.BEFORE, method)
    after_hooks = get_hooks(app, service, HookType.AFTER, method, app_last=True)
    error_hooks = get_hooks(app, service, HookType.ERROR, method, app_last=True)

    trace.insert("push")
    try:
        context = await process_hooks(before_hooks, context, short_circuit=True)

        if context.result is None:
            trace.insert("call")
            try:
                context.result = await call_method(
                    original, context.arguments(), uses_callback
                )
            except Exception as e:
                e.hook = context
                raise

        context = context.derive(type=HookType.AFTER)
        context = await process_hooks(after_hooks, context)
    except Exception as e:
        failed = getattr(e, "hook", None)
        logger.debug(
            "%s.%s failed in %s stage: %r",
            type(service).__name__,
            method,
            failed.type.value if failed else HookType.BEFORE.value,
            e,
        )
        error_context = (failed or context).derive(
            type=HookType.ERROR,
            result=None,
            original=failed,
            error=e,
        )
        try:
            error_context = await process_hooks(error_hooks, error_context)
        finally:
            _finish(trace, config)

        if error_context.result is not None:
            return error_context.result
        if error_context.error is None:
            raise e
        raise error_context.error

    _finish(trace, config)
    return context.result


def make_wrapper(
    app: Any,
    service: Any,
    method: str,
    original: Callable,
    config: HooksConfig,
) -> Callable:
    """Build the hook-running replacement for one verb of one service."""
    uses_callback = accepts_callback(original)

    def wrapper(*args: Any, **kwargs: Any) -> Any:
        values, callback = normalize_arguments(method, args, kwargs)
        pipeline = run_pipeline(
            app, service, method, original, uses_callback, values, config
        )
        if callback is None:
            return pipeline

        task = asyncio.ensure_future(pipeline)

        def done(task: asyncio.Task) -> None:
            if task.cancelled():
                callback(asyncio.CancelledError(), None)
            elif task.exception() is not None:
                callback(task.exception(), None)
            else:
                callback(None, task.result())

        task.add_done_callback(done)
        return task

    wrapper.__name__ = method
    wrapper.__qualname__ = f"{type(service).__name__}.{method}"
    wrapper.__doc__ = getattr(original, "__doc__", None)
    return wrapper


def hook_mixin(app: Any, service: Any, config: HooksConfig | None = None) -> None:
    """Install hooks on ``service``.

    No-op when the service already exposes a callable ``hooks``. Hook
    declarations the service carries as ``before``, ``after`` or ``error``
    attributes are registered once the mixin is applied.
    """
    if callable(getattr(service, "hooks", None)):
        return

    config = config or HooksConfig()
    declared = {
        hook_type.value: getattr(service, hook_type.value)
        for hook_type in HookType
        if getattr(service, hook_type.value, None) is not None
    }

    attach_registry(service, app.methods)

    mixin: dict[str, Any] = dict(BASE_MIXIN)
    for method in app.methods:
        if not callable(getattr(service, method, None)):
            continue
        mixin[method] = Override(
            lambda original, method=method: make_wrapper(
                app, service, method, original, config
            )
        )

    apply_mixin(service, mixin)
    logger.debug(
        "Installed hooks on %s for %s",
        type(service).__name__,
        ", ".join(m for m in app.methods if m in mixin),
    )

    for hook_type, declared_hooks in declared.items():
        service.hooks({hook_type: declared_hooks})
