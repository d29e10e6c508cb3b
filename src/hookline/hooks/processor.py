"""Sequential hook execution for hookline.

Runs one stage's hook chain against a context. Hooks execute one at a time,
in order; hook N+1 never starts before hook N has settled.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import fields

from hookline.errors import InvalidHookResult
from hookline.hooks.adapter import call_hook
from hookline.hooks.registry import HookFn
from hookline.hooks.types import HookContext

logger = logging.getLogger(__name__)

CONTEXT_FIELDS = frozenset(f.name for f in fields(HookContext))
# Context fields a hook result may not change.
FIXED_FIELDS = ("type", "method")


class HookProcessor:
    """Runs hook chains.

    Each hook receives the current context and may:
    - return None to keep the context (mutating it in place is allowed)
    - return a HookContext, whose set fields are merged over the current one
    - return a dict, whose keys are merged into a copy of the current one
    - raise, which aborts the chain

    A raised exception gets a ``hook`` attribute pointing at the context that
    was current when it happened, so the error stage can inspect it.
    """

    async def process(
        self,
        hooks: Iterable[HookFn],
        context: HookContext,
        short_circuit: bool = False,
    ) -> HookContext:
        """Run ``hooks`` in order against ``context``.

        Args:
            hooks: Hook functions in execution order
            context: The context to start from
            short_circuit: Stop as soon as ``context.result`` is set
                (used for the before stage)

        Returns:
            The context produced by the last hook that ran
        """
        for fn in hooks:
            if short_circuit and context.result is not None:
                logger.debug(
                    "%s.%s result set, skipping remaining hooks",
                    context.type.value,
                    context.method,
                )
                break

            try:
                value = await call_hook(fn, context)
                context = self._update(context, value, fn)
            except Exception as e:
                e.hook = context
                raise

        return context

    def _update(self, context: HookContext, value: object, fn: HookFn) -> HookContext:
        if value is None:
            return context
        if value is context:
            return context
        if isinstance(value, HookContext):
            return context.derive(**_set_fields(value))
        if isinstance(value, Mapping):
            unknown = set(value) - CONTEXT_FIELDS
            if unknown:
                raise InvalidHookResult(
                    f"Hook returned unknown context fields: {', '.join(sorted(unknown))}"
                )
            for name in FIXED_FIELDS:
                if name in value and value[name] != getattr(context, name):
                    raise InvalidHookResult(
                        f"{context.type.value} hook for '{context.method}' "
                        f"cannot change '{name}' to {value[name]!r}"
                    )
            return context.derive(**value)

        name = getattr(fn, "__name__", repr(fn))
        raise InvalidHookResult(
            f"{context.type.value} hook '{name}' for '{context.method}' "
            f"returned {type(value).__name__}, expected None, a dict or a HookContext"
        )


def _set_fields(returned: HookContext) -> dict:
    """Fields of a returned context that carry a value.

    None counts as unset and an empty ``params`` dict as absent, so a hook
    may return a partly filled ``HookContext`` without wiping the rest.
    """
    changes = {}
    for f in fields(HookContext):
        if f.name in FIXED_FIELDS:
            continue
        value = getattr(returned, f.name)
        if value is None or (f.name == "params" and not value):
            continue
        changes[f.name] = value
    return changes


_processor = HookProcessor()


async def process_hooks(
    hooks: Iterable[HookFn],
    context: HookContext,
    short_circuit: bool = False,
) -> HookContext:
    """Run a hook chain with the shared processor."""
    return await _processor.process(hooks, context, short_circuit=short_circuit)
