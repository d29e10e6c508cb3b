"""Attach behaviour to existing objects without subclassing them."""

from collections.abc import Callable, Mapping
from types import MethodType
from typing import Any

# A factory receives the attribute it replaces (or None) and returns the new one
MixinFactory = Callable[[Any], Any]


class Override:
    """Marks a mixin entry that wraps the attribute it replaces."""

    def __init__(self, factory: MixinFactory):
        self.factory = factory


def apply_mixin(target: Any, mixin: Mapping[str, Any]) -> Any:
    """Apply ``mixin`` onto ``target``.

    Plain callables are bound to ``target`` as methods. ``Override`` entries
    are called with the previous value of the attribute, captured once at
    application time, and their return value is set as the new attribute.

    Returns:
        The target, for chaining
    """
    for name, value in mixin.items():
        if isinstance(value, Override):
            previous = getattr(target, name, None)
            setattr(target, name, value.factory(previous))
        elif callable(value):
            setattr(target, name, MethodType(value, target))
        else:
            setattr(target, name, value)
    return target
