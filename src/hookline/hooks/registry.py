"""Hook storage and lookup for hookline.

Two registries live here:
- HookRegistry: per-target (app or service) hook lists keyed by stage and verb
- HookCatalog: hook functions published by name for YAML hook config
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from hookline.errors import HookError, InvalidHookMethod, InvalidHookType, UnknownHook
from hookline.hooks.types import HookType

logger = logging.getLogger(__name__)

# Hook function signature: (HookContext) -> HookContext | dict | None, sync or async.
# Hooks taking a second positional argument get a ``next(error, result)`` callback.
HookFn = Callable[..., Any | Awaitable[Any]]

ALL_METHODS = "all"

REGISTRY_ATTR = "_hook_registry"


def _as_list(value: Any) -> list[HookFn]:
    hooks = list(value) if isinstance(value, (list, tuple)) else [value]
    for fn in hooks:
        if not callable(fn):
            raise HookError(f"Hook {fn!r} is not callable")
    return hooks


def _as_hook_type(hook_type: HookType | str) -> HookType:
    if isinstance(hook_type, HookType):
        return hook_type
    try:
        return HookType(hook_type)
    except ValueError:
        raise InvalidHookType(f"'{hook_type}' is not a valid hook type") from None


class HookRegistry:
    """Hook lists for one target, keyed by stage then verb.

    Registration is append-only. Hooks registered under ``"all"`` are
    expanded into every verb bucket at registration time, ahead of the
    verb-specific hooks of the same registration call.

    Example:
        registry = HookRegistry(VERBS)
        registry.register("before", {"all": authenticate, "create": [validate]})
        registry.get(HookType.BEFORE, "create")  # [authenticate, validate]
    """

    def __init__(self, methods: Iterable[str]):
        self.methods = tuple(methods)
        self._hooks: dict[HookType, dict[str, list[HookFn]]] = {
            hook_type: {method: [] for method in self.methods} for hook_type in HookType
        }

    def register(self, hook_type: HookType | str, hooks: Any) -> None:
        """Append hooks for one stage.

        Args:
            hook_type: The stage (before, after, error)
            hooks: A hook function, a list of them, or a mapping from verb
                name (or "all") to a hook function or list

        Raises:
            InvalidHookType: If the stage is unknown
            InvalidHookMethod: If a mapping key is not a verb of this target
            HookError: If a hook is not callable
        """
        stage = _as_hook_type(hook_type)

        if isinstance(hooks, Mapping):
            by_method = {method: _as_list(value) for method, value in hooks.items()}
        else:
            by_method = {ALL_METHODS: _as_list(hooks)}

        for method in by_method:
            if method != ALL_METHODS and method not in self.methods:
                raise InvalidHookMethod(f"'{method}' is not a valid hook method")

        for method in self.methods:
            bucket = self._hooks[stage][method]
            bucket.extend(by_method.get(ALL_METHODS, []))
            bucket.extend(by_method.get(method, []))

        logger.debug(
            "Registered %s hooks for %s", stage.value, ", ".join(sorted(by_method))
        )

    def register_all(self, all_hooks: Mapping[str, Any]) -> None:
        """Register several stages at once, e.g. {"before": ..., "after": ...}."""
        for hook_type, hooks in all_hooks.items():
            self.register(hook_type, hooks)

    def get(self, hook_type: HookType | str, method: str) -> list[HookFn]:
        """Return a copy of the hooks registered for a stage and verb."""
        return list(self._hooks[_as_hook_type(hook_type)].get(method, []))


def attach_registry(target: Any, methods: Iterable[str]) -> HookRegistry:
    """Give ``target`` its own registry, keeping an existing one."""
    registry = getattr(target, REGISTRY_ATTR, None)
    if registry is None:
        registry = HookRegistry(methods)
        setattr(target, REGISTRY_ATTR, registry)
    return registry


def get_registry(target: Any) -> HookRegistry | None:
    return getattr(target, REGISTRY_ATTR, None)


def get_hooks(
    app: Any,
    service: Any,
    hook_type: HookType,
    method: str,
    app_last: bool = False,
) -> list[HookFn]:
    """Collect the hooks for one call.

    App hooks run first, then service hooks. With ``app_last`` the levels
    are swapped, so after and error hooks unwind from the service outwards.
    Order within a level is registration order.
    """
    app_registry = get_registry(app)
    service_registry = get_registry(service)
    app_hooks = app_registry.get(hook_type, method) if app_registry else []
    service_hooks = service_registry.get(hook_type, method) if service_registry else []

    if app_last:
        return service_hooks + app_hooks
    return app_hooks + service_hooks


class HookCatalog:
    """Hook functions published under a name, for YAML hook config to use.

    A name is bound once. Binding it again to the same function is allowed,
    binding it to another function raises :class:`HookError`.
    """

    def __init__(self) -> None:
        self._entries: dict[str, HookFn] = {}

    def add(self, name: str, fn: HookFn) -> HookFn:
        if not callable(fn):
            raise HookError(f"Catalog entry '{name}' is not callable: {fn!r}")
        bound = self._entries.get(name)
        if bound is not None and bound is not fn:
            owner = getattr(bound, "__qualname__", repr(bound))
            raise HookError(f"Hook name '{name}' already refers to {owner}")
        self._entries[name] = fn
        logger.debug("Cataloged hook '%s'", name)
        return fn

    def lookup(self, name: str) -> HookFn:
        """Return the hook published as ``name``.

        Raises:
            UnknownHook: If nothing is published under ``name``
        """
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownHook(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def names(self) -> list[str]:
        return sorted(self._entries)

    def clear(self) -> None:
        self._entries.clear()


# Catalog used by ``@hook`` and the YAML loader unless one is passed in.
default_catalog = HookCatalog()


def hook(name: str, catalog: HookCatalog | None = None) -> Callable[[HookFn], HookFn]:
    """Publish the decorated function in ``catalog`` under ``name``.

    Usage:
        @hook("stripPassword")
        def strip_password(ctx):
            ctx.result.pop("password", None)
    """
    target = default_catalog if catalog is None else catalog

    def decorator(fn: HookFn) -> HookFn:
        return target.add(name, fn)

    return decorator
