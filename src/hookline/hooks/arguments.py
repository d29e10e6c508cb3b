"""Conversion between raw verb arguments and hook context fields."""

from typing import TYPE_CHECKING, Any, Callable

from hookline.errors import InvalidArguments

if TYPE_CHECKING:
    from hookline.hooks.types import HookContext

# Positional argument names for every verb, in call order
ARGUMENT_NAMES: dict[str, tuple[str, ...]] = {
    "find": ("params",),
    "get": ("id", "params"),
    "create": ("data", "params"),
    "update": ("id", "data", "params"),
    "patch": ("id", "data", "params"),
    "remove": ("id", "params"),
}

# Index of the params slot, which is where a propagated trace is injected
PARAMS_INDEX: dict[str, int] = {
    method: names.index("params") for method, names in ARGUMENT_NAMES.items()
}

REQUIRED: dict[str, tuple[str, ...]] = {
    "find": (),
    "get": ("id",),
    "create": ("data",),
    "update": ("id", "data"),
    "patch": ("data",),
    "remove": (),
}


def normalize_arguments(
    method: str,
    args: tuple[Any, ...] | list[Any],
    kwargs: dict[str, Any],
) -> tuple[dict[str, Any], Callable | None]:
    """Map a raw verb call onto named values.

    Args:
        method: The verb being called
        args: Positional arguments as passed by the caller
        kwargs: Keyword arguments as passed by the caller

    Returns:
        Tuple of (values, callback). ``values`` holds every argument name of
        the verb, ``params`` defaulting to an empty dict. ``callback`` is the
        trailing positional callable or the ``callback`` keyword, if any.

    Raises:
        InvalidArguments: If the arguments do not fit the verb's signature
    """
    if method not in ARGUMENT_NAMES:
        raise InvalidArguments(f"'{method}' is not a service verb")

    names = ARGUMENT_NAMES[method]
    args = list(args)
    kwargs = dict(kwargs)
    callback = kwargs.pop("callback", None)

    if callback is None and len(args) > len(names) - 1 and args and callable(args[-1]):
        callback = args.pop()

    if len(args) > len(names):
        raise InvalidArguments(
            f"Too many arguments for '{method}': expected at most {len(names)}, "
            f"got {len(args)}"
        )

    values: dict[str, Any] = dict(zip(names, args))
    for name, value in kwargs.items():
        if name not in names:
            raise InvalidArguments(f"'{method}' got an unexpected argument '{name}'")
        if name in values:
            raise InvalidArguments(f"'{method}' got multiple values for '{name}'")
        values[name] = value

    for name in REQUIRED[method]:
        if values.get(name) is None:
            raise InvalidArguments(f"'{method}' requires '{name}'")

    for name in names:
        values.setdefault(name, None)

    if values["params"] is None:
        values["params"] = {}
    elif not isinstance(values["params"], dict):
        raise InvalidArguments(
            f"params for '{method}' must be a dict, got {type(values['params']).__name__}"
        )

    return values, callback


def make_arguments(context: "HookContext") -> list[Any]:
    """Rebuild the positional argument list for the context's verb."""
    return [getattr(context, name) for name in ARGUMENT_NAMES[context.method]]
