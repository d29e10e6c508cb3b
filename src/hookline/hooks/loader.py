"""YAML hook wiring.

Binds named hooks from the :class:`HookCatalog` to the app or to services::

    app:
      before:
        all: [authenticate]
    services:
      messages:
        before:
          create: [validateMessage]
        after:
          all: [stripPassword]
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from hookline.hooks.registry import HookCatalog, default_catalog
from hookline.hooks.types import HookType

logger = logging.getLogger(__name__)

VALID_STAGES = tuple(hook_type.value for hook_type in HookType)


@dataclass
class HookBinding:
    """Named hooks to register on one target for one stage.

    Attributes:
        path: Service path, or None for the app itself
        stage: before, after or error
        hooks: Hook names keyed by verb or "all"
    """

    path: str | None
    stage: str
    hooks: dict[str, list[str]] = field(default_factory=dict)


def _resolve_stages(path: str | None, data: dict) -> list[HookBinding]:
    bindings: list[HookBinding] = []
    for stage, by_method in (data or {}).items():
        if stage not in VALID_STAGES:
            logger.warning("Ignoring unknown hook stage '%s' for %s", stage, path or "app")
            continue
        hooks: dict[str, list[str]] = {}
        for method, names in (by_method or {}).items():
            hooks[method] = [names] if isinstance(names, str) else list(names)
        bindings.append(HookBinding(path=path, stage=stage, hooks=hooks))
    return bindings


def parse_hook_config(data: dict[str, Any] | None) -> list[HookBinding]:
    """Convert a loaded hook config mapping to bindings, app first."""
    data = data or {}
    bindings = _resolve_stages(None, data.get("app", {}))
    for path, stages in (data.get("services") or {}).items():
        bindings.extend(_resolve_stages(path, stages))
    return bindings


def load_hook_config(path: Path | str) -> list[HookBinding]:
    """Read hook bindings from a YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return parse_hook_config(data)


def apply_hook_config(
    app: Any,
    bindings: list[HookBinding],
    catalog: HookCatalog | None = None,
) -> None:
    """Register the hooks named by ``bindings``.

    Names are looked up in ``catalog``, the default catalog when omitted.
    Names missing from it are logged and skipped.

    Raises:
        ServiceNotFound: If a binding targets a path with no service
    """
    catalog = default_catalog if catalog is None else catalog
    for binding in bindings:
        target = app if binding.path is None else app.service(binding.path)
        resolved: dict[str, list] = {}
        for method, names in binding.hooks.items():
            fns = []
            for name in names:
                if name not in catalog:
                    logger.warning(
                        "Hook '%s' is not in the catalog, skipping (%s %s.%s)",
                        name,
                        binding.stage,
                        binding.path or "app",
                        method,
                    )
                    continue
                fns.append(catalog.lookup(name))
            if fns:
                resolved[method] = fns
        if resolved:
            target.hooks({binding.stage: resolved})
