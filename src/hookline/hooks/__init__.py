"""hookline service hook system.

Wraps the verbs of registered services (find, get, create, update, patch,
remove) with ordered extension points:
- before: runs ahead of the method; app hooks first, then service hooks
- after: runs on success; service hooks first, then app hooks
- error: runs on any failure; may recover by setting ``result``

Usage:
    from hookline import Application
    from hookline.hooks import configure

    app = Application().configure(configure())
    app.use("messages", MessageService())

    def stamp(ctx):
        ctx.data["createdAt"] = now()

    app.service("messages").before({"create": stamp})
"""

from hookline.hooks.interceptor import hook_mixin
from hookline.hooks.loader import (
    HookBinding,
    apply_hook_config,
    load_hook_config,
    parse_hook_config,
)
from hookline.hooks.processor import HookProcessor, process_hooks
from hookline.hooks.registry import (
    HookCatalog,
    HookRegistry,
    default_catalog,
    get_hooks,
    hook,
)
from hookline.hooks.setup import configure
from hookline.hooks.types import VERBS, HookContext, HookType

__all__ = [
    "HookBinding",
    "HookCatalog",
    "HookContext",
    "HookProcessor",
    "HookRegistry",
    "HookType",
    "VERBS",
    "apply_hook_config",
    "configure",
    "default_catalog",
    "get_hooks",
    "hook",
    "hook_mixin",
    "load_hook_config",
    "parse_hook_config",
    "process_hooks",
]
