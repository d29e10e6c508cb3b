"""One-time installation of the hook engine on an application."""

import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from hookline.config import HooksConfig
from hookline.hooks.interceptor import BASE_MIXIN, hook_mixin
from hookline.hooks.registry import attach_registry
from hookline.mixins import apply_mixin

logger = logging.getLogger(__name__)


def configure(config: HooksConfig | None = None) -> Callable[[Any], None]:
    """Return a setup function installing hooks on an app.

    The app gains ``hooks``, ``before``, ``after`` and ``error`` for app-wide
    hooks, and every service added afterwards gets its verbs wrapped.

    Usage:
        app = Application()
        app.configure(configure())
        app.use("messages", MessageService())

    Args:
        config: Engine settings. Defaults to HooksConfig.from_env().
    """

    def setup(app: Any) -> None:
        settings = config or HooksConfig.from_env()
        attach_registry(app, app.methods)
        apply_mixin(app, BASE_MIXIN)
        app.mixins.insert(0, partial(hook_mixin, config=settings))
        logger.debug("Hooks installed (trace=%s)", settings.trace)

    return setup
