"""Minimal service host.

Holds services by path and applies the registered mixins to every service as
it is added. This is the surface the hook engine installs itself on.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from hookline.errors import ServiceNotFound
from hookline.hooks.types import VERBS

logger = logging.getLogger(__name__)

# A mixin receives the app and the service being added
ServiceMixin = Callable[["Application", Any], None]


def _strip(path: str) -> str:
    return path.strip("/")


class Application:
    """A registry of named services.

    Attributes:
        methods: Verb names services may implement
        services: Registered services by path
        mixins: Applied in order to each service passed to ``use``
    """

    def __init__(self, methods: Iterable[str] = VERBS):
        self.methods: list[str] = list(methods)
        self.services: dict[str, Any] = {}
        self.mixins: list[ServiceMixin] = []

    def configure(self, fn: Callable[["Application"], Any]) -> "Application":
        """Run a setup function against this app."""
        fn(self)
        return self

    def use(self, path: str, service: Any) -> "Application":
        """Register ``service`` under ``path`` after applying all mixins."""
        path = _strip(path)
        for mixin in self.mixins:
            mixin(self, service)
        self.services[path] = service
        logger.debug("Registered service '%s' (%s)", path, type(service).__name__)
        return self

    def service(self, path: str) -> Any:
        """Return the service registered under ``path``.

        Raises:
            ServiceNotFound: If nothing is registered there
        """
        path = _strip(path)
        if path not in self.services:
            raise ServiceNotFound(path)
        return self.services[path]
