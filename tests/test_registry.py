"""Tests for hook registration and lookup."""

from types import SimpleNamespace

import pytest

from hookline.errors import HookError, InvalidHookMethod, InvalidHookType, UnknownHook
from hookline.hooks import (
    HookCatalog,
    HookRegistry,
    HookType,
    VERBS,
    default_catalog,
    get_hooks,
    hook,
)
from hookline.hooks.registry import attach_registry, get_registry


def a(ctx):
    pass


def b(ctx):
    pass


def c(ctx):
    pass


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clear_hook_catalog():
    """Clear the default hook catalog before and after each test."""
    default_catalog.clear()
    yield
    default_catalog.clear()


@pytest.fixture
def registry():
    return HookRegistry(VERBS)


# =============================================================================
# HookRegistry tests
# =============================================================================


class TestHookRegistry:
    def test_single_function_applies_to_all_methods(self, registry):
        registry.register("before", a)
        for method in VERBS:
            assert registry.get(HookType.BEFORE, method) == [a]

    def test_list_applies_to_all_methods(self, registry):
        registry.register(HookType.AFTER, [a, b])
        assert registry.get("after", "remove") == [a, b]

    def test_method_specific(self, registry):
        registry.register("before", {"create": a})
        assert registry.get("before", "create") == [a]
        assert registry.get("before", "find") == []

    def test_all_then_specific_within_one_registration(self, registry):
        registry.register("before", {"create": [b], "all": [a]})
        assert registry.get("before", "create") == [a, b]

    def test_all_then_specific_for_error_hooks(self, registry):
        registry.register("error", {"get": c, "all": a})
        assert registry.get("error", "get") == [a, c]

    def test_registration_order_across_calls(self, registry):
        registry.register("before", {"create": b})
        registry.register("before", {"all": a})
        registry.register("before", {"create": c})
        assert registry.get("before", "create") == [b, a, c]

    def test_register_all(self, registry):
        registry.register_all({"before": a, "after": {"get": b}})
        assert registry.get("before", "get") == [a]
        assert registry.get("after", "get") == [b]

    def test_get_returns_copy(self, registry):
        registry.register("before", a)
        registry.get("before", "find").append(b)
        assert registry.get("before", "find") == [a]

    def test_invalid_hook_type(self, registry):
        with pytest.raises(InvalidHookType, match="'around' is not a valid hook type"):
            registry.register("around", a)

    def test_invalid_method(self, registry):
        with pytest.raises(InvalidHookMethod, match="'upsert' is not a valid hook method"):
            registry.register("before", {"upsert": a})

    def test_invalid_method_registers_nothing(self, registry):
        with pytest.raises(InvalidHookMethod):
            registry.register("before", {"all": a, "upsert": b})
        assert registry.get("before", "find") == []

    def test_non_callable_rejected(self, registry):
        with pytest.raises(HookError, match="not callable"):
            registry.register("before", {"get": "validate"})

    def test_custom_method_set(self):
        registry = HookRegistry(["find", "search"])
        registry.register("before", {"search": a})
        assert registry.get("before", "search") == [a]
        with pytest.raises(InvalidHookMethod):
            registry.register("before", {"get": a})


class TestAttachRegistry:
    def test_attach_once(self):
        target = SimpleNamespace()
        first = attach_registry(target, VERBS)
        assert attach_registry(target, VERBS) is first
        assert get_registry(target) is first

    def test_missing_registry(self):
        assert get_registry(SimpleNamespace()) is None


# =============================================================================
# get_hooks ordering tests
# =============================================================================


class TestGetHooks:
    @pytest.fixture
    def targets(self):
        app = SimpleNamespace()
        service = SimpleNamespace()
        attach_registry(app, VERBS).register("before", {"create": a})
        attach_registry(service, VERBS).register("before", {"create": b})
        get_registry(app).register("after", {"create": a})
        get_registry(service).register("after", {"create": b})
        return app, service

    def test_before_app_first(self, targets):
        app, service = targets
        assert get_hooks(app, service, HookType.BEFORE, "create") == [a, b]

    def test_after_app_last(self, targets):
        app, service = targets
        assert get_hooks(app, service, HookType.AFTER, "create", app_last=True) == [b, a]

    def test_targets_without_registry(self):
        assert get_hooks(SimpleNamespace(), SimpleNamespace(), HookType.ERROR, "get") == []


# =============================================================================
# HookCatalog tests
# =============================================================================


@pytest.fixture
def catalog():
    return HookCatalog()


class TestHookCatalog:
    def test_add_and_lookup(self, catalog):
        assert catalog.add("stamp", a) is a
        assert catalog.lookup("stamp") is a

    def test_same_function_twice(self, catalog):
        catalog.add("stamp", a)
        catalog.add("stamp", a)
        assert catalog.names() == ["stamp"]

    def test_rebinding_name_rejected(self, catalog):
        catalog.add("stamp", a)
        with pytest.raises(HookError, match="already refers to a"):
            catalog.add("stamp", b)
        assert catalog.lookup("stamp") is a

    def test_non_callable_rejected(self, catalog):
        with pytest.raises(HookError, match="not callable"):
            catalog.add("stamp", "a")
        assert "stamp" not in catalog

    def test_lookup_missing(self, catalog):
        with pytest.raises(UnknownHook) as excinfo:
            catalog.lookup("nonexistent")
        assert excinfo.value.name == "nonexistent"
        assert isinstance(excinfo.value, LookupError)

    def test_contains(self, catalog):
        assert "stamp" not in catalog
        catalog.add("stamp", a)
        assert "stamp" in catalog

    def test_names_sorted(self, catalog):
        catalog.add("zeta", a)
        catalog.add("alpha", b)
        assert catalog.names() == ["alpha", "zeta"]

    def test_catalogs_are_independent(self, catalog):
        catalog.add("stamp", a)
        assert "stamp" not in default_catalog
        assert "stamp" not in HookCatalog()

    def test_decorator_uses_default_catalog(self):
        @hook("decorated")
        def decorated(ctx):
            pass

        assert default_catalog.lookup("decorated") is decorated

    def test_decorator_with_catalog(self, catalog):
        @hook("decorated", catalog=catalog)
        def decorated(ctx):
            pass

        assert catalog.lookup("decorated") is decorated
        assert "decorated" not in default_catalog
