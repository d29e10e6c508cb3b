"""Tests for injecting the trace marker into nested verb calls."""

import pytest

from hookline import Application
from hookline.hooks.propagation import TracedApp, TracedService, inject_trace, unwrap
from hookline.trace import TRACE_KEY, TraceContext


@pytest.fixture
def trace():
    return TraceContext()


def noop(error, result):
    pass


class TestInjectTrace:
    def test_find_without_arguments(self, trace):
        args, kwargs = inject_trace("find", (), {}, trace)
        assert args == [{TRACE_KEY: trace}]
        assert kwargs == {}

    def test_get_pads_params(self, trace):
        args, _ = inject_trace("get", (1,), {}, trace)
        assert args == [1, {TRACE_KEY: trace}]

    def test_create_copies_params(self, trace):
        params = {"user": "u1"}
        args, _ = inject_trace("create", ({"a": 1}, params), {}, trace)
        assert args[1] == {"user": "u1", TRACE_KEY: trace}
        assert params == {"user": "u1"}

    def test_update_slot(self, trace):
        args, _ = inject_trace("update", (1, {"a": 1}, None), {}, trace)
        assert args == [1, {"a": 1}, {TRACE_KEY: trace}]

    def test_patch_from_keywords(self, trace):
        args, kwargs = inject_trace("patch", (), {"id": 1, "data": {"a": 1}}, trace)
        assert args == [1, {"a": 1}, {TRACE_KEY: trace}]
        assert kwargs == {}

    def test_params_keyword(self, trace):
        args, kwargs = inject_trace("remove", (3,), {"params": {"q": 1}}, trace)
        assert args == [3]
        assert kwargs == {"params": {"q": 1, TRACE_KEY: trace}}

    def test_trailing_callback_kept_last(self, trace):
        args, _ = inject_trace("get", (1, noop), {}, trace)
        assert args == [1, {TRACE_KEY: trace}, noop]

    def test_non_dict_params_left_alone(self, trace):
        args, _ = inject_trace("find", ("query",), {}, trace)
        assert args == ["query"]


class Recorder:
    def __init__(self):
        self.calls = []
        self.label = "recorder"

    def get(self, *args, **kwargs):
        self.calls.append(("get", args, kwargs))
        return "got"


class TestTracedService:
    def test_verb_injects_trace(self, trace):
        target = Recorder()
        traced = TracedService(target, trace)
        assert traced.get(5) == "got"
        assert target.calls == [("get", (5, {TRACE_KEY: trace}), {})]

    def test_other_attributes_delegate(self, trace):
        assert TracedService(Recorder(), trace).label == "recorder"

    def test_missing_verb(self, trace):
        with pytest.raises(AttributeError):
            TracedService(Recorder(), trace).find()


class TestTracedApp:
    def test_service_lookup_is_traced(self, trace):
        app = Application()
        target = Recorder()
        app.use("things", target)

        traced = TracedApp(app, trace).service("things")
        assert isinstance(traced, TracedService)
        assert traced.target is target
        assert traced.trace is trace

    def test_other_attributes_delegate(self, trace):
        app = Application()
        assert TracedApp(app, trace).services is app.services


class TestUnwrap:
    def test_unwrap_nested(self, trace):
        target = Recorder()
        assert unwrap(TracedService(TracedService(target, trace), trace)) is target

    def test_unwrap_plain(self):
        target = Recorder()
        assert unwrap(target) is target
