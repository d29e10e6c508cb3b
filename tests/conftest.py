"""Shared fixtures and sample services for the hookline test suite."""

import pytest

from hookline import Application, HooksConfig, configure


class NotFound(Exception):
    pass


class MemoryService:
    """Async in-memory service recording every call it receives."""

    def __init__(self):
        self.store: dict[int, dict] = {}
        self.next_id = 1
        self.calls: list[tuple] = []

    async def find(self, params=None):
        self.calls.append(("find", params))
        return list(self.store.values())

    async def get(self, id, params=None):
        self.calls.append(("get", id, params))
        if id not in self.store:
            raise NotFound(f"No record found for id '{id}'")
        return self.store[id]

    async def create(self, data, params=None):
        self.calls.append(("create", data, params))
        record = {**data, "id": self.next_id}
        self.store[self.next_id] = record
        self.next_id += 1
        return record

    async def update(self, id, data, params=None):
        self.calls.append(("update", id, data, params))
        if id not in self.store:
            raise NotFound(f"No record found for id '{id}'")
        self.store[id] = {**data, "id": id}
        return self.store[id]

    async def patch(self, id, data, params=None):
        self.calls.append(("patch", id, data, params))
        if id not in self.store:
            raise NotFound(f"No record found for id '{id}'")
        self.store[id].update(data)
        return self.store[id]

    async def remove(self, id, params=None):
        self.calls.append(("remove", id, params))
        if id not in self.store:
            raise NotFound(f"No record found for id '{id}'")
        return self.store.pop(id)


class CallbackService:
    """Reports completion through ``callback(error, result)`` only."""

    def find(self, params=None, callback=None):
        callback(NotFound("nothing here"), None)

    def get(self, id, params=None, callback=None):
        callback(None, {"id": id, "source": "callback"})


class SyncService:
    """Plain synchronous methods returning their result."""

    def get(self, id, params=None):
        return {"id": id, "source": "sync"}

    def create(self, data, params=None):
        raise ValueError("read-only service")


@pytest.fixture
def app():
    return Application().configure(configure(HooksConfig()))


@pytest.fixture
def messages(app):
    service = MemoryService()
    app.use("messages", service)
    return service


@pytest.fixture
def users(app):
    service = MemoryService()
    app.use("/users/", service)
    service.store[1] = {"id": 1, "name": "Ada"}
    return service
