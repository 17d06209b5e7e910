"""Shared fixtures: resources that record when they are used and finalized."""

import asyncio

import pytest

_ENV_VARS = (
    "USE_WITH_STRICT",
    "USE_WITH_FINALIZER_NAMES",
    "USE_WITH_ASYNC_FINALIZER_NAMES",
    "USE_WITH_LOG_LEVEL",
)


class TrackedResource:
    """Resource that appends 'used'/'closed' markers to a shared event log."""

    def __init__(self, name, events, value=0):
        self.name = name
        self.events = events
        self.value = value
        self.close_count = 0

    def use(self):
        self.events.append(f"used:{self.name}")
        return self.value

    def close(self):
        self.close_count += 1
        self.events.append(f"closed:{self.name}")


class AsyncTrackedResource(TrackedResource):
    """Tracked resource with an asynchronous finalizer."""

    def __init__(self, name, events, value=0):
        super().__init__(name, events, value)
        self.aclose_count = 0

    async def aclose(self):
        # Suspend so finalization spans a scheduling point too
        await asyncio.sleep(0)
        self.aclose_count += 1
        self.events.append(f"aclosed:{self.name}")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test against the default configuration."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def events():
    """Ordered log of resource events."""
    return []


@pytest.fixture
def make_resource(events):
    """Factory for synchronously finalized tracked resources."""

    def factory(name="resource", value=0):
        return TrackedResource(name, events, value)

    return factory


@pytest.fixture
def make_async_resource(events):
    """Factory for asynchronously finalized tracked resources."""

    def factory(name="resource", value=0):
        return AsyncTrackedResource(name, events, value)

    return factory
