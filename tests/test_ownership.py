"""Tests for one-shot ownership transfer."""

import pytest

from use_with import (
    MissingFinalizerError,
    Owned,
    ResourceConsumedError,
    UseWithConfig,
    claim,
    run_with,
    using,
)


def test_take_once(make_resource):
    """Test that an owned handle hands its value out once."""
    resource = make_resource()
    handle = Owned(resource)

    assert not handle.consumed
    assert handle.take() is resource
    assert handle.consumed


def test_second_take_fails(make_resource):
    """Test that taking a consumed handle raises."""
    handle = Owned(make_resource())
    handle.take()

    with pytest.raises(ResourceConsumedError, match="already consumed"):
        handle.take()


def test_claim_passes_plain_values():
    """Test that claim() leaves values that are not Owned untouched."""
    value = object()
    assert claim(value) is value


def test_runner_consumes_handle(make_resource):
    """Test that run_with unwraps an Owned handle and consumes it."""
    resource = make_resource(value=10)
    handle = Owned(resource)

    assert run_with(handle, lambda res: res.use() + 32) == 42
    assert handle.consumed
    assert resource.close_count == 1


def test_reuse_after_scope_fails_fast(make_resource):
    """Test that reusing a handle after its scope is rejected before any work runs."""
    resource = make_resource()
    handle = Owned(resource)
    run_with(handle, lambda res: res.use())
    calls = []

    with pytest.raises(ResourceConsumedError):
        run_with(handle, calls.append)

    assert calls == []
    assert resource.close_count == 1


def test_using_consumes_handle(make_resource):
    """Test that the block form also claims Owned handles."""
    handle = Owned(make_resource())

    with using(handle) as it:
        assert it.name == "resource"

    assert handle.consumed
    assert "consumed" in repr(handle)


def test_strict_rejection_keeps_ownership():
    """Test that a handle rejected in strict mode is not consumed."""
    handle = Owned(10)

    with pytest.raises(MissingFinalizerError):
        run_with(handle, lambda value: value, config=UseWithConfig(strict=True))

    assert not handle.consumed
    assert handle.take() == 10


def test_peek_does_not_consume(make_resource):
    """Test that peek() leaves the handle owned."""
    resource = make_resource()
    handle = Owned(resource)

    assert handle.peek() is resource
    assert not handle.consumed

    handle.take()
    with pytest.raises(ResourceConsumedError):
        handle.peek()
