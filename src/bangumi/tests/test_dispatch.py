"""
Unit tests for the callback/future completion adapter.
"""

import pytest

from bangumi.dispatch import once, promise_or_callback, validate_future_factory
from bangumi.exceptions import BangumiRemoteError, BangumiTransportError

pytestmark = pytest.mark.unit


def test_once_ignores_later_calls():
    calls = []
    complete = once(lambda err, value: calls.append((err, value)))

    complete(None, 1)
    complete("late", 2)

    assert calls == [(None, 1)]


def test_callback_mode_returns_none_and_passes_arguments():
    calls = []

    returned = promise_or_callback(
        lambda err, value: calls.append((err, value)),
        lambda complete: complete({"error": "x"}, {}),
    )

    assert returned is None
    assert calls == [({"error": "x"}, {})]


@pytest.mark.asyncio
async def test_future_resolves_with_value():
    future = promise_or_callback(None, lambda complete: complete(None, {"id": 1}))

    assert await future == {"id": 1}


@pytest.mark.asyncio
async def test_future_rejects_with_exception_error():
    error = BangumiTransportError("down")
    future = promise_or_callback(None, lambda complete: complete(error, {}))

    with pytest.raises(BangumiTransportError) as exc_info:
        await future
    assert exc_info.value is error


@pytest.mark.asyncio
async def test_future_rejects_payload_as_remote_error():
    future = promise_or_callback(None, lambda complete: complete({"error": "need login"}, {}))

    with pytest.raises(BangumiRemoteError) as exc_info:
        await future
    assert exc_info.value.payload == {"error": "need login"}


@pytest.mark.asyncio
async def test_future_keeps_first_completion():
    def work(complete):
        complete(None, "first")
        complete(BangumiTransportError("second"), {})

    assert await promise_or_callback(None, work) == "first"


def test_work_errors_propagate_synchronously():
    def work(complete):
        raise ValueError("bad path")

    with pytest.raises(ValueError, match="bad path"):
        promise_or_callback(lambda err, value: None, work)


def test_validate_future_factory():
    factory = validate_future_factory(list)
    assert factory is list

    with pytest.raises(TypeError):
        validate_future_factory(None)
