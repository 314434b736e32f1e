"""
Dual-mode completion: hand results to a caller's callback, or to a future when
no callback was given.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from bangumi.exceptions import BangumiRemoteError

Completion = Callable[[Any, Any], None]
FutureFactory = Callable[[], Any]


def once(callback: Completion) -> Completion:
    """Wrap ``callback`` so only its first invocation goes through."""
    called = False

    def complete(error: Any, value: Any) -> None:
        nonlocal called
        if called:
            return
        called = True
        callback(error, value)

    return complete


def default_future_factory() -> asyncio.Future:
    return asyncio.get_running_loop().create_future()


def validate_future_factory(factory: Any) -> FutureFactory:
    if not callable(factory):
        raise TypeError(f"future_factory must be callable, got {factory!r}")
    return factory


def promise_or_callback(
    callback: Completion | None,
    work: Callable[[Completion], Any],
    future_factory: FutureFactory | None = None,
) -> Any:
    """Run ``work`` with a completion function.

    With a callback, the callback (guarded to fire once) is the completion and
    None is returned. Without one, a future is returned that resolves with the
    value, or is rejected with the error. Remote error payloads are not
    exceptions, so they are raised as ``BangumiRemoteError``.
    """
    if callback is not None:
        work(once(callback))
        return None

    future = (future_factory or default_future_factory)()

    def complete(error: Any, value: Any) -> None:
        if future.done():
            return
        if error is None:
            future.set_result(value)
        elif isinstance(error, BaseException):
            future.set_exception(error)
        else:
            future.set_exception(BangumiRemoteError(error))

    work(complete)
    return future
