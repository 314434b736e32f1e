"""
Bangumi Core Service - HTTP client for the Bangumi API.
Every endpoint funnels through the GET/POST executors, which deliver results to a
callback or to a returned future.
"""

import asyncio
import warnings
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlencode

import aiohttp
from yarl import URL

from bangumi.config import BangumiConfig
from bangumi.dispatch import (
    Completion,
    FutureFactory,
    promise_or_callback,
    validate_future_factory,
)
from bangumi.exceptions import BangumiInvalidArgument
from bangumi.models import BangumiRequest, BangumiResult
from bangumi.utils.get_logger import get_logger

logger = get_logger(__name__)

# characters left intact in request paths, as a browser would leave them
_PATH_SAFE = "/:@!$&'()*+,;=~?#"

Params = Mapping[str, Any]
ParamsOrCallback = Params | Completion | None


def _form_value(value: Any) -> Any:
    """Booleans as lowercase words and None as an empty string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return [_form_value(v) for v in value]
    return value


def encode_params(params: Params | None) -> str:
    """Serialize a parameter mapping as ``application/x-www-form-urlencoded`` text."""
    if not params:
        return ""
    return urlencode(
        {key: _form_value(value) for key, value in params.items()}, doseq=True, quote_via=quote
    )


def encode_path(path: str) -> str:
    return quote(path, safe=_PATH_SAFE)


def _join_query(url: str, qs: str) -> str:
    if not qs:
        return url
    return url + ("&" if "?" in url else "?") + qs


def _split_args(params: ParamsOrCallback, callback: Completion | None) -> tuple[dict, Completion | None]:
    """Allow the callback to be passed in place of the params mapping."""
    if callable(params):
        return {}, params
    return dict(params or {}), callback


class BangumiService:
    """
    Client for the Bangumi API.

    Requests are scheduled on the running event loop. Each call either invokes
    ``callback(error, value)`` or, when no callback is given, returns a future.
    """

    def __init__(
        self,
        options: BangumiConfig | dict[str, Any] | None = None,
        future_factory: FutureFactory | None = None,
    ):
        if isinstance(options, BangumiConfig):
            self.config = options
        else:
            self.config = BangumiConfig.from_options(options)
        self.future_factory = validate_future_factory(future_factory) if future_factory else None
        self._inflight: set[asyncio.Task] = set()

    @classmethod
    def from_env(cls, options: dict[str, Any] | None = None) -> "BangumiService":
        """Build a service with credentials from BANGUMI_APP_ID / BANGUMI_ACCESS_TOKEN."""
        from bangumi.auth import bangumi_auth

        return cls(bangumi_auth.get_client_options(options))

    def configure(self, **options: Any) -> "BangumiService":
        """Replace the configuration with ``options`` merged over the current one.

        Requests already dispatched keep the configuration they started with.
        """
        self.config = self.config.merged(**options)
        return self

    def set_future_factory(self, factory: FutureFactory) -> "BangumiService":
        """Use ``factory`` to create the futures returned when no callback is given."""
        self.future_factory = validate_future_factory(factory)
        return self

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    @staticmethod
    def _check_path(path: Any) -> None:
        if not isinstance(path, str) or not path.startswith("/"):
            raise BangumiInvalidArgument(f"invalid path {path!r}: must start with '/'")

    @staticmethod
    def _check_callback(callback: Any) -> None:
        if not callable(callback):
            raise BangumiInvalidArgument("invalid callback: a callable is required")

    @staticmethod
    def _auth_headers(config: BangumiConfig) -> dict[str, str]:
        headers = dict(config.headers)
        if config.access_token is not None:
            headers["Authorization"] = f"Bearer {config.access_token}"
        return headers

    def build_get_request(self, path: str, params: Params | None = None) -> BangumiRequest:
        """Build a GET request; the app id is sent as ``source`` unless params override it."""
        self._check_path(path)
        config = self.config
        query = dict(params or {})
        if config.app_id is not None:
            query = {"source": config.app_id, **query}

        url = _join_query(config.base_url + encode_path(path), encode_params(query))

        return BangumiRequest(method="GET", url=url, headers=self._auth_headers(config))

    def build_post_request(self, path: str, params: Params | None = None) -> BangumiRequest:
        """Build a form-encoded POST request; the app id goes in the URL query."""
        self._check_path(path)
        config = self.config
        body = encode_params(params).encode("utf-8")

        url = config.base_url + encode_path(path)
        if config.app_id is not None:
            url = _join_query(url, encode_params({"source": config.app_id}))

        headers = {"Content-Length": str(len(body)), **self._auth_headers(config)}
        return BangumiRequest(method="POST", url=url, headers=headers, body=body)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _send(self, request: BangumiRequest) -> BangumiResult:
        logger.debug(f"{request.method} {request.url}")
        try:
            async with (
                aiohttp.ClientSession() as session,
                session.request(
                    request.method,
                    URL(request.url, encoded=True),
                    headers=request.headers,
                    data=request.body,
                ) as response,
            ):
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            return BangumiResult.from_transport_error(e)
        return BangumiResult.from_body(body)

    async def request(self, method: str, path: str, params: Params | None = None) -> BangumiResult:
        """Perform one round trip and return a ``BangumiResult``.

        Transport, parse and remote failures are reported in the result, not raised.

        Raises:
            BangumiInvalidArgument: If ``path`` does not start with '/' or ``method``
                is not GET or POST
        """
        method = method.upper()
        if method == "GET":
            req = self.build_get_request(path, params)
        elif method == "POST":
            req = self.build_post_request(path, params)
        else:
            raise BangumiInvalidArgument(f"unsupported method {method!r}")
        return await self._send(req)

    def _dispatch(self, req: BangumiRequest, callback: Completion) -> None:
        async def run() -> None:
            try:
                result = await self._send(req)
            except Exception as e:
                logger.exception(f"Unexpected error during {req.method} {req.url}")
                result = BangumiResult.from_transport_error(e)
            try:
                callback(*result.completion())
            except Exception:
                logger.exception(f"Callback for {req.method} {req.url} raised")

        task = asyncio.get_running_loop().create_task(run())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    def _get(self, path: str, params: ParamsOrCallback = None, callback: Completion | None = None) -> "BangumiService":
        """Issue a GET and deliver ``(error, value)`` to ``callback`` once the body is parsed."""
        params, callback = _split_args(params, callback)
        self._check_callback(callback)
        req = self.build_get_request(path, params)
        self._dispatch(req, callback)
        return self

    def _post(self, path: str, params: ParamsOrCallback = None, callback: Completion | None = None) -> "BangumiService":
        """Issue a POST with form-encoded ``params`` and deliver ``(error, value)`` to ``callback``."""
        params, callback = _split_args(params, callback)
        self._check_callback(callback)
        req = self.build_post_request(path, params)
        self._dispatch(req, callback)
        return self

    def get(self, path: str, params: ParamsOrCallback = None, callback: Completion | None = None) -> Any:
        """GET ``path``. Returns the service when a callback is given, otherwise a future."""
        params, callback = _split_args(params, callback)
        if callback is not None:
            self._check_callback(callback)
        result = promise_or_callback(
            callback, lambda cb: self._get(path, params, cb), self.future_factory
        )
        return self if result is None else result

    def post(self, path: str, params: ParamsOrCallback = None, callback: Completion | None = None) -> Any:
        """POST to ``path``. Returns the service when a callback is given, otherwise a future."""
        params, callback = _split_args(params, callback)
        if callback is not None:
            self._check_callback(callback)
        result = promise_or_callback(
            callback, lambda cb: self._post(path, params, cb), self.future_factory
        )
        return self if result is None else result

    # ------------------------------------------------------------------
    # API methods
    # ------------------------------------------------------------------

    def calendar(self, callback: Completion | None = None) -> Any:
        """Weekly airing schedule."""
        return self.get("/calendar", callback=callback)

    def user(self, username: str | int, callback: Completion | None = None) -> Any:
        """Profile of a user by username or uid."""
        return self.get(f"/user/{username}", callback=callback)

    def subject(self, subject_id: int, params: ParamsOrCallback = None, callback: Completion | None = None) -> Any:
        """Subject details.

        Args:
            subject_id: id of target subject
            params: ``responseGroup`` accepts small|medium|large
        """
        return self.get(f"/subject/{subject_id}", params, callback)

    def ep(self, subject_id: int, callback: Completion | None = None) -> Any:
        """Episode list of a subject."""
        return self.get(f"/subject/{subject_id}/ep", callback=callback)

    def collection_by_user(
        self, username: str | int, params: ParamsOrCallback = None, callback: Completion | None = None
    ) -> Any:
        """A user's collection; ``cat`` accepts watching."""
        return self.get(f"/user/{username}/collection", params, callback)

    def search(self, keywords: str, params: ParamsOrCallback = None, callback: Completion | None = None) -> Any:
        """Search subjects by keywords.

        Args:
            keywords: query string for search
            params: ``responseGroup`` (small|medium|large), ``type`` (1 book, 2 anime,
                3 music, 4 game, 6 real), ``start`` (paging offset) and
                ``max_results`` (at most 20)
        """
        return self.get(f"/search/subject/{keywords}", params, callback)

    def collection_by_subject(
        self, subject_id: int, params: ParamsOrCallback = None, callback: Completion | None = None
    ) -> Any:
        """Current user's collection status on a subject; requires ``auth``."""
        return self.get(f"/collection/{subject_id}", params, callback)

    def progress(self, username: str | int, params: ParamsOrCallback = None, callback: Completion | None = None) -> Any:
        """Episodes a user has watched, grouped by subject; requires ``auth``."""
        return self.get(f"/user/{username}/progress", params, callback)

    def auth(self, params: ParamsOrCallback = None, callback: Completion | None = None) -> Any:
        """Log in with ``username`` and ``password`` and return an auth string.

        Deprecated: use an OAuth access token instead.
        """
        warnings.warn(
            "BangumiService.auth() is deprecated; configure an access_token instead",
            DeprecationWarning,
            stacklevel=2,
        )
        logger.warning("auth() will be removed in a future release")
        return self.post("/auth", params, callback)

    def create_collection(
        self, subject_id: int, params: ParamsOrCallback = None, callback: Completion | None = None
    ) -> Any:
        """Create or update the collection status of a subject.

        Args:
            subject_id: id of target subject
            params: ``status`` (wish|collect|do|on_hold|dropped), optional ``comment``,
                ``tags`` (comma separated) and ``rating`` (0 to 10)
        """
        return self.post(f"/collection/{subject_id}/create", params, callback)

    def update_ep(
        self,
        ep_id: int,
        status: str,
        params: ParamsOrCallback = None,
        callback: Completion | None = None,
    ) -> Any:
        """Set the watch status of an episode; ``ep_id`` in params batches a comma separated list."""
        return self.post(f"/ep/{ep_id}/status/{status}", params, callback)

    def update_eps(self, subject_id: int, params: ParamsOrCallback = None, callback: Completion | None = None) -> Any:
        """Mark episodes 1 through ``watched_eps`` of a subject as watched."""
        return self.post(f"/subject/{subject_id}/update/watched_eps", params, callback)
