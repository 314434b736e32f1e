"""
Bangumi Models - Pydantic models for requests, results and common API payloads.
Payload models accept unknown fields so new API attributes pass through untouched.
"""

import json
from typing import Any

from pydantic import ConfigDict, Field

from bangumi.exceptions import (
    BangumiError,
    BangumiParseError,
    BangumiRemoteError,
    BangumiTransportError,
    ErrorKind,
)
from bangumi.utils.pydantic_tools import BaseModelWithMethods

# ============================================================================
# Request / Result
# ============================================================================


class BangumiRequest(BaseModelWithMethods):
    """One outgoing request, built per call."""

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes | None = None


class BangumiResult(BaseModelWithMethods):
    """Outcome of a single round trip: either a payload or a classified failure."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    ok: bool
    data: Any = Field(default_factory=dict)
    error_kind: ErrorKind | None = None
    error_message: str | None = None
    error_payload: Any = None
    exception: BangumiError | None = Field(default=None, exclude=True)

    @classmethod
    def success(cls, payload: Any) -> "BangumiResult":
        return cls(ok=True, data=payload)

    @classmethod
    def failure(cls, exc: BangumiError) -> "BangumiResult":
        payload = exc.payload if isinstance(exc, BangumiRemoteError) else None
        return cls(
            ok=False,
            data={},
            error_kind=exc.kind,
            error_message=exc.message,
            error_payload=payload,
            exception=exc,
        )

    @classmethod
    def from_body(cls, body: str | bytes) -> "BangumiResult":
        """Classify a response body: JSON with an ``error`` key is a remote failure.

        Bytes are decoded as UTF-8 with invalid sequences replaced. A body of
        ``null`` carries no value and counts as a parse failure.
        """
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")
        try:
            payload = json.loads(body)
        except ValueError as e:
            return cls.failure(BangumiParseError(f"invalid JSON response: {e}", body=body))
        if payload is None:
            return cls.failure(BangumiParseError("empty JSON response: null", body=body))
        if isinstance(payload, dict) and "error" in payload:
            return cls.failure(BangumiRemoteError(payload))
        return cls.success(payload)

    @classmethod
    def from_transport_error(cls, exc: BaseException) -> "BangumiResult":
        error = BangumiTransportError(str(exc) or type(exc).__name__)
        error.__cause__ = exc
        return cls.failure(error)

    def completion(self) -> tuple[Any, Any]:
        """Return the ``(error, value)`` pair handed to callbacks.

        Remote failures pass the parsed payload itself as the error.
        """
        if self.ok:
            return None, self.data
        if self.error_kind == ErrorKind.REMOTE:
            return self.error_payload, {}
        return self.exception, {}


# ============================================================================
# Raw Bangumi API Payload Models
# ============================================================================


class BangumiImages(BaseModelWithMethods):
    large: str | None = None
    common: str | None = None
    medium: str | None = None
    small: str | None = None
    grid: str | None = None


class BangumiRating(BaseModelWithMethods):
    total: int = 0
    count: dict[str, int] = Field(default_factory=dict)
    score: float = 0.0


class BangumiCollectionCounts(BaseModelWithMethods):
    wish: int = 0
    collect: int = 0
    doing: int = 0
    on_hold: int = 0
    dropped: int = 0


class BangumiEpisode(BaseModelWithMethods):
    id: int
    url: str | None = None
    type: int = 0
    sort: float = 0
    name: str = ""
    name_cn: str = ""
    duration: str = ""
    airdate: str = ""
    comment: int = 0
    desc: str = ""
    status: str = ""


class BangumiSubject(BaseModelWithMethods):
    """Subject in small/medium/large response groups; larger groups add fields."""

    id: int
    url: str | None = None
    type: int = 0
    name: str = ""
    name_cn: str = ""
    summary: str = ""
    air_date: str = ""
    air_weekday: int = 0
    eps: list[BangumiEpisode] | int | None = None
    eps_count: int | None = None
    images: BangumiImages | None = None
    rating: BangumiRating | None = None
    rank: int | None = None
    collection: BangumiCollectionCounts | None = None

    @property
    def display_name(self) -> str:
        return self.name_cn or self.name


class BangumiWeekday(BaseModelWithMethods):
    en: str = ""
    cn: str = ""
    ja: str = ""
    id: int = 0


class BangumiCalendarDay(BaseModelWithMethods):
    weekday: BangumiWeekday
    items: list[BangumiSubject] = Field(default_factory=list)


class BangumiAvatar(BaseModelWithMethods):
    large: str | None = None
    medium: str | None = None
    small: str | None = None


class BangumiUser(BaseModelWithMethods):
    id: int
    url: str | None = None
    username: str = ""
    nickname: str = ""
    avatar: BangumiAvatar | None = None
    sign: str = ""
    usergroup: int | None = None


# ============================================================================
# Wrapper Response Models
# ============================================================================


class BangumiWrapperResponse(BaseModelWithMethods):
    """Common failure fields for wrapper responses."""

    error: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def from_failure(cls, result: BangumiResult, **fields: Any) -> Any:
        return cls(error=result.error_message, error_kind=result.error_kind, **fields)


class BangumiCalendarResponse(BangumiWrapperResponse):
    days: list[BangumiCalendarDay] = Field(default_factory=list)


class BangumiSubjectResponse(BangumiWrapperResponse):
    subject: BangumiSubject | None = None


class BangumiEpisodesResponse(BangumiWrapperResponse):
    subject_id: int | None = None
    episodes: list[BangumiEpisode] = Field(default_factory=list)


class BangumiUserResponse(BangumiWrapperResponse):
    user: BangumiUser | None = None


class BangumiSearchResponse(BangumiWrapperResponse):
    query: str | None = None
    results: int = 0
    subjects: list[BangumiSubject] = Field(default_factory=list, alias="list")
