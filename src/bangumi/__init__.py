"""
Bangumi API client.

This package provides:
- BangumiService: GET/POST dispatcher and one method per API endpoint
- BangumiConfig: Immutable client options
- Models: Pydantic models for results and common payloads
- Wrappers: awaitable helpers returning typed responses
"""

from bangumi.auth import BangumiAuth, bangumi_auth
from bangumi.config import VERSION, BangumiConfig
from bangumi.core import BangumiService, encode_params
from bangumi.dispatch import promise_or_callback
from bangumi.exceptions import (
    BangumiError,
    BangumiInvalidArgument,
    BangumiParseError,
    BangumiRemoteError,
    BangumiTransportError,
    ErrorKind,
)
from bangumi.models import (
    BangumiCalendarDay,
    BangumiCalendarResponse,
    BangumiEpisode,
    BangumiEpisodesResponse,
    BangumiRequest,
    BangumiResult,
    BangumiSearchResponse,
    BangumiSubject,
    BangumiSubjectResponse,
    BangumiUser,
    BangumiUserResponse,
)
from bangumi.wrappers import BangumiWrapper, bangumi_wrapper

__version__ = VERSION

__all__ = [
    # Core
    "BangumiService",
    "BangumiConfig",
    "BangumiAuth",
    "bangumi_auth",
    "encode_params",
    "promise_or_callback",
    # Errors
    "BangumiError",
    "BangumiInvalidArgument",
    "BangumiParseError",
    "BangumiRemoteError",
    "BangumiTransportError",
    "ErrorKind",
    # Models
    "BangumiRequest",
    "BangumiResult",
    "BangumiSubject",
    "BangumiEpisode",
    "BangumiUser",
    "BangumiCalendarDay",
    # Response Models
    "BangumiCalendarResponse",
    "BangumiSubjectResponse",
    "BangumiEpisodesResponse",
    "BangumiUserResponse",
    "BangumiSearchResponse",
    # Wrappers
    "BangumiWrapper",
    "bangumi_wrapper",
    "VERSION",
]
