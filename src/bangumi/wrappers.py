"""
Bangumi Async Wrappers - awaitable helpers returning typed response models.
Failures come back as a response with ``error`` and ``error_kind`` set instead of raising.
"""

from typing import Any

from pydantic import ValidationError

from bangumi.core import BangumiService
from bangumi.exceptions import ErrorKind
from bangumi.models import (
    BangumiCalendarDay,
    BangumiCalendarResponse,
    BangumiEpisode,
    BangumiEpisodesResponse,
    BangumiResult,
    BangumiSearchResponse,
    BangumiSubject,
    BangumiSubjectResponse,
    BangumiUser,
    BangumiUserResponse,
)
from bangumi.utils.get_logger import get_logger

logger = get_logger(__name__)


class BangumiWrapper:
    def __init__(self, service: BangumiService | None = None):
        self._service = service

    @property
    def service(self) -> BangumiService:
        """Lazy-load service instance on first use."""
        if self._service is None:
            self._service = BangumiService.from_env()
        return self._service

    @staticmethod
    def _invalid(response_cls: Any, name: str, e: ValidationError, **fields: Any) -> Any:
        logger.warning(f"Error validating Bangumi {name} response: {e}")
        return response_cls(error=f"unexpected {name} payload", error_kind=ErrorKind.PARSE, **fields)

    async def get_calendar(self) -> BangumiCalendarResponse:
        """Weekly airing schedule, one entry per weekday."""
        result: BangumiResult = await self.service.request("GET", "/calendar")
        if not result.ok:
            return BangumiCalendarResponse.from_failure(result)
        if not isinstance(result.data, list):
            return BangumiCalendarResponse(error="unexpected calendar payload", error_kind=ErrorKind.PARSE)
        try:
            days = [BangumiCalendarDay.model_validate(day) for day in result.data]
        except ValidationError as e:
            return self._invalid(BangumiCalendarResponse, "calendar", e)
        return BangumiCalendarResponse(days=days)

    async def get_subject(self, subject_id: int, response_group: str = "small") -> BangumiSubjectResponse:
        """
        Subject details.

        Args:
            subject_id: Bangumi subject id
            response_group: small, medium or large

        Returns:
            BangumiSubjectResponse with ``subject`` set on success
        """
        result = await self.service.request(
            "GET", f"/subject/{subject_id}", {"responseGroup": response_group}
        )
        if not result.ok:
            return BangumiSubjectResponse.from_failure(result)
        try:
            return BangumiSubjectResponse(subject=BangumiSubject.model_validate(result.data))
        except ValidationError as e:
            return self._invalid(BangumiSubjectResponse, "subject", e)

    async def get_episodes(self, subject_id: int) -> BangumiEpisodesResponse:
        result = await self.service.request("GET", f"/subject/{subject_id}/ep")
        if not result.ok:
            return BangumiEpisodesResponse.from_failure(result, subject_id=subject_id)
        eps = result.data.get("eps", []) if isinstance(result.data, dict) else []
        try:
            episodes = [BangumiEpisode.model_validate(ep) for ep in eps or []]
        except ValidationError as e:
            return self._invalid(BangumiEpisodesResponse, "episode", e, subject_id=subject_id)
        return BangumiEpisodesResponse(subject_id=subject_id, episodes=episodes)

    async def get_user(self, username: str | int) -> BangumiUserResponse:
        result = await self.service.request("GET", f"/user/{username}")
        if not result.ok:
            return BangumiUserResponse.from_failure(result)
        try:
            return BangumiUserResponse(user=BangumiUser.model_validate(result.data))
        except ValidationError as e:
            return self._invalid(BangumiUserResponse, "user", e)

    async def search_subjects(
        self,
        keywords: str,
        subject_type: int | None = None,
        start: int = 0,
        max_results: int = 20,
        response_group: str = "small",
    ) -> BangumiSearchResponse:
        """
        Search subjects by keyword.

        Args:
            keywords: Search query
            subject_type: 1 book, 2 anime, 3 music, 4 game, 6 real (None for all)
            start: Paging offset
            max_results: Page size, the API caps it at 20
            response_group: small, medium or large

        Returns:
            BangumiSearchResponse with the total hit count and the current page
        """
        params: dict[str, Any] = {
            "responseGroup": response_group,
            "start": start,
            "max_results": min(max_results, 20),
        }
        if subject_type is not None:
            params["type"] = subject_type

        result = await self.service.request("GET", f"/search/subject/{keywords}", params)
        if not result.ok:
            return BangumiSearchResponse.from_failure(result, query=keywords)
        data = result.data if isinstance(result.data, dict) else {}
        try:
            return BangumiSearchResponse(
                query=keywords,
                results=data.get("results", 0),
                subjects=data.get("list") or [],
            )
        except ValidationError as e:
            return self._invalid(BangumiSearchResponse, "search", e, query=keywords)


bangumi_wrapper = BangumiWrapper()
