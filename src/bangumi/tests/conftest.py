"""
Shared fixtures and utilities for Bangumi client tests.
"""

import asyncio
import json
import os
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Keep a developer's env file from leaking credentials into unit tests
os.environ["ENV_FILE"] = os.devnull


@pytest.fixture
def mock_app_id():
    return "bgm_test_app_12345"


@pytest.fixture
def mock_access_token():
    return "test_access_token_abcdef"


@pytest.fixture
def mock_http():
    """Patch aiohttp so every request answers with ``mock_http.respond(...)``'s body.

    ``session_class`` counts sessions opened; ``session.request`` records the call.
    """
    with patch("aiohttp.ClientSession") as mock_session_class:
        mock_response = AsyncMock()
        mock_response.status = 200
        mock_response.read = AsyncMock(return_value=b"{}")

        request_cm = MagicMock()
        request_cm.__aenter__ = AsyncMock(return_value=mock_response)
        request_cm.__aexit__ = AsyncMock(return_value=False)

        mock_session = MagicMock()
        mock_session.request.return_value = request_cm
        mock_session.__aenter__ = AsyncMock(return_value=mock_session)
        mock_session.__aexit__ = AsyncMock(return_value=False)
        mock_session_class.return_value = mock_session

        def respond(payload: Any) -> None:
            if isinstance(payload, str):
                payload = payload.encode("utf-8")
            elif not isinstance(payload, bytes):
                payload = json.dumps(payload).encode("utf-8")
            mock_response.read = AsyncMock(return_value=payload)

        def fail(exc: BaseException) -> None:
            mock_session.request.side_effect = exc

        def last_call() -> SimpleNamespace:
            args, kwargs = mock_session.request.call_args
            return SimpleNamespace(method=args[0], url=str(args[1]), **kwargs)

        yield SimpleNamespace(
            session_class=mock_session_class,
            session=mock_session,
            response=mock_response,
            respond=respond,
            fail=fail,
            last_call=last_call,
        )


@pytest.fixture
def completion():
    """A callback that records its calls and a future set by the first one."""

    class Recorder:
        def __init__(self):
            self.calls: list[tuple[Any, Any]] = []
            self.done = asyncio.get_running_loop().create_future()

        def __call__(self, error: Any, value: Any) -> None:
            self.calls.append((error, value))
            if not self.done.done():
                self.done.set_result((error, value))

        async def wait(self) -> tuple[Any, Any]:
            return await asyncio.wait_for(self.done, timeout=1)

    return Recorder


@pytest.fixture
def mock_calendar_response():
    """Mock response for the calendar endpoint."""
    return [
        {
            "weekday": {"en": "Mon", "cn": "星期一", "ja": "月耀日", "id": 1},
            "items": [
                {
                    "id": 253,
                    "url": "http://bgm.tv/subject/253",
                    "type": 2,
                    "name": "カウボーイビバップ",
                    "name_cn": "星际牛仔",
                    "summary": "",
                    "air_date": "1998-10-23",
                    "air_weekday": 1,
                    "images": {
                        "large": "http://lain.bgm.tv/pic/cover/l/c2/0a/253_t3XWj.jpg",
                        "common": "http://lain.bgm.tv/pic/cover/c/c2/0a/253_t3XWj.jpg",
                        "medium": "http://lain.bgm.tv/pic/cover/m/c2/0a/253_t3XWj.jpg",
                        "small": "http://lain.bgm.tv/pic/cover/s/c2/0a/253_t3XWj.jpg",
                        "grid": "http://lain.bgm.tv/pic/cover/g/c2/0a/253_t3XWj.jpg",
                    },
                    "rating": {"total": 4000, "count": {"10": 1200, "9": 1500}, "score": 9.1},
                    "rank": 3,
                    "collection": {"doing": 300},
                }
            ],
        },
        {
            "weekday": {"en": "Tue", "cn": "星期二", "ja": "火耀日", "id": 2},
            "items": [],
        },
    ]


@pytest.fixture
def mock_subject_response():
    """Mock response for the subject endpoint (small response group)."""
    return {
        "id": 253,
        "url": "http://bgm.tv/subject/253",
        "type": 2,
        "name": "カウボーイビバップ",
        "name_cn": "星际牛仔",
        "summary": "2071年,人类已经殖民太阳系。",
        "eps": 26,
        "eps_count": 26,
        "air_date": "1998-10-23",
        "air_weekday": 5,
        "rating": {"total": 4000, "count": {"10": 1200}, "score": 9.1},
        "rank": 3,
        "images": {"large": "http://lain.bgm.tv/pic/cover/l/c2/0a/253_t3XWj.jpg"},
        "collection": {"wish": 1000, "collect": 9000, "doing": 300, "on_hold": 200, "dropped": 50},
    }


@pytest.fixture
def mock_episodes_response():
    """Mock response for the subject episode list endpoint."""
    return {
        "id": 253,
        "name": "カウボーイビバップ",
        "eps": [
            {
                "id": 519,
                "url": "http://bgm.tv/ep/519",
                "type": 0,
                "sort": 1,
                "name": "アステロイド・ブルース",
                "name_cn": "小行星蓝调",
                "duration": "24m",
                "airdate": "1998-10-23",
                "comment": 12,
                "desc": "",
                "status": "Air",
            },
            {
                "id": 520,
                "url": "http://bgm.tv/ep/520",
                "type": 0,
                "sort": 2,
                "name": "野良犬のストラット",
                "name_cn": "",
                "duration": "24m",
                "airdate": "1998-10-30",
                "comment": 8,
                "desc": "",
                "status": "Air",
            },
        ],
    }


@pytest.fixture
def mock_user_response():
    return {
        "id": 1,
        "url": "http://bgm.tv/user/sai",
        "username": "sai",
        "nickname": "Sai",
        "avatar": {"large": "http://lain.bgm.tv/pic/user/l/000/00/00/1.jpg"},
        "sign": "Awesome!",
        "usergroup": 1,
    }


@pytest.fixture
def mock_search_response():
    return {
        "results": 2,
        "list": [
            {"id": 253, "type": 2, "name": "カウボーイビバップ", "name_cn": "星际牛仔"},
            {"id": 254, "type": 2, "name": "カウボーイビバップ 天国の扉", "name_cn": "星际牛仔 天国之门"},
        ],
    }
