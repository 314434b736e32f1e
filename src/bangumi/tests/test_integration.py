"""
Integration tests for the Bangumi client.
These tests hit the live api.bgm.tv endpoints (no mocks).

Requirements:
- BANGUMI_INTEGRATION=1 to opt in
- Internet connection required

Run with: BANGUMI_INTEGRATION=1 pytest src/bangumi/tests/test_integration.py -m integration -v
"""

import os

import pytest

from bangumi.core import BangumiService
from bangumi.wrappers import BangumiWrapper

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        os.getenv("BANGUMI_INTEGRATION") != "1", reason="set BANGUMI_INTEGRATION=1 to call the live API"
    ),
]


@pytest.fixture
def bangumi_service():
    return BangumiService({"app_id": os.getenv("BANGUMI_APP_ID")} if os.getenv("BANGUMI_APP_ID") else None)


@pytest.mark.asyncio
async def test_calendar(bangumi_service):
    calendar = await bangumi_service.calendar()

    assert isinstance(calendar, list)
    assert len(calendar) == 7


@pytest.mark.asyncio
async def test_subject_wrapper(bangumi_service):
    response = await BangumiWrapper(bangumi_service).get_subject(253)

    assert response.error is None
    assert response.subject.id == 253
