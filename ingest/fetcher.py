"""Remotive jobs API fetcher.

One GET per run against the public remote-jobs endpoint. The endpoint returns
the whole listing in a single body (`{"jobs": [...]}`), so there is no paging.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from utils.config import DEFAULT_JOBS_API_URL, DEFAULT_JOBS_CATEGORY, Settings

JobRecord = Dict[str, Any]


class FetchError(Exception):
    """Raised when the jobs listing could not be retrieved."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class RemotiveFetcher:
    """Async client for the Remotive remote-jobs endpoint.

    Use as an async context manager; the aiohttp session lives for one run.
    A session passed in by the caller is used as-is and left open.
    """

    def __init__(
        self,
        *,
        url: str = DEFAULT_JOBS_API_URL,
        category: str = DEFAULT_JOBS_CATEGORY,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._url = url
        self._category = category
        self._session = session
        self._owns_session = session is None
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings) -> RemotiveFetcher:
        return cls(url=settings.jobs_api_url, category=settings.jobs_category)

    async def __aenter__(self) -> RemotiveFetcher:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get the active session, raising error if not initialized."""
        if self._session is None:
            raise RuntimeError("Fetcher not initialized. Use 'async with fetcher: ...'")
        return self._session

    async def fetch(self) -> List[JobRecord]:
        """Fetch the full jobs listing.

        Returns:
            Raw job records; an absent or null `jobs` key yields an empty list.

        Raises:
            FetchError: On any non-200 status, transport failure or
                undecodable body (no retry).
        """
        params = {"category": self._category}
        self._logger.info(f"[Fetcher] Fetching remote {self._category} jobs from {self._url}")

        try:
            async with self.session.get(self._url, params=params) as response:
                if response.status != 200:
                    raise FetchError(
                        f"Failed to fetch data: HTTP {response.status}",
                        status=response.status,
                    )
                data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise FetchError(f"Error fetching remote jobs: {e!r}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise FetchError(f"Unexpected response body: expected an object, got {type(data).__name__}")

        jobs = data.get("jobs") or []
        self._logger.info(f"[Fetcher] ✓ Successfully fetched {len(jobs)} jobs")
        return list(jobs)
