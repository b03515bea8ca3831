from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import requests

from ..config import SETTINGS
from ..errors import DecodeError

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]


class SourceFetcher:
    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        *,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._session_factory = session_factory or requests.Session
        self._session = self._create_session()
        self._timeout = timeout
        self._retries = retries
        self._sleep = sleep

    def _create_session(self) -> requests.Session:
        session = self._session_factory()
        session.headers.update({"User-Agent": "bead-grid/1.0"})
        return session

    @property
    def timeout(self) -> float:
        return SETTINGS.timeout if self._timeout is None else self._timeout

    @property
    def retries(self) -> int:
        return SETTINGS.retries if self._retries is None else self._retries

    def fetch_bytes(self, url: str) -> bytes:
        last_exception: Exception | None = None
        for attempt in range(1, self.retries + 2):
            try:
                response = self._session.get(url, timeout=self.timeout)
                response.raise_for_status()
                return response.content
            except requests.RequestException as exc:
                last_exception = exc
                logger.warning("Fetching %s failed (attempt %d): %s", url, attempt, exc)
                if attempt <= self.retries:
                    self._sleep(0.4 * attempt)
        raise DecodeError(f"Could not fetch image from {url}: {last_exception}") from last_exception


FETCHER = SourceFetcher()
