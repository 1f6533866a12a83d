"""HTTP client for the country-stats endpoint and the single-fetch loader."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from countrystats.errors import DataSourceUnavailable, StaleResponseDiscarded
from countrystats.utils.logging import get_logger
from countrystats.view.table import TableView

logger = get_logger(__name__)

STATS_PATH = "/api/country-stats"
HEALTH_PATH = "/api/healthz"


class StatsClient:
    """Fetches the full StatsRow array from a country stats server."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.http = http or requests.Session()

    @property
    def stats_url(self) -> str:
        return f"{self.base_url}{STATS_PATH}"

    def fetch_rows(self) -> List[Dict[str, Any]]:
        """
        GET the country stats rows.

        Returns:
            List of row dicts keyed by column label

        Raises:
            DataSourceUnavailable: On connection errors, non-2xx status, invalid
                JSON, or a body that is not an array of objects
        """
        try:
            response = self.http.get(self.stats_url, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            logger.error(f"Request to {self.stats_url} failed: {e}")
            raise DataSourceUnavailable(f"Request failed: {e}") from e

        if not response.ok:
            logger.error(f"{self.stats_url} returned HTTP {response.status_code}")
            raise DataSourceUnavailable(f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise DataSourceUnavailable("Response body is not JSON") from e

        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            raise DataSourceUnavailable("Response body is not an array of rows")

        logger.info(f"Fetched {len(data)} rows from {self.stats_url}")
        return data

    def health(self) -> bool:
        try:
            response = self.http.get(f"{self.base_url}{HEALTH_PATH}", timeout=self.timeout_seconds)
            return response.ok and response.json().get("ok") is True
        except (requests.RequestException, ValueError, AttributeError):
            return False


@dataclass
class FetchHandle:
    """One fetch attempt. Cancellation is advisory: the result is dropped."""
    generation: int
    client: StatsClient
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class StatsLoader:
    """
    Keeps at most one current fetch feeding a TableView.

    Starting a fetch cancels the previous one; a cancelled fetch that still
    completes never overwrites the view.
    """

    def __init__(self, client: StatsClient, view: TableView):
        self.client = client
        self.view = view
        self._generation = 0
        self._current: Optional[FetchHandle] = None

    def start(self) -> FetchHandle:
        if self._current is not None:
            self._current.cancel()
        self._generation += 1
        handle = FetchHandle(generation=self._generation, client=self.client)
        self._current = handle
        self.view.loading = True
        self.view.error = None
        return handle

    def _ensure_current(self, handle: FetchHandle) -> None:
        if handle.cancelled or handle is not self._current:
            raise StaleResponseDiscarded(f"Fetch #{handle.generation} superseded")

    def complete(self, handle: FetchHandle) -> bool:
        """
        Run the fetch for handle and apply its outcome to the view.

        Returns:
            True if rows were applied; False on failure or stale discard
        """
        try:
            self._ensure_current(handle)
            try:
                rows = handle.client.fetch_rows()
            except DataSourceUnavailable as e:
                self._ensure_current(handle)
                self.view.set_error(e.user_message)
                return False
            self._ensure_current(handle)
        except StaleResponseDiscarded as e:
            logger.warning(f"Discarding result: {e}")
            return False

        self.view.set_rows(rows)
        return True

    def load(self) -> bool:
        return self.complete(self.start())

    def reconfigure(self, base_url: str, timeout_seconds: Optional[float] = None) -> bool:
        """Point at a new server and reload; any in-flight fetch is cancelled."""
        self.client = StatsClient(
            base_url,
            timeout_seconds=self.client.timeout_seconds if timeout_seconds is None else timeout_seconds,
            http=self.client.http,
        )
        return self.load()
