"""Airtable connector for the REST list-records and get-record endpoints.

List flow, repeated until the response carries no offset:
1. GET {api_url}/{base_id}/{table}?fields[]=..&filterByFormula=..&offset=..
2. Append the page's records in order
3. Continue with the returned offset token

Failures abort the whole fetch; callers never see a partial table.
"""

import logging
import time
from typing import Optional, Sequence
from urllib.parse import quote

import httpx

from lead_metrics.config import Settings
from lead_metrics.connectors.base import BaseConnector
from lead_metrics.errors import ConfigurationError, NetworkError, NotFoundError, RemoteApiError
from lead_metrics.models.record import Record

from .constants import (
    FIELDS_PARAM,
    FILTER_PARAM,
    NOT_FOUND_TYPES,
    OFFSET_PARAM,
    PAGE_SIZE_PARAM,
    USER_AGENT,
)
from .parsers import parse_error, parse_json, parse_page, parse_record

logger = logging.getLogger(__name__)


class AirtableConnector(BaseConnector):
    """
    Connector for an Airtable base.
    Uses a static bearer token; requests are throttled client-side and
    strictly sequential.
    """

    source_id = "airtable"

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.Client] = None,
        base_id: Optional[str] = None,
    ):
        """
        Args:
            settings: Validated settings (credential, API url, throttle)
            client: Optional httpx client; a new one is created otherwise
            base_id: Override the base (e.g. the products base)
        """
        missing = settings.missing_credentials()
        if base_id and "base_id" in missing:
            missing.remove("base_id")
        if missing:
            raise ConfigurationError(missing)

        self._settings = settings
        self._base_id = base_id or settings.base_id
        self._api_url = settings.api_url.rstrip("/")
        self._interval = settings.request_interval
        self._last_request: Optional[float] = None
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=settings.timeout,
            follow_redirects=True,
        )
        self._headers = {
            "Authorization": f"Bearer {settings.api_key}",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _table_url(self, table: str, record_id: Optional[str] = None) -> str:
        url = f"{self._api_url}/{quote(self._base_id, safe='')}/{quote(table, safe='')}"
        if record_id:
            url += f"/{quote(record_id, safe='')}"
        return url

    def _throttle(self) -> None:
        """Keep at least request_interval seconds between requests."""
        if self._interval and self._last_request is not None:
            elapsed = time.monotonic() - self._last_request
            if elapsed < self._interval:
                time.sleep(self._interval - elapsed)
        self._last_request = time.monotonic()

    def _get(self, url: str, params: Optional[list[tuple[str, str]]] = None) -> httpx.Response:
        """GET with auth; maps transport failures and non-2xx statuses to our errors."""
        self._throttle()
        try:
            resp = self._client.get(url, params=params, headers=self._headers)
        except httpx.TransportError as e:
            logger.warning("Request to %s failed: %s", url, e)
            raise NetworkError(e) from e

        if not resp.is_success:
            error_type, message = parse_error(resp.text)
            raise RemoteApiError(resp.status_code, message, error_type)
        return resp

    def _list_params(
        self,
        fields: Sequence[str],
        filter_formula: Optional[str],
        offset: Optional[str],
    ) -> list[tuple[str, str]]:
        params = [(FIELDS_PARAM, f) for f in fields]
        if filter_formula:
            params.append((FILTER_PARAM, filter_formula))
        if self._settings.page_size:
            params.append((PAGE_SIZE_PARAM, str(self._settings.page_size)))
        if offset:
            params.append((OFFSET_PARAM, offset))
        return params

    def fetch_all(
        self,
        table: str,
        fields: Sequence[str] = (),
        filter_formula: Optional[str] = None,
    ) -> list[Record]:
        """
        Fetch every record of table, following offset tokens until none is returned.
        No deduplication: the backend guarantees unique ids across pages.
        """
        url = self._table_url(table)
        all_records: list[Record] = []
        offset: Optional[str] = None
        pages = 0

        while True:
            resp = self._get(url, self._list_params(fields, filter_formula, offset))
            records, offset = parse_page(parse_json(resp.text))
            all_records.extend(records)
            pages += 1
            logger.debug("Fetched page %d of %s (%d records)", pages, table, len(records))
            if not offset:
                break

        logger.info("Fetched %d records from %s in %d page(s)", len(all_records), table, pages)
        return all_records

    def fetch_record(self, table: str, record_id: str) -> Record:
        """Fetch one record by id. A 404 or not-found error body becomes NotFoundError."""
        try:
            resp = self._get(self._table_url(table, record_id))
        except RemoteApiError as e:
            if e.status == 404 or e.error_type in NOT_FOUND_TYPES:
                raise NotFoundError(f"Record not found: {record_id} ({e.message})") from e
            raise
        return parse_record(parse_json(resp.text))

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
