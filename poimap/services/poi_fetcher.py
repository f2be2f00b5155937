"""
POI Fetcher - bounded bounding-box queries against NYC Open Data.

Each category is queried independently with its own timeout. Failures are
classified (timeout vs. failure), logged, and returned alongside an empty
point list; they are never raised to the caller, so one category failing
cannot disturb the other or the existing marker set.
"""

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from poimap.config.settings import FetchSettings, get_settings
from poimap.core.exceptions import FetchFailureError, FetchTimeoutError, PoiMapException
from poimap.models.poi import CATEGORY_ORDER, Category, PointOfInterest, Viewport

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Outcome of one category query. On failure `points` is empty and `error` is set."""
    category: Category
    points: List[PointOfInterest] = field(default_factory=list)
    error: Optional[PoiMapException] = None
    discarded: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def _coordinate(value: Any) -> Optional[float]:
    """Accept numbers and numeric strings; reject anything else, NaN and infinities."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _flag(value: Any) -> Optional[bool]:
    if value is None:
        return None
    return str(value).strip().lower() == "yes"


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_record(category: Category, record: Dict[str, Any]) -> Optional[PointOfInterest]:
    """Map a raw dataset record to a PointOfInterest, or None if it has no usable coordinate."""
    lat = _coordinate(record.get("latitude"))
    lng = _coordinate(record.get("longitude"))
    if lat is None or lng is None:
        return None

    if category is Category.RESTROOM:
        return PointOfInterest.create(
            category,
            lat,
            lng,
            name=_text(record.get("facility_name")) or "Public Restroom",
            borough=_text(record.get("borough")),
            accessible=_flag(record.get("handicap_accessible")),
            year_round=_flag(record.get("open_year_round")),
        )

    return PointOfInterest.create(
        category,
        lat,
        lng,
        name=_text(record.get("dba")) or "Restaurant",
        borough=_text(record.get("boro")),
        cuisine=_text(record.get("cuisine_description")),
        grade=_text(record.get("grade")),
    )


def parse_records(category: Category, payload: Any) -> tuple[List[PointOfInterest], int]:
    """
    Parse a dataset payload. Returns (points, discarded_count).

    Raises FetchFailureError if the payload is not a list of records. Within
    one result the first record for a key wins.
    """
    if not isinstance(payload, list):
        raise FetchFailureError(category.value, "malformed payload", {"payload_type": type(payload).__name__})

    points: List[PointOfInterest] = []
    seen = set()
    discarded = 0
    for record in payload:
        poi = parse_record(category, record) if isinstance(record, dict) else None
        if poi is None or poi.key in seen:
            discarded += 1
            continue
        seen.add(poi.key)
        points.append(poi)
    return points, discarded


def build_query(category: Category, viewport: Viewport, limit: int) -> Dict[str, str]:
    """SoQL parameters selecting records inside the viewport."""
    where = (
        f"latitude between '{viewport.south}' and '{viewport.north}' "
        f"AND longitude between '{viewport.west}' and '{viewport.east}'"
    )
    if category is Category.RESTAURANT:
        where += " AND grade='A'"
    return {"$where": where, "$limit": str(limit)}


class PoiFetcher:
    """Queries the per-category remote datasets for points inside a viewport."""

    def __init__(
        self,
        config: Optional[FetchSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_settings().fetch
        self._client = client
        self._owns_client = client is None
        self.urls = {
            Category.RESTROOM: self.config.restroom_url,
            Category.RESTAURANT: self.config.restaurant_url,
        }

    def _get_headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.config.app_token:
            headers["X-App-Token"] = self.config.app_token
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(headers=self._get_headers())
        return self._client

    async def fetch(self, category: Category, viewport: Viewport) -> FetchResult:
        """
        Fetch points for one category inside the viewport.

        Cancellation of the calling task propagates and aborts the request.
        """
        timeout = self.config.timeout_seconds
        try:
            points, discarded = await asyncio.wait_for(self._request(category, viewport), timeout=timeout)
        except asyncio.TimeoutError:
            error = FetchTimeoutError(category.value, timeout)
            logger.warning(error.message, extra={"category": category.value, "error_code": error.error_code.value})
            return FetchResult(category=category, error=error)
        except FetchFailureError as error:
            logger.warning(error.message, extra={"category": category.value, "error_code": error.error_code.value})
            return FetchResult(category=category, error=error)
        except httpx.HTTPError as e:
            error = FetchFailureError(category.value, f"{type(e).__name__}: {e}")
            logger.warning(error.message, extra={"category": category.value, "error_code": error.error_code.value})
            return FetchResult(category=category, error=error)

        if discarded:
            logger.debug(f"Discarded {discarded} {category.value} records without usable coordinates")
        logger.info(f"Fetched {len(points)} {category.value} points")
        return FetchResult(category=category, points=points, discarded=discarded)

    async def fetch_all(self, viewport: Viewport) -> Dict[Category, FetchResult]:
        """Fetch every category concurrently; returns once all have settled."""
        results = await asyncio.gather(*(self.fetch(category, viewport) for category in CATEGORY_ORDER))
        return {result.category: result for result in results}

    async def _request(self, category: Category, viewport: Viewport) -> tuple[List[PointOfInterest], int]:
        params = build_query(category, viewport, self.config.result_limit)
        response = await self._get_client().get(self.urls[category], params=params, headers=self._get_headers())

        if response.status_code < 200 or response.status_code >= 300:
            raise FetchFailureError(
                category.value,
                f"HTTP {response.status_code}",
                {"status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError:
            raise FetchFailureError(category.value, "response is not valid JSON")

        return parse_records(category, payload)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
