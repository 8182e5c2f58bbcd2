# backend/leadlove/services/place_details.py
"""
Place Details - rating, reviews, description and category for a place id

GooglePlacesDirectory talks to the Places Details API; PlaceDetailsFetcher
maps its payload onto PlaceDetails and scores review freshness. A failed
lookup always degrades to an empty PlaceDetails.
"""

import logging
import math
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

import httpx

from leadlove.config import settings
from leadlove.schemas.enrichment import PlaceDetails

logger = logging.getLogger(__name__)


FRESHNESS_WINDOW_SECONDS = 90 * 24 * 60 * 60
DEFAULT_FRESHNESS_SCORE = 5


class DirectoryLookup(ABC):
    """External business directory client"""

    @abstractmethod
    async def lookup(self, place_id: str) -> Optional[Dict[str, Any]]:
        """
        Return the raw place payload, or None when the place is unknown.

        Expected keys: rating, user_ratings_total, reviews[{time}],
        editorial_summary{overview}, types[].
        """


class GooglePlacesDirectory(DirectoryLookup):
    """Google Places Details API client"""

    BASE_URL = "https://maps.googleapis.com/maps/api/place/details/json"
    FIELDS = "rating,user_ratings_total,reviews,types,editorial_summary"

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key or settings.GOOGLE_PLACES_API_KEY
        self.client = client
        self.timeout = timeout or settings.GOOGLE_PLACES_TIMEOUT

    async def lookup(self, place_id: str) -> Optional[Dict[str, Any]]:
        if not self.api_key:
            logger.warning("GOOGLE_PLACES_API_KEY not configured, skipping place lookup")
            return None

        params = {
            "place_id": place_id,
            "fields": self.FIELDS,
            "key": self.api_key
        }

        if self.client is not None:
            response = await self.client.get(self.BASE_URL, params=params, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.BASE_URL, params=params)

        response.raise_for_status()
        data = response.json()

        status = data.get("status")
        if status and status != "OK":
            logger.info(f"Places API returned {status} for {place_id}")

        return data.get("result")


def calculate_freshness_score(
    reviews: Optional[List[Dict[str, Any]]],
    now: Optional[float] = None
) -> int:
    """
    1-10 indicator of recent review activity.

    Each review dated within the last 90 days is worth 2 points. Returns
    DEFAULT_FRESHNESS_SCORE when no review carries a timestamp.
    """
    timestamps = [
        review.get("time") for review in (reviews or [])
        if isinstance(review, dict) and isinstance(review.get("time"), (int, float))
    ]
    if not timestamps:
        return DEFAULT_FRESHNESS_SCORE

    now = time.time() if now is None else now
    recent_count = sum(1 for ts in timestamps if now - ts < FRESHNESS_WINDOW_SECONDS)

    return min(10, max(1, math.floor(recent_count * 2)))


class PlaceDetailsFetcher:
    """Fetch and normalise place details. Never raises."""

    def __init__(
        self,
        directory: Optional[DirectoryLookup] = None,
        clock: Callable[[], float] = time.time
    ):
        self.directory = directory or GooglePlacesDirectory()
        self.clock = clock

    async def fetch(self, place_id: Optional[str]) -> PlaceDetails:
        if not place_id:
            return PlaceDetails()

        try:
            place = await self.directory.lookup(place_id)
        except Exception as e:
            logger.warning(f"Place lookup failed for {place_id}: {e}")
            return PlaceDetails()

        if not place:
            return PlaceDetails()

        try:
            return self._parse_place(place)
        except Exception as e:
            logger.warning(f"Could not parse place details for {place_id}: {e}")
            return PlaceDetails()

    def _parse_place(self, place: Dict[str, Any]) -> PlaceDetails:
        """Map a Places payload onto PlaceDetails"""
        summary = place.get("editorial_summary") or {}
        types = place.get("types") or []

        # Out-of-range numbers are clamped, not rejected
        rating = place.get("rating")
        if rating is not None:
            rating = min(5.0, max(0.0, float(rating)))
        review_count = max(0, int(place.get("user_ratings_total") or 0))

        return PlaceDetails(
            rating=rating,
            review_count=review_count,
            business_description=summary.get("overview") or None,
            category=types[0] if types else None,
            review_freshness_score=calculate_freshness_score(
                place.get("reviews"),
                now=self.clock()
            )
        )
