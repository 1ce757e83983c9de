import logging
from typing import List

import requests

from src.application.ports import HospitalSearchPort
from src.domain.models import HospitalResult
from src.infrastructure.config import Settings


logger = logging.getLogger(__name__)


TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"


class GooglePlacesHospitalSearchAdapter(HospitalSearchPort):
    def __init__(self, settings: Settings | None = None, api_key: str | None = None):
        self.settings = settings or Settings()
        self.api_key = api_key or self.settings.google_places_api_key

    def search_hospitals(self, query: str, location_query: str, limit: int = 5) -> List[HospitalResult]:
        if not self.api_key:
            logger.warning("Google Places API key missing; hospital search disabled.")
            return []

        params = {
            "query": f"{query} in {location_query}" if location_query else query,
            "type": "hospital",
            "key": self.api_key,
        }
        try:
            resp = requests.get(TEXT_SEARCH_URL, params=params, timeout=15)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.exception("Places TextSearch failed: %s", e)
            return []

        results: List[HospitalResult] = []
        for r in data.get("results", [])[:limit]:
            place_id = r.get("place_id")
            results.append(
                HospitalResult(
                    name=r.get("name") or "Hospital",
                    specialty=query,
                    rating=r.get("rating"),
                    address=r.get("formatted_address"),
                    phone=self._lookup_phone(place_id) if place_id else None,
                    maps_url=f"https://www.google.com/maps/place/?q=place_id:{place_id}" if place_id else None,
                )
            )
        return results

    def _lookup_phone(self, place_id: str) -> str | None:
        params = {
            "place_id": place_id,
            "fields": "formatted_phone_number",
            "key": self.api_key,
        }
        try:
            resp = requests.get(DETAILS_URL, params=params, timeout=10)
            resp.raise_for_status()
            return resp.json().get("result", {}).get("formatted_phone_number")
        except (requests.RequestException, ValueError) as e:
            logger.warning("Place details lookup failed for %s: %s", place_id, e)
            return None
