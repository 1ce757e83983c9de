from typing import List

from src.application.ports import HospitalSearchPort
from src.domain.models import HospitalResult
from src.domain.rules import build_maps_search_url


class MockHospitalSearchAdapter(HospitalSearchPort):
    def search_hospitals(self, query: str, location_query: str, limit: int = 5) -> List[HospitalResult]:
        return [
            HospitalResult(
                name=f"{query.title()} {i+1}",
                specialty=query,
                rating=4.2 + (i % 2) * 0.3,
                address=f"{i+1} Main Road, {location_query or 'your area'}",
                phone="(000) 000-0000",
                maps_url=build_maps_search_url(query),
            )
            for i in range(limit)
        ]
