# backend/services/location.py
import logging
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

from services.errors import InvalidRequest

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5


@dataclass
class GeocodeResult:
    name: str
    country: str
    lat: float
    lon: float
    state: Optional[str] = None
    display: str = ""

    def to_dict(self) -> Dict:
        return asdict(self)


def format_display(name: str, state: Optional[str], country: str) -> str:
    parts = [name or '']
    if state:
        parts.append(state)
    parts.append(country or '')
    return ', '.join(parts)


def to_geocode_result(record: Dict) -> GeocodeResult:
    name = record.get('name')
    country = record.get('country')
    state = record.get('state')
    return GeocodeResult(
        name=name,
        country=country,
        state=state,
        lat=record.get('lat'),
        lon=record.get('lon'),
        display=format_display(name, state, country),
    )


class LocationService:
    def __init__(self, client):
        self.client = client

    def search(self, query: Optional[str], limit: int = DEFAULT_LIMIT) -> List[GeocodeResult]:
        query = (query or '').strip()
        if not query:
            raise InvalidRequest("Missing search parameter 'query'")
        if limit < 1:
            raise InvalidRequest("'limit' must be a positive integer")

        logger.info(f"Searching for location: {query}")
        records = self.client.geocode(query, limit)
        return [to_geocode_result(record) for record in records if isinstance(record, dict)]
