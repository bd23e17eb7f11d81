# backend/services/enrichment.py
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from services.errors import WeatherServiceError

logger = logging.getLogger(__name__)

ENRICHED_FIELDS = ('uvi', 'pop', 'sunrise', 'sunset')


@dataclass
class EnrichmentResult:
    fields: Dict = field(default_factory=dict)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def sun_times(payload: Dict) -> Tuple[Optional[int], Optional[int]]:
    """Sunrise/sunset from the top-level slots, falling back to ``sys``."""
    sys_block = payload.get('sys')
    if not isinstance(sys_block, dict):
        sys_block = {}
    sunrise = payload.get('sunrise')
    if sunrise is None:
        sunrise = sys_block.get('sunrise')
    sunset = payload.get('sunset')
    if sunset is None:
        sunset = sys_block.get('sunset')
    return sunrise, sunset


def needs_enrichment(payload: Dict) -> bool:
    sunrise, sunset = sun_times(payload)
    return sunrise is None and sunset is None


def enrichment_coordinates(payload: Dict, query=None) -> Optional[Tuple[float, float]]:
    coord = payload.get('coord')
    if isinstance(coord, dict) and coord.get('lat') is not None and coord.get('lon') is not None:
        return coord['lat'], coord['lon']
    if query is not None and query.has_coordinates:
        return query.lat, query.lon
    return None


def fetch_enrichment(client, lat: float, lon: float) -> EnrichmentResult:
    try:
        return EnrichmentResult(fields=client.fetch_enrichment(lat, lon))
    except WeatherServiceError as e:
        return EnrichmentResult(error=e)


def merge_enrichment(payload: Dict, fields: Dict) -> Dict:
    for name in ENRICHED_FIELDS:
        if payload.get(name) is None and fields.get(name) is not None:
            payload[name] = fields[name]
    return payload
