# backend/services/weather.py
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from services.cache import ResponseCache
from services.enrichment import (
    enrichment_coordinates,
    fetch_enrichment,
    merge_enrichment,
    needs_enrichment,
)
from services.errors import InvalidRequest

logger = logging.getLogger(__name__)


@dataclass
class LocationQuery:
    lat: Optional[str] = None
    lon: Optional[str] = None
    city: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return bool(self.lat and self.lon)

    @property
    def cache_key(self) -> str:
        # No normalization: "1.50,2" and "1.5,2" are distinct keys.
        if self.has_coordinates:
            return f"{self.lat},{self.lon}"
        return self.city

    @classmethod
    def from_params(cls, lat: Optional[str], lon: Optional[str], city: Optional[str]) -> 'LocationQuery':
        # Blank values count as missing; non-blank ones are kept verbatim.
        lat = lat if lat and lat.strip() else None
        lon = lon if lon and lon.strip() else None
        city = city if city and city.strip() else None

        if lat and lon:
            for name, value in (('lat', lat), ('lon', lon)):
                try:
                    float(value)
                except ValueError:
                    raise InvalidRequest(f"Invalid '{name}' parameter: {value}")
            return cls(lat=lat, lon=lon)

        if city:
            return cls(city=city)

        raise InvalidRequest("Missing location parameters: provide 'lat' and 'lon' or 'city'")


class WeatherService:
    def __init__(self, client, cache: ResponseCache):
        self.client = client
        self.cache = cache

    def get_weather(self, query: LocationQuery) -> Dict:
        payload, _ = self.lookup(query)
        return payload

    def lookup(self, query: LocationQuery):
        """Return ``(payload, cache_hit)`` for a location query.

        Provider errors propagate unchanged; only enrichment failures are
        absorbed here.
        """
        cache_key = query.cache_key
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Using cached weather for: {cache_key}")
            return cached, True

        payload = self.client.fetch_current_weather(query)
        self._enrich(payload, query)

        self.cache.put(cache_key, payload)
        return payload, False

    def _enrich(self, payload: Dict, query: LocationQuery):
        if not needs_enrichment(payload):
            return

        coordinates = enrichment_coordinates(payload, query)
        if coordinates is None:
            logger.warning("Skipping enrichment: payload has no coordinates")
            return

        result = fetch_enrichment(self.client, *coordinates)
        if not result.ok:
            logger.warning(f"Enrichment failed, serving primary payload: {result.error}")
            return

        merge_enrichment(payload, result.fields)
