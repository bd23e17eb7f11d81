# backend/services/provider.py
import logging
from typing import Dict, List, Optional

import requests

from config import Settings
from services.errors import (
    MalformedResponse,
    RequestTimeout,
    UpstreamConnectionError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    'Cache-Control': 'no-cache',
    'Pragma': 'no-cache',
}


class OpenWeatherClient:
    """Thin wrapper over the OpenWeatherMap REST endpoints.

    Every call goes out live with an explicit timeout. Transport failures are
    translated into the service error types so callers never see a raw
    ``requests`` exception.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.update(NO_CACHE_HEADERS)

    def close(self):
        self.session.close()

    def _get_json(self, url: str, params: Dict, timeout: float, context: str):
        try:
            response = self.session.get(url, params=params, timeout=timeout)
        except requests.Timeout as e:
            raise RequestTimeout(f"{context} request timed out after {timeout:g}s") from e
        except requests.ConnectionError as e:
            raise UpstreamConnectionError(f"{context} connection failed: {e}") from e
        except requests.RequestException as e:
            raise UpstreamConnectionError(f"{context} request failed: {e}") from e

        if not response.ok:
            logger.error(f"{context} API error: {response.status_code} - {response.text}")
            raise UpstreamError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse(f"Invalid {context} response") from e

    def _base_params(self) -> Dict:
        return {
            'appid': self.settings.api_key,
            'units': self.settings.units,
            'lang': self.settings.lang,
        }

    def geocode(self, query: str, limit: int = 5) -> List[Dict]:
        params = {
            'q': query,
            'limit': limit,
            'appid': self.settings.api_key,
        }
        data = self._get_json(
            self.settings.geocoding_url, params, self.settings.geocode_timeout, 'Geocoding'
        )
        if not isinstance(data, list):
            raise MalformedResponse("Invalid Geocoding response")
        return data

    def fetch_current_weather(self, query) -> Dict:
        params = self._base_params()
        if query.has_coordinates:
            params['lat'] = query.lat
            params['lon'] = query.lon
        else:
            params['q'] = query.city

        data = self._get_json(
            f"{self.settings.base_url}/weather", params, self.settings.weather_timeout, 'Weather'
        )
        if not isinstance(data, dict):
            raise MalformedResponse("Invalid Weather response")
        return data

    def fetch_enrichment(self, lat: float, lon: float) -> Dict:
        params = self._base_params()
        params.update({
            'lat': lat,
            'lon': lon,
            'exclude': 'minutely,hourly,alerts',
        })
        data = self._get_json(
            f"{self.settings.base_url}/onecall", params, self.settings.weather_timeout, 'OneCall'
        )
        if not isinstance(data, dict):
            raise MalformedResponse("Invalid OneCall response")

        fields = {}
        current = data.get('current')
        if not isinstance(current, dict):
            current = {}
        for name in ('uvi', 'sunrise', 'sunset'):
            if current.get(name) is not None:
                fields[name] = current[name]

        daily = data.get('daily')
        if isinstance(daily, list) and daily and isinstance(daily[0], dict) and daily[0].get('pop') is not None:
            fields['pop'] = daily[0]['pop']

        return fields
