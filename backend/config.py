# backend/config.py
import os
from dataclasses import dataclass, field
from typing import List


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class Settings:
    api_key: str = ''
    base_url: str = 'https://api.openweathermap.org/data/2.5'
    geocoding_url: str = 'https://api.openweathermap.org/geo/1.0/direct'
    geocode_timeout_ms: int = 5000
    weather_timeout_ms: int = 10000
    cache_ttl_seconds: int = 600
    units: str = 'metric'
    lang: str = 'es'
    cors_origins: str = '*'
    rate_limits: List[str] = field(default_factory=lambda: ['3000 per day', '500 per hour'])
    rate_limit_enabled: bool = True

    @property
    def geocode_timeout(self) -> float:
        return self.geocode_timeout_ms / 1000

    @property
    def weather_timeout(self) -> float:
        return self.weather_timeout_ms / 1000

    @classmethod
    def from_env(cls) -> 'Settings':
        # A missing API key is not checked here; upstream answers 401.
        defaults = cls()
        limits = os.getenv('RATE_LIMITS')
        return cls(
            api_key=os.getenv('OPENWEATHER_API_KEY', ''),
            base_url=os.getenv('OPENWEATHER_API_URL', defaults.base_url).rstrip('/'),
            geocoding_url=os.getenv('OPENWEATHER_GEOCODING_URL', defaults.geocoding_url),
            geocode_timeout_ms=int(os.getenv('GEOCODE_TIMEOUT_MS', defaults.geocode_timeout_ms)),
            weather_timeout_ms=int(os.getenv('WEATHER_TIMEOUT_MS', defaults.weather_timeout_ms)),
            cache_ttl_seconds=int(os.getenv('WEATHER_CACHE_TTL', defaults.cache_ttl_seconds)),
            units=os.getenv('OPENWEATHER_UNITS', defaults.units),
            lang=os.getenv('OPENWEATHER_LANG', defaults.lang),
            cors_origins=os.getenv('CORS_ORIGINS', defaults.cors_origins),
            rate_limits=[l.strip() for l in limits.split(';') if l.strip()] if limits else defaults.rate_limits,
            rate_limit_enabled=_env_bool('RATE_LIMIT_ENABLED', True),
        )
