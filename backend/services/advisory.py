# backend/services/advisory.py
"""Clothing, rain, UV and sun-time advice derived from a weather payload.

Everything here is a pure function of the payload and the evaluation instant,
so the same inputs always produce the same advice.
"""
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from urllib.parse import urlencode

from services.enrichment import sun_times

RAIN_CONDITIONS = {'Rain', 'Drizzle', 'Thunderstorm'}
RAIN_POP_THRESHOLD = 0.4
UV_THRESHOLD = 6
HAT_TEMPERATURE = 20

# (upper bound, coat message, clothing suggestion, shopping keyword)
COAT_TIERS = [
    (10, 'Coat, no question about it. It is very cold.',
     'Warm jacket, scarf and gloves. It is freezing out there!', 'winter jacket'),
    (15, 'Yes, bring a coat. It is chilly.',
     'A coat or light jacket. It is chilly.', 'mid-season jacket'),
    (20, 'Maybe a light coat. It is mild.',
     'A sweatshirt or sweater should be enough.', 'cotton sweatshirt'),
    (25, 'No coat needed. The temperature is pleasant.',
     'Long-sleeve tee or a light shirt.', 'long sleeve tee'),
    (None, 'Leave the coat at home. It is hot.',
     'Light tee and cool clothes.', 'summer tee'),
]

RAIN_TEXT = 'Bring an umbrella. Rain is likely.'
RAIN_CLAUSE = 'Bring a raincoat or umbrella for the rain.'
RAIN_KEYWORD = 'waterproof raincoat'

UV_TEXT = 'The sun is strong. Wear sunscreen and a hat.'
UV_CLAUSE = 'Do not forget a cap and sunscreen, the sun is strong.'
HAT_KEYWORD = 'summer cap'

NO_SUN_DATA_TEXT = 'No sunrise or sunset data available.'

SHOPPING_SEARCH_URL = 'https://www.mercadolibre.com.ar/jm/search'
DEFAULT_AFFILIATE_ID = 'APP_ABRIGO'


@dataclass
class Advisory:
    coat_text: str
    rain_text: str
    uv_text: str
    sun_time_text: str
    shopping_keyword: str
    suggestion: str

    def to_dict(self) -> Dict:
        return asdict(self)


def effective_temperature(payload: Dict) -> Optional[float]:
    main = payload.get('main') or {}
    feels_like = main.get('feels_like')
    return feels_like if feels_like is not None else main.get('temp')


def condition(payload: Dict) -> Optional[str]:
    weather = payload.get('weather') or []
    if weather and isinstance(weather[0], dict):
        return weather[0].get('main')
    return None


def is_daytime(payload: Dict, now: datetime) -> bool:
    sunrise, sunset = sun_times(payload)
    if sunrise is None or sunset is None:
        return True
    return sunrise < now.timestamp() < sunset


def _coat_tier(temp: float):
    for bound, coat_text, suggestion, keyword in COAT_TIERS:
        if bound is None or temp < bound:
            return coat_text, suggestion, keyword


def _local_time(epoch: int, payload: Dict) -> str:
    offset = timedelta(seconds=payload.get('timezone') or 0)
    return datetime.fromtimestamp(epoch, timezone(offset)).strftime('%H:%M')


def sun_time_text(payload: Dict, now: datetime) -> str:
    sunrise, sunset = sun_times(payload)
    if sunrise is None or sunset is None:
        return NO_SUN_DATA_TEXT

    ts = now.timestamp()
    if ts < sunrise:
        return f"The sun rises at {_local_time(sunrise, payload)}."
    if ts < sunset:
        return f"The sun sets at {_local_time(sunset, payload)}."
    return f"The sun already set at {_local_time(sunset, payload)}."


def derive_advisory(payload: Dict, now: Optional[datetime] = None) -> Advisory:
    if now is None:
        now = datetime.now(timezone.utc)

    temp = effective_temperature(payload)
    if temp is None:
        raise ValueError("Weather payload has no temperature")

    pop = payload.get('pop')
    pop = 0 if pop is None else pop
    uvi = payload.get('uvi')
    uvi = 0 if uvi is None else uvi

    coat_text, suggestion, keyword = _coat_tier(temp)
    rain_text = ''
    uv_text = ''

    if pop > RAIN_POP_THRESHOLD or condition(payload) in RAIN_CONDITIONS:
        rain_text = RAIN_TEXT
        suggestion = f"{suggestion} {RAIN_CLAUSE}"
        keyword = f"{RAIN_KEYWORD} {keyword}"

    if uvi > UV_THRESHOLD and is_daytime(payload, now):
        uv_text = UV_TEXT
        suggestion = f"{suggestion} {UV_CLAUSE}"
        if temp > HAT_TEMPERATURE:
            keyword = f"{HAT_KEYWORD} {keyword}"

    return Advisory(
        coat_text=coat_text,
        rain_text=rain_text,
        uv_text=uv_text,
        sun_time_text=sun_time_text(payload, now),
        shopping_keyword=keyword,
        suggestion=suggestion,
    )


def shopping_link(keyword: str, affiliate_id: str = DEFAULT_AFFILIATE_ID) -> str:
    return f"{SHOPPING_SEARCH_URL}?{urlencode({'q': keyword, 'affiliate': affiliate_id})}"
