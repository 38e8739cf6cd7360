"""
OpenWeather current-weather lookup, used for the welcome message and the
weather hint in the guest context.
"""
import logging
import time
from typing import Optional

import httpx
from pydantic import BaseModel

from menu_backend.config import get_settings
from menu_backend.services.cache import TTLCache

logger = logging.getLogger(__name__)

settings = get_settings()


class Weather(BaseModel):
    temp: int
    feels_like: int
    condition: str
    description: str = ""
    humidity: int = 0
    wind_speed: int = 0
    city: str = ""
    icon: str = ""


NEUTRAL_WEATHER = Weather(
    temp=15,
    feels_like=15,
    condition="clouds",
    description="bewolkt",
    humidity=70,
    wind_speed=10,
    city=settings.WEATHER_FALLBACK_CITY,
    icon="03d",
)


def weather_category(weather: Optional[Weather]) -> str:
    if weather is None:
        return "neutral"

    temp = weather.temp
    condition = weather.condition

    if temp >= 25 and condition == "clear":
        return "hot_sunny"
    if temp >= 22:
        return "hot"
    if temp < 8:
        return "cold"
    if condition in ("rain", "drizzle"):
        return "rain"
    if condition == "snow":
        return "snow"
    if condition == "clouds":
        if temp >= 15:
            return "clouds_warm"
        if temp < 12:
            return "clouds_cool"
    return "neutral"


WELCOME_MESSAGES = {
    "nl": {
        "rain": ["Wat een weer hè? 🌧️ Fijn dat je er bent!", "Heerlijk binnen zitten! ☔"],
        "snow": ["Wat een winterweer! ❄️ Welkom!", "Gezellig knus binnen! ⛄"],
        "cold": ["Lekker warm binnen! 🔥", "Kom er lekker bij! ❄️"],
        "hot_sunny": ["Perfecte dag voor op het terras! ☀️", "Wat een heerlijk weer! 🌞"],
        "hot": ["Lekker verfrissend bij ons! 🌤️", "Tijd voor iets kouds! 🧊"],
        "clouds_cool": ["Fijn dat je er bent! ☁️"],
    },
    "en": {
        "rain": ["What weather huh? 🌧️ Great to see you!", "Nice to be inside! ☔"],
        "snow": ["What winter weather! ❄️ Welcome!", "Cozy inside! ⛄"],
        "cold": ["Nice and warm inside! 🔥", "Come warm up! ❄️"],
        "hot_sunny": ["Perfect day for the terrace! ☀️", "What lovely weather! 🌞"],
        "hot": ["Nice and refreshing here! 🌤️", "Time for something cold! 🧊"],
        "clouds_cool": ["Great to see you! ☁️"],
    },
}
AUTUMN_CLOUDS_MESSAGES = {
    "nl": ["Herfstachtig he? 🍂 Welkom!", "Typisch herfstweer! 🍁"],
    "en": ["Autumn vibes! 🍂 Welcome!", "Typical autumn weather! 🍁"],
}
DEFAULT_WELCOME_MESSAGES = {
    "nl": ["Fijn dat je er bent! ✨", "Welkom bij 't Tolhuis! 🌟", "Goed je te zien! 👋"],
    "en": ["Great to see you! ✨", "Welcome to 't Tolhuis! 🌟", "Good to see you! 👋"],
}


def welcome_message(category: str, season: str = "", lang: str = "nl", index: Optional[int] = None) -> str:
    """Weather-aware welcome line. `index` picks the variant; by default the
    variant rotates with the clock.
    """
    lang = lang if lang in WELCOME_MESSAGES else "nl"
    if category == "clouds_cool" and season == "herfst":
        messages = AUTUMN_CLOUDS_MESSAGES[lang]
    else:
        messages = WELCOME_MESSAGES[lang].get(category) or DEFAULT_WELCOME_MESSAGES[lang]
    if index is None:
        index = int(time.time() // 10)
    return messages[index % len(messages)]


class WeatherService:
    def __init__(
        self,
        api_key: Optional[str] = None,
        cache: Optional[TTLCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = settings.OPENWEATHER_API_KEY if api_key is None else api_key
        self.cache = cache or TTLCache(settings.WEATHER_CACHE_TTL_SECONDS)
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def fetch(self, lat: float, lon: float) -> Optional[Weather]:
        params = {
            "lat": lat,
            "lon": lon,
            "appid": self.api_key,
            "units": "metric",
            "lang": "nl",
        }
        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
                response = await client.get(settings.OPENWEATHER_URL, params=params)
                response.raise_for_status()
                data = response.json()
            return Weather(
                temp=round(data["main"]["temp"]),
                feels_like=round(data["main"]["feels_like"]),
                condition=data["weather"][0]["main"].lower(),
                description=data["weather"][0].get("description", ""),
                humidity=data["main"].get("humidity", 0),
                wind_speed=round(data.get("wind", {}).get("speed", 0)),
                city=data.get("name", ""),
                icon=data["weather"][0].get("icon", ""),
            )
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning(f"Weather lookup failed: {e}")
            return None

    async def get_current_weather(self, lat: Optional[float] = None, lon: Optional[float] = None) -> Weather:
        """Current weather near the guest, or near the venue when no location
        is given. Falls back to neutral weather.
        """
        lat = settings.WEATHER_FALLBACK_LAT if lat is None else lat
        lon = settings.WEATHER_FALLBACK_LON if lon is None else lon
        key = f"{round(lat, 2)},{round(lon, 2)}"

        cached, fresh = self.cache.get(key)
        if fresh:
            return cached

        if not self.is_configured:
            logger.debug("OPENWEATHER_API_KEY not set, using neutral weather")
            return cached or NEUTRAL_WEATHER

        weather = await self.fetch(lat, lon)
        if weather is None:
            return cached or NEUTRAL_WEATHER

        self.cache.set(key, weather)
        return weather


# Singleton instance
weather_service = WeatherService()


def get_weather_service() -> WeatherService:
    return weather_service
