"""
Configuration management for the digital menu backend
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Digital Menu"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    PORT: int = 3001
    CORS_ORIGINS: list[str] = ["*"]

    # Database (opt-ins, analytics events, generated pairing copy)
    DATABASE_URL: str = "sqlite:///./digital_menu.db"

    # OpenAI proxy
    OPENAI_API_KEY: str = ""
    REACT_APP_OPENAI_API_KEY: str = ""  # legacy name used by the browser build
    OPENAI_API_URL: str = "https://api.openai.com/v1/chat/completions"
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    OPENAI_MAX_TOKENS: int = 150
    OPENAI_TEMPERATURE: float = 0.7
    OPENAI_TIMEOUT_SECONDS: float = 15.0

    # Google Sheets (public CSV export)
    SPREADSHEET_ID: str = "1Y2xftXxnFn0DUKr_wXkBb4Vr-0NXrvytlmWpppKLwvo"
    MENU_SHEET: str = "menu"
    WEEKMENU_SHEET: str = "weekmenu"
    PAIRINGS_SHEET: str = "pairings"
    RULES_SHEET: str = ""  # optional; columns key, taste_code, pairings
    SHEETS_CACHE_TTL_SECONDS: float = 30.0
    SHEETS_TIMEOUT_SECONDS: float = 10.0

    # Weather (OpenWeather current weather)
    OPENWEATHER_API_KEY: str = ""
    OPENWEATHER_URL: str = "https://api.openweathermap.org/data/2.5/weather"
    WEATHER_CACHE_TTL_SECONDS: float = 300.0
    WEATHER_FALLBACK_LAT: float = 52.2242  # Hilversum
    WEATHER_FALLBACK_LON: float = 5.1758
    WEATHER_FALLBACK_CITY: str = "Hilversum"

    # Dayparts, half-open hour windows [start, end)
    BREAKFAST_START: int = 6
    BREAKFAST_END: int = 11
    LUNCH_START: int = 11
    LUNCH_END: int = 16
    APERITIF_START: int = 16
    APERITIF_END: int = 19
    DINNER_START: int = 19
    DINNER_END: int = 23
    FRIDAY_APERITIF_START: int = 15
    FRIDAY_APERITIF_END: int = 17
    FALLBACK_DAYPART: str = "aperitif"

    # Venue
    VENUE_SLUG: str = "tolhuis"
    VENUE_NAME: str = "'t Tolhuis"
    CURRENCY: str = "€"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def openai_key(self) -> str:
        return self.OPENAI_API_KEY or self.REACT_APP_OPENAI_API_KEY


@lru_cache()
def get_settings() -> Settings:
    return Settings()
