"""
Time-derived guest context: daypart, greeting, season and the template intro.
"""
import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from menu_backend.config import Settings, get_settings
from menu_backend.schemas.menu import Context, Daypart

logger = logging.getLogger(__name__)

FRIDAY = 4

DAYPART_LABELS = {
    Daypart.BREAKFAST: {"nl": "ontbijt", "en": "breakfast"},
    Daypart.LUNCH: {"nl": "lunch", "en": "lunch"},
    Daypart.APERITIF: {"nl": "borrel", "en": "aperitif"},
    Daypart.DINNER: {"nl": "diner", "en": "dinner"},
}

CHEF_TITLES = {
    "nl": [
        "Speciaal voor jou geselecteerd",
        "Chef's keuze voor jou",
        "Voor jou uitgekozen",
        "Onze aanbeveling",
    ],
    "en": [
        "Specially selected for you",
        "Chef's choice for you",
        "Picked for you",
        "Our recommendation",
    ],
}
CHEF_TITLE_ROTATION_SECONDS = 10


@dataclass
class DaypartSchedule:
    """Half-open hour windows per daypart plus the Friday aperitif override"""
    windows: dict = field(default_factory=lambda: {
        Daypart.BREAKFAST: (6, 11),
        Daypart.LUNCH: (11, 16),
        Daypart.APERITIF: (16, 19),
        Daypart.DINNER: (19, 23),
    })
    friday_aperitif: tuple = (15, 17)
    fallback: Daypart = Daypart.APERITIF

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DaypartSchedule":
        settings = settings or get_settings()
        return cls(
            windows={
                Daypart.BREAKFAST: (settings.BREAKFAST_START, settings.BREAKFAST_END),
                Daypart.LUNCH: (settings.LUNCH_START, settings.LUNCH_END),
                Daypart.APERITIF: (settings.APERITIF_START, settings.APERITIF_END),
                Daypart.DINNER: (settings.DINNER_START, settings.DINNER_END),
            },
            friday_aperitif=(settings.FRIDAY_APERITIF_START, settings.FRIDAY_APERITIF_END),
            fallback=Daypart(settings.FALLBACK_DAYPART),
        )

    def daypart_for(self, hour: int, day_of_week: int) -> Daypart:
        if day_of_week == FRIDAY:
            start, end = self.friday_aperitif
            if start <= hour < end:
                return Daypart.APERITIF
        for daypart, (start, end) in self.windows.items():
            if start <= hour < end:
                return daypart
        return self.fallback


def build_context(
    now: Optional[datetime] = None,
    schedule: Optional[DaypartSchedule] = None,
    weather_category: Optional[str] = None,
) -> Context:
    now = now or datetime.now()
    schedule = schedule or DaypartSchedule.from_settings()
    day_of_week = now.weekday()
    return Context(
        hour=now.hour,
        day_of_week=day_of_week,
        daypart=schedule.daypart_for(now.hour, day_of_week),
        weather_category=weather_category,
        timestamp=now,
    )


def time_context(hour: int) -> dict:
    if 6 <= hour < 12:
        return {
            "period": "ochtend",
            "period_en": "morning",
            "greeting": "Goedemorgen",
            "greeting_en": "Good morning",
            "context": "Perfect moment voor een ontbijt of vroege lunch",
            "context_en": "Perfect time for breakfast or early lunch",
            "emoji": "🌅",
        }
    if 12 <= hour < 17:
        return {
            "period": "middag",
            "period_en": "afternoon",
            "greeting": "Goedemiddag",
            "greeting_en": "Good afternoon",
            "context": "Ideale tijd voor een uitgebreide lunch op het terras",
            "context_en": "Perfect time for an extended lunch on the terrace",
            "emoji": "☀️",
        }
    if 17 <= hour < 21:
        return {
            "period": "avond",
            "period_en": "evening",
            "greeting": "Goedenavond",
            "greeting_en": "Good evening",
            "context": "Tijd voor een heerlijk diner en gezelligheid",
            "context_en": "Time for a delicious dinner and coziness",
            "emoji": "🌆",
        }
    return {
        "period": "nacht",
        "period_en": "night",
        "greeting": "Goedenavond",
        "greeting_en": "Good evening",
        "context": "Laat diner of late night snacks",
        "context_en": "Late dinner or late night snacks",
        "emoji": "🌙",
    }


def easter_date(year: int) -> date:
    """Easter Sunday (anonymous Gregorian algorithm)"""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day + 1)


def _season(key: str, key_en: str, message: str, message_en: str, special: bool, emoji: str) -> dict:
    return {
        "season": key,
        "season_en": key_en,
        "message": message,
        "message_en": message_en,
        "special": special,
        "emoji": emoji,
    }


def seasonal_context(today: Optional[date] = None) -> dict:
    today = today or date.today()
    month, day = today.month, today.day

    if month == 12 and 20 <= day <= 26:
        return _season("kerst", "christmas",
                       "🎄 Vrolijk Kerstfeest! Geniet van onze speciale kerstmenu's",
                       "🎄 Merry Christmas! Enjoy our special Christmas menus", True, "🎄")
    if month == 1 and day <= 7:
        return _season("nieuwjaar", "new year",
                       "🥂 Gelukkig Nieuwjaar! Ontdek onze nieuwe gerechten",
                       "🥂 Happy New Year! Discover our new dishes", True, "🥂")
    if month == 2 and 10 <= day <= 16:
        return _season("valentijn", "valentine",
                       "💕 Romantisch dineren? Onze chef heeft speciale gerechten bereid",
                       "💕 Romantic dinner? Our chef has prepared special dishes", True, "💕")
    if month in (3, 4):
        easter = easter_date(today.year)
        if easter - timedelta(days=7) <= today <= easter + timedelta(days=7):
            return _season("pasen", "easter",
                           "🐰 Vrolijk Pasen! Proef onze lente specialiteiten",
                           "🐰 Happy Easter! Taste our spring specialties", True, "🐰")
    if 6 <= month <= 8:
        return _season("zomer", "summer",
                       "☀️ Zomerse sfeer! Perfect weer voor een terras moment",
                       "☀️ Summer vibes! Perfect weather for a terrace moment", False, "☀️")
    if 9 <= month <= 11:
        return _season("herfst", "autumn",
                       "🍂 Herfstgevoel! Warme gerechten voor koude dagen",
                       "🍂 Autumn feeling! Warm dishes for cold days", False, "🍂")
    if month == 12 or month <= 2:
        return _season("winter", "winter",
                       "❄️ Wintergevoel! Verwarmende gerechten en warme dranken",
                       "❄️ Winter feeling! Warming dishes and hot drinks", False, "❄️")
    return _season("lente", "spring",
                   "🌸 Lente in de lucht! Verse ingrediënten en lichte gerechten",
                   "🌸 Spring in the air! Fresh ingredients and light dishes", False, "🌸")


def template_intro(time_ctx: dict, season_ctx: dict, weather_message: str, lang: str = "nl", user_name: str = "") -> dict:
    """Intro built from fixed texts, used when no generated intro is available"""
    en = lang == "en"
    name = f", {user_name}" if user_name else ""
    greeting = time_ctx["greeting_en"] if en else time_ctx["greeting"]

    if season_ctx["special"]:
        message = season_ctx["message_en"] if en else season_ctx["message"]
        emoji = season_ctx["emoji"]
    else:
        time_message = time_ctx["context_en"] if en else time_ctx["context"]
        message = f"{time_message}. {weather_message}" if weather_message else f"{time_message}."
        emoji = time_ctx["emoji"]

    return {
        "greeting": f"{greeting}{name}",
        "message": message,
        "emoji": emoji,
        "source": "template",
    }


def chef_recommendation_title(lang: str = "nl", now: Optional[float] = None) -> str:
    """Title above the personal recommendations; rotates every ten seconds"""
    titles = CHEF_TITLES.get(lang, CHEF_TITLES["nl"])
    seconds = time.time() if now is None else now
    return titles[int(seconds // CHEF_TITLE_ROTATION_SECONDS) % len(titles)]
