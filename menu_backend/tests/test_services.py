"""
Service tests - Sheets adapter, weather, OpenAI wrapper, dictionary translation
"""
import json
import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import OpenAIError

from menu_backend.database import to_async_url
from menu_backend.services.cache import TTLCache
from menu_backend.services.openai_service import OpenAIService
from menu_backend.services.sheets_service import DEFAULT_PERIOD, SheetsService, parse_csv, parse_period
from menu_backend.services.translation_service import translate_category, translate_text
from menu_backend.services.weather_service import (
    NEUTRAL_WEATHER,
    Weather,
    WeatherService,
    weather_category,
    welcome_message,
)
from menu_backend.utils.logger import PACKAGE_LOGGER, get_logger

MENU_CSV = (
    "id,section,title,description,price,type,category,diet,tags,active,is_week\n"
    'd1,Diner,Biefstuk,"Met jus, friet","19,95",vlees,main,meat,"rijk,hartig",TRUE,FALSE\n'
    "d2,Diner,,Geen titel,12,vega,main,veg,,TRUE,FALSE\n"
    "d3,Diner,Zeebaars,,\"21,50\",vis,main,fish,licht,FALSE,FALSE\n"
)
WEEKMENU_CSV = (
    "id,section,title,description,price,type,category,diet,tags,active,is_week,supplier,date\n"
    "w1,Week,Stoofvlees,,16,vlees,main,meat,,TRUE,TRUE,,'t Tolhuis Journaal No.12 (3 mrt t/m 9 mrt 2025)\n"
)
PAIRINGS_CSV = (
    "dish_id,venue,suggestion,description,kind,match_tags,priority,active\n"
    'd1,tolhuis,"Glas Merlot + €5,95",,wine,rich_hearty,8,TRUE\n'
)


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class SheetServer:
    """MockTransport handler serving CSV per sheet name"""

    def __init__(self):
        self.sheets = {"menu": MENU_CSV, "weekmenu": WEEKMENU_CSV, "pairings": PAIRINGS_CSV}
        self.fail = False
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            return httpx.Response(503, text="unavailable")
        sheet = request.url.params["sheet"]
        return httpx.Response(200, text=self.sheets.get(sheet, ""))


@pytest.fixture()
def sheet_server():
    return SheetServer()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def sheets(sheet_server, clock):
    return SheetsService(
        spreadsheet_id="sheet-id",
        cache=TTLCache(30, clock=clock),
        transport=httpx.MockTransport(sheet_server),
    )


# ===================== SHEETS =====================


class TestSheetsService:

    async def test_get_menu_parses_csv(self, sheets, sheet_server):
        menu = await sheets.get_menu()

        assert [d.id for d in menu] == ["d1"]
        steak = menu[0]
        assert steak.description == "Met jus, friet"
        assert steak.price == 19.95
        assert steak.tags == ["rijk", "hartig"]

        request = sheet_server.requests[0]
        assert "/spreadsheets/d/sheet-id/gviz/tq" in request.url.path
        assert request.url.params["tqx"] == "out:csv"

    async def test_cache_hit_skips_download(self, sheets, sheet_server, clock):
        await sheets.get_menu()
        clock.now += 10
        await sheets.get_menu()
        assert len(sheet_server.requests) == 1

        await sheets.get_menu(force_refresh=True)
        assert len(sheet_server.requests) == 2

    async def test_stale_value_served_when_refresh_fails(self, sheets, sheet_server, clock):
        first = await sheets.get_menu()
        clock.now += 60
        sheet_server.fail = True

        again = await sheets.get_menu()
        assert again == first
        assert len(sheet_server.requests) == 2

    async def test_failure_without_cache_gives_empty_list(self, sheets, sheet_server):
        sheet_server.fail = True
        assert await sheets.get_menu() == []
        assert await sheets.get_pairings() == []

    async def test_weekmenu_and_period(self, sheets):
        week = await sheets.get_weekmenu()
        assert [d.id for d in week] == ["w1"]
        assert week[0].is_week
        assert await sheets.get_current_period() == "3 mrt t/m 9 mrt 2025"

    async def test_pairings(self, sheets):
        pairings = await sheets.get_pairings()
        assert len(pairings) == 1
        assert pairings[0].suggestion == "Glas Merlot + €5,95"
        assert pairings[0].priority == 8

    async def test_rules_sheet_not_configured(self, sheets, sheet_server):
        assert await sheets.get_rules() == []
        assert sheet_server.requests == []

    async def test_invalidate_forces_download(self, sheets, sheet_server):
        await sheets.get_menu()
        sheets.invalidate("menu")
        await sheets.get_menu()
        assert len(sheet_server.requests) == 2


def test_parse_csv_quoted_newline():
    rows = parse_csv('a,"regel een\nregel twee",c\n')
    assert rows == [["a", "regel een\nregel twee", "c"]]


def test_parse_period():
    assert parse_period("'t Tolhuis Journaal No.12 (3 mrt t/m 9 mrt 2025)") == "3 mrt t/m 9 mrt 2025"
    assert parse_period("'t Tolhuis Journaal No.51 Kerstweek") == "Kerstweek"
    assert parse_period("") == DEFAULT_PERIOD
    assert parse_period(None) == DEFAULT_PERIOD


# ===================== WEATHER =====================


OPENWEATHER_BODY = {
    "main": {"temp": 16.4, "feels_like": 15.2, "humidity": 60},
    "weather": [{"main": "Clouds", "description": "bewolkt", "icon": "03d"}],
    "wind": {"speed": 4.2},
    "name": "Hilversum",
}


class TestWeather:

    @pytest.mark.parametrize("temp, condition, category", [
        (26, "clear", "hot_sunny"),
        (23, "clouds", "hot"),
        (5, "rain", "cold"),
        (12, "rain", "rain"),
        (10, "snow", "snow"),
        (16, "clouds", "clouds_warm"),
        (10, "clouds", "clouds_cool"),
        (13, "clouds", "neutral"),
        (18, "clear", "neutral"),
    ])
    def test_category(self, temp, condition, category):
        assert weather_category(Weather(temp=temp, feels_like=temp, condition=condition)) == category

    def test_category_without_weather(self):
        assert weather_category(None) == "neutral"

    def test_welcome_messages(self):
        assert welcome_message("rain", lang="nl", index=0) == "Wat een weer hè? 🌧️ Fijn dat je er bent!"
        assert welcome_message("clouds_cool", "herfst", "en", index=1) == "Typical autumn weather! 🍁"
        assert welcome_message("neutral", index=1) == "Welkom bij 't Tolhuis! 🌟"
        assert welcome_message("rain", lang="fr", index=1) == "Heerlijk binnen zitten! ☔"

    async def test_fetch_and_cache(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=OPENWEATHER_BODY)

        service = WeatherService(api_key="key", cache=TTLCache(300), transport=httpx.MockTransport(handler))
        weather = await service.get_current_weather(52.2242, 5.1758)

        assert weather.temp == 16
        assert weather.condition == "clouds"
        assert weather.wind_speed == 4
        assert weather_category(weather) == "clouds_warm"
        assert calls[0].url.params["units"] == "metric"

        await service.get_current_weather(52.2242, 5.1758)
        assert len(calls) == 1

    async def test_no_key_gives_neutral_weather(self):
        service = WeatherService(api_key="")
        assert not service.is_configured
        assert await service.get_current_weather() == NEUTRAL_WEATHER

    async def test_upstream_failure_gives_neutral_weather(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"message": "Invalid API key"}))
        service = WeatherService(api_key="bad", cache=TTLCache(300), transport=transport)
        assert await service.get_current_weather() == NEUTRAL_WEATHER

    async def test_malformed_body_gives_neutral_weather(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"weather": []}))
        service = WeatherService(api_key="key", cache=TTLCache(300), transport=transport)
        assert await service.get_current_weather() == NEUTRAL_WEATHER


# ===================== OPENAI =====================


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class TestOpenAIService:

    async def test_generate_without_key(self):
        service = OpenAIService(api_key="")
        assert not service.is_available
        assert await service.generate("Beschrijf Merlot") is None

    async def test_generate_returns_stripped_text(self):
        service = OpenAIService(api_key="sk-test")
        service.client = MagicMock()
        service.client.chat.completions.create = AsyncMock(return_value=completion("  Fluweelzacht.  "))

        assert await service.generate("Beschrijf Merlot") == "Fluweelzacht."
        kwargs = service.client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"][1] == {"role": "user", "content": "Beschrijf Merlot"}

    async def test_generate_swallows_api_errors(self):
        service = OpenAIService(api_key="sk-test")
        service.client = MagicMock()
        service.client.chat.completions.create = AsyncMock(side_effect=OpenAIError("rate limited"))
        assert await service.generate("Beschrijf Merlot") is None

    async def test_forward_passes_body_and_key(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "Hallo"}}]})

        service = OpenAIService(api_key="sk-test", transport=httpx.MockTransport(handler))
        payload = {"model": "gpt-3.5-turbo", "messages": [{"role": "user", "content": "Hoi"}]}
        status, body = await service.forward(payload)

        assert status == 200
        assert body["choices"][0]["message"]["content"] == "Hallo"
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"] == payload

    async def test_forward_keeps_upstream_error_status(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(429, json={"error": {"message": "slow down"}}))
        service = OpenAIService(api_key="sk-test", transport=transport)
        status, body = await service.forward({"messages": []})
        assert status == 429
        assert body["error"]["message"] == "slow down"

    async def test_forward_non_json_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad gateway"))
        service = OpenAIService(api_key="sk-test", transport=transport)
        assert await service.forward({"messages": []}) == (502, {"error": "Bad gateway"})

    async def test_forward_without_key(self):
        with pytest.raises(RuntimeError):
            await OpenAIService(api_key="").forward({"messages": []})


# ===================== TRANSLATION =====================


class TestDictionaryTranslation:

    def test_exact_entry(self):
        assert translate_text("Biefstuk") == "Steak"

    def test_phrase_by_phrase(self):
        assert translate_text("Zeebaars met citroenboter") == "Sea bass with lemon butter"

    def test_longest_phrase_wins(self):
        assert translate_text("Caesar salade met gamba's") == "Caesar salad with shrimp"

    def test_leftover_dutch_kept_as_is(self):
        assert translate_text("Tapas met maïs") == "Tapas met maïs"

    def test_dutch_requested(self):
        assert translate_text("Biefstuk", "nl") == "Biefstuk"
        assert translate_text("", "en") == ""

    def test_category(self):
        assert translate_category("Hoofdgerecht", "en") == "Main Course"
        assert translate_category("Chef specials", "en") == "Dish"
        assert translate_category("", "nl") == "Gerecht"
        assert translate_category("", "en") == "Dish"
        assert translate_category("Voorgerecht", "nl") == "Voorgerecht"

    @pytest.mark.parametrize("token, nl, en", [
        ("main", "Hoofdgerecht", "Main course"),
        ("starter", "Voorgerecht", "Starter"),
        ("side", "Bijgerecht", "Side dish"),
        ("borrel", "Borrel", "Snacks"),
        ("diner", "Hoofdgerecht", "Main course"),
        ("soep", "Voorgerecht", "Starter"),
        ("vlees", "Hoofdgerecht", "Main course"),
        ("Main", "Hoofdgerecht", "Main course"),
    ])
    def test_category_tokens(self, token, nl, en):
        assert translate_category(token, "nl") == nl
        assert translate_category(token, "en") == en


# ===================== LOGGING =====================


def test_loggers_share_the_package_handler():
    logger = get_logger("services.sheets_service")
    assert logger.name == "menu_backend.services.sheets_service"
    assert get_logger("menu_backend.api.menu").name == "menu_backend.api.menu"
    assert logging.getLogger(PACKAGE_LOGGER).handlers
    assert get_logger() is logging.getLogger(PACKAGE_LOGGER)


def test_async_database_urls():
    assert to_async_url("sqlite:///./digital_menu.db") == "sqlite+aiosqlite:///./digital_menu.db"
    assert to_async_url("postgres://u:p@db/menu") == "postgresql+asyncpg://u:p@db/menu"
    assert to_async_url("postgresql://u:p@db/menu") == "postgresql+asyncpg://u:p@db/menu"
    assert to_async_url("sqlite+aiosqlite:///:memory:") == "sqlite+aiosqlite:///:memory:"
