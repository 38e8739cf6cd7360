"""
Test fixtures - in-memory SQLite database, sample catalog, fake sheet and
OpenAI services, and an HTTP client bound to the app
"""
from datetime import datetime
from typing import Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from menu_backend.database import Base, create_tables, get_db
from menu_backend.main import app
from menu_backend.api.menu import get_context
from menu_backend.schemas.menu import Context, Daypart, Dish, Pairing
from menu_backend.services.openai_service import get_openai_service
from menu_backend.services.sheets_service import DEFAULT_PERIOD, get_sheets_service
from menu_backend.services.weather_service import NEUTRAL_WEATHER, get_weather_service


def make_dish(id: str, name: str, **kwargs) -> Dish:
    kwargs.setdefault("price", 10.0)
    return Dish(id=id, name=name, **kwargs)


@pytest.fixture()
def sample_dishes():
    """A small 't Tolhuis style menu covering every daypart"""
    return [
        make_dish("d1", "Franse uiensoep", category="starter", type="vega", diet=["veg"], tags=["hartig"]),
        make_dish("d2", "Biefstuk Tolhuis", category="main", type="vlees", diet=["meat"], tags=["rijk", "hartig"]),
        make_dish("d3", "Zeebaars", category="main", type="vis", diet=["fish"], tags=["licht", "fris"]),
        make_dish("d4", "Vegetarische hap", category="main", type="vega", diet=["veg"]),
        make_dish("d5", "Bitterballen", category="borrel", type="vlees", diet=["meat"], tags=["snack"]),
        make_dish("d6", "Kaasplankje", category="borrel", type="vega", diet=["veg"]),
        make_dish("d7", "Tosti ham kaas", category="lunch", type="vlees", diet=["meat"]),
        make_dish("d8", "Broodje kroket", category="lunch", type="vlees", diet=["meat"]),
        make_dish("d9", "Ontbijtplank", category="ontbijt", type="vega", diet=["veg"]),
        make_dish("d10", "Glas Merlot", section="dranken", category="drinken", price=5.95),
        make_dish("d11", "Cappuccino", section="warme dranken", category="drinken", price=3.5),
    ]


@pytest.fixture()
def sample_pairings():
    return [
        Pairing(dish_id="d2", suggestion="Glas Merlot + €5,95", kind="wine", match_tags=["rich_hearty"], priority=5),
        Pairing(dish_id="d2", suggestion="Friet + €4,50", kind="side", match_tags=["all"], priority=5),
        Pairing(dish_id="d2", suggestion="Sla", kind="side", priority=3),
        Pairing(dish_id="d2", suggestion="Oude wijn", kind="wine", active=False),
        Pairing(dish_id="d3", suggestion="Glas Chardonnay + €6,50", kind="wine", match_tags=["fris"], priority=5),
    ]


class FakeSheetsService:
    """Stands in for SheetsService; serves fixed records"""

    def __init__(self, menu=None, weekmenu=None, pairings=None, rules=None, period: str = DEFAULT_PERIOD):
        self.menu = menu or []
        self.weekmenu = weekmenu or []
        self.pairings = pairings or []
        self.rules = rules or []
        self.period = period
        self.invalidated = []

    async def get_menu(self, force_refresh: bool = False):
        return self.menu

    async def get_weekmenu(self, force_refresh: bool = False):
        return self.weekmenu

    async def get_pairings(self, force_refresh: bool = False):
        return self.pairings

    async def get_rules(self, force_refresh: bool = False):
        return self.rules

    async def get_current_period(self):
        return self.period

    def invalidate(self, sheet: Optional[str] = None):
        self.invalidated.append(sheet)


class FakeOpenAIService:
    """Records prompts; answers with a fixed text or None"""

    def __init__(self, available: bool = True, reply: Optional[str] = None, forward_result=None, forward_error=None):
        self._available = available
        self.reply = reply
        self.forward_result = forward_result or (200, {"choices": []})
        self.forward_error = forward_error
        self.prompts = []
        self.forwarded = []

    @property
    def is_available(self) -> bool:
        return self._available

    async def generate(self, prompt, lang="nl", system_prompt=None, max_tokens=None):
        self.prompts.append(prompt)
        return self.reply if self._available else None

    async def forward(self, payload):
        if self.forward_error:
            raise self.forward_error
        self.forwarded.append(payload)
        return self.forward_result


class FakeWeatherService:
    def __init__(self, weather=NEUTRAL_WEATHER):
        self.weather = weather

    async def get_current_weather(self, lat=None, lon=None):
        return self.weather


@pytest.fixture()
def fake_sheets(sample_dishes, sample_pairings):
    return FakeSheetsService(
        menu=sample_dishes,
        weekmenu=[make_dish("w1", "Weekhap stoofvlees", category="main", type="vlees", diet=["meat"], is_week=True,
                            date="'t Tolhuis Journaal No.12 (3 mrt t/m 9 mrt 2025)")],
        pairings=sample_pairings,
        period="3 mrt t/m 9 mrt 2025",
    )


@pytest.fixture()
def fake_llm():
    return FakeOpenAIService(available=False)


@pytest.fixture()
def dinner_context():
    return Context(hour=20, day_of_week=2, daypart=Daypart.DINNER, timestamp=datetime(2025, 3, 5, 20, 0))


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    await create_tables(engine)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture()
async def client(db_session, fake_sheets, fake_llm, dinner_context):
    """httpx AsyncClient bound to the FastAPI app with fake collaborators"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sheets_service] = lambda: fake_sheets
    app.dependency_overrides[get_openai_service] = lambda: fake_llm
    app.dependency_overrides[get_weather_service] = lambda: FakeWeatherService()
    app.dependency_overrides[get_context] = lambda: dinner_context

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
