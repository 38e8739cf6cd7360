"""
Google Sheets adapter.

Reads the public CSV export of the menu spreadsheet. Each sheet is cached
with a TTL; when a refresh fails the last good value is served (or an empty
list when there is none), so a Sheets outage never breaks the menu.
"""
import csv
import io
import logging
import re
from typing import Awaitable, Callable, Optional

import httpx

from menu_backend.config import get_settings
from menu_backend.schemas.menu import Dish, Pairing, PairingRule
from menu_backend.services.cache import TTLCache
from menu_backend.services.catalog import load_dishes, load_pairings, load_rules

logger = logging.getLogger(__name__)

settings = get_settings()

CSV_EXPORT_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/gviz/tq"

DEFAULT_PERIOD = "Huidige week"

_MONTHS = "jan|feb|mrt|apr|mei|jun|jul|aug|sep|okt|nov|dec"
_PERIOD_RE = re.compile(
    rf"\((\d{{1,2}})\s+({_MONTHS})\s+t/m\s+(\d{{1,2}})\s+({_MONTHS})\s+(\d{{4}})\)",
    re.IGNORECASE,
)
_JOURNAL_PREFIX_RE = re.compile(r"^'t Tolhuis Journaal No\.\d+\s*")


def parse_csv(text: str) -> list[list[str]]:
    """Split CSV text into rows of stripped cells; quoted cells may span lines"""
    return [[cell.strip() for cell in row] for row in csv.reader(io.StringIO(text))]


def parse_period(date_text: Optional[str]) -> str:
    """Week period shown above the week specials.

    >>> parse_period("'t Tolhuis Journaal No.12 (3 mrt t/m 9 mrt 2025)")
    '3 mrt t/m 9 mrt 2025'
    """
    if not date_text:
        return DEFAULT_PERIOD
    match = _PERIOD_RE.search(date_text)
    if match:
        start_day, start_month, end_day, end_month, year = match.groups()
        return f"{start_day} {start_month} t/m {end_day} {end_month} {year}"
    return _JOURNAL_PREFIX_RE.sub("", date_text).strip() or DEFAULT_PERIOD


class SheetsService:
    def __init__(
        self,
        spreadsheet_id: Optional[str] = None,
        cache: Optional[TTLCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.spreadsheet_id = spreadsheet_id or settings.SPREADSHEET_ID
        self.cache = cache or TTLCache(settings.SHEETS_CACHE_TTL_SECONDS)
        self.timeout = timeout or settings.SHEETS_TIMEOUT_SECONDS
        self._transport = transport
        self.venue = settings.VENUE_SLUG

    async def fetch_rows(self, sheet: str) -> list[list[str]]:
        """Download one sheet as CSV rows. Raises httpx.HTTPError on failure."""
        url = CSV_EXPORT_URL.format(spreadsheet_id=self.spreadsheet_id)
        params = {"tqx": "out:csv", "sheet": sheet}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return parse_csv(response.text)

    async def _cached(self, key: str, load: Callable[[], Awaitable[list]], force_refresh: bool = False) -> list:
        value, fresh = self.cache.get(key)
        if fresh and not force_refresh:
            logger.debug(f"Sheets cache hit for {key}")
            return value

        try:
            result = await load()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch sheet {key}: {e}")
            return value if value is not None else []

        self.cache.set(key, result)
        logger.info(f"Loaded {len(result)} records from sheet {key}")
        return result

    async def get_menu(self, force_refresh: bool = False) -> list[Dish]:
        async def load():
            return load_dishes(await self.fetch_rows(settings.MENU_SHEET), venue=self.venue)
        return await self._cached(settings.MENU_SHEET, load, force_refresh)

    async def get_weekmenu(self, force_refresh: bool = False) -> list[Dish]:
        async def load():
            rows = await self.fetch_rows(settings.WEEKMENU_SHEET)
            return load_dishes(rows, only_week=True, venue=self.venue)
        return await self._cached(settings.WEEKMENU_SHEET, load, force_refresh)

    async def get_pairings(self, force_refresh: bool = False) -> list[Pairing]:
        async def load():
            return load_pairings(await self.fetch_rows(settings.PAIRINGS_SHEET))
        return await self._cached(settings.PAIRINGS_SHEET, load, force_refresh)

    async def get_rules(self, force_refresh: bool = False) -> list[PairingRule]:
        if not settings.RULES_SHEET:
            return []

        async def load():
            return load_rules(await self.fetch_rows(settings.RULES_SHEET))
        return await self._cached(settings.RULES_SHEET, load, force_refresh)

    async def get_current_period(self) -> str:
        weekmenu = await self.get_weekmenu()
        if not weekmenu:
            return DEFAULT_PERIOD
        return parse_period(weekmenu[0].date)

    def invalidate(self, sheet: Optional[str] = None) -> None:
        self.cache.invalidate(sheet)
        logger.info(f"Sheets cache cleared: {sheet or 'all'}")


# Singleton instance
sheets_service = SheetsService()


def get_sheets_service() -> SheetsService:
    return sheets_service
