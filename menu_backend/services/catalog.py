"""
Catalog normalizer.
Turns spreadsheet rows (lists of string cells) into Dish and Pairing records.
A row that cannot be used is reported as Skipped with a reason and logged;
loading a batch never raises because of one bad row.
"""
import logging
import re
from dataclasses import dataclass
from typing import Generic, Iterable, Optional, Sequence, TypeVar, Union

from menu_backend.schemas.menu import Dish, Pairing, PairingRule

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Column order of the menu and weekmenu sheets (A..O)
DISH_COLUMNS = (
    "id", "section", "title", "description", "price", "type", "category",
    "diet", "tags", "active", "is_week", "supplier", "date",
    "title_en", "description_en",
)

# Column order of the pairings sheet (A..L)
PAIRING_COLUMNS = (
    "dish_id", "venue", "suggestion", "description", "kind", "match_tags",
    "priority", "active", "suggestion_en", "description_en",
    "ai_description_nl", "ai_description_en",
)

# Column order of the optional pairing rules sheet
RULE_COLUMNS = ("key", "taste_code", "pairings")

TRUTHY = {"TRUE", "1", "WAAR"}
# Leading minus kept so negative prices can be rejected
PRICE_RE = re.compile(r"-?\d+(?:[.,]\d+)?")

DEFAULT_PAIRING_PRIORITY = 5


@dataclass(frozen=True)
class Parsed(Generic[T]):
    record: T


@dataclass(frozen=True)
class Skipped:
    reason: str
    index: int


RowResult = Union[Parsed, Skipped]


# ---------------------------------------------------------------------------
# Cell parsing
# ---------------------------------------------------------------------------

def parse_price(text: Optional[str]) -> Optional[float]:
    """Parse a price cell; comma and dot both work as decimal separator.
    The first number in the cell is the price, so "24,-" and "8,50 p.p." parse.

    >>> parse_price("19,95")
    19.95
    """
    if text is None:
        return None
    match = PRICE_RE.search(str(text))
    if not match or match.group(0).startswith("-"):
        return None
    return float(match.group(0).replace(",", "."))


def parse_bool(text: Optional[str]) -> bool:
    return (text or "").strip().upper() in TRUTHY


def split_list(text: Optional[str]) -> list[str]:
    """Split a tag/diet cell on comma or pipe, dropping empty tokens"""
    if not text:
        return []
    return [token.strip() for token in re.split(r"[,|]", str(text)) if token.strip()]


def _pad(cells: Sequence[Optional[str]], width: int) -> list[str]:
    values = [(c or "").strip() for c in cells]
    return values + [""] * (width - len(values))


def _is_header(values: list[str], first: str, title_col: int, title: str) -> bool:
    return values[0].lower() == first or values[title_col].lower() == title


# ---------------------------------------------------------------------------
# Row normalization
# ---------------------------------------------------------------------------

def normalize_dish_row(cells: Sequence[Optional[str]], index: int = 0, venue: str = "tolhuis") -> RowResult:
    """Map one menu/weekmenu row to a Dish.

    Header rows, rows without a title and rows without a usable price are
    skipped. Inactive rows still parse; filtering on `active` is up to the
    loader.
    """
    if not cells or not any((c or "").strip() for c in cells):
        return Skipped("empty row", index)

    values = _pad(cells, len(DISH_COLUMNS))
    row = dict(zip(DISH_COLUMNS, values))

    if _is_header(values, "id", 2, "title"):
        return Skipped("header row", index)
    if not row["title"]:
        return Skipped("missing title", index)

    price = parse_price(row["price"])
    if price is None:
        return Skipped(f"missing or invalid price {row['price']!r}", index)

    return Parsed(Dish(
        id=row["id"] or f"item_{index}",
        venue=venue,
        section=row["section"].lower(),
        name=row["title"],
        title_en=row["title_en"],
        description=row["description"],
        description_en=row["description_en"],
        price=price,
        type=row["type"],
        category=row["category"],
        diet=split_list(row["diet"]),
        tags=split_list(row["tags"]),
        active=parse_bool(row["active"]),
        is_week=parse_bool(row["is_week"]),
        supplier=row["supplier"],
        date=row["date"] or None,
    ))


def normalize_pairing_row(cells: Sequence[Optional[str]], index: int = 0) -> RowResult:
    """Map one pairings row to a Pairing; rows need a dish_id and a suggestion"""
    if not cells or not any((c or "").strip() for c in cells):
        return Skipped("empty row", index)

    values = _pad(cells, len(PAIRING_COLUMNS))
    row = dict(zip(PAIRING_COLUMNS, values))

    if _is_header(values, "dish_id", 2, "suggestion"):
        return Skipped("header row", index)
    if not row["dish_id"] or not row["suggestion"]:
        return Skipped("missing dish_id or suggestion", index)

    try:
        priority = int(row["priority"])
    except ValueError:
        priority = DEFAULT_PAIRING_PRIORITY

    return Parsed(Pairing(
        dish_id=row["dish_id"],
        venue=row["venue"] or "tolhuis",
        suggestion=row["suggestion"],
        suggestion_en=row["suggestion_en"] or row["suggestion"],
        description=row["description"],
        description_en=row["description_en"],
        ai_description_nl=row["ai_description_nl"],
        ai_description_en=row["ai_description_en"],
        kind=row["kind"] or "food",
        match_tags=split_list(row["match_tags"]),
        priority=priority,
        active=parse_bool(row["active"]),
        row_index=index,
    ))


def normalize_rule_row(cells: Sequence[Optional[str]], index: int = 0) -> RowResult:
    if not cells or not any((c or "").strip() for c in cells):
        return Skipped("empty row", index)

    values = _pad(cells, len(RULE_COLUMNS))
    row = dict(zip(RULE_COLUMNS, values))

    if row["key"].lower() == "key":
        return Skipped("header row", index)
    if not (row["key"] or row["taste_code"]) or not row["pairings"]:
        return Skipped("missing key or pairings", index)

    return Parsed(PairingRule(
        key=row["key"],
        taste_code=row["taste_code"] or None,
        pairings=split_list(row["pairings"]),
    ))


# ---------------------------------------------------------------------------
# Batch loading
# ---------------------------------------------------------------------------

def load_dishes(
    rows: Iterable[Sequence[Optional[str]]],
    only_week: bool = False,
    venue: str = "tolhuis",
) -> list[Dish]:
    """Normalize a sheet into active dishes, optionally only week specials"""
    dishes = []
    for index, cells in enumerate(rows):
        result = normalize_dish_row(cells, index, venue=venue)
        if isinstance(result, Skipped):
            if result.reason not in ("header row", "empty row"):
                logger.info(f"Skipping menu row {result.index}: {result.reason}")
            continue
        dish = result.record
        if not dish.active or (only_week and not dish.is_week):
            continue
        dishes.append(dish)
    return dishes


def load_pairings(rows: Iterable[Sequence[Optional[str]]]) -> list[Pairing]:
    pairings = []
    for index, cells in enumerate(rows):
        result = normalize_pairing_row(cells, index)
        if isinstance(result, Skipped):
            if result.reason not in ("header row", "empty row"):
                logger.info(f"Skipping pairing row {result.index}: {result.reason}")
            continue
        if result.record.active:
            pairings.append(result.record)
    return pairings


def load_rules(rows: Iterable[Sequence[Optional[str]]]) -> list[PairingRule]:
    results = (normalize_rule_row(cells, index) for index, cells in enumerate(rows))
    return [r.record for r in results if isinstance(r, Parsed)]


# ---------------------------------------------------------------------------
# Supplier detection
# ---------------------------------------------------------------------------

ICE_CREAM_PATTERNS = ("ijs", "ice", "sorbet", "gelato", "frozen", "ijsje")

CONFIRMED_MEAT_SUPPLIER_IDS = ("week_hap",)
CONFIRMED_MEAT_SUPPLIER_NAMES = ("de gebraden eendenborst", "eendenborst")
MEAT_SUPPLIER_EXCLUDES = (
    "schol", "scholfilet", "vis", "zalm", "tonijn",
    "kaas", "roquefort", "blauwader", "geitenkaas",
    "soep", "salade", "saus", "jus", "dressing",
    "vegetarisch", "vega", "hap van het seizoen", "seizoen",
)


def supplier_for(dish: Dish) -> Optional[str]:
    """Name of the supplier to credit on the dish card, if known"""
    if dish.supplier:
        return dish.supplier

    name = dish.name.lower()
    # word prefixes, so "rice" is not ice cream
    words = re.findall(r"\w+", " ".join([name, dish.description.lower(), " ".join(dish.tags).lower()]))
    if any(word.startswith(pattern) for word in words for pattern in ICE_CREAM_PATTERNS):
        return "De Hoop"

    if dish.id.lower() in CONFIRMED_MEAT_SUPPLIER_IDS:
        return "Nice to Meat"
    if any(pattern in name for pattern in MEAT_SUPPLIER_EXCLUDES):
        return None
    if any(confirmed in name for confirmed in CONFIRMED_MEAT_SUPPLIER_NAMES):
        return "Nice to Meat"
    return None
