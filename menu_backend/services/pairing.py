"""
Pairing selector.

Table pairings for the dish are scored on their match tags and priority,
rule pairings are appended, and the merged list is de-duplicated on
(kind, name) and cut to three.
"""
import logging
import re
from typing import Optional, Sequence

from menu_backend.schemas.menu import Dish, Pairing, PairingRule, PairingSuggestion, UserProfile
from menu_backend.services.matching import TASTE_FAMILIES, taste_to_code

logger = logging.getLogger(__name__)

MAX_PAIRINGS = 3

EXACT_TAG_SCORE = 10
FAMILY_TAG_SCORE = 10
WILDCARD_TAG_SCORE = 1
UNTAGGED_SCORE = 1
WILDCARD_TAGS = ("all", "*")

_PRICE_RE = re.compile(r"\+\s*€?\s*(\d+(?:[.,]\d+)?)")
_PRICE_SUFFIX_RE = re.compile(r"\s*\+\s*€?\s*[\d,.]+.*$")

FALLBACK_COPY = {
    "nl": "Perfecte combinatie met {name} versterkt de smaken zonder te overheersen.",
    "en": "Perfect combination with {name} lifts the flavours without overpowering.",
}


def parse_suggestion_price(suggestion: str) -> Optional[float]:
    """Price embedded in a suggestion such as "Glas Merlot + €5,95"."""
    match = _PRICE_RE.search(suggestion or "")
    if not match:
        return None
    try:
        return float(match.group(1).replace(",", "."))
    except ValueError:
        return None


def strip_price(suggestion: str) -> str:
    return _PRICE_SUFFIX_RE.sub("", suggestion or "").strip()


def pairing_copy_fallback(name: str, lang: str = "nl") -> str:
    return FALLBACK_COPY.get(lang, FALLBACK_COPY["nl"]).format(name=name)


def score_pairing(pairing: Pairing, taste_code: str) -> int:
    tags = [t.strip().lower() for t in pairing.match_tags]
    score = 0
    if not tags:
        score += UNTAGGED_SCORE
    elif taste_code and taste_code in tags:
        score += EXACT_TAG_SCORE
    elif any(tag in TASTE_FAMILIES.get(taste_code, ()) for tag in tags):
        score += FAMILY_TAG_SCORE
    elif any(tag in WILDCARD_TAGS for tag in tags):
        score += WILDCARD_TAG_SCORE
    return score + (pairing.priority or 5)


def _from_table(dish: Dish, pairing: Pairing, score: int) -> PairingSuggestion:
    suggestion_en = pairing.suggestion_en or pairing.suggestion
    return PairingSuggestion(
        dish_id=dish.id,
        kind=pairing.kind,
        name=strip_price(pairing.suggestion),
        name_en=strip_price(suggestion_en),
        suggestion=pairing.suggestion,
        suggestion_en=suggestion_en,
        price=parse_suggestion_price(pairing.suggestion),
        description=pairing.description,
        description_en=pairing.description_en,
        ai_description_nl=pairing.ai_description_nl,
        ai_description_en=pairing.ai_description_en,
        match_tags=list(pairing.match_tags),
        upsell_id=f"pairing_{pairing.kind}_{dish.id}",
        priority=pairing.priority,
        score=score,
    )


def rule_matches(rule: PairingRule, taste_label: str, taste_code: str) -> bool:
    """Structured rules match on the taste code; legacy rules on their key text"""
    if rule.taste_code:
        return rule.taste_code == taste_code
    key = rule.key.lower()
    return "taste" in key and taste_label.lower() in key


def _from_rules(dish: Dish, rules: Sequence[PairingRule], taste_label: str, taste_code: str) -> list[PairingSuggestion]:
    suggestions = []
    for rule in rules:
        if not rule_matches(rule, taste_label, taste_code):
            continue
        for token in rule.pairings:
            kind, _, name = str(token).partition(":")
            kind, name = kind.strip(), name.strip()
            if not kind or not name:
                logger.warning(f"Ignoring malformed pairing rule token {token!r}")
                continue
            suggestions.append(PairingSuggestion(
                dish_id=dish.id,
                kind=kind,
                name=name,
                name_en=name,
                suggestion=name,
                suggestion_en=name,
                upsell_id=f"rule_{kind}_{name}",
                source="rule",
            ))
    return suggestions


def select_pairings(
    dish: Dish,
    pairings: Sequence[Pairing],
    user: UserProfile,
    rules: Sequence[PairingRule] = (),
) -> list[PairingSuggestion]:
    """Up to three pairing suggestions for a dish, best first"""
    taste_code = taste_to_code(user.taste)

    eligible = [p for p in pairings if p.dish_id == dish.id and p.active]
    scored = sorted(
        ((p, score_pairing(p, taste_code)) for p in eligible),
        key=lambda pair: pair[1],
        reverse=True,
    )
    merged = [_from_table(dish, p, score) for p, score in scored]
    merged.extend(_from_rules(dish, rules, user.taste, taste_code))

    seen = set()
    selected = []
    for suggestion in merged:
        key = (suggestion.kind.lower(), suggestion.name.lower())
        if key in seen:
            continue
        seen.add(key)
        selected.append(suggestion)
        if len(selected) == MAX_PAIRINGS:
            break
    return selected
