"""
Step 1: Profile Extraction
Mines structured profile fields from the user's side of the conversation.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from lifequote.pipeline.models import ChatMessage, Profile
from lifequote.pipeline.tables import (
    COUNTRY_CODES,
    DEFAULT_STATE,
    STATE_CODES,
    US_COUNTRY_CODES,
)


AGE_RANGE = (18, 80)
INCOME_RANGE = (20_000, 2_000_000)
MORTGAGE_RANGE = (50_000, 2_000_000)
STUDENT_LOAN_RANGE = (5_000, 500_000)

_LOCATION_LEAD = r"\b(?:live in|from|in|located in)\s+"
_STATE_NAMES = "|".join(STATE_CODES)
_COUNTRY_NAMES = "|".join(COUNTRY_CODES)


@dataclass(frozen=True)
class ExtractionRule:
    """
    One field's worth of extraction.

    Patterns are tried in order. With ``scan_all`` every match of a pattern
    is offered to ``resolve`` before moving on; otherwise only the first.
    ``resolve`` returns None to discard a match. ``after`` runs on the
    working profile dict once the field has been set.
    """
    field: str
    patterns: Tuple[re.Pattern, ...]
    resolve: Callable[[re.Match, str], Optional[Any]]
    scan_all: bool = False
    after: Optional[Callable[[Dict[str, Any]], None]] = None


def _first_group(match: re.Match) -> str:
    return next(group for group in match.groups() if group is not None)


def _in_range(value: int, bounds: Tuple[int, int]) -> Optional[int]:
    low, high = bounds
    return value if low <= value <= high else None


def _resolve_age(match: re.Match, text: str) -> Optional[int]:
    return _in_range(int(match.group(1)), AGE_RANGE)


def _resolve_income(match: re.Match, text: str) -> Optional[int]:
    digits = match.group(1)
    income = int(digits)
    # Any "<digits>k" in the whole text counts, not just at this match
    if f"{digits}k" in text:
        income *= 1000
    return _in_range(income, INCOME_RANGE)


def _resolve_debt(bounds: Tuple[int, int]) -> Callable[[re.Match, str], Optional[int]]:
    def resolve(match: re.Match, text: str) -> Optional[int]:
        amount = int(_first_group(match))
        if amount < 1000 and "k" in text:
            amount *= 1000
        return _in_range(amount, bounds)
    return resolve


def _resolve_state(match: re.Match, text: str) -> str:
    found = match.group(1)
    if found in STATE_CODES:
        return STATE_CODES[found]
    return found.upper() if len(found) == 2 else DEFAULT_STATE


def _resolve_country(match: re.Match, text: str) -> str:
    found = match.group(1)
    return COUNTRY_CODES.get(found, found.upper())


def _clear_state_outside_us(profile: Dict[str, Any]) -> None:
    if profile.get("country") not in US_COUNTRY_CODES:
        profile["state"] = None


def _default_spouse_dependent(profile: Dict[str, Any]) -> None:
    # A spouse counts as one dependent until children are mentioned
    if profile.get("marital_status") == "married" and profile.get("dependents") is None:
        profile["dependents"] = 1


def _keyword_rule(
    field: str,
    options: Tuple[Tuple[str, Any], ...],
    after: Optional[Callable[[Dict[str, Any]], None]] = None,
) -> ExtractionRule:
    """Build a rule whose patterns each map to a fixed value, in priority order."""
    values = {re.compile(regex): value for regex, value in options}
    return ExtractionRule(
        field=field,
        patterns=tuple(values),
        resolve=lambda match, text: values[match.re],
        after=after,
    )


DEFAULT_RULES: Tuple[ExtractionRule, ...] = (
    ExtractionRule(
        field="age",
        patterns=(
            re.compile(r"(?:i'm|i am|age|turned)\s*(\d{2})\s*(?:years?\s*old|yo\b|$)"),
            re.compile(r"\b(\d{2})\s*(?:years?\s*old|yo\b)"),
        ),
        resolve=_resolve_age,
    ),
    ExtractionRule(
        field="income",
        patterns=(
            re.compile(r"(?:make|earn|salary|income).*?\$?(\d+)k?(?:\s*(?:per\s*year|annually|a\s*year))?"),
            re.compile(r"\$?(\d+)k?\s*(?:per\s*year|annually|salary|income)"),
            re.compile(r"(\d+)k?\s*(?:dollar|usd|salary|income)"),
        ),
        resolve=_resolve_income,
        scan_all=True,
    ),
    _keyword_rule("gender", (
        (r"\b(?:females?|wom[ae]n|girls?|she/her|lad(?:y|ies))\b", "female"),
        (r"\b(?:males?|m[ae]n|guys?|he/him|gentlem[ae]n)\b", "male"),
    )),
    # Negative phrasing first so "non-smoker" is not read as a smoker
    _keyword_rule("smoker", (
        (r"(?:don[’']t smoke|do not smoke|non-?\s?smoker|never smoked|quit smoking)", False),
        (r"(?:smoke|smoker|cigarette)", True),
    )),
    ExtractionRule(
        field="state",
        patterns=(
            re.compile(_LOCATION_LEAD + rf"({_STATE_NAMES}|[a-z]{{2}}\b)"),
            re.compile(r"\b([a-z]{2})\s*(?:state|area)\b"),
        ),
        resolve=_resolve_state,
    ),
    ExtractionRule(
        field="country",
        patterns=(re.compile(_LOCATION_LEAD + rf"({_COUNTRY_NAMES})\b"),),
        resolve=_resolve_country,
        after=_clear_state_outside_us,
    ),
    ExtractionRule(
        field="dependents",
        patterns=(re.compile(r"\b(\d+)\s*(?:kids?|children|dependents)"),),
        resolve=lambda match, text: int(match.group(1)),
    ),
    _keyword_rule("marital_status", (
        (r"\b(?:single|unmarried|not married)\b", "single"),
        (r"\b(?:married|spouse|partner|wife|husband)\b", "married"),
    ), after=_default_spouse_dependent),
    ExtractionRule(
        field="mortgage",
        patterns=(re.compile(r"mortgage.*?\$?(\d+)k?|house.*?owe.*?\$?(\d+)k?"),),
        resolve=_resolve_debt(MORTGAGE_RANGE),
    ),
    ExtractionRule(
        field="student_loans",
        patterns=(re.compile(r"student.*?loan.*?\$?(\d+)k?|loan.*?\$?(\d+)k?"),),
        resolve=_resolve_debt(STUDENT_LOAN_RANGE),
    ),
)


def build_conversation_text(messages: Iterable[ChatMessage]) -> str:
    """Join every user-authored turn, lower-cased, with single spaces."""
    return " ".join(m.content.lower() for m in messages if m.role == "user")


class ProfileExtractionStep:
    """
    Applies the rule table to the conversation text and merges what it
    finds into the current profile. Never raises on odd input: a match
    that fails validation is simply ignored.
    """

    def __init__(self, rules: Tuple[ExtractionRule, ...] = DEFAULT_RULES):
        self.rules = rules

    def execute(
        self,
        conversation_text: str,
        current_profile: Optional[Profile] = None
    ) -> Profile:
        """
        Extract profile fields from conversation text.

        Args:
            conversation_text: All user turns joined together
            current_profile: Profile from previous turns, if any

        Returns:
            A new Profile; the input profile is left untouched
        """
        text = (conversation_text or "").lower()
        profile = (current_profile or Profile()).model_dump()

        for rule in self.rules:
            value = self.match_rule(rule, text)
            if value is None:
                continue
            profile[rule.field] = value
            if rule.after:
                rule.after(profile)

        if profile.get("state") and not profile.get("country"):
            profile["country"] = "US"

        return Profile.model_validate(profile)

    @staticmethod
    def match_rule(rule: ExtractionRule, text: str) -> Optional[Any]:
        """Return the first valid value a rule yields for the text, or None."""
        for pattern in rule.patterns:
            if rule.scan_all:
                matches = pattern.finditer(text)
            else:
                matches = filter(None, [pattern.search(text)])
            for match in matches:
                value = rule.resolve(match, text)
                if value is not None:
                    return value
        return None
