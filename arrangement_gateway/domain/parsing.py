"""
Input parsing for arrangement plan forms.

Admins type dollars, percentages, dates and comma-separated lists into the
plan form. These helpers turn the raw strings into fixed-point integers
(cents, basis points) or return None. None means the input was blank or
could not be read; range checks are the validator's job, so a negative
amount still parses.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from typing import TYPE_CHECKING, FrozenSet, List

from arrangement_gateway.utils.date_utils import parse_iso_date

if TYPE_CHECKING:
    from arrangement_gateway.domain.drafts import PlanDraft

UNTIL_PAID = "until_paid"

# Plain ASCII decimal notation only: no exponents, thousands separators or currency symbols
_DECIMAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$", re.ASCII)
_INTEGER_RE = re.compile(r"^[+-]?\d+$", re.ASCII)


def _parse_decimal(value: str | None) -> Decimal | None:
    if value is None:
        return None
    text = value.strip()
    if not _DECIMAL_RE.match(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def _scale_by_100(value: str | None) -> int | None:
    number = _parse_decimal(value)
    if number is None:
        return None
    try:
        return int((number * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # More digits than the decimal context can hold
        return None


def parse_currency(value: str | None) -> int | None:
    """
    Parse a dollar amount into integer cents.

    Examples:
        "150"    -> 15000
        "19.999" -> 2000
        "-5"     -> -500  (rejected later by the validator)
        "abc", "", "12.34.56" -> None
    """
    return _scale_by_100(value)


def parse_percentage(value: str | None) -> int | None:
    """Parse a percentage into basis points ("60" -> 6000, "12.5" -> 1250)"""
    return _scale_by_100(value)


def parse_max_term(value: str | None) -> int | None:
    """
    Parse a maximum term in months.

    The UNTIL_PAID sentinel and blank input both mean the plan runs until
    the balance is paid, represented as None. Fractional months are
    truncated, not rounded.
    """
    if value is None or value.strip() == UNTIL_PAID:
        return None
    number = _parse_decimal(value)
    if number is None:
        return None
    return int(number.to_integral_value(rounding=ROUND_DOWN))


def parse_date(value: str | None) -> date | None:
    """Parse a strict YYYY-MM-DD date, None for anything else (including 2024-02-30)"""
    if value is None:
        return None
    return parse_iso_date(value.strip())


def parse_payment_counts(value: str | None) -> List[int]:
    """
    Parse a comma-separated list of settlement payment counts.

    Blank, non-integer and non-positive tokens are dropped, as are repeats:
    "1,3,6" -> [1, 3, 6], "1, ,6" -> [1, 6], "" -> [].
    """
    if not value:
        return []

    counts: List[int] = []
    for token in value.split(","):
        token = token.strip()
        if not _INTEGER_RE.match(token):
            continue
        count = int(token)
        if count > 0 and count not in counts:
            counts.append(count)
    return counts


def _is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    text = value.strip()
    return text or None


@dataclass(frozen=True)
class ParsedFields:
    """Typed values read from a plan draft.

    `malformed` names the fields whose input was filled in but could not
    be parsed, so the validator can tell "missing" from "malformed".
    """

    name: str = ""
    description: str | None = None
    balance_tier: str | None = None
    monthly_payment_min_cents: int | None = None
    monthly_payment_max_cents: int | None = None
    max_term_months: int | None = None
    fixed_monthly_payment_cents: int | None = None
    payoff_percentage_basis_points: int | None = None
    payment_counts: List[int] = field(default_factory=list)
    payment_frequency: str | None = None
    offer_expires_date: date | None = None
    terms_text: str | None = None
    custom_terms_text: str | None = None
    minimum_payment_cents: int | None = None
    due_date: date | None = None
    malformed: FrozenSet[str] = frozenset()


def parse_draft(draft: "PlanDraft") -> ParsedFields:
    """Run every field parser over a draft and note which inputs were unreadable"""
    malformed = set()

    def track(field_name: str, raw: str | None, parsed):
        if parsed is None and not _is_blank(raw):
            malformed.add(field_name)
        return parsed

    max_term_raw = draft.max_term_months
    max_term = parse_max_term(max_term_raw)
    if max_term is None and not _is_blank(max_term_raw) and max_term_raw.strip() != UNTIL_PAID:
        malformed.add("max_term_months")

    return ParsedFields(
        name=draft.name.strip(),
        description=_optional_text(draft.description),
        balance_tier=_optional_text(draft.balance_tier),
        monthly_payment_min_cents=track(
            "monthly_payment_min_cents",
            draft.monthly_payment_min,
            parse_currency(draft.monthly_payment_min),
        ),
        monthly_payment_max_cents=track(
            "monthly_payment_max_cents",
            draft.monthly_payment_max,
            parse_currency(draft.monthly_payment_max),
        ),
        max_term_months=max_term,
        fixed_monthly_payment_cents=track(
            "fixed_monthly_payment_cents",
            draft.fixed_monthly_payment,
            parse_currency(draft.fixed_monthly_payment),
        ),
        payoff_percentage_basis_points=track(
            "payoff_percentage_basis_points",
            draft.payoff_percentage,
            parse_percentage(draft.payoff_percentage),
        ),
        payment_counts=parse_payment_counts(draft.settlement_payment_counts),
        payment_frequency=_optional_text(draft.settlement_payment_frequency),
        offer_expires_date=track(
            "offer_expires_date",
            draft.settlement_offer_expires_date,
            parse_date(draft.settlement_offer_expires_date),
        ),
        terms_text=_optional_text(draft.terms_text),
        custom_terms_text=_optional_text(draft.custom_terms_text),
        minimum_payment_cents=track(
            "minimum_payment_cents",
            draft.minimum_payment,
            parse_currency(draft.minimum_payment),
        ),
        due_date=track("due_date", draft.due_date, parse_date(draft.due_date)),
        malformed=frozenset(malformed),
    )
