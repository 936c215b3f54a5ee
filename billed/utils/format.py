"""Display formatting for bills"""

from datetime import date, datetime
from typing import Iterable, List, Optional, TypeVar

from billed.models.enums import BillStatus

# French short month names, as browsers print them for the "fr" locale
FRENCH_MONTHS = (
    "janv.", "févr.", "mars", "avr.", "mai", "juin",
    "juil.", "août", "sept.", "oct.", "nov.", "déc.",
)

STATUS_LABELS = {
    BillStatus.PENDING.value: "En attente",
    BillStatus.ACCEPTED.value: "Accepté",
    BillStatus.REFUSED.value: "Refused",
}

T = TypeVar("T")


def parse_date(value: Optional[str]) -> date:
    """
    Parse a "YYYY-MM-DD" calendar date.

    Raises:
        ValueError: the value is not a calendar date
    """
    if not isinstance(value, str):
        raise ValueError(f"Invalid time value: {value!r}")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid time value: {value!r}")


def format_date(value: Optional[str]) -> str:
    """"2004-04-04" -> "4 Avr. 04" """
    parsed = parse_date(value)
    month = FRENCH_MONTHS[parsed.month - 1]
    month = month[0].upper() + month[1:]
    return f"{parsed.day} {month[:3]}. {str(parsed.year)[2:4]}"


def format_status(status: Optional[str]) -> Optional[str]:
    if not isinstance(status, str):
        return status
    return STATUS_LABELS.get(status, status)


def sort_bills(bills: Iterable[T], key=lambda bill: bill.date) -> List[T]:
    """
    Newest first by calendar date.

    Ties keep their input order. Bills whose date does not parse go last,
    in their input order.
    """
    dated = []
    undated = []
    for bill in bills:
        try:
            dated.append((parse_date(key(bill)), bill))
        except ValueError:
            undated.append(bill)
    # sorted() is stable, so equal dates keep input order
    dated = sorted(dated, key=lambda pair: pair[0], reverse=True)
    return [bill for _, bill in dated] + undated

