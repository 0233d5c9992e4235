"""
Dashboard aggregations over fetched rows.

Inputs are plain records (ORM objects or mappings); nothing here touches the
database. Monthly series always contain exactly `months_back` consecutive
calendar months ending at the reference month, oldest first, even when a
month has no rows.
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from imobi.models.enums import LeadStatus
from imobi.pipeline.staleness import LEAD_STATUS_ORDER, is_terminal

# pt-BR short month names
MONTH_LABELS = [
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
]


@dataclass
class MonthlyLeadStats:
    month: str
    label: str
    novos: int = 0
    fechados: int = 0
    perdidos: int = 0
    total: int = 0


@dataclass
class MonthlyRevenueStats:
    month: str
    label: str
    revenue: float = 0.0


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def _to_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        return _to_datetime(datetime.fromisoformat(value))
    raise TypeError(f"Unsupported date value: {value!r}")


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_window(reference_date: Any, months_back: int = 6) -> List[Tuple[datetime, datetime]]:
    """
    Half-open [start, end) bounds of the `months_back` calendar months
    ending at the month containing `reference_date`, oldest first.
    """
    if months_back < 1:
        raise ValueError("months_back must be at least 1")
    ref = _to_datetime(reference_date)

    window = []
    for offset in range(months_back - 1, -1, -1):
        year, month = _shift_month(ref.year, ref.month, -offset)
        next_year, next_month = _shift_month(year, month, 1)
        window.append((datetime(year, month, 1), datetime(next_year, next_month, 1)))
    return window


def month_key(start: datetime) -> str:
    return start.strftime("%Y-%m")


def month_label(start: datetime) -> str:
    return MONTH_LABELS[start.month - 1]


def count_by_status(leads: Iterable[Any]) -> Dict[LeadStatus, int]:
    """Lead count per status; every status is present, zero when absent."""
    counts = {status: 0 for status in LEAD_STATUS_ORDER}
    for lead in leads:
        counts[LeadStatus(_field(lead, "status"))] += 1
    return counts


def count_open_leads(leads: Iterable[Any]) -> int:
    """Leads still in the pipeline (not fechado/perdido)."""
    return sum(1 for lead in leads if not is_terminal(_field(lead, "status")))


def monthly_lead_stats(
    leads: Iterable[Any],
    reference_date: Any,
    months_back: int = 6
) -> List[MonthlyLeadStats]:
    """
    Leads bucketed by the month of `created_at`.

    `novos`, `fechados` and `perdidos` use each lead's current status, so a
    lead created in March and closed in May counts as fechado for March.
    """
    window = month_window(reference_date, months_back)
    buckets = [MonthlyLeadStats(month=month_key(s), label=month_label(s)) for s, _ in window]
    lower, upper = window[0][0], window[-1][1]

    for lead in leads:
        created_at = _to_datetime(_field(lead, "created_at"))
        if created_at is None or not (lower <= created_at < upper):
            continue
        index = _bucket_index(window, created_at)
        bucket = buckets[index]
        bucket.total += 1
        status = LeadStatus(_field(lead, "status"))
        if status == LeadStatus.NOVO:
            bucket.novos += 1
        elif status == LeadStatus.FECHADO:
            bucket.fechados += 1
        elif status == LeadStatus.PERDIDO:
            bucket.perdidos += 1

    return buckets


def monthly_revenue(
    payments: Iterable[Any],
    reference_date: Any,
    months_back: int = 6
) -> List[MonthlyRevenueStats]:
    """
    Paid value summed by the month of `payment_date`.
    Payments without a payment date are ignored.
    """
    window = month_window(reference_date, months_back)
    buckets = [MonthlyRevenueStats(month=month_key(s), label=month_label(s)) for s, _ in window]
    lower, upper = window[0][0], window[-1][1]

    for payment in payments:
        paid_at = _to_datetime(_field(payment, "payment_date"))
        if paid_at is None or not (lower <= paid_at < upper):
            continue
        buckets[_bucket_index(window, paid_at)].revenue += _field(payment, "paid_value") or 0

    return buckets


def sum_revenue(payments: Iterable[Any], start: datetime, end: datetime) -> float:
    """Paid value of payments dated within [start, end)."""
    total = 0.0
    for payment in payments:
        paid_at = _to_datetime(_field(payment, "payment_date"))
        if paid_at is not None and start <= paid_at < end:
            total += _field(payment, "paid_value") or 0
    return total


def _bucket_index(window: List[Tuple[datetime, datetime]], moment: datetime) -> int:
    first = window[0][0]
    return (moment.year - first.year) * 12 + (moment.month - first.month)
