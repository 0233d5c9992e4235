"""
Lead pipeline: status ordering, staleness thresholds and urgency tiers.

Every function here is pure. Callers fetch a snapshot of leads once and pass
it in together with an explicit `now`, so results never depend on the clock
or on rows from two different fetches.
"""
import enum
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from imobi.core.exceptions import InvalidTransition, MalformedRecord
from imobi.models.enums import LeadStatus

logger = logging.getLogger(__name__)


class UrgencyLevel(str, enum.Enum):
    """Derived from staleness, never stored."""
    RECENT = "recent"
    ATTENTION = "attention"
    URGENT = "urgent"
    CRITICAL = "critical"


# Kanban column order
LEAD_STATUS_ORDER: List[LeadStatus] = [
    LeadStatus.NOVO,
    LeadStatus.EM_ATENDIMENTO,
    LeadStatus.QUALIFICADO,
    LeadStatus.PROPOSTA,
    LeadStatus.FECHADO,
    LeadStatus.PERDIDO,
]

TERMINAL_STATUSES = frozenset({LeadStatus.FECHADO, LeadStatus.PERDIDO})

# Hours a lead may sit in a status before it is overdue
STATUS_THRESHOLDS: Dict[LeadStatus, float] = {
    LeadStatus.NOVO: 24,
    LeadStatus.EM_ATENDIMENTO: 48,
    LeadStatus.QUALIFICADO: 72,
    LeadStatus.PROPOSTA: 120,
    LeadStatus.FECHADO: math.inf,
    LeadStatus.PERDIDO: math.inf,
}

DEFAULT_THRESHOLD = 24

# Sort rank, most severe first
URGENCY_RANK: Dict[UrgencyLevel, int] = {
    UrgencyLevel.CRITICAL: 0,
    UrgencyLevel.URGENT: 1,
    UrgencyLevel.ATTENTION: 2,
    UrgencyLevel.RECENT: 3,
}

ALERT_LEVELS = frozenset({UrgencyLevel.URGENT, UrgencyLevel.CRITICAL})


@dataclass
class StaleLeadInfo:
    lead: Any
    hours_since_update: Optional[int]
    threshold: float
    urgency_level: UrgencyLevel


@dataclass
class KanbanColumn:
    status: LeadStatus
    leads: List[Any]

    @property
    def count(self) -> int:
        return len(self.leads)


def parse_status(value: Any) -> LeadStatus:
    """Coerce a raw value to LeadStatus, raising InvalidTransition otherwise."""
    if isinstance(value, LeadStatus):
        return value
    try:
        return LeadStatus(value)
    except ValueError:
        raise InvalidTransition(str(value))


def is_terminal(status: Any) -> bool:
    try:
        return parse_status(status) in TERMINAL_STATUSES
    except InvalidTransition:
        return False


def threshold_for(status: Any) -> float:
    """Staleness threshold in hours; unknown statuses fall back to 24."""
    try:
        return STATUS_THRESHOLDS[parse_status(status)]
    except InvalidTransition:
        return DEFAULT_THRESHOLD


def classify(hours_since_update: float, threshold: float) -> UrgencyLevel:
    """
    Bucket elapsed time against a threshold.

        h < 0.5t         -> recent
        0.5t <= h < t    -> attention
        t <= h < 1.5t    -> urgent
        h >= 1.5t        -> critical
    """
    if hours_since_update < threshold * 0.5:
        return UrgencyLevel.RECENT
    if hours_since_update < threshold:
        return UrgencyLevel.ATTENTION
    if hours_since_update < threshold * 1.5:
        return UrgencyLevel.URGENT
    return UrgencyLevel.CRITICAL


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def hours_since(updated_at: datetime, now: datetime) -> int:
    """Whole hours elapsed between two instants, floored."""
    delta = _as_naive_utc(now) - _as_naive_utc(updated_at)
    return math.floor(delta.total_seconds() / 3600)


def _stale_info(lead: Any, now: datetime) -> StaleLeadInfo:
    threshold = threshold_for(lead.status)
    updated_at = getattr(lead, "updated_at", None)
    if updated_at is None:
        raise MalformedRecord("Lead", "updated_at", str(getattr(lead, "id", "")))
    hours = hours_since(updated_at, now)
    return StaleLeadInfo(
        lead=lead,
        hours_since_update=hours,
        threshold=threshold,
        urgency_level=classify(hours, threshold),
    )


def _sort_key(info: StaleLeadInfo):
    updated_at = getattr(info.lead, "updated_at", None)
    # Undated leads sort ahead of dated ones inside the same tier
    return (
        URGENCY_RANK[info.urgency_level],
        updated_at is not None,
        _as_naive_utc(updated_at) if updated_at is not None else datetime.min,
        str(getattr(info.lead, "id", "")),
    )


def list_stale_leads(leads: Iterable[Any], now: datetime) -> List[StaleLeadInfo]:
    """
    Leads that need attention, most urgent first.

    Terminal leads are skipped before classification and `recent` ones are
    dropped. Ties within a tier go to the oldest `updated_at`, then lead id.
    A lead without `updated_at` is reported as critical.
    """
    result = []
    for lead in leads:
        if is_terminal(lead.status):
            continue
        try:
            info = _stale_info(lead, now)
        except MalformedRecord as e:
            logger.warning("%s; flagging as critical", e.message)
            result.append(StaleLeadInfo(
                lead=lead,
                hours_since_update=None,
                threshold=threshold_for(lead.status),
                urgency_level=UrgencyLevel.CRITICAL,
            ))
            continue
        if info.urgency_level != UrgencyLevel.RECENT:
            result.append(info)

    result.sort(key=_sort_key)
    return result


def count_alert_leads(stale_leads: Iterable[StaleLeadInfo]) -> int:
    """Entries that are urgent or critical (badge counter)."""
    return sum(1 for info in stale_leads if info.urgency_level in ALERT_LEVELS)


def transition_status(lead: Any, new_status: Any, now: datetime) -> Any:
    """
    Move a lead to `new_status` and stamp `updated_at`.

    Any status may follow any other. Moving to the current status still
    stamps `updated_at`, which resets the staleness clock.
    """
    status = parse_status(new_status)
    current = getattr(lead, "updated_at", None)
    if current is not None and _as_naive_utc(now) < _as_naive_utc(current):
        # updated_at never goes backwards
        now = current
    lead.status, lead.updated_at = status, now
    return lead


def build_kanban(leads: Iterable[Any]) -> List[KanbanColumn]:
    """One column per status in pipeline order, newest lead first."""
    columns = {status: [] for status in LEAD_STATUS_ORDER}
    for lead in leads:
        columns[parse_status(lead.status)].append(lead)

    board = []
    for status in LEAD_STATUS_ORDER:
        items = sorted(
            columns[status],
            key=lambda l: _as_naive_utc(l.created_at) if l.created_at else datetime.min,
            reverse=True,
        )
        board.append(KanbanColumn(status=status, leads=items))
    return board
