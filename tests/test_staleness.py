import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from imobi.core.exceptions import InvalidTransition
from imobi.models.enums import LeadStatus
from imobi.pipeline.staleness import (
    UrgencyLevel, LEAD_STATUS_ORDER,
    threshold_for, classify, hours_since, list_stale_leads,
    count_alert_leads, transition_status, build_kanban, parse_status
)

NOW = datetime(2024, 5, 15, 12, 0, 0)


@dataclass
class FakeLead:
    status: LeadStatus
    updated_at: Optional[datetime]
    created_at: datetime = NOW
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    name: str = "Lead"


def lead_aged(status, hours, **kwargs):
    return FakeLead(status=status, updated_at=NOW - timedelta(hours=hours), **kwargs)


class TestThresholds:
    def test_table_values(self):
        assert threshold_for(LeadStatus.NOVO) == 24
        assert threshold_for(LeadStatus.EM_ATENDIMENTO) == 48
        assert threshold_for(LeadStatus.QUALIFICADO) == 72
        assert threshold_for(LeadStatus.PROPOSTA) == 120
        assert threshold_for(LeadStatus.FECHADO) == float("inf")
        assert threshold_for(LeadStatus.PERDIDO) == float("inf")

    def test_accepts_raw_values(self):
        assert threshold_for("proposta") == 120

    def test_unknown_status_defaults_to_24(self):
        assert threshold_for("arquivado") == 24


class TestClassify:
    @pytest.mark.parametrize("hours,expected", [
        (0, UrgencyLevel.RECENT),
        (11, UrgencyLevel.RECENT),
        (12, UrgencyLevel.ATTENTION),
        (23, UrgencyLevel.ATTENTION),
        (24, UrgencyLevel.URGENT),
        (35, UrgencyLevel.URGENT),
        (36, UrgencyLevel.CRITICAL),
        (500, UrgencyLevel.CRITICAL),
    ])
    def test_boundaries(self, hours, expected):
        assert classify(hours, 24) == expected

    def test_infinite_threshold_is_always_recent(self):
        assert classify(10_000, float("inf")) == UrgencyLevel.RECENT


class TestHoursSince:
    def test_floors_partial_hours(self):
        assert hours_since(NOW - timedelta(hours=5, minutes=59), NOW) == 5

    def test_mixes_aware_and_naive(self):
        aware = datetime(2024, 5, 15, 9, 0, tzinfo=timezone(timedelta(hours=-3)))
        assert hours_since(aware, NOW) == 0
        assert hours_since(aware, NOW + timedelta(hours=2)) == 2


class TestListStaleLeads:
    def test_recent_lead_is_excluded(self):
        assert list_stale_leads([lead_aged(LeadStatus.NOVO, 10)], NOW) == []

    def test_attention_lead_is_kept_but_not_an_alert(self):
        result = list_stale_leads([lead_aged(LeadStatus.NOVO, 20)], NOW)
        assert len(result) == 1
        assert result[0].urgency_level == UrgencyLevel.ATTENTION
        assert result[0].hours_since_update == 20
        assert result[0].threshold == 24
        assert count_alert_leads(result) == 0

    def test_critical_lead_is_an_alert(self):
        result = list_stale_leads([lead_aged(LeadStatus.EM_ATENDIMENTO, 100)], NOW)
        assert result[0].urgency_level == UrgencyLevel.CRITICAL
        assert count_alert_leads(result) == 1

    def test_terminal_leads_never_listed(self):
        leads = [
            lead_aged(LeadStatus.FECHADO, 5000),
            lead_aged(LeadStatus.PERDIDO, 5000),
        ]
        assert list_stale_leads(leads, NOW) == []

    def test_sorted_by_severity_then_oldest_update(self):
        attention = lead_aged(LeadStatus.NOVO, 13)
        urgent = lead_aged(LeadStatus.QUALIFICADO, 80)
        critical_newer = lead_aged(LeadStatus.NOVO, 40)
        critical_older = lead_aged(LeadStatus.PROPOSTA, 400)

        result = list_stale_leads([attention, urgent, critical_newer, critical_older], NOW)

        assert [info.lead for info in result] == [
            critical_older, critical_newer, urgent, attention
        ]

    def test_ties_broken_by_lead_id(self):
        first = lead_aged(LeadStatus.NOVO, 30, id=uuid.UUID(int=1))
        second = lead_aged(LeadStatus.NOVO, 30, id=uuid.UUID(int=2))
        result = list_stale_leads([second, first], NOW)
        assert [info.lead for info in result] == [first, second]

    def test_lead_without_update_time_is_critical(self):
        broken = FakeLead(status=LeadStatus.NOVO, updated_at=None)
        other = lead_aged(LeadStatus.NOVO, 500)

        result = list_stale_leads([other, broken], NOW)

        assert result[0].lead is broken
        assert result[0].urgency_level == UrgencyLevel.CRITICAL
        assert result[0].hours_since_update is None
        assert count_alert_leads(result) == 2

    def test_empty_input(self):
        assert list_stale_leads([], NOW) == []
        assert count_alert_leads([]) == 0


class TestTransition:
    def test_proposta_to_perdido_stamps_updated_at(self):
        lead = lead_aged(LeadStatus.PROPOSTA, 50)
        transition_status(lead, LeadStatus.PERDIDO, NOW)
        assert lead.status == LeadStatus.PERDIDO
        assert lead.updated_at == NOW

    def test_any_move_is_allowed(self):
        lead = lead_aged(LeadStatus.FECHADO, 1)
        transition_status(lead, "novo", NOW)
        assert lead.status == LeadStatus.NOVO

    def test_same_status_resets_clock(self):
        lead = lead_aged(LeadStatus.NOVO, 30)
        transition_status(lead, LeadStatus.NOVO, NOW)
        assert lead.updated_at == NOW
        assert list_stale_leads([lead], NOW) == []

    def test_updated_at_never_moves_backwards(self):
        lead = FakeLead(status=LeadStatus.NOVO, updated_at=NOW)
        transition_status(lead, LeadStatus.QUALIFICADO, NOW - timedelta(hours=1))
        assert lead.updated_at == NOW

    def test_invalid_status_raises_and_leaves_lead_untouched(self):
        lead = lead_aged(LeadStatus.NOVO, 3)
        before = lead.updated_at
        with pytest.raises(InvalidTransition) as exc:
            transition_status(lead, "vendido", NOW)
        assert exc.value.status_value == "vendido"
        assert lead.status == LeadStatus.NOVO
        assert lead.updated_at == before

    def test_parse_status(self):
        assert parse_status("em_atendimento") is LeadStatus.EM_ATENDIMENTO
        with pytest.raises(InvalidTransition):
            parse_status("")


class TestKanban:
    def test_one_column_per_status_in_order(self):
        board = build_kanban([])
        assert [column.status for column in board] == LEAD_STATUS_ORDER
        assert all(column.count == 0 for column in board)

    def test_newest_first_within_column(self):
        older = FakeLead(LeadStatus.NOVO, NOW, created_at=NOW - timedelta(days=2))
        newer = FakeLead(LeadStatus.NOVO, NOW, created_at=NOW - timedelta(days=1))
        closed = FakeLead(LeadStatus.FECHADO, NOW)

        board = build_kanban([older, closed, newer])

        assert board[0].leads == [newer, older]
        assert board[0].count == 2
        assert board[4].leads == [closed]
