"""Tests for the dashboard stats summary."""

from __future__ import annotations

from datetime import timedelta

from freelancedesk.domain.snapshot import Snapshot
from freelancedesk.domain.stats import summarize_stats
from tests.conftest import FIXED_NOW, iso, make_snapshot


class TestSummarizeStats:
    def test_sample(self, snapshot: Snapshot) -> None:
        stats = summarize_stats(snapshot)
        assert stats.total_clients == 3
        assert stats.active_projects == 2
        assert stats.pending_invoices == 2
        assert stats.upcoming_meetings == 2

    def test_totals_match_collections(self, snapshot: Snapshot) -> None:
        stats = summarize_stats(snapshot)
        assert stats.total_clients == len(snapshot.clients)
        assert stats.pending_invoices == sum(1 for i in snapshot.invoices if not i.is_paid)

    def test_empty(self) -> None:
        stats = summarize_stats(Snapshot(taken_at=FIXED_NOW))
        assert stats.model_dump() == {
            "total_clients": 0,
            "active_projects": 0,
            "pending_invoices": 0,
            "upcoming_meetings": 0,
        }

    def test_meeting_at_now_is_not_upcoming(self) -> None:
        snapshot = make_snapshot(
            {
                "meetings": [
                    {"_id": "m", "date": FIXED_NOW.isoformat()},
                    {"_id": "n", "date": iso(seconds=1)},
                ]
            }
        )
        assert summarize_stats(snapshot).upcoming_meetings == 1

    def test_overdue_unpaid_invoice_scenario(self) -> None:
        snapshot = make_snapshot(
            {
                "invoices": [
                    {
                        "_id": "i1",
                        "amount": 100,
                        "status": "Unpaid",
                        "dueDate": (FIXED_NOW - timedelta(days=1)).isoformat(),
                    }
                ]
            }
        )
        assert summarize_stats(snapshot).pending_invoices == 1

    def test_invoice_without_status_is_not_pending(self) -> None:
        snapshot = make_snapshot({"invoices": [{"_id": "i1", "amount": 100}]})
        assert summarize_stats(snapshot).pending_invoices == 0
