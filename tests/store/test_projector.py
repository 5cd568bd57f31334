"""
Unit tests for the derived stats projector.
"""

from dataclasses import replace
from datetime import date

import pytest

from admin_console.models.entities import ApprovalStatus, DashboardStats
from admin_console.store.projector import (
    EntityChange,
    derive_stats,
    find_drift,
    pending_delta,
    project,
)


class TestPendingDelta:
    """Test cases for pending_delta."""

    @pytest.fixture
    def pending(self, state):
        return state.find_student("STU004")

    @pytest.fixture
    def approved(self, pending):
        return replace(pending, approval_status=ApprovalStatus.APPROVED)

    def test_leaving_pending(self, pending, approved):
        assert pending_delta(EntityChange("students", pending, approved)) == -1

    def test_entering_pending(self, pending, approved):
        assert pending_delta(EntityChange("students", approved, pending)) == 1

    def test_same_status(self, pending):
        assert pending_delta(EntityChange("students", pending, pending)) == 0

    def test_removed_pending_record(self, pending):
        assert pending_delta(EntityChange("students", pending, None)) == -1

    def test_packages_are_not_registrations(self, state):
        package = state.find_package("PKG002")
        approved = replace(package, status=ApprovalStatus.APPROVED)

        assert pending_delta(EntityChange("packages", package, approved)) == 0


class TestProject:
    """Test cases for project."""

    @pytest.fixture
    def stats(self):
        return DashboardStats(
            total_students=6,
            total_instructors=5,
            active_lessons=3,
            pending_approvals=1,
            monthly_revenue=450.0,
            pending_payouts=100.0,
        )

    def test_no_delta_returns_same_object(self, stats, state):
        student = state.find_student("STU001")
        changes = [EntityChange("students", student, replace(student, rating=5.0))]

        assert project(stats, changes) is stats

    def test_counter_floors_at_zero(self, stats, state):
        """Test pending_approvals never goes negative."""
        pending = [s for s in state.students if s.approval_status == ApprovalStatus.PENDING]
        changes = [EntityChange("students", s, None) for s in pending]

        projected = project(stats, changes)

        assert projected.pending_approvals == 0
        assert projected.total_students == 4

    def test_payout_floors_at_zero(self, stats):
        projected = project(stats, [], payout=250.0)

        assert projected.pending_payouts == 0.0
        assert projected.pending_approvals == 1

    def test_payout_rounding(self, stats):
        projected = project(replace(stats, pending_payouts=500.5), [], payout=320.1)

        assert projected.pending_payouts == 180.4


class TestDeriveStats:
    """Test cases for derive_stats and find_drift."""

    def test_derive_from_seed(self, state, today):
        stats = derive_stats(state, today)

        assert stats == state.dashboard_stats

    def test_monthly_revenue_counts_paid_in_month(self, state):
        """Test only paid transactions of the reference month count."""
        assert derive_stats(state, date(2025, 3, 1)).monthly_revenue == 450.0
        assert derive_stats(state, date(2025, 2, 1)).monthly_revenue == 1075.0
        assert derive_stats(state, date(2024, 12, 1)).monthly_revenue == 0.0

    def test_find_drift(self, state, today):
        drifted = replace(
            state,
            dashboard_stats=replace(state.dashboard_stats, pending_approvals=9, total_students=8),
        )

        assert find_drift(drifted, today=today) == {"pending_approvals": (9, 4)}
        assert find_drift(drifted, ("total_students",), today) == {"total_students": (8, 6)}

    def test_no_drift(self, state, today):
        assert find_drift(state, today=today) == {}
