"""
Tests for the KYC transition table.

Covers:
- The only forward edges are NOT_SUBMITTED -> PENDING -> {VERIFIED, REJECTED}
- VERIFIED and REJECTED are terminal
"""

import pytest

from payroll_kernel.domain.kyc import (
    KYC_TRANSITIONS,
    TERMINAL_KYC_STATUSES,
    KYCStatus,
    can_transition,
)


class TestKYCTransitions:
    """Tests for can_transition."""

    def test_submit_edge(self):
        assert can_transition(KYCStatus.NOT_SUBMITTED, KYCStatus.PENDING)

    def test_decision_edges(self):
        assert can_transition(KYCStatus.PENDING, KYCStatus.VERIFIED)
        assert can_transition(KYCStatus.PENDING, KYCStatus.REJECTED)

    def test_cannot_skip_pending(self):
        assert not can_transition(KYCStatus.NOT_SUBMITTED, KYCStatus.VERIFIED)
        assert not can_transition(KYCStatus.NOT_SUBMITTED, KYCStatus.REJECTED)

    def test_cannot_resubmit_while_pending(self):
        assert not can_transition(KYCStatus.PENDING, KYCStatus.PENDING)

    @pytest.mark.parametrize("terminal", sorted(TERMINAL_KYC_STATUSES))
    @pytest.mark.parametrize("target", list(KYCStatus))
    def test_terminal_states_have_no_exit(self, terminal, target):
        assert not can_transition(terminal, target)

    def test_rejection_is_final(self):
        """A rejected employee has no way back to PENDING."""
        assert KYC_TRANSITIONS[KYCStatus.REJECTED] == frozenset()
        assert not can_transition(KYCStatus.REJECTED, KYCStatus.PENDING)

    def test_every_status_has_a_row(self):
        assert set(KYC_TRANSITIONS) == set(KYCStatus)

    def test_status_values_are_stable(self):
        assert [s.value for s in KYCStatus] == [
            "not_submitted",
            "pending",
            "verified",
            "rejected",
        ]
