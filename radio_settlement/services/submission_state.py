"""Radio submission lifecycle: pending -> accepted | rejected.

Accepted and rejected are terminal. Settlement only ever performs the
pending -> accepted transition; rejection belongs to the review workflow.
"""
from __future__ import annotations

from datetime import datetime

from radio_settlement.models.db.enums import SubmissionStatus
from radio_settlement.models.db.submissions import RadioSubmission
from radio_settlement.services.errors import SubmissionStateError

ALLOWED_TRANSITIONS: dict[SubmissionStatus, frozenset[SubmissionStatus]] = {
    SubmissionStatus.PENDING: frozenset({SubmissionStatus.ACCEPTED, SubmissionStatus.REJECTED}),
    SubmissionStatus.ACCEPTED: frozenset(),
    SubmissionStatus.REJECTED: frozenset(),
}


def ensure_transition(submission: RadioSubmission, target: SubmissionStatus) -> None:
    current = SubmissionStatus(submission.status)
    if target not in ALLOWED_TRANSITIONS[current]:
        raise SubmissionStateError(submission.id, current.value)


def accept_submission(submission: RadioSubmission, reviewed_at: datetime) -> RadioSubmission:
    ensure_transition(submission, SubmissionStatus.ACCEPTED)
    submission.status = SubmissionStatus.ACCEPTED
    submission.reviewed_at = reviewed_at  # type: ignore[assignment]
    submission.rejection_reason = None
    return submission


__all__ = ["ALLOWED_TRANSITIONS", "ensure_transition", "accept_submission"]
