"""
Job State Machine - Enforces valid job status transitions.

State progression: PENDING -> RUNNING -> SUCCEEDED/FAILED

Key rules:
- States only advance forward, never regress
- PENDING may fail directly (no slot could be obtained)
- Terminal states (SUCCEEDED, FAILED) cannot transition
"""

from sitesync.errors import InvalidJobTransitionError
from sitesync.models import JobStatus


class JobStateMachine:
    """State machine for job status transitions."""

    # Valid transitions: from_state -> set of valid to_states
    VALID_TRANSITIONS: dict[JobStatus, set[JobStatus]] = {
        JobStatus.PENDING: {JobStatus.RUNNING, JobStatus.FAILED},
        JobStatus.RUNNING: {JobStatus.SUCCEEDED, JobStatus.FAILED},
        JobStatus.SUCCEEDED: set(),  # Terminal
        JobStatus.FAILED: set(),  # Terminal
    }

    @classmethod
    def can_transition(cls, from_state: JobStatus, to_state: JobStatus) -> bool:
        """Check if a state transition is valid."""
        if from_state == to_state:
            return False
        return to_state in cls.VALID_TRANSITIONS.get(from_state, set())

    @classmethod
    def is_terminal(cls, state: JobStatus) -> bool:
        return len(cls.VALID_TRANSITIONS.get(state, set())) == 0

    @classmethod
    def transition(
        cls,
        job_id: str,
        from_state: JobStatus,
        to_state: JobStatus,
    ) -> JobStatus:
        """
        Return to_state if the transition is valid.

        Raises:
            InvalidJobTransitionError: If the transition is not allowed
        """
        if not cls.can_transition(from_state, to_state):
            raise InvalidJobTransitionError(job_id, from_state.value, to_state.value)

        return to_state
