"""Load-status finite state machine for one feed.

Each FeedState owns one FeedLoadSM. The FSM only validates and records
transitions; it has no callbacks. FeedLoader is the only caller of its
events, so a feed's status cannot change any other way.
"""

from __future__ import annotations

from statemachine import State, StateMachine


class FeedLoadSM(StateMachine):
    """Four-state load lifecycle of a feed.

    States:
        default   -- Nothing requested yet.
        pending   -- A fetch is in flight.
        fulfilled -- The latest fetch succeeded.
        rejected  -- The latest fetch failed.

    ``supersede`` is the pending self-transition taken when a newer reset
    replaces the in-flight request.
    """

    default = State("Default", initial=True, value="default")
    pending = State("Pending", value="pending")
    fulfilled = State("Fulfilled", value="fulfilled")
    rejected = State("Rejected", value="rejected")

    start = default.to(pending) | fulfilled.to(pending) | rejected.to(pending)
    supersede = pending.to.itself()
    succeed = pending.to(fulfilled)
    fail = pending.to(rejected)


def create_fsm(current_state: str = "default") -> FeedLoadSM:
    """Create an FSM positioned at *current_state*.

    Args:
        current_state: One of 'default', 'pending', 'fulfilled', 'rejected'.
    """
    return FeedLoadSM(start_value=current_state)
