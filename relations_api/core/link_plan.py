"""Link Planning — pure connect/disconnect resolution for many-to-many relations.

Invariants:
    - Both sets are evaluated against the pre-operation state
    - An id present in both the add and remove sets ends UNLINKED (disconnect wins)
    - Connecting a linked pair or disconnecting an unlinked pair is a no-op
    - No IO: callers pass in the currently linked ids

Design Decisions:
    - Plan computed per pair through resolve_pair(): the state machine
      {UNLINKED, LINKED} is the single source of truth for the tie-break
"""

from collections.abc import Iterable
from dataclasses import dataclass

from relations_api.core.domain_types import LinkState


@dataclass(frozen=True)
class LinkPlan:
    """Minimal set of pair mutations needed to reach the requested state."""
    to_connect: frozenset[int]
    to_disconnect: frozenset[int]

    @property
    def is_noop(self) -> bool:
        return not self.to_connect and not self.to_disconnect


def resolve_pair(state: LinkState, attach: bool, detach: bool) -> LinkState:
    """Final state of one pair given the requested transitions."""
    if detach:
        return LinkState.UNLINKED
    if attach:
        return LinkState.LINKED
    return state


def plan_link_changes(
    current: Iterable[int],
    add: Iterable[int] | None = None,
    remove: Iterable[int] | None = None,
) -> LinkPlan:
    """Compute which pairs to connect and disconnect.

    Absent or empty sets are no-ops for their direction.
    """
    linked = set(current)
    add_ids = set(add or ())
    remove_ids = set(remove or ())

    to_connect: set[int] = set()
    to_disconnect: set[int] = set()
    for target_id in add_ids | remove_ids:
        before = LinkState.LINKED if target_id in linked else LinkState.UNLINKED
        after = resolve_pair(
            before, target_id in add_ids, target_id in remove_ids,
        )
        if before == after:
            continue
        if after == LinkState.LINKED:
            to_connect.add(target_id)
        else:
            to_disconnect.add(target_id)

    return LinkPlan(frozenset(to_connect), frozenset(to_disconnect))
