from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Tuple

from ..api.helpers.links import last_path_segment


def policy_rule_key(rule_id: str) -> str:
    """
    Comparable key for a policy rule reference.

    Notifications reference rules by URL while callers usually know the bare id,
    so both ``.../api/policy-rules/abc`` and ``abc`` map to ``abc``.
    """
    return last_path_segment(rule_id.strip())


@dataclass(frozen=True)
class PolicyNotificationFilter:
    """Allow-set of policy rules a caller cares about. Empty means every rule passes."""
    rule_ids: FrozenSet[str] = frozenset()

    @classmethod
    def of(cls, rule_ids: Optional[Iterable[str]]) -> "PolicyNotificationFilter":
        return cls(frozenset(r for r in (rule_ids or ()) if r and r.strip()))

    @property
    def is_empty(self) -> bool:
        return not self.rule_ids

    def passes(self, rule_ids: Iterable[str]) -> FrozenSet[str]:
        """Return the subset of *rule_ids* allowed by this filter."""
        candidates = frozenset(rule_ids)
        if self.is_empty:
            return candidates
        allowed = {policy_rule_key(r) for r in self.rule_ids}
        return frozenset(r for r in candidates if policy_rule_key(r) in allowed)

    def passing_in_order(self, rule_ids: Iterable[str]) -> Tuple[str, ...]:
        """Like ``passes`` but keeps the input order and drops duplicates."""
        ordered = list(rule_ids)
        passing = self.passes(ordered)
        seen = set()
        result = []
        for rule_id in ordered:
            if rule_id in passing and rule_id not in seen:
                seen.add(rule_id)
                result.append(rule_id)
        return tuple(result)
