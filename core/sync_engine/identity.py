"""
Identity mapping for one reconciliation pass.

IdentityResolver maps local identifiers to canonical (remote) identifiers.
ReconciliationContext owns the resolver for the lifetime of a single pass;
nothing here is persisted, every pass re-derives its matches.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional


class IdentityResolver:
    """Local id -> canonical id. Never queried in reverse."""

    def __init__(self):
        self._mapping: Dict[str, str] = {}

    def register(self, local_id: str, canonical_id: str) -> None:
        # unconditional overwrite
        self._mapping[local_id] = canonical_id

    def resolve(self, local_id: str) -> Optional[str]:
        return self._mapping.get(local_id)

    def __contains__(self, local_id: object) -> bool:
        return local_id in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._mapping)


@dataclass
class ReconciliationContext:
    """State shared by the reconcilers during one pass."""
    today: date = field(default_factory=date.today)
    resolver: IdentityResolver = field(default_factory=IdentityResolver)
