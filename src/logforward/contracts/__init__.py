"""Compiled graph contracts - fail-fast enforcement of generator invariants.

Contracts fail immediately and loudly when a compilation pass produces a
graph the collector would reject.

Key principle:
- Pydantic validates spec correctness
- Contracts validate generator correctness
- Builders handle per-destination edge cases
"""

from logforward.contracts.failure import ContractViolation
from logforward.contracts.base import require
from logforward.contracts.graph import assert_unique_component_ids, assert_acyclic

__all__ = [
    "ContractViolation",
    "require",
    "assert_unique_component_ids",
    "assert_acyclic",
]
