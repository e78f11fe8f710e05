"""Compiled graph contract.

Enforces the guarantees the collector needs before it will load a
configuration: every component ID is unique and every element reads only
from a raw source or from an element emitted before it.
"""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from logforward.contracts.base import require

if TYPE_CHECKING:
    from logforward.generator.elements import Element


def assert_unique_component_ids(elements: Sequence["Element"]) -> None:
    """Enforce globally unique component IDs.

    Raises
    ------
    ContractViolation
        If two elements claim the same component ID
    """
    seen = set()
    for element in elements:
        require(
            element.component_id not in seen,
            f"Graph contract violated: duplicate component id '{element.component_id}'"
        )
        seen.add(element.component_id)


def assert_acyclic(elements: Sequence["Element"], sources: Iterable[str]) -> None:
    """Enforce that inputs only reference raw sources or earlier elements.

    A route element publishes ``<component_id>.<branch>`` outputs, which
    later elements may read from.

    Parameters
    ----------
    elements : sequence of Element
        Compiled elements in emission order
    sources : iterable of str
        Raw source names provided by the collector's source section

    Raises
    ------
    ContractViolation
        If an element reads from an unknown or later component
    """
    available = set(sources)
    for element in elements:
        for upstream in element.inputs:
            require(
                upstream in available,
                f"Graph contract violated: '{element.component_id}' reads from "
                f"'{upstream}' which is not a source or an earlier component"
            )
        available.update(element.outputs())
