"""Selector compilation: application selectors to route conditions.

An application input narrows the application stream by namespace,
container name and pod labels. ``compile_selector`` folds all of these
into one VRL condition for the ``route_application_logs`` branch of that
input, or reports that no condition is needed.

Clause order is fixed so output is deterministic: included namespaces
(declaration order), excluded namespaces, included containers, excluded
containers, then labels (``matchLabels`` sorted by key, followed by
``matchExpressions`` in declaration order with sorted values).
"""

from typing import NamedTuple, Optional

from logforward.generator.expressions import (
    ALWAYS_TRUE,
    K8S_CONTAINER_NAME,
    and_,
    eq,
    glob_match,
    label_field,
    match_label,
    match_namespace,
    neg,
    or_,
    paren,
)
from logforward.schemas.forwarder import (
    ApplicationSelector,
    LabelSelector,
    LabelSelectorRequirement,
    RateLimit,
)


class SelectorFilter(NamedTuple):
    """A compiled route condition; ``active`` is False when no filter is needed."""
    expression: str
    active: bool


def _none_of(clause: str) -> str:
    return neg(paren(clause))


def compile_label_requirement(requirement: LabelSelectorRequirement) -> str:
    """``In`` is any of the values, ``NotIn`` is none of them."""
    field = label_field(requirement.key)
    matches = or_(*(eq(field, value) for value in sorted(set(requirement.values))))
    if requirement.operator == "NotIn":
        return _none_of(matches)
    return matches


def compile_label_selector(selector: Optional[LabelSelector]) -> str:
    if selector is None:
        return ""
    labels = [
        match_label(key, selector.match_labels[key])
        for key in sorted(selector.match_labels)
    ]
    expressions = [compile_label_requirement(r) for r in selector.match_expressions]
    return and_(*labels, *expressions)


def compile_selector(selector: ApplicationSelector,
                     rate_limit: Optional[RateLimit] = None) -> SelectorFilter:
    """Compile an application selector into a route condition.

    Parameters
    ----------
    selector : ApplicationSelector
        Namespace, container and label constraints of one input
    rate_limit : RateLimit, optional
        The input's policy. When present and nothing else constrains the
        input, the condition is ``true`` so the route still has a branch
        for the throttle to read from.

    Returns
    -------
    SelectorFilter
        ``(expression, active)``; inactive filters have an empty expression
    """
    namespaces = or_(*(match_namespace(ns) for ns in selector.namespaces))
    excluded_namespaces = _none_of(
        or_(*(match_namespace(ns) for ns in selector.exclude_namespaces))
    )

    included_containers = excluded_containers = ""
    if selector.containers is not None:
        included_containers = or_(
            *(glob_match(K8S_CONTAINER_NAME, c) for c in selector.containers.include)
        )
        excluded_containers = _none_of(
            or_(*(glob_match(K8S_CONTAINER_NAME, c) for c in selector.containers.exclude))
        )

    labels = compile_label_selector(selector.selector)

    expression = and_(
        namespaces,
        excluded_namespaces,
        included_containers,
        excluded_containers,
        labels,
    )
    if expression:
        return SelectorFilter(expression, True)
    if rate_limit is not None:
        return SelectorFilter(ALWAYS_TRUE, True)
    return SelectorFilter("", False)


__all__ = [
    "SelectorFilter",
    "compile_selector",
    "compile_label_selector",
    "compile_label_requirement",
]
