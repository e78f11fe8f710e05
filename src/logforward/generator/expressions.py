"""Boolean match expressions over structured field paths.

Builds the VRL condition text used by route branches. All functions are
pure string builders; callers keep operand order stable so that output is
deterministic.

Empty operands
--------------
The empty string means "no constraint". ``and_`` and ``or_`` drop empty
operands, return a lone remaining operand unchanged, and return ``""``
when nothing remains, so an empty clause is absorbed by whatever
expression encloses it. ``neg`` and ``paren`` keep ``""`` empty. A caller
that ends up with ``""`` at the top level has no filter to apply.

Examples
--------
>>> or_(eq(".a", "x"), eq(".a", "y"))
'(.a == "x") || (.a == "y")'
>>> and_(or_(eq(".a", "x")), and_())
'.a == "x"'
"""

import json
import re

K8S_NAMESPACE_NAME = ".kubernetes.namespace_name"
K8S_CONTAINER_NAME = ".kubernetes.container_name"
K8S_LABEL_KEY_EXPR = ".kubernetes.labels.{}"

ALWAYS_TRUE = "true"


def quote(value: str) -> str:
    """Double-quote ``value`` as a VRL string literal."""
    return json.dumps(value)


def eq(field: str, value: str) -> str:
    return f"{field} == {quote(value)}"


def starts_with(field: str, prefix: str) -> str:
    return f"starts_with!({field},{quote(prefix)})"


def glob_match(field: str, pattern: str) -> str:
    """Match ``field`` against a glob where ``*`` is the only wildcard.

    Literal patterns compile to a plain equality.
    """
    if "*" not in pattern:
        return eq(field, pattern)
    regex = ".*".join(re.escape(part) for part in pattern.split("*"))
    return f"match!({field}, r'^{regex}$')"


def paren(expr: str) -> str:
    if not expr:
        return ""
    return f"({expr})"


def neg(expr: str) -> str:
    if not expr:
        return ""
    return f"!{expr}"


def _join(operator: str, exprs) -> str:
    operands = [e for e in exprs if e]
    if not operands:
        return ""
    if len(operands) == 1:
        return operands[0]
    return f" {operator} ".join(paren(e) for e in operands)


def and_(*exprs: str) -> str:
    return _join("&&", exprs)


def or_(*exprs: str) -> str:
    return _join("||", exprs)


def label_field(key: str) -> str:
    """Field path of one pod label, quoted so keys with dots and slashes survive."""
    return K8S_LABEL_KEY_EXPR.format(quote(key))


def match_namespace(namespace: str) -> str:
    return glob_match(K8S_NAMESPACE_NAME, namespace)


def match_label(key: str, value: str) -> str:
    return eq(label_field(key), value)
