"""Helpers for inspecting compiled element lists in tests."""


def by_id(elements):
    """Index a compiled element list by component ID."""
    return {element.component_id: element for element in elements}


def ids(elements):
    """Component IDs in emission order."""
    return [element.component_id for element in elements]
