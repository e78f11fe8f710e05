"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all contracts.
"""

from logforward.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a compiled graph contract.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation (for debugging).

    Raises
    ------
    ContractViolation
        If condition is False. This indicates a bug in generator logic.

    Examples
    --------
    >>> require(len(ids) == len(set(ids)), "Graph contract: duplicate component id")
    """
    if not condition:
        raise ContractViolation(message)
