"""Failure type for contract violations.

Contracts fail fast, loud, and once. All violations raise the same
exception type, allowing callers to handle generator bugs uniformly.
"""


class ContractViolation(RuntimeError):
    """Raised when the compiled element graph breaks one of its invariants.

    This indicates a bug in the generator's naming or ordering, not bad user
    input. It means the compiled configuration would be rejected by the
    collector.

    Key distinction:
    - ValueError: User/spec error (handled by Pydantic)
    - ContractViolation: Generator bug (programmer error)
    - Silent omission: Misconfigured policy or unknown output type
    """
    pass
