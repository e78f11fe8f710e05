"""Base Pydantic models with strict defaults for logforward schemas.

All schemas inherit from one of these bases to ensure consistent
validation behavior across the forwarder spec and the generator options.
"""

from pydantic import BaseModel, ConfigDict


class LogforwardBaseModel(BaseModel):
    """Base model for generator option schemas.

    Enforces strict validation:
    - No extra fields allowed
    - Validates assignments after initialization
    - Strips whitespace from strings
    """

    model_config = ConfigDict(
        extra='forbid',           # Reject unknown fields
        validate_assignment=True, # Validate on field mutation
        use_enum_values=True,     # Convert enums to values
        str_strip_whitespace=True,# Strip whitespace from strings
    )


class ForwarderBaseModel(LogforwardBaseModel):
    """Base model for the forwarder specification.

    The specification is read-only input to a compilation pass, so these
    models are frozen. Both snake_case field names and the forwarder API's
    camelCase aliases are accepted.
    """

    model_config = ConfigDict(
        extra='forbid',
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )
