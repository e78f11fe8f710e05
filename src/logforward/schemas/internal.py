"""InternalConfig: Authoritative generator configuration.

This is the ONLY options schema that generator code sees. It is fully
validated, normalized and frozen; no fallback defaults are applied by
runtime code.
"""

from typing import Literal, Optional
from pydantic import ConfigDict, Field
from logforward.schemas.base import LogforwardBaseModel
from logforward.schemas.param import TLSVersion


class InternalMetricsConfig(LogforwardBaseModel):
    """Runtime metrics exporter configuration."""
    port: int = Field(ge=1, le=65535)
    listen_ipv6: bool


class InternalSecretsConfig(LogforwardBaseModel):
    """Runtime secret mount configuration."""
    mount_dir: str
    fallback_name: str


class InternalTLSConfig(LogforwardBaseModel):
    """Runtime TLS profile."""
    min_tls_version: TLSVersion
    ciphers: list[str]
    trusted_ca_file: Optional[str]


class InternalThrottleConfig(LogforwardBaseModel):
    """Runtime throttle configuration."""
    window_secs: int = Field(ge=1)


class InternalLoggingConfig(LogforwardBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class InternalConfig(LogforwardBaseModel):
    """Authoritative generator configuration.

    Generator modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.port = config.metrics.port  # NOT .get()
    """

    metrics: InternalMetricsConfig
    secrets: InternalSecretsConfig
    tls: InternalTLSConfig
    throttle: InternalThrottleConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
