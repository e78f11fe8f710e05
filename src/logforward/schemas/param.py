"""ParamConfig: Expert defaults for the collector config generator.

This module defines the complete default configuration. ALL generator
options must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field
from logforward.schemas.base import LogforwardBaseModel


# Mozilla "intermediate" profile, the cluster default when no profile is fetched
DEFAULT_CIPHERS = [
    "TLS_AES_128_GCM_SHA256",
    "TLS_AES_256_GCM_SHA384",
    "TLS_CHACHA20_POLY1305_SHA256",
    "ECDHE-ECDSA-AES128-GCM-SHA256",
    "ECDHE-RSA-AES128-GCM-SHA256",
    "ECDHE-ECDSA-AES256-GCM-SHA384",
    "ECDHE-RSA-AES256-GCM-SHA384",
    "ECDHE-ECDSA-CHACHA20-POLY1305",
    "ECDHE-RSA-CHACHA20-POLY1305",
    "DHE-RSA-AES128-GCM-SHA256",
    "DHE-RSA-AES256-GCM-SHA384",
]

TLSVersion = Literal["VersionTLS10", "VersionTLS11", "VersionTLS12", "VersionTLS13"]


# =============================================================================
# Nested Configuration Models
# =============================================================================

class MetricsConfig(LogforwardBaseModel):
    """Collector self-metrics exporter."""
    port: int = Field(24231, ge=1, le=65535, description="Prometheus exporter listen port")
    listen_ipv6: bool = Field(False, description="Listen on [::] instead of 0.0.0.0")


class SecretsConfig(LogforwardBaseModel):
    """Where output secrets are mounted in the collector pod."""
    mount_dir: str = "/var/run/ocp-collector/secrets"
    fallback_name: str = Field(
        "logcollector-token",
        description="Secret used by outputs that have no secret of their own",
    )


class TLSConfig(LogforwardBaseModel):
    """Cluster TLS profile applied to outputs with TLS endpoints."""
    min_tls_version: TLSVersion = "VersionTLS12"
    ciphers: list[str] = Field(default_factory=lambda: list(DEFAULT_CIPHERS))
    trusted_ca_file: Optional[str] = None


class ThrottleConfig(LogforwardBaseModel):
    """Throttle component settings."""
    window_secs: int = Field(1, ge=1)


class LoggingConfig(LogforwardBaseModel):
    """Generator logging."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(LogforwardBaseModel):
    """Expert defaults for every generator option.

    Usage
    -----
        param = ParamConfig()
        config = resolve_config(param, user_cfg, cli_cfg)
    """

    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    secrets: SecretsConfig = Field(default_factory=SecretsConfig)
    tls: TLSConfig = Field(default_factory=TLSConfig)
    throttle: ThrottleConfig = Field(default_factory=ThrottleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
