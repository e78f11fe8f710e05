"""UserConfig: Forgiving, minimal user-facing generator options.

Read from the ``generator`` section of a forwarder file. Accepts both
uppercase and lowercase keys and flat aliases for the common settings
(e.g., METRICS_PORT -> metrics.port, MIN_TLS_VERSION -> tls.min_tls_version).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults.
"""

from typing import Optional, Any
from pydantic import Field, field_validator
from logforward.schemas.base import LogforwardBaseModel


class UserMetricsConfig(LogforwardBaseModel):
    """User-facing metrics config."""
    port: Optional[int] = None
    listen_ipv6: Optional[bool] = None


class UserTLSConfig(LogforwardBaseModel):
    """User-facing TLS profile config."""
    min_tls_version: Optional[str] = None
    ciphers: Optional[list[str]] = None
    trusted_ca_file: Optional[str] = None

    @field_validator("ciphers", mode="before")
    @classmethod
    def split_cipher_string(cls, v):
        """Accept a comma-separated cipher string."""
        if isinstance(v, str):
            return [c.strip() for c in v.split(",") if c.strip()]
        return v


class UserConfig(LogforwardBaseModel):
    """User-facing generator options.

    This config is converted to internal overrides during resolution.

    Usage
    -----
        user_cfg = UserConfig(METRICS_PORT=9090, LOG_LEVEL="debug")
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Flat aliases
    metrics_port: Optional[int] = Field(None, alias="METRICS_PORT")
    listen_ipv6: Optional[bool] = Field(None, alias="LISTEN_IPV6")
    secrets_mount_dir: Optional[str] = Field(None, alias="SECRETS_MOUNT_DIR")
    min_tls_version: Optional[str] = Field(None, alias="MIN_TLS_VERSION")
    trusted_ca_file: Optional[str] = Field(None, alias="TRUSTED_CA_FILE")
    throttle_window_secs: Optional[int] = Field(None, alias="THROTTLE_WINDOW_SECS")
    log_level: Optional[str] = Field(None, alias="LOG_LEVEL")

    # Nested overrides (advanced users)
    metrics: Optional[UserMetricsConfig] = None
    tls: Optional[UserTLSConfig] = None

    model_config = LogforwardBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Normalize level names to uppercase."""
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides: dict[str, Any] = {}

        metrics = {}
        if self.metrics_port is not None:
            metrics["port"] = self.metrics_port
        if self.listen_ipv6 is not None:
            metrics["listen_ipv6"] = self.listen_ipv6
        if self.metrics is not None:
            metrics.update(self.metrics.model_dump(exclude_none=True))
        if metrics:
            overrides["metrics"] = metrics

        if self.secrets_mount_dir is not None:
            overrides["secrets"] = {"mount_dir": self.secrets_mount_dir}

        tls = {}
        if self.min_tls_version is not None:
            tls["min_tls_version"] = self.min_tls_version
        if self.trusted_ca_file is not None:
            tls["trusted_ca_file"] = self.trusted_ca_file
        if self.tls is not None:
            tls.update(self.tls.model_dump(exclude_none=True))
        if tls:
            overrides["tls"] = tls

        if self.throttle_window_secs is not None:
            overrides["throttle"] = {"window_secs": self.throttle_window_secs}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
