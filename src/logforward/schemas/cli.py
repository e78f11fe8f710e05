"""CLIConfig: Command-line operational overrides.

Minimal configuration for settings that commonly change between runs:
verbosity, metrics listen address and the trusted CA bundle path.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from logforward.schemas.base import LogforwardBaseModel


class CLIConfig(LogforwardBaseModel):
    """Command-line configuration overrides.

    Highest priority in config resolution.
    """

    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    metrics_port: Optional[int] = None
    listen_ipv6: Optional[bool] = None
    trusted_ca_file: Optional[str] = None

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        metrics = {}
        if self.metrics_port is not None:
            metrics["port"] = self.metrics_port
        if self.listen_ipv6 is not None:
            metrics["listen_ipv6"] = self.listen_ipv6
        if metrics:
            overrides["metrics"] = metrics

        if self.trusted_ca_file is not None:
            overrides["tls"] = {"trusted_ca_file": self.trusted_ca_file}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
