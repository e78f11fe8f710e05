"""Root-level pytest fixtures for the logforward test suite.

Provides shared configuration fixtures following Pydantic-based architecture.
All tests must use these fixtures instead of creating raw dict configs.
"""

import pytest

from logforward.generator import CollectorConfigGenerator
from logforward.schemas import (
    ClusterLogForwarderSpec,
    ParamConfig,
    Secret,
    UserConfig,
    resolve_config,
)


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults.

    Use this as the base for all test configs. Override specific values
    using make_config or by creating custom UserConfig instances.
    """
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated generator options (no overrides).

    Use this when tests don't care about specific option values and just
    need a valid InternalConfig to pass to builders.
    """
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_custom_port(make_config):
    ...     config = make_config(metrics_port=9090)
    ...     assert config.metrics.port == 9090
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Forwarder Spec Fixtures
# =============================================================================

@pytest.fixture
def make_spec():
    """Factory fixture building a ClusterLogForwarderSpec from API-shaped dicts."""
    def _make(inputs=None, outputs=None, pipelines=None):
        return ClusterLogForwarderSpec.model_validate({
            "inputs": inputs or [],
            "outputs": outputs or [],
            "pipelines": pipelines or [],
        })

    return _make


@pytest.fixture
def generator(internal_config):
    """Generator with default options and every destination family."""
    return CollectorConfigGenerator(internal_config)


@pytest.fixture
def basic_secret():
    """Secret carrying username/password and client TLS material."""
    return Secret(
        name="es-secret",
        data={
            "username": "elastic",
            "password": "changeme",
            "tls.crt": "CRT",
            "tls.key": "KEY",
            "ca-bundle.crt": "CA",
        },
    )
