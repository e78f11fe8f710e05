"""Test config resolution and validation with Pydantic."""

import pytest
from pydantic import ValidationError

from logforward.schemas import CLIConfig, InternalConfig, ParamConfig, UserConfig
from logforward.schemas.resolve import deep_merge, resolve_config

pytestmark = pytest.mark.unit


class TestConfigResolution:
    """Test resolve_config() precedence and merging."""

    def test_resolve_config_all_defaults(self):
        """Resolving with no user/CLI overrides uses all ParamConfig defaults."""
        config = resolve_config(ParamConfig(), None, None)

        assert isinstance(config, InternalConfig)
        assert config.metrics.port == 24231
        assert config.metrics.listen_ipv6 is False
        assert config.secrets.fallback_name == "logcollector-token"
        assert config.tls.min_tls_version == "VersionTLS12"
        assert config.throttle.window_secs == 1
        assert config.logging.level == "INFO"

    def test_param_config_defaults_when_none(self):
        """A None ParamConfig means the expert defaults."""
        assert resolve_config() == resolve_config(ParamConfig(), None, None)

    def test_user_config_overrides_param_config(self):
        """UserConfig values override ParamConfig defaults."""
        user = UserConfig(metrics_port=9090)
        config = resolve_config(ParamConfig(), user, None)

        assert config.metrics.port == 9090

    def test_precedence_param_user_cli(self):
        """Full precedence: CLI > User > Param."""
        user = UserConfig(METRICS_PORT=9090, LOG_LEVEL="debug")
        cli = CLIConfig(metrics_port=9999)
        config = resolve_config(ParamConfig(), user, cli)

        assert config.metrics.port == 9999
        assert config.logging.level == "DEBUG"

    def test_empty_dicts_use_all_param_defaults(self):
        config = resolve_config(ParamConfig(), {}, {})
        assert config == resolve_config(ParamConfig(), None, None)

    def test_dict_inputs_are_validated(self):
        config = resolve_config({"metrics": {"port": 1234}}, {"LISTEN_IPV6": True}, None)
        assert config.metrics.port == 1234
        assert config.metrics.listen_ipv6 is True

    def test_internal_config_is_frozen(self, internal_config):
        with pytest.raises(ValidationError):
            internal_config.metrics = None

    def test_invalid_tls_version_rejected(self):
        """User values are validated when merged into InternalConfig."""
        with pytest.raises(ValidationError):
            resolve_config(ParamConfig(), UserConfig(MIN_TLS_VERSION="SSLv3"), None)

    def test_invalid_port_rejected(self):
        with pytest.raises(ValidationError):
            resolve_config(ParamConfig(), UserConfig(METRICS_PORT=70000), None)


class TestUserConfigAliases:
    """Test UserConfig flat aliases map correctly."""

    def test_flat_aliases(self, make_config):
        config = make_config(
            SECRETS_MOUNT_DIR="/secrets",
            TRUSTED_CA_FILE="/etc/pki/ca.crt",
            THROTTLE_WINDOW_SECS=5,
        )
        assert config.secrets.mount_dir == "/secrets"
        assert config.tls.trusted_ca_file == "/etc/pki/ca.crt"
        assert config.throttle.window_secs == 5

    def test_nested_overrides_win_over_flat(self):
        """Nested sections are applied after flat aliases."""
        user = UserConfig.model_validate({
            "METRICS_PORT": 9090,
            "metrics": {"port": 9191},
        })
        assert resolve_config(ParamConfig(), user, None).metrics.port == 9191

    def test_cipher_string_split(self):
        user = UserConfig.model_validate({"tls": {"ciphers": "A, B,,C"}})
        config = resolve_config(ParamConfig(), user, None)
        assert config.tls.ciphers == ["A", "B", "C"]

    def test_unknown_keys_ignored(self):
        """UserConfig is forgiving about unknown keys."""
        user = UserConfig.model_validate({"LEGACY_FLAG": 1})
        assert user.to_internal_overrides() == {}


class TestCLIConfig:
    """CLI overrides and their structure."""

    def test_cli_overrides_do_not_mutate_user(self):
        user = UserConfig.model_validate({"METRICS_PORT": 9090})
        cli = CLIConfig.model_validate({"metrics_port": 9999})

        internal = resolve_config(ParamConfig(), user, cli)

        assert internal.metrics.port == 9999
        assert user.metrics_port == 9090

    def test_cli_trusted_ca_file_keeps_user_tls_version(self):
        user = UserConfig(MIN_TLS_VERSION="VersionTLS13")
        cli = CLIConfig(trusted_ca_file="/ca.crt")
        config = resolve_config(ParamConfig(), user, cli)

        assert config.tls.trusted_ca_file == "/ca.crt"
        assert config.tls.min_tls_version == "VersionTLS13"

    def test_cli_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            CLIConfig.model_validate({"unknown_flag": "X"})

    def test_cli_rejects_bad_log_level(self):
        with pytest.raises(ValidationError):
            CLIConfig(log_level="LOUD")

    def test_empty_cli_has_no_overrides(self):
        assert CLIConfig().to_internal_overrides() == {}


class TestDeepMerge:

    def test_nested_merge(self):
        base = {"a": 1, "b": {"c": 2, "d": 3}}
        override = {"b": {"d": 4, "e": 5}, "f": 6}
        assert deep_merge(base, override) == {"a": 1, "b": {"c": 2, "d": 4, "e": 5}, "f": 6}

    def test_base_not_mutated(self):
        base = {"b": {"c": 2}}
        deep_merge(base, {"b": {"c": 3}})
        assert base == {"b": {"c": 2}}
