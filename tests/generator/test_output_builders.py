"""Test the per-family destination builders."""

import pytest

from logforward.generator import Remap, Sink
from logforward.generator.output import (
    cloudwatch,
    elasticsearch,
    gcl,
    http,
    kafka,
    loki,
    splunk,
    syslog,
)
from logforward.generator.output.common import format_component_id, http_auth, tls_config
from logforward.schemas import Secret
from logforward.schemas.forwarder import output_adapter

pytestmark = [pytest.mark.unit, pytest.mark.generator]

SECRETS_DIR = "/var/run/ocp-collector/secrets"


def make_output(**data):
    return output_adapter.validate_python(data)


class TestCommon:

    @pytest.mark.parametrize("name,expected", [
        ("es", "es"),
        ("My.Output-1", "my_output_1"),
        ("a b/c", "a_b_c"),
    ])
    def test_format_component_id(self, name, expected):
        assert format_component_id(name) == expected

    def test_basic_auth_preferred_over_bearer(self):
        secret = Secret(name="s", data={"username": "u", "password": "p", "token": "t"})
        assert http_auth(secret) == {"strategy": "basic", "user": "u", "password": "p"}

    def test_no_auth_without_secret(self):
        assert http_auth(None) is None

    def test_tls_only_for_tls_schemes(self, internal_config):
        plain = make_output(name="h", type="http", url="http://x")
        assert tls_config(plain, None, internal_config) is None

    def test_tls_from_secret(self, internal_config, basic_secret):
        output = make_output(name="h", type="http", url="https://x")
        tls = tls_config(output, basic_secret, internal_config)

        assert tls["min_tls_version"] == "VersionTLS12"
        assert tls["ciphersuites"] == ",".join(internal_config.tls.ciphers)
        assert tls["crt_file"] == f"{SECRETS_DIR}/es-secret/tls.crt"
        assert tls["key_file"] == f"{SECRETS_DIR}/es-secret/tls.key"
        assert tls["ca_file"] == f"{SECRETS_DIR}/es-secret/ca-bundle.crt"
        assert "enabled" not in tls

    def test_trusted_ca_fallback(self, make_config):
        config = make_config(TRUSTED_CA_FILE="/etc/pki/ca.crt")
        output = make_output(name="h", type="http", url="https://x")
        assert tls_config(output, None, config)["ca_file"] == "/etc/pki/ca.crt"

    def test_insecure_skip_verify(self, internal_config):
        output = make_output(name="h", type="http", url="https://x",
                             tls={"insecureSkipVerify": True})
        tls = tls_config(output, None, internal_config, enableable=True)

        assert tls["enabled"] is True
        assert tls["verify_certificate"] is False
        assert tls["verify_hostname"] is False


class TestElasticsearch:

    def test_remap_then_sink(self, internal_config, basic_secret):
        output = make_output(name="ES-Main", type="elasticsearch", url="https://es:9200")
        remap, sink = elasticsearch.conf(output, ["p"], basic_secret, internal_config)

        assert isinstance(remap, Remap)
        assert remap.component_id == "es_main_add_es_index"
        assert remap.inputs == ("p",)
        assert '.write_index = index + "-write"' in remap.vrl
        assert "._id = encode_base64(uuid_v4())" in remap.vrl

        assert sink.component_id == "es_main"
        assert sink.inputs == ("es_main_add_es_index",)
        assert sink.sink_type == "elasticsearch"
        assert sink.options["endpoints"] == ["https://es:9200"]
        assert sink.options["api_version"] == "v8"
        assert sink.options["auth"]["strategy"] == "basic"
        assert "tls" in sink.options

    def test_fixed_index_and_version(self, internal_config):
        output = make_output(name="es", type="elasticsearch", url="http://es:9200",
                             elasticsearch={"version": 6, "index": "my-index"})
        remap, sink = elasticsearch.conf(output, ["p"], None, internal_config)

        assert remap.vrl.startswith('.write_index = "my-index"')
        assert sink.options["api_version"] == "v6"
        assert "auth" not in sink.options
        assert "tls" not in sink.options


class TestKafka:

    def test_brokers_topic_and_sasl(self, internal_config):
        output = make_output(name="k", type="kafka", url="tls://broker-0:9093/logs",
                             kafka={"brokers": ["tls://broker-1:9093", "broker-0:9093"]})
        secret = Secret(name="k", data={"username": "u", "password": "p"})
        (sink,) = kafka.conf(output, ["p"], secret, internal_config)

        assert sink.sink_type == "kafka"
        assert sink.options["bootstrap_servers"] == "broker-0:9093,broker-1:9093"
        assert sink.options["topic"] == "logs"
        assert sink.options["sasl"] == {
            "enabled": True, "mechanism": "PLAIN", "username": "u", "password": "p",
        }
        assert sink.options["tls"]["enabled"] is True

    def test_default_topic(self, internal_config):
        output = make_output(name="k", type="kafka", kafka={"brokers": ["b:9092"]})
        (sink,) = kafka.conf(output, [], None, internal_config)

        assert sink.options["topic"] == "topic"
        assert "sasl" not in sink.options


class TestLoki:

    def test_default_labels_and_tenant(self, internal_config):
        output = make_output(name="loki", type="loki", url="http://loki:3100",
                             loki={"tenantKey": "kubernetes.namespace_name"})
        (sink,) = loki.conf(output, ["p"], None, internal_config)

        assert sink.options["labels"] == {
            "kubernetes_host": "{{kubernetes.host}}",
            "kubernetes_namespace_name": "{{kubernetes.namespace_name}}",
            "kubernetes_pod_name": "{{kubernetes.pod_name}}",
            "log_type": "{{log_type}}",
        }
        assert sink.options["tenant_id"] == "{{kubernetes.namespace_name}}"
        assert sink.options["endpoint"] == "http://loki:3100"

    def test_custom_label_keys(self, internal_config):
        output = make_output(name="loki", type="loki", url="http://loki:3100",
                             loki={"labelKeys": ["kubernetes.labels.app"]})
        (sink,) = loki.conf(output, [], None, internal_config)
        assert sink.options["labels"] == {"kubernetes_labels_app": "{{kubernetes.labels.app}}"}


class TestCloudwatch:

    def test_group_by_namespace_with_prefix(self, internal_config):
        output = make_output(name="cw", type="cloudwatch",
                             cloudwatch={"region": "us-east-1", "groupBy": "namespaceName",
                                         "groupPrefix": "prod"})
        secret = Secret(name="cw", data={"aws_access_key_id": "AK", "aws_secret_access_key": "SK"})
        remap, sink = cloudwatch.conf(output, ["p"], secret, internal_config)

        assert remap.component_id == "cw_normalize_group_and_streams"
        assert '( "prod." + .kubernetes.namespace_name ) ?? "application"' in remap.vrl
        assert '.group_name = "prod.audit"' in remap.vrl
        assert sink.sink_type == "aws_cloudwatch_logs"
        assert sink.options["region"] == "us-east-1"
        assert sink.options["auth"] == {"access_key_id": "AK", "secret_access_key": "SK"}
        assert "endpoint" not in sink.options

    def test_group_by_log_type(self, internal_config):
        output = make_output(name="cw", type="cloudwatch", url="https://localstack:4566",
                             cloudwatch={"region": "eu-west-1"})
        remap, sink = cloudwatch.conf(output, [], None, internal_config)

        assert '( "" + "application" ) ?? "application"' in remap.vrl
        assert sink.options["endpoint"] == "https://localstack:4566"


class TestGoogleCloudLogging:

    def test_project_and_credentials(self, internal_config):
        output = make_output(name="gcl", type="googleCloudLogging",
                             googleCloudLogging={"projectId": "proj", "logId": "app-logs"})
        secret = Secret(name="gcl-secret", data={"google-application-credentials.json": "{}"})
        (sink,) = gcl.conf(output, ["p"], secret, internal_config)

        assert sink.sink_type == "gcp_stackdriver_logs"
        assert sink.options["project_id"] == "proj"
        assert sink.options["log_id"] == "app-logs"
        assert "folder_id" not in sink.options
        assert sink.options["credentials_path"] == \
            f"{SECRETS_DIR}/gcl-secret/google-application-credentials.json"


class TestSplunk:

    def test_token_and_index_key(self, internal_config):
        output = make_output(name="splunk", type="splunk", url="https://splunk:8088",
                             splunk={"indexKey": "kubernetes.namespace_name"})
        secret = Secret(name="splunk", data={"hecToken": "hec"})
        (sink,) = splunk.conf(output, ["p"], secret, internal_config)

        assert sink.sink_type == "splunk_hec_logs"
        assert sink.options["default_token"] == "hec"
        assert sink.options["index"] == "{{ kubernetes.namespace_name }}"
        assert "tls" in sink.options

    def test_index_name(self, internal_config):
        output = make_output(name="splunk", type="splunk", url="http://splunk:8088",
                             splunk={"indexName": "main"})
        (sink,) = splunk.conf(output, [], None, internal_config)

        assert sink.options["index"] == "main"
        assert "default_token" not in sink.options


class TestHttp:

    def test_method_headers_and_timeout(self, internal_config):
        output = make_output(name="h", type="http", url="http://x",
                             http={"method": "put", "headers": {"b": "2", "a": "1"}, "timeout": 30})
        (sink,) = http.conf(output, ["p"], None, internal_config)

        assert sink.options["uri"] == "http://x"
        assert sink.options["method"] == "put"
        assert sink.options["request"] == {"timeout_secs": 30, "headers": {"a": "1", "b": "2"}}
        assert list(sink.options["request"]["headers"]) == ["a", "b"]


class TestSyslog:

    def test_rfc5424_over_udp(self, internal_config):
        output = make_output(name="rsyslog", type="syslog", url="udp://syslog:514",
                             syslog={"facility": "local0", "severity": "error", "appName": "app"})
        remap, sink = syslog.conf(output, ["p"], None, internal_config)

        assert remap.component_id == "rsyslog_json"
        assert '"<131>1 "' in remap.vrl
        assert '"app - - -"' in remap.vrl
        assert isinstance(sink, Sink)
        assert sink.sink_type == "socket"
        assert sink.inputs == ("rsyslog_json",)
        assert sink.options["mode"] == "udp"
        assert sink.options["address"] == "syslog:514"
        assert "framing" not in sink.options

    def test_rfc3164_over_tls(self, internal_config):
        output = make_output(name="rsyslog", type="syslog", url="tls://syslog:6514",
                             syslog={"rfc": "RFC3164", "tag": "mytag", "addLogSource": True})
        remap, sink = syslog.conf(output, [], None, internal_config)

        assert '"mytag"' in remap.vrl
        assert ".log_source" in remap.vrl
        assert "<14>" in remap.vrl
        assert sink.options["mode"] == "tcp"
        assert sink.options["framing"] == {"method": "newline_delimited"}
        assert sink.options["tls"]["enabled"] is True
