"""End-to-end compilation and rendering."""

import json

import pytest
from pydantic import ValidationError

from logforward.generator import CollectorConfigGenerator, Remap, Route, Sink, Throttle
from logforward.generator.elements import render_config
from logforward.generator.outputs import ADD_NODENAME_TO_METRIC, PROMETHEUS_OUTPUT
from logforward.schemas import Secret

from tests.helpers.graph import by_id, ids

pytestmark = [pytest.mark.integration, pytest.mark.generator]


@pytest.fixture
def full_spec(make_spec):
    return make_spec(
        inputs=[
            {
                "name": "payments",
                "application": {
                    "namespaces": ["payments"],
                    "selector": {"matchLabels": {"tier": "backend"}},
                    "containerLimit": {"maxRecordsPerSecond": 100},
                },
            },
            {"name": "frontend", "application": {"namespaces": ["web-*"]}},
            {"name": "webhook", "receiver": {"type": "http", "http": {}}},
        ],
        outputs=[
            {"name": "es-main", "type": "elasticsearch", "url": "https://es:9200"},
            {
                "name": "archive", "type": "kafka", "url": "tls://kafka:9093/logs",
                "rateLimit": {"maxRecordsPerSecond": 5000},
            },
            {"name": "legacy", "type": "fluentdForward", "url": "tcp://fluentd:24224"},
        ],
        pipelines=[
            {"name": "apps", "inputRefs": ["payments", "frontend"], "outputRefs": ["es-main"]},
            {
                "name": "everything",
                "inputRefs": ["infrastructure", "audit", "webhook"],
                "outputRefs": ["archive", "legacy"],
                "labels": {"cluster": "east"},
            },
        ],
    )


class TestGenerate:

    def test_emission_order(self, generator, full_spec):
        elements = generator.generate(full_spec, {})

        assert ids(elements) == [
            "route_container_logs",
            "application",
            "infrastructure",
            "audit",
            "route_application_logs",
            "source_throttle_payments",
            "webhook_input",
            "apps",
            "everything",
            "es_main_add_es_index",
            "es_main",
            "sink_throttle_archive",
            "archive",
            ADD_NODENAME_TO_METRIC,
            PROMETHEUS_OUTPUT,
        ]

    def test_pipeline_inputs(self, generator, full_spec):
        elements = by_id(generator.generate(full_spec))

        assert elements["apps"].inputs == (
            "route_application_logs.frontend", "source_throttle_payments",
        )
        assert elements["everything"].inputs == ("audit", "infrastructure", "webhook_input")
        assert elements["archive"].inputs == ("sink_throttle_archive",)

    def test_element_kinds(self, generator, full_spec):
        elements = by_id(generator.generate(full_spec))

        assert isinstance(elements["route_application_logs"], Route)
        assert isinstance(elements["source_throttle_payments"], Throttle)
        assert isinstance(elements["apps"], Remap)
        assert isinstance(elements["archive"], Sink)

    def test_empty_spec(self, generator, make_spec):
        """An empty spec compiles to exactly the metrics pipeline."""
        assert ids(generator.generate(make_spec())) == [ADD_NODENAME_TO_METRIC, PROMETHEUS_OUTPUT]

    def test_secrets_flow_to_builders(self, generator, full_spec):
        secrets = {"es-main": Secret(name="es-main", data={"username": "u", "password": "p"})}
        elements = by_id(generator.generate(full_spec, secrets))
        assert elements["es_main"].options["auth"]["user"] == "u"
        assert "sasl" not in elements["archive"].options


class TestNameCollisions:
    """Names that would compile to the same component ID never reach the generator."""

    def test_pipeline_named_like_output(self, make_spec):
        with pytest.raises(ValidationError, match="component id 'web'"):
            make_spec(
                outputs=[{"name": "web", "type": "http", "url": "http://x"}],
                pipelines=[{"name": "web", "inputRefs": ["audit"], "outputRefs": ["web"]}],
            )

    def test_pipeline_named_like_log_type(self, make_spec):
        with pytest.raises(ValidationError, match="component id 'audit'"):
            make_spec(pipelines=[{"name": "audit", "inputRefs": ["audit"]}])

    def test_accepted_spec_compiles_to_unique_ids(self, generator, make_spec):
        """Every spec the schema accepts passes the graph contracts."""
        spec = make_spec(
            inputs=[{"name": "web", "application": {"namespaces": ["web"]}}],
            outputs=[
                {"name": "My Out", "type": "elasticsearch", "url": "http://es:9200",
                 "rateLimit": {"maxRecordsPerSecond": 5}},
                {"name": "sink", "type": "syslog", "url": "udp://syslog:514"},
            ],
            pipelines=[{"name": "web", "inputRefs": ["web"], "outputRefs": ["My Out", "sink"]}],
        )
        elements = generator.generate(spec)
        assert len(ids(elements)) == len(set(ids(elements)))
        assert {"web", "my_out", "my_out_add_es_index", "sink_throttle_my_out",
                "sink", "sink_json"} <= set(ids(elements))


class TestRender:

    def test_render_is_deterministic(self, generator, full_spec):
        """Compiling an unchanged spec twice gives byte-identical output."""
        assert generator.render(full_spec) == generator.render(full_spec)

    def test_fresh_generators_agree(self, internal_config, full_spec):
        first = CollectorConfigGenerator(internal_config).render(full_spec)
        second = CollectorConfigGenerator(internal_config).render(full_spec)
        assert first == second

    def test_rendered_sections(self, generator, full_spec):
        document = json.loads(generator.render(full_spec))

        assert set(document) == {"transforms", "sinks"}
        assert set(document["sinks"]) == {"es_main", "archive", PROMETHEUS_OUTPUT}
        assert document["transforms"]["source_throttle_payments"] == {
            "type": "throttle",
            "inputs": ["route_application_logs.payments"],
            "threshold": 100,
            "window_secs": 1,
            "key_field": "{{ file }}",
        }
        assert document["transforms"]["everything"]["source"] == \
            '.openshift.labels = {"cluster": "east"}'

    def test_route_rendering(self):
        text = render_config([
            Route(component_id="r", inputs=("src",), routes={"b": "x", "a": "y"}),
        ])
        document = json.loads(text)
        assert document == {
            "transforms": {"r": {"type": "route", "inputs": ["src"], "route": {"a": "y", "b": "x"}}},
            "sinks": {},
        }
        assert text.endswith("\n")

    def test_throttle_rejects_zero_threshold(self):
        with pytest.raises(ValueError):
            Throttle(component_id="t", threshold=0)
