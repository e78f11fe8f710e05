"""Output stage: one destination per declared output, then collector metrics.

For every output, in declaration order:

1. Resolve the credential: the output's own secret, else the process-wide
   collector token, else None.
2. Resolve upstream pipelines from the output -> pipelines index.
3. Wrap the pipelines in ``sink_throttle_<name>`` when the output has a
   positive rate limit.
4. Suppress the output entirely when its rate limit is not positive.
5. Dispatch to the builder registered for the output type; unknown types
   emit nothing.

The metrics remap and the Prometheus exporter sink always close the list.
"""

import logging
from collections import defaultdict
from collections.abc import Mapping
from typing import Optional, Sequence

from logforward.generator.elements import Element, Remap, Sink
from logforward.generator.normalize import new_throttle
from logforward.generator.output.registry import BuilderRegistry, default_registry
from logforward.generator.sources import INTERNAL_METRICS
from logforward.schemas.forwarder import BaseOutput, ClusterLogForwarderSpec
from logforward.schemas.ids import (
    ADD_NODENAME_TO_METRIC,
    PROMETHEUS_OUTPUT,
    USER_DEFINED_SINK_THROTTLE,
    format_component_id,
)
from logforward.schemas.internal import InternalConfig
from logforward.schemas.secret import Secret

logger = logging.getLogger(__name__)

ADD_NODENAME_VRL = '.tags.hostname = get_env_var!("VECTOR_SELF_NODE_NAME")'

METRICS_TLS_DIR = "/etc/collector/metrics"


def output_from_pipelines(spec: ClusterLogForwarderSpec) -> dict[str, list[str]]:
    """Inverse index: output name -> sorted names of the pipelines feeding it."""
    index: dict[str, set[str]] = defaultdict(set)
    for pipeline in spec.pipelines:
        for ref in pipeline.output_refs:
            index[ref].add(pipeline.name)
    return {name: sorted(pipelines) for name, pipelines in index.items()}


def resolve_secret(output: BaseOutput, secrets: Mapping[str, Secret],
                   fallback_name: str) -> Optional[Secret]:
    """The output's own secret, else the fallback collector token, else None."""
    secret = secrets.get(output.name)
    if secret is not None:
        logger.debug("Using secret configured in output: %s", output.name)
        return secret
    secret = secrets.get(fallback_name)
    if secret is not None:
        logger.debug("Using secret configured in %s", fallback_name)
    else:
        logger.debug("No Secret found in %s", fallback_name)
    return secret


def sink_throttle_id(output: BaseOutput) -> str:
    """Throttle ID, formatted like the sink it feeds."""
    return USER_DEFINED_SINK_THROTTLE.format(format_component_id(output.name))


def add_throttle_for_sink(output: BaseOutput, inputs: Sequence[str],
                          window_secs: int = 1) -> list[Element]:
    return new_throttle(
        sink_throttle_id(output),
        inputs,
        output.max_records_per_second(),
        None,
        window_secs,
    )


def listen_address(config: InternalConfig) -> str:
    """All local interfaces on the metrics port."""
    host = "[::]" if config.metrics.listen_ipv6 else "0.0.0.0"
    return f"{host}:{config.metrics.port}"


def add_nodename_to_metric(component_id: str, inputs: Sequence[str]) -> Element:
    return Remap(
        component_id=component_id,
        desc="Add node name to collector metrics",
        inputs=tuple(inputs),
        vrl=ADD_NODENAME_VRL,
    )


def prometheus_output(component_id: str, inputs: Sequence[str],
                      config: InternalConfig) -> Element:
    return Sink(
        component_id=component_id,
        inputs=tuple(inputs),
        sink_type="prometheus_exporter",
        options={
            "address": listen_address(config),
            "default_namespace": "collector",
            "tls": {
                "enabled": True,
                "key_file": f"{METRICS_TLS_DIR}/tls.key",
                "crt_file": f"{METRICS_TLS_DIR}/tls.crt",
                "min_tls_version": config.tls.min_tls_version,
                "ciphersuites": ",".join(config.tls.ciphers),
            },
        },
    )


def outputs(spec: ClusterLogForwarderSpec, secrets: Mapping[str, Secret],
            config: InternalConfig,
            registry: Optional[BuilderRegistry] = None) -> list[Element]:
    """Compile the output stage of ``spec``.

    Parameters
    ----------
    spec : ClusterLogForwarderSpec
        Forwarder specification
    secrets : Mapping[str, Secret]
        Credentials keyed by output name, plus the fallback collector token
    config : InternalConfig
        Generator options
    registry : BuilderRegistry, optional
        Destination builders (``default_registry()`` if None)

    Returns
    -------
    list of Element
        Throttles and destination elements, followed by the metrics pipeline
    """
    if registry is None:
        registry = default_registry()
    elements: list[Element] = []
    ofp = output_from_pipelines(spec)

    for output in spec.outputs:
        secret = resolve_secret(output, secrets, config.secrets.fallback_name)

        inputs = list(ofp.get(output.name, []))
        if not inputs:
            logger.debug("Output %s is not referenced by any pipeline", output.name)

        if output.has_policy() and output.max_records_per_second() <= 0:
            logger.debug("Suppressing output %s: rate limit threshold %d is not positive",
                         output.name, output.max_records_per_second())
            continue

        if output.has_policy():
            elements.extend(add_throttle_for_sink(output, inputs, config.throttle.window_secs))
            inputs = [sink_throttle_id(output)]

        builder = registry.get(output.type)
        if builder is None:
            logger.warning("Skipping output %s: unsupported output type %r",
                           output.name, output.type)
            continue
        elements.extend(builder(output, inputs, secret, config))

    elements.append(add_nodename_to_metric(ADD_NODENAME_TO_METRIC, [INTERNAL_METRICS]))
    elements.append(prometheus_output(PROMETHEUS_OUTPUT, [ADD_NODENAME_TO_METRIC], config))
    return elements
