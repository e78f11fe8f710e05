"""Loki destination."""

from typing import Optional, Sequence

from logforward.generator.elements import Element, Sink
from logforward.generator.output.common import (
    JSON_ENCODING,
    format_component_id,
    http_auth,
    tls_config,
    with_optional,
)
from logforward.schemas.forwarder import LokiOutput
from logforward.schemas.internal import InternalConfig
from logforward.schemas.secret import Secret

DEFAULT_LABEL_KEYS = (
    "log_type",
    "kubernetes.namespace_name",
    "kubernetes.pod_name",
    "kubernetes.host",
)


def labels(output: LokiOutput) -> dict[str, str]:
    """Stream labels, one template per record field, keyed with dots as underscores."""
    keys = sorted(set(output.loki.label_keys or DEFAULT_LABEL_KEYS))
    return {key.replace(".", "_"): "{{" + key + "}}" for key in keys}


def conf(output: LokiOutput, inputs: Sequence[str], secret: Optional[Secret],
         config: InternalConfig) -> list[Element]:
    options = {
        "endpoint": output.url,
        "out_of_order_action": "accept",
        "healthcheck": {"enabled": False},
        "encoding": dict(JSON_ENCODING),
        "labels": labels(output),
    }
    tenant_id = None
    if output.loki.tenant_key:
        tenant_id = "{{" + output.loki.tenant_key + "}}"
    options = with_optional(
        options,
        tenant_id=tenant_id,
        auth=http_auth(secret),
        tls=tls_config(output, secret, config),
    )
    return [Sink(
        component_id=format_component_id(output.name),
        inputs=tuple(inputs),
        sink_type="loki",
        options=options,
    )]
