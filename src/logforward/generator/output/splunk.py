"""Splunk HTTP Event Collector destination."""

from typing import Optional, Sequence

from logforward.generator.elements import Element, Sink
from logforward.generator.output.common import (
    JSON_ENCODING,
    format_component_id,
    tls_config,
    with_optional,
)
from logforward.schemas.forwarder import SplunkOutput
from logforward.schemas.internal import InternalConfig
from logforward.schemas.secret import Secret

KEY_HEC_TOKEN = "hecToken"


def index(output: SplunkOutput) -> Optional[str]:
    """Per-record index template from ``indexKey``, else the fixed ``indexName``."""
    if output.splunk.index_key:
        return "{{ " + output.splunk.index_key + " }}"
    return output.splunk.index_name


def conf(output: SplunkOutput, inputs: Sequence[str], secret: Optional[Secret],
         config: InternalConfig) -> list[Element]:
    options = {
        "endpoint": output.url,
        "compression": "none",
        "timestamp_key": "@timestamp",
        "encoding": dict(JSON_ENCODING),
    }
    token = secret.get(KEY_HEC_TOKEN) if secret is not None else None
    options = with_optional(
        options,
        default_token=token,
        index=index(output),
        tls=tls_config(output, secret, config),
    )
    return [Sink(
        component_id=format_component_id(output.name),
        inputs=tuple(inputs),
        sink_type="splunk_hec_logs",
        options=options,
    )]
