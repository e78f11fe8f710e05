"""Kafka destination."""

from typing import Optional, Sequence
from urllib.parse import urlparse

from logforward.generator.elements import Element, Sink
from logforward.generator.output.common import (
    KEY_PASSWORD,
    KEY_USERNAME,
    format_component_id,
    tls_config,
    with_optional,
)
from logforward.schemas.forwarder import KafkaOutput
from logforward.schemas.internal import InternalConfig
from logforward.schemas.secret import Secret

DEFAULT_TOPIC = "topic"
KEY_SASL_MECHANISM = "sasl.mechanism"
DEFAULT_SASL_MECHANISM = "PLAIN"


def brokers(output: KafkaOutput) -> list[str]:
    """The URL's host first, then the declared brokers, without duplicates."""
    result = []
    if output.url:
        host = urlparse(output.url).netloc
        if host:
            result.append(host)
    for broker in output.kafka.brokers:
        address = urlparse(broker).netloc or broker
        if address not in result:
            result.append(address)
    return result


def topic(output: KafkaOutput) -> str:
    if output.kafka.topic:
        return output.kafka.topic
    if output.url:
        path = urlparse(output.url).path.strip("/")
        if path:
            return path
    return DEFAULT_TOPIC


def sasl(secret: Optional[Secret]) -> Optional[dict]:
    if secret is None or not (secret.has(KEY_USERNAME) and secret.has(KEY_PASSWORD)):
        return None
    return {
        "enabled": True,
        "mechanism": secret.get(KEY_SASL_MECHANISM) or DEFAULT_SASL_MECHANISM,
        "username": secret.get(KEY_USERNAME),
        "password": secret.get(KEY_PASSWORD),
    }


def conf(output: KafkaOutput, inputs: Sequence[str], secret: Optional[Secret],
         config: InternalConfig) -> list[Element]:
    options = {
        "bootstrap_servers": ",".join(brokers(output)),
        "topic": topic(output),
        "encoding": {"codec": "json", "timestamp_format": "rfc3339"},
    }
    options = with_optional(
        options,
        sasl=sasl(secret),
        tls=tls_config(output, secret, config, enableable=True),
    )
    return [Sink(
        component_id=format_component_id(output.name),
        inputs=tuple(inputs),
        sink_type="kafka",
        options=options,
    )]
