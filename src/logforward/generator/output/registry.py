"""Registry of destination builders keyed by output type.

A registry miss is the "unknown destination type" case: the dispatcher
emits nothing for that output and carries on with the rest.
"""

from typing import Callable, Optional, Sequence

from logforward.generator.elements import Element
from logforward.schemas.forwarder import BaseOutput
from logforward.schemas.internal import InternalConfig
from logforward.schemas.secret import Secret

Builder = Callable[[BaseOutput, Sequence[str], Optional[Secret], InternalConfig], list[Element]]


class BuilderRegistry:
    """Maps output type tags to builder functions."""

    def __init__(self) -> None:
        self._builders: dict[str, Builder] = {}

    def register(self, output_type: str, builder: Builder) -> None:
        """Register one builder.

        Raises
        ------
        ValueError
            If a different builder is already registered for ``output_type``
        """
        existing = self._builders.get(output_type)
        if existing is not None and existing is not builder:
            raise ValueError(f"builder conflict for output type {output_type!r}; already registered")
        self._builders[output_type] = builder

    def get(self, output_type: str) -> Optional[Builder]:
        """Return the builder for ``output_type``, or None when unknown."""
        return self._builders.get(output_type)

    def types(self) -> tuple[str, ...]:
        return tuple(sorted(self._builders))

    def __contains__(self, output_type: object) -> bool:
        return output_type in self._builders


def default_registry() -> BuilderRegistry:
    """Registry with every destination family this package knows."""
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
    from logforward.schemas import forwarder

    registry = BuilderRegistry()
    registry.register(forwarder.OUTPUT_TYPE_KAFKA, kafka.conf)
    registry.register(forwarder.OUTPUT_TYPE_LOKI, loki.conf)
    registry.register(forwarder.OUTPUT_TYPE_ELASTICSEARCH, elasticsearch.conf)
    registry.register(forwarder.OUTPUT_TYPE_CLOUDWATCH, cloudwatch.conf)
    registry.register(forwarder.OUTPUT_TYPE_GOOGLE_CLOUD_LOGGING, gcl.conf)
    registry.register(forwarder.OUTPUT_TYPE_SPLUNK, splunk.conf)
    registry.register(forwarder.OUTPUT_TYPE_HTTP, http.conf)
    registry.register(forwarder.OUTPUT_TYPE_SYSLOG, syslog.conf)
    return registry
