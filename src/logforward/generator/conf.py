"""Whole-pass compilation of a forwarder spec into collector elements."""

import logging
from collections.abc import Mapping
from typing import Optional, TYPE_CHECKING

from logforward.contracts import assert_acyclic, assert_unique_component_ids
from logforward.generator.elements import Element, render_config
from logforward.generator.inputs import inputs
from logforward.generator.output.registry import BuilderRegistry, default_registry
from logforward.generator.outputs import outputs
from logforward.generator.pipelines import pipelines
from logforward.generator.sources import raw_sources
from logforward.schemas.forwarder import ClusterLogForwarderSpec
from logforward.schemas.secret import Secret

if TYPE_CHECKING:
    from logforward.schemas import InternalConfig

__all__ = ['CollectorConfigGenerator']

logger = logging.getLogger(__name__)


class CollectorConfigGenerator:
    """Compiles forwarder specs into the collector's transforms and sinks.

    One generator can compile any number of specs; each call to
    ``generate`` is an independent pass with no shared state, so the same
    spec, secrets and options always give the same element list.

    **Stages (in emission order):**

    1. **Inputs**: split container logs by namespace, tag log types,
       route user-defined application inputs, throttle their branches.
    2. **Pipelines**: one remap per pipeline merging its resolved inputs.
    3. **Outputs**: credential lookup, sink throttles and per-family
       destination builders, then the collector metrics exporter.

    The result is checked against the graph contracts (unique component
    IDs, no forward references) before it is returned.

    Example usage::

        generator = CollectorConfigGenerator(config)
        elements = generator.generate(spec, secrets)
        text = generator.render(spec, secrets)
    """

    def __init__(self, config: "InternalConfig",
                 registry: Optional[BuilderRegistry] = None):
        """Initialize generator with validated options.

        Parameters
        ----------
        config : InternalConfig
            Fully validated generator options.

        registry : BuilderRegistry, optional
            Destination builders keyed by output type. Defaults to every
            family this package provides.
        """
        self.config = config
        self.registry = registry if registry is not None else default_registry()

    def generate(self, spec: ClusterLogForwarderSpec,
                 secrets: Optional[Mapping[str, Secret]] = None) -> list[Element]:
        """Compile ``spec`` into an ordered element list.

        Parameters
        ----------
        spec : ClusterLogForwarderSpec
            Validated forwarder specification
        secrets : Mapping[str, Secret], optional
            Credentials keyed by output name and by the fallback token name

        Returns
        -------
        list of Element
            Transforms and sinks in emission order

        Raises
        ------
        ContractViolation
            If the compiled graph has duplicate IDs or forward references
        """
        secrets = secrets or {}
        elements: list[Element] = []
        elements.extend(inputs(spec, self.config.throttle.window_secs))
        elements.extend(pipelines(spec))
        elements.extend(outputs(spec, secrets, self.config, self.registry))

        assert_unique_component_ids(elements)
        assert_acyclic(elements, raw_sources(spec))

        logger.info("Compiled %d inputs, %d pipelines, %d outputs into %d elements",
                    len(spec.inputs), len(spec.pipelines), len(spec.outputs), len(elements))
        return elements

    def render(self, spec: ClusterLogForwarderSpec,
               secrets: Optional[Mapping[str, Secret]] = None) -> str:
        """Compile ``spec`` and render it as collector JSON configuration."""
        return render_config(self.generate(spec, secrets))
