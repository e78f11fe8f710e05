"""Pipeline stage: one named remap per forwarder pipeline.

Outputs read from pipeline names, so each pipeline is materialized as a
remap that merges the component IDs its input references resolve to and
attaches the pipeline's labels.
"""

import json
import logging

from logforward.generator.elements import Element, Remap
from logforward.generator.inputs import resolve_input_ref, user_defined_app_routing
from logforward.generator.normalize import PASS_THROUGH
from logforward.schemas.forwarder import ClusterLogForwarderSpec, PipelineSpec

logger = logging.getLogger(__name__)


def pipeline_labels_vrl(pipeline: PipelineSpec) -> str:
    """VRL attaching the pipeline's labels, keys sorted."""
    if not pipeline.labels:
        return PASS_THROUGH
    labels = {key: pipeline.labels[key] for key in sorted(pipeline.labels)}
    return f".openshift.labels = {json.dumps(labels)}"


def pipelines(spec: ClusterLogForwarderSpec) -> list[Element]:
    """Compile one remap per pipeline, in declaration order.

    Input references that name no known input are skipped; validating
    references is left to admission validation upstream of the compiler.
    """
    route_map = user_defined_app_routing(spec)
    elements: list[Element] = []
    for pipeline in spec.pipelines:
        resolved = set()
        for ref in pipeline.input_refs:
            component_id = resolve_input_ref(spec, ref, route_map)
            if component_id is None:
                logger.debug("Pipeline %s: skipping unknown input %s", pipeline.name, ref)
                continue
            resolved.add(component_id)
        elements.append(Remap(
            component_id=pipeline.name,
            desc=f"Pipeline {pipeline.name}",
            inputs=tuple(sorted(resolved)),
            vrl=pipeline_labels_vrl(pipeline),
        ))
    return elements
