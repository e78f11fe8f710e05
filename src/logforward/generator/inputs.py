"""Input stage: classify raw sources into the canonical log types.

Takes the raw log sources (container, journal, audit, receivers) and
produces the inputs named by the forwarder spec:

1. ``route_container_logs`` splits container logs into ``app`` and
   ``infra`` by namespace, then ``application``, ``infrastructure`` and
   ``audit`` remaps tag each stream with its ``log_type``. Each stage is
   emitted only when some pipeline needs that log type.
2. ``route_application_logs`` fans the application stream out to one
   branch per user-defined application input, and ``source_throttle_<name>``
   rate-limits the branches of inputs carrying a policy.
3. Receiver inputs get their own tagging remaps.
"""

import logging
from typing import Optional

from logforward.generator.elements import Element, Remap, Route
from logforward.generator.expressions import (
    K8S_NAMESPACE_NAME,
    eq,
    neg,
    or_,
    paren,
    starts_with,
)
from logforward.generator.normalize import (
    FIX_HOSTNAME,
    FIX_TIMESTAMP_FIELD,
    add_log_type,
    join_vrl,
    new_throttle,
)
from logforward.generator.selector import compile_selector
from logforward.generator.sources import (
    AUDIT_SOURCES,
    CONTAINER_LOGS,
    JOURNAL_LOGS,
    RAW_SYSLOG_LOGS,
    RECEIVER_NORMALIZED,
)
from logforward.schemas.forwarder import (
    INPUT_NAME_APPLICATION,
    INPUT_NAME_AUDIT,
    INPUT_NAME_INFRASTRUCTURE,
    RESERVED_INPUT_NAMES,
    ClusterLogForwarderSpec,
    InputSpec,
)
from logforward.schemas.ids import (
    RECEIVER_INPUT,
    ROUTE_APPLICATION_LOGS,
    ROUTE_CONTAINER_LOGS,
    SYSLOG_INPUT,
    USER_DEFINED_SOURCE_THROTTLE,
)

logger = logging.getLogger(__name__)

NS_KUBE = "kube"
NS_OPENSHIFT = "openshift"
NS_DEFAULT = "default"

USER_DEFINED_INPUT = ROUTE_APPLICATION_LOGS + ".{}"

INFRA_CONTAINER_LOGS = or_(
    starts_with(K8S_NAMESPACE_NAME, NS_KUBE + "-"),
    starts_with(K8S_NAMESPACE_NAME, NS_OPENSHIFT + "-"),
    eq(K8S_NAMESPACE_NAME, NS_DEFAULT),
    eq(K8S_NAMESPACE_NAME, NS_OPENSHIFT),
    eq(K8S_NAMESPACE_NAME, NS_KUBE),
)
APP_CONTAINER_LOGS = neg(paren(INFRA_CONTAINER_LOGS))

AUDIT_VRL = join_vrl(add_log_type(INPUT_NAME_AUDIT), FIX_HOSTNAME, FIX_TIMESTAMP_FIELD)


def gather_sources(spec: ClusterLogForwarderSpec) -> set[str]:
    """Canonical log types referenced by any pipeline.

    Reserved input names count directly; user-defined inputs count through
    their selector kind. Receiver inputs and unknown references add nothing.
    """
    input_map = spec.input_map()
    types = set()
    for pipeline in spec.pipelines:
        for ref in pipeline.input_refs:
            if ref in RESERVED_INPUT_NAMES:
                types.add(ref)
            elif ref in input_map and input_map[ref].selector.kind in RESERVED_INPUT_NAMES:
                types.add(input_map[ref].selector.kind)
    return types


def user_defined_app_routing(spec: ClusterLogForwarderSpec) -> dict[str, str]:
    """Route conditions for application inputs referenced by pipelines.

    Returns
    -------
    dict
        ``input name -> condition``; inputs without an active filter appear
        only when they carry a rate limit (condition ``true``)
    """
    input_map = spec.input_map()
    route_map = {}
    for pipeline in spec.pipelines:
        for ref in pipeline.input_refs:
            input_spec = input_map.get(ref)
            if input_spec is None or input_spec.application is None:
                continue
            compiled = compile_selector(input_spec.application, input_spec.rate_limit)
            if compiled.active:
                route_map[input_spec.name] = compiled.expression
    return route_map


def add_throttle(input_spec: InputSpec, window_secs: int = 1) -> list[Element]:
    """Throttle the routed branch of one application input.

    Container-level limits bucket records per container log file; group
    limits share one bucket across the whole input.
    """
    rate_limit = input_spec.rate_limit
    return new_throttle(
        USER_DEFINED_SOURCE_THROTTLE.format(input_spec.name),
        [USER_DEFINED_INPUT.format(input_spec.name)],
        rate_limit.max_records_per_second,
        rate_limit.per_key,
        window_secs,
    )


def is_throttled(input_spec: InputSpec) -> bool:
    return input_spec.has_policy() and input_spec.max_records_per_second() > 0


def inputs(spec: ClusterLogForwarderSpec, window_secs: int = 1) -> list[Element]:
    """Compile the input stage of ``spec``.

    Parameters
    ----------
    spec : ClusterLogForwarderSpec
        Forwarder specification
    window_secs : int, optional
        Throttle window length in seconds (default 1)

    Returns
    -------
    list of Element
        Routes, remaps and throttles in emission order
    """
    elements: list[Element] = []
    types = gather_sources(spec)
    logger.debug("Canonical log types referenced by pipelines: %s", sorted(types))

    if INPUT_NAME_APPLICATION in types or INPUT_NAME_INFRASTRUCTURE in types:
        routes = {}
        if INPUT_NAME_APPLICATION in types:
            routes["app"] = APP_CONTAINER_LOGS
        if INPUT_NAME_INFRASTRUCTURE in types:
            routes["infra"] = INFRA_CONTAINER_LOGS
        elements.append(Route(
            component_id=ROUTE_CONTAINER_LOGS,
            inputs=(CONTAINER_LOGS,),
            routes=routes,
        ))

    if INPUT_NAME_APPLICATION in types:
        elements.append(Remap(
            component_id=INPUT_NAME_APPLICATION,
            desc='Set log_type to "application"',
            inputs=(ROUTE_CONTAINER_LOGS + ".app",),
            vrl=add_log_type(INPUT_NAME_APPLICATION),
        ))
    if INPUT_NAME_INFRASTRUCTURE in types:
        elements.append(Remap(
            component_id=INPUT_NAME_INFRASTRUCTURE,
            desc='Set log_type to "infrastructure"',
            inputs=(ROUTE_CONTAINER_LOGS + ".infra", JOURNAL_LOGS),
            vrl=add_log_type(INPUT_NAME_INFRASTRUCTURE),
        ))
    if INPUT_NAME_AUDIT in types:
        elements.append(Remap(
            component_id=INPUT_NAME_AUDIT,
            desc='Set log_type to "audit"',
            inputs=AUDIT_SOURCES,
            vrl=AUDIT_VRL,
        ))

    route_map = user_defined_app_routing(spec)
    if route_map:
        elements.append(Route(
            component_id=ROUTE_APPLICATION_LOGS,
            inputs=(INPUT_NAME_APPLICATION,),
            routes={name: route_map[name] for name in sorted(route_map)},
        ))
        input_map = spec.input_map()
        for name in sorted(route_map):
            if is_throttled(input_map[name]):
                elements.extend(add_throttle(input_map[name], window_secs))

    syslog_tagged = False
    for input_spec in spec.inputs:
        if input_spec.is_audit_http_receiver():
            elements.append(Remap(
                component_id=RECEIVER_INPUT.format(input_spec.name),
                desc='Set log_type to "audit"',
                inputs=(RECEIVER_NORMALIZED.format(input_spec.name),),
                vrl=AUDIT_VRL,
            ))
        if input_spec.is_syslog_receiver() and not syslog_tagged:
            # All syslog receivers feed one raw stream
            elements.append(Remap(
                component_id=SYSLOG_INPUT,
                desc='Set log_type to "infrastructure"',
                inputs=(RAW_SYSLOG_LOGS,),
                vrl=add_log_type(INPUT_NAME_INFRASTRUCTURE),
            ))
            syslog_tagged = True

    return elements


def resolve_input_ref(spec: ClusterLogForwarderSpec, ref: str,
                      route_map: dict[str, str]) -> Optional[str]:
    """Component ID a pipeline reads from for one of its input references.

    Parameters
    ----------
    spec : ClusterLogForwarderSpec
        Forwarder specification
    ref : str
        Reserved or user-defined input name
    route_map : dict
        Result of ``user_defined_app_routing(spec)``

    Returns
    -------
    str or None
        None when ``ref`` names no known input
    """
    if ref in RESERVED_INPUT_NAMES:
        return ref
    input_spec = spec.input_map().get(ref)
    if input_spec is None:
        return None
    if input_spec.application is not None:
        if ref not in route_map:
            return INPUT_NAME_APPLICATION
        if is_throttled(input_spec):
            return USER_DEFINED_SOURCE_THROTTLE.format(ref)
        return USER_DEFINED_INPUT.format(ref)
    if input_spec.is_audit_http_receiver():
        return RECEIVER_INPUT.format(ref)
    if input_spec.is_syslog_receiver():
        return SYSLOG_INPUT
    return input_spec.selector.kind
