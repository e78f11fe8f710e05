"""Component IDs derived from forwarder names.

The forwarder spec uses these to reject names whose compiled elements
would collide; the generator emits its elements under the same IDs.
"""

import re

# Fixed IDs emitted whenever their stage is needed
ROUTE_CONTAINER_LOGS = "route_container_logs"
ROUTE_APPLICATION_LOGS = "route_application_logs"
SYSLOG_INPUT = "syslog_input"
ADD_NODENAME_TO_METRIC = "add_nodename_to_metric"
PROMETHEUS_OUTPUT = "prometheus_output"

FIXED_COMPONENT_IDS = (
    ROUTE_CONTAINER_LOGS,
    ROUTE_APPLICATION_LOGS,
    SYSLOG_INPUT,
    ADD_NODENAME_TO_METRIC,
    PROMETHEUS_OUTPUT,
)

# Templates filled with an input name or a formatted output ID
USER_DEFINED_SOURCE_THROTTLE = "source_throttle_{}"
USER_DEFINED_SINK_THROTTLE = "sink_throttle_{}"
RECEIVER_INPUT = "{}_input"
ADD_ES_INDEX = "{}_add_es_index"
NORMALIZE_GROUP_AND_STREAMS = "{}_normalize_group_and_streams"
SYSLOG_JSON = "{}_json"


def format_component_id(name: str) -> str:
    """Lowercase ``name`` and replace anything outside ``[a-z0-9_]`` with ``_``."""
    return re.sub(r"[^a-z0-9_]", "_", name.lower())
