"""Raw source identifiers provided by the collector's source section.

The source section itself is generated elsewhere; the compiler only reads
from these names.
"""

from logforward.schemas.forwarder import ClusterLogForwarderSpec

CONTAINER_LOGS = "container_logs"
JOURNAL_LOGS = "journal_logs"

HOST_AUDIT_LOGS = "host_audit_logs"
K8S_AUDIT_LOGS = "k8s_audit_logs"
OPENSHIFT_AUDIT_LOGS = "openshift_audit_logs"
OVN_AUDIT_LOGS = "ovn_audit_logs"
AUDIT_SOURCES = (HOST_AUDIT_LOGS, K8S_AUDIT_LOGS, OPENSHIFT_AUDIT_LOGS, OVN_AUDIT_LOGS)

RAW_SYSLOG_LOGS = "raw_syslog_logs"
INTERNAL_METRICS = "internal_metrics"

RECEIVER_NORMALIZED = "{}_normalized"

FIXED_SOURCES = (
    CONTAINER_LOGS,
    JOURNAL_LOGS,
    *AUDIT_SOURCES,
    INTERNAL_METRICS,
)


def raw_sources(spec: ClusterLogForwarderSpec) -> list[str]:
    """All source names the compiled graph may read from for ``spec``."""
    names = list(FIXED_SOURCES)
    for input_spec in spec.inputs:
        if input_spec.is_audit_http_receiver():
            names.append(RECEIVER_NORMALIZED.format(input_spec.name))
        if input_spec.is_syslog_receiver() and RAW_SYSLOG_LOGS not in names:
            names.append(RAW_SYSLOG_LOGS)
    return names
