"""Syslog destination over a TCP, UDP or TLS socket.

A remap renders each record as one RFC 5424 or RFC 3164 line in
``.message``; the socket sink then sends ``.message`` as text.
"""

from typing import Optional, Sequence
from urllib.parse import urlparse

from logforward.generator.elements import Element, Remap, Sink
from logforward.generator.expressions import quote
from logforward.generator.normalize import join_vrl
from logforward.generator.output.common import format_component_id, tls_config, with_optional
from logforward.schemas.forwarder import SyslogOutput
from logforward.schemas.ids import SYSLOG_JSON
from logforward.schemas.internal import InternalConfig
from logforward.schemas.secret import Secret

NIL = "-"

LOG_SOURCE_VRL = '''
if exists(.kubernetes) {
  .log_source = "namespace_name=" + (to_string(.kubernetes.namespace_name) ?? "") + ", container_name=" + (to_string(.kubernetes.container_name) ?? "") + ", pod_name=" + (to_string(.kubernetes.pod_name) ?? "")
}
'''

HEADER_FIELDS_VRL = '''
ts = to_string(."@timestamp") ?? "-"
host = to_string(.hostname) ?? "-"
payload = encode_json(.)
'''


def message_vrl(output: SyslogOutput) -> str:
    tuning = output.syslog
    pri = f"<{tuning.priority}>"
    if tuning.rfc == "RFC3164":
        tag = tuning.tag or tuning.app_name or NIL
        line = f'.message = "{pri}" + ts + " " + host + " " + {quote(tag)} + ": " + payload'
    else:
        header = " ".join([tuning.app_name or NIL, tuning.proc_id or NIL, tuning.msg_id or NIL, NIL])
        line = f'.message = "{pri}1 " + ts + " " + host + " " + {quote(header)} + " " + payload'
    fragments = [LOG_SOURCE_VRL] if tuning.add_log_source else []
    return join_vrl(*fragments, HEADER_FIELDS_VRL, line)


def socket_mode(output: SyslogOutput) -> str:
    """``udp`` only for udp URLs; tcp, tls and missing schemes use TCP."""
    scheme = urlparse(output.url).scheme.lower() if output.url else ""
    return "udp" if scheme == "udp" else "tcp"


def conf(output: SyslogOutput, inputs: Sequence[str], secret: Optional[Secret],
         config: InternalConfig) -> list[Element]:
    component_id = format_component_id(output.name)
    remap_id = SYSLOG_JSON.format(component_id)

    remap = Remap(
        component_id=remap_id,
        desc="Format syslog message",
        inputs=tuple(inputs),
        vrl=message_vrl(output),
    )
    mode = socket_mode(output)
    options = {
        "mode": mode,
        "encoding": {"codec": "text"},
    }
    if mode == "tcp":
        options["framing"] = {"method": "newline_delimited"}
    options = with_optional(
        options,
        address=urlparse(output.url).netloc if output.url else None,
        tls=tls_config(output, secret, config, enableable=True),
    )
    sink = Sink(
        component_id=component_id,
        inputs=(remap_id,),
        sink_type="socket",
        options=options,
    )
    return [remap, sink]
