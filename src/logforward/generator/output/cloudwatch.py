"""Amazon CloudWatch Logs destination.

A remap derives ``group_name`` and ``stream_name`` for every record from
the output's grouping strategy, then the sink writes to those templates.
"""

from typing import Optional, Sequence

from logforward.generator.elements import Element, Remap, Sink
from logforward.generator.output.common import (
    JSON_ENCODING,
    format_component_id,
    with_optional,
)
from logforward.schemas.forwarder import CloudwatchOutput
from logforward.schemas.ids import NORMALIZE_GROUP_AND_STREAMS
from logforward.schemas.internal import InternalConfig
from logforward.schemas.secret import Secret

KEY_AWS_ACCESS_KEY_ID = "aws_access_key_id"
KEY_AWS_SECRET_ACCESS_KEY = "aws_secret_access_key"

APPLICATION_GROUP = {
    "logType": '"application"',
    "namespaceName": ".kubernetes.namespace_name",
    "namespaceUUID": ".kubernetes.namespace_id",
}

GROUP_AND_STREAMS_VRL = '''
.group_name = "default"
.stream_name = "default"

if (.file != null) {{
 .file = "kubernetes" + replace!(.file, "/", ".")
 .stream_name = del(.file)
}}

if ( .log_type == "application" ) {{
 .group_name = ( "{prefix}" + {application_group} ) ?? "application"
}}
if ( .log_type == "audit" ) {{
 .group_name = "{prefix}audit"
 .stream_name = ( "${{VECTOR_SELF_NODE_NAME}}" + .tag ) ?? .stream_name
}}
if ( .log_type == "infrastructure" ) {{
 .group_name = "{prefix}infrastructure"
 .stream_name = ( .hostname + "." + .stream_name ) ?? .stream_name
}}
'''


def group_and_streams_vrl(output: CloudwatchOutput) -> str:
    prefix = f"{output.cloudwatch.group_prefix}." if output.cloudwatch.group_prefix else ""
    return GROUP_AND_STREAMS_VRL.format(
        prefix=prefix,
        application_group=APPLICATION_GROUP[output.cloudwatch.group_by],
    ).strip()


def aws_auth(secret: Optional[Secret]) -> Optional[dict]:
    if secret is None or not (
        secret.has(KEY_AWS_ACCESS_KEY_ID) and secret.has(KEY_AWS_SECRET_ACCESS_KEY)
    ):
        return None
    return {
        "access_key_id": secret.get(KEY_AWS_ACCESS_KEY_ID),
        "secret_access_key": secret.get(KEY_AWS_SECRET_ACCESS_KEY),
    }


def conf(output: CloudwatchOutput, inputs: Sequence[str], secret: Optional[Secret],
         config: InternalConfig) -> list[Element]:
    component_id = format_component_id(output.name)
    remap_id = NORMALIZE_GROUP_AND_STREAMS.format(component_id)

    remap = Remap(
        component_id=remap_id,
        desc="Cloudwatch Group and Stream Names",
        inputs=tuple(inputs),
        vrl=group_and_streams_vrl(output),
    )
    options = {
        "region": output.cloudwatch.region,
        "compression": "none",
        "group_name": "{{ group_name }}",
        "stream_name": "{{ stream_name }}",
        "encoding": dict(JSON_ENCODING),
        "healthcheck": {"enabled": False},
    }
    options = with_optional(options, auth=aws_auth(secret), endpoint=output.url)
    sink = Sink(
        component_id=component_id,
        inputs=(remap_id,),
        sink_type="aws_cloudwatch_logs",
        options=options,
    )
    return [remap, sink]
