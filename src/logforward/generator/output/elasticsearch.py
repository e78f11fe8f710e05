"""Elasticsearch destination.

Records are routed to ``<type>-write`` aliases (``app``, ``infra``,
``audit``) unless the output names a fixed index. A remap computes the
index and a document ID before the sink.
"""

from typing import Optional, Sequence

from logforward.generator.elements import Element, Remap, Sink
from logforward.generator.expressions import quote
from logforward.generator.normalize import join_vrl
from logforward.generator.output.common import (
    basic_auth,
    format_component_id,
    tls_config,
    with_optional,
)
from logforward.schemas.forwarder import ElasticsearchOutput
from logforward.schemas.ids import ADD_ES_INDEX
from logforward.schemas.internal import InternalConfig
from logforward.schemas.secret import Secret

INDEX_BY_LOG_TYPE_VRL = '''
index = "default"
if (.log_type == "application"){
  index = "app"
}
if (.log_type == "infrastructure"){
  index = "infra"
}
if (.log_type == "audit"){
  index = "audit"
}
.write_index = index + "-write"
'''

ADD_ID_VRL = '._id = encode_base64(uuid_v4())'


def index_vrl(output: ElasticsearchOutput) -> str:
    if output.elasticsearch.index:
        return f".write_index = {quote(output.elasticsearch.index)}"
    return INDEX_BY_LOG_TYPE_VRL


def conf(output: ElasticsearchOutput, inputs: Sequence[str], secret: Optional[Secret],
         config: InternalConfig) -> list[Element]:
    component_id = format_component_id(output.name)
    remap_id = ADD_ES_INDEX.format(component_id)

    remap = Remap(
        component_id=remap_id,
        desc="Add ES index and document id",
        inputs=tuple(inputs),
        vrl=join_vrl(index_vrl(output), ADD_ID_VRL),
    )
    options = {
        "endpoints": [output.url],
        "api_version": f"v{output.elasticsearch.version}",
        "bulk": {"action": "create", "index": "{{ write_index }}"},
        "encoding": {"except_fields": ["write_index"]},
        "id_key": "_id",
    }
    options = with_optional(
        options,
        auth=basic_auth(secret),
        tls=tls_config(output, secret, config),
    )
    sink = Sink(
        component_id=component_id,
        inputs=(remap_id,),
        sink_type="elasticsearch",
        options=options,
    )
    return [remap, sink]
