"""Generic HTTP destination."""

from typing import Optional, Sequence

from logforward.generator.elements import Element, Sink
from logforward.generator.output.common import (
    JSON_ENCODING,
    format_component_id,
    http_auth,
    tls_config,
    with_optional,
)
from logforward.schemas.forwarder import HttpOutput
from logforward.schemas.internal import InternalConfig
from logforward.schemas.secret import Secret


def conf(output: HttpOutput, inputs: Sequence[str], secret: Optional[Secret],
         config: InternalConfig) -> list[Element]:
    tuning = output.http
    request = {"timeout_secs": tuning.timeout}
    if tuning.headers:
        request["headers"] = {key: tuning.headers[key] for key in sorted(tuning.headers)}
    options = {
        "uri": output.url,
        "method": tuning.method.lower(),
        "encoding": dict(JSON_ENCODING),
        "request": request,
    }
    options = with_optional(
        options,
        auth=http_auth(secret),
        tls=tls_config(output, secret, config),
    )
    return [Sink(
        component_id=format_component_id(output.name),
        inputs=tuple(inputs),
        sink_type="http",
        options=options,
    )]
