"""Google Cloud Logging destination."""

from typing import Optional, Sequence

from logforward.generator.elements import Element, Sink
from logforward.generator.output.common import format_component_id, secret_path, with_optional
from logforward.schemas.forwarder import GoogleCloudLoggingOutput
from logforward.schemas.internal import InternalConfig
from logforward.schemas.secret import Secret

KEY_GOOGLE_CREDENTIALS = "google-application-credentials.json"


def conf(output: GoogleCloudLoggingOutput, inputs: Sequence[str], secret: Optional[Secret],
         config: InternalConfig) -> list[Element]:
    tuning = output.google_cloud_logging
    options = with_optional(
        {
            "log_id": tuning.log_id,
            "severity_key": "level",
            "resource": {"type": "k8s_node", "node_name": "{{hostname}}"},
        },
        project_id=tuning.project_id,
        folder_id=tuning.folder_id,
        organization_id=tuning.organization_id,
        billing_account_id=tuning.billing_account_id,
    )
    if secret is not None and secret.has(KEY_GOOGLE_CREDENTIALS):
        options["credentials_path"] = secret_path(config, secret, KEY_GOOGLE_CREDENTIALS)
    return [Sink(
        component_id=format_component_id(output.name),
        inputs=tuple(inputs),
        sink_type="gcp_stackdriver_logs",
        options=options,
    )]
