"""Forwarder specification: named inputs, outputs and the pipelines joining them.

These models are the read-only input of one compilation pass. They accept
the forwarder API's JSON shape (camelCase keys, one optional field per
selector variant) and normalize it into genuine sum types:

- ``InputSpec.selector`` is discriminated on ``kind``
- ``ReceiverSelector.receiver`` is discriminated on ``type``
- ``OutputSpec`` is discriminated on ``type``, with ``UnrecognizedOutput``
  catching every destination type the generator has no builder for

Rate-limit thresholds are not range-checked here. A non-positive threshold
is a policy the compiler recovers from by omitting the throttle (and, for
outputs, the sink), so the schema must let it through.

Names are checked against the component IDs they compile to (see
``schemas.ids``), so a spec accepted here never yields duplicate IDs.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
    model_validator,
)

from logforward.schemas.base import ForwarderBaseModel
from logforward.schemas.ids import (
    ADD_ES_INDEX,
    FIXED_COMPONENT_IDS,
    NORMALIZE_GROUP_AND_STREAMS,
    RECEIVER_INPUT,
    SYSLOG_JSON,
    USER_DEFINED_SINK_THROTTLE,
    USER_DEFINED_SOURCE_THROTTLE,
    format_component_id,
)


# Reserved input names referring to the canonical log types
INPUT_NAME_APPLICATION = "application"
INPUT_NAME_INFRASTRUCTURE = "infrastructure"
INPUT_NAME_AUDIT = "audit"
RESERVED_INPUT_NAMES = (INPUT_NAME_APPLICATION, INPUT_NAME_INFRASTRUCTURE, INPUT_NAME_AUDIT)

RECEIVER_TYPE_HTTP = "http"
RECEIVER_TYPE_SYSLOG = "syslog"
FORMAT_KUBE_API_AUDIT = "kubeAPIAudit"

OUTPUT_TYPE_KAFKA = "kafka"
OUTPUT_TYPE_LOKI = "loki"
OUTPUT_TYPE_ELASTICSEARCH = "elasticsearch"
OUTPUT_TYPE_CLOUDWATCH = "cloudwatch"
OUTPUT_TYPE_GOOGLE_CLOUD_LOGGING = "googleCloudLogging"
OUTPUT_TYPE_SPLUNK = "splunk"
OUTPUT_TYPE_HTTP = "http"
OUTPUT_TYPE_SYSLOG = "syslog"

KNOWN_OUTPUT_TYPES = (
    OUTPUT_TYPE_KAFKA,
    OUTPUT_TYPE_LOKI,
    OUTPUT_TYPE_ELASTICSEARCH,
    OUTPUT_TYPE_CLOUDWATCH,
    OUTPUT_TYPE_GOOGLE_CLOUD_LOGGING,
    OUTPUT_TYPE_SPLUNK,
    OUTPUT_TYPE_HTTP,
    OUTPUT_TYPE_SYSLOG,
)

# Extra component emitted in front of the sink by some families
OUTPUT_HELPER_IDS = {
    OUTPUT_TYPE_ELASTICSEARCH: ADD_ES_INDEX,
    OUTPUT_TYPE_CLOUDWATCH: NORMALIZE_GROUP_AND_STREAMS,
    OUTPUT_TYPE_SYSLOG: SYSLOG_JSON,
}

# Bucketing key that makes a throttle count records per container log file
PER_CONTAINER_KEY_FIELD = "{{ file }}"


# =============================================================================
# Rate limits
# =============================================================================

class RateLimit(ForwarderBaseModel):
    """Records-per-second policy on an input or an output."""
    max_records_per_second: int = Field(
        validation_alias=AliasChoices("maxRecordsPerSecond", "threshold", "max_records_per_second"),
    )
    per_container: bool = Field(False, alias="perContainer")

    @property
    def per_key(self) -> Optional[str]:
        """Throttle bucketing field, set only for container-level limits."""
        return PER_CONTAINER_KEY_FIELD if self.per_container else None


# =============================================================================
# Input selectors
# =============================================================================

class InclusionSpec(ForwarderBaseModel):
    """Container name globs to include or exclude."""
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)


class LabelSelectorRequirement(ForwarderBaseModel):
    """One ``matchExpressions`` entry of a Kubernetes label selector."""
    key: str = Field(min_length=1)
    operator: Literal["In", "NotIn"]
    values: list[str] = Field(min_length=1)


class LabelSelector(ForwarderBaseModel):
    """Kubernetes-style pod label selector."""
    match_labels: dict[str, str] = Field(default_factory=dict, alias="matchLabels")
    match_expressions: list[LabelSelectorRequirement] = Field(
        default_factory=list, alias="matchExpressions"
    )


class ApplicationSelector(ForwarderBaseModel):
    """Application container logs, optionally narrowed by namespace, container and labels."""
    kind: Literal["application"] = "application"
    namespaces: list[str] = Field(default_factory=list)
    exclude_namespaces: list[str] = Field(default_factory=list, alias="excludeNamespaces")
    containers: Optional[InclusionSpec] = None
    selector: Optional[LabelSelector] = None


class InfrastructureSelector(ForwarderBaseModel):
    """Infrastructure logs: node journal and infra-namespace containers."""
    kind: Literal["infrastructure"] = "infrastructure"
    sources: list[Literal["container", "node"]] = Field(
        default_factory=lambda: ["container", "node"]
    )


class AuditSelector(ForwarderBaseModel):
    """Audit logs from the host and the API servers."""
    kind: Literal["audit"] = "audit"
    sources: list[Literal["auditd", "kubeAPI", "openshiftAPI", "ovn"]] = Field(
        default_factory=lambda: ["auditd", "kubeAPI", "openshiftAPI", "ovn"]
    )


class HTTPReceiver(ForwarderBaseModel):
    """Receives encoded logs on an HTTP endpoint."""
    type: Literal["http"] = "http"
    port: int = Field(8443, ge=1, le=65535)
    format: Literal["kubeAPIAudit"] = FORMAT_KUBE_API_AUDIT


class SyslogReceiver(ForwarderBaseModel):
    """Receives logs from rsyslog."""
    type: Literal["syslog"] = "syslog"
    port: int = Field(10514, ge=1, le=65535)
    protocol: Literal["tcp", "udp"] = "tcp"


class ReceiverSelector(ForwarderBaseModel):
    """Logs pushed to the collector by an external sender."""
    kind: Literal["receiver"] = "receiver"
    receiver: Annotated[Union[HTTPReceiver, SyslogReceiver], Field(discriminator="type")]

    @model_validator(mode="before")
    @classmethod
    def lift_api_receiver(cls, data: Any) -> Any:
        """Accept ``{"type": "http", "http": {...}}`` as written in the forwarder API."""
        if not isinstance(data, dict) or "receiver" in data:
            return data
        data = dict(data)
        receiver_type = data.pop("type", None)
        body = {}
        for key in (RECEIVER_TYPE_HTTP, RECEIVER_TYPE_SYSLOG):
            value = data.pop(key, None)
            if key == receiver_type and value is not None:
                body = value
        if isinstance(body, BaseModel):
            data["receiver"] = body
        else:
            data["receiver"] = {"type": receiver_type, **body}
        return data


InputSelector = Annotated[
    Union[ApplicationSelector, InfrastructureSelector, AuditSelector, ReceiverSelector],
    Field(discriminator="kind"),
]

_SELECTOR_KEYS = ("application", "infrastructure", "audit", "receiver")


class InputSpec(ForwarderBaseModel):
    """A named input: one selector variant plus an optional rate limit."""
    name: str = Field(min_length=1)
    selector: InputSelector
    rate_limit: Optional[RateLimit] = Field(None, alias="rateLimit")

    @model_validator(mode="before")
    @classmethod
    def lift_api_selector(cls, data: Any) -> Any:
        """Convert the API's one-optional-field-per-variant shape into ``selector``.

        Application ``containerLimit`` / ``groupLimit`` entries are lifted
        into ``rateLimit`` when no explicit rate limit is given.
        """
        if not isinstance(data, dict) or "selector" in data:
            return data
        data = dict(data)
        present = [key for key in _SELECTOR_KEYS if data.get(key) is not None]
        if len(present) != 1:
            raise ValueError(
                f"input {data.get('name')!r} must set exactly one of "
                f"{', '.join(_SELECTOR_KEYS)} (got {', '.join(present) or 'none'})"
            )
        kind = present[0]
        body = data.pop(kind)
        for key in _SELECTOR_KEYS:
            data.pop(key, None)

        if isinstance(body, dict):
            body = {"kind": kind, **body}
            container_limit = body.pop("containerLimit", None)
            group_limit = body.pop("groupLimit", None)
            if "rateLimit" not in data and "rate_limit" not in data:
                if container_limit is not None:
                    data["rateLimit"] = {**container_limit, "perContainer": True}
                elif group_limit is not None:
                    data["rateLimit"] = {**group_limit, "perContainer": False}

        data["selector"] = body
        return data

    @property
    def application(self) -> Optional[ApplicationSelector]:
        if isinstance(self.selector, ApplicationSelector):
            return self.selector
        return None

    def has_policy(self) -> bool:
        return self.rate_limit is not None

    def max_records_per_second(self) -> int:
        return self.rate_limit.max_records_per_second if self.rate_limit else 0

    def is_audit_http_receiver(self) -> bool:
        return (
            isinstance(self.selector, ReceiverSelector)
            and isinstance(self.selector.receiver, HTTPReceiver)
            and self.selector.receiver.format == FORMAT_KUBE_API_AUDIT
        )

    def is_syslog_receiver(self) -> bool:
        return (
            isinstance(self.selector, ReceiverSelector)
            and isinstance(self.selector.receiver, SyslogReceiver)
        )


# =============================================================================
# Outputs
# =============================================================================

class OutputTLS(ForwarderBaseModel):
    """TLS overrides for one output."""
    insecure_skip_verify: bool = Field(False, alias="insecureSkipVerify")


class BaseOutput(ForwarderBaseModel):
    """Fields shared by every destination family."""
    name: str = Field(min_length=1)
    # Families whose endpoint is the URL redeclare it as required
    url: Optional[str] = None
    tls: Optional[OutputTLS] = None
    rate_limit: Optional[RateLimit] = Field(None, alias="rateLimit")

    def has_policy(self) -> bool:
        return self.rate_limit is not None

    def max_records_per_second(self) -> int:
        return self.rate_limit.max_records_per_second if self.rate_limit else 0


class KafkaTuning(ForwarderBaseModel):
    topic: Optional[str] = None
    brokers: list[str] = Field(default_factory=list)


class KafkaOutput(BaseOutput):
    type: Literal["kafka"] = OUTPUT_TYPE_KAFKA
    kafka: KafkaTuning = Field(default_factory=KafkaTuning)

    @model_validator(mode="after")
    def has_bootstrap_server(self):
        """Brokers come from the URL host, the broker list, or both."""
        if not self.url and not self.kafka.brokers:
            raise ValueError(f"kafka output {self.name!r} needs a url or at least one broker")
        return self


class LokiTuning(ForwarderBaseModel):
    tenant_key: Optional[str] = Field(None, alias="tenantKey")
    label_keys: list[str] = Field(default_factory=list, alias="labelKeys")


class LokiOutput(BaseOutput):
    type: Literal["loki"] = OUTPUT_TYPE_LOKI
    url: str = Field(min_length=1)
    loki: LokiTuning = Field(default_factory=LokiTuning)


class ElasticsearchTuning(ForwarderBaseModel):
    version: int = Field(8, ge=6, le=8)
    index: Optional[str] = None


class ElasticsearchOutput(BaseOutput):
    type: Literal["elasticsearch"] = OUTPUT_TYPE_ELASTICSEARCH
    url: str = Field(min_length=1)
    elasticsearch: ElasticsearchTuning = Field(default_factory=ElasticsearchTuning)


class CloudwatchTuning(ForwarderBaseModel):
    region: str = Field(min_length=1)
    group_by: Literal["logType", "namespaceName", "namespaceUUID"] = Field(
        "logType", alias="groupBy"
    )
    group_prefix: Optional[str] = Field(None, alias="groupPrefix")


class CloudwatchOutput(BaseOutput):
    type: Literal["cloudwatch"] = OUTPUT_TYPE_CLOUDWATCH
    cloudwatch: CloudwatchTuning


class GoogleCloudLoggingTuning(ForwarderBaseModel):
    project_id: Optional[str] = Field(None, alias="projectId")
    folder_id: Optional[str] = Field(None, alias="folderId")
    organization_id: Optional[str] = Field(None, alias="organizationId")
    billing_account_id: Optional[str] = Field(None, alias="billingAccountId")
    log_id: str = Field(min_length=1, alias="logId")

    @model_validator(mode="after")
    def exactly_one_parent(self):
        """Exactly one of the resource parent IDs identifies where logs go."""
        parents = [
            self.project_id, self.folder_id, self.organization_id, self.billing_account_id
        ]
        if sum(p is not None for p in parents) != 1:
            raise ValueError(
                "exactly one of projectId, folderId, organizationId, billingAccountId is required"
            )
        return self


class GoogleCloudLoggingOutput(BaseOutput):
    type: Literal["googleCloudLogging"] = OUTPUT_TYPE_GOOGLE_CLOUD_LOGGING
    google_cloud_logging: GoogleCloudLoggingTuning = Field(alias="googleCloudLogging")


class SplunkTuning(ForwarderBaseModel):
    index_key: Optional[str] = Field(None, alias="indexKey")
    index_name: Optional[str] = Field(None, alias="indexName")


class SplunkOutput(BaseOutput):
    type: Literal["splunk"] = OUTPUT_TYPE_SPLUNK
    url: str = Field(min_length=1)
    splunk: SplunkTuning = Field(default_factory=SplunkTuning)


class HttpTuning(ForwarderBaseModel):
    method: Literal["GET", "HEAD", "POST", "PUT", "DELETE", "OPTIONS", "TRACE", "PATCH"] = "POST"
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: int = Field(10, ge=1)

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v):
        """Normalize method names to uppercase."""
        if isinstance(v, str):
            return v.upper().strip()
        return v


class HttpOutput(BaseOutput):
    type: Literal["http"] = OUTPUT_TYPE_HTTP
    url: str = Field(min_length=1)
    http: HttpTuning = Field(default_factory=HttpTuning)


SYSLOG_FACILITIES = {
    "kern": 0, "user": 1, "mail": 2, "daemon": 3, "auth": 4, "syslog": 5,
    "lpr": 6, "news": 7, "uucp": 8, "cron": 9, "authpriv": 10, "ftp": 11,
    "ntp": 12, "security": 13, "console": 14, "solaris-cron": 15,
    "local0": 16, "local1": 17, "local2": 18, "local3": 19,
    "local4": 20, "local5": 21, "local6": 22, "local7": 23,
}
SYSLOG_SEVERITIES = {
    "emergency": 0, "alert": 1, "critical": 2, "error": 3,
    "warning": 4, "notice": 5, "informational": 6, "debug": 7,
}


def _syslog_code(value: Any, names: dict[str, int], what: str) -> int:
    if isinstance(value, str) and value.strip().lower() in names:
        return names[value.strip().lower()]
    try:
        code = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"unknown syslog {what}: {value!r}") from None
    if code not in names.values():
        raise ValueError(f"syslog {what} out of range: {code}")
    return code


class SyslogTuning(ForwarderBaseModel):
    """Syslog message header settings; facility and severity become numeric codes."""
    rfc: Literal["RFC3164", "RFC5424"] = "RFC5424"
    facility: int = SYSLOG_FACILITIES["user"]
    severity: int = SYSLOG_SEVERITIES["informational"]
    app_name: Optional[str] = Field(None, alias="appName")
    proc_id: Optional[str] = Field(None, alias="procID")
    msg_id: Optional[str] = Field(None, alias="msgID")
    tag: Optional[str] = None
    add_log_source: bool = Field(False, alias="addLogSource")

    @field_validator("facility", mode="before")
    @classmethod
    def facility_code(cls, v):
        """Accept facility names (``local0``) or codes."""
        return _syslog_code(v, SYSLOG_FACILITIES, "facility")

    @field_validator("severity", mode="before")
    @classmethod
    def severity_code(cls, v):
        """Accept severity names (``error``) or codes."""
        return _syslog_code(v, SYSLOG_SEVERITIES, "severity")

    @property
    def priority(self) -> int:
        return self.facility * 8 + self.severity


class SyslogOutput(BaseOutput):
    type: Literal["syslog"] = OUTPUT_TYPE_SYSLOG
    url: str = Field(min_length=1)
    syslog: SyslogTuning = Field(default_factory=SyslogTuning)


class UnrecognizedOutput(BaseOutput):
    """An output whose type has no builder; it validates but compiles to nothing."""
    type: str

    model_config = ConfigDict(
        extra='ignore',
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )


def _output_tag(value: Any) -> str:
    if isinstance(value, dict):
        output_type = value.get("type")
    else:
        output_type = getattr(value, "type", None)
    if isinstance(value, UnrecognizedOutput) or output_type not in KNOWN_OUTPUT_TYPES:
        return "unrecognized"
    return output_type


OutputSpec = Annotated[
    Union[
        Annotated[KafkaOutput, Tag(OUTPUT_TYPE_KAFKA)],
        Annotated[LokiOutput, Tag(OUTPUT_TYPE_LOKI)],
        Annotated[ElasticsearchOutput, Tag(OUTPUT_TYPE_ELASTICSEARCH)],
        Annotated[CloudwatchOutput, Tag(OUTPUT_TYPE_CLOUDWATCH)],
        Annotated[GoogleCloudLoggingOutput, Tag(OUTPUT_TYPE_GOOGLE_CLOUD_LOGGING)],
        Annotated[SplunkOutput, Tag(OUTPUT_TYPE_SPLUNK)],
        Annotated[HttpOutput, Tag(OUTPUT_TYPE_HTTP)],
        Annotated[SyslogOutput, Tag(OUTPUT_TYPE_SYSLOG)],
        Annotated[UnrecognizedOutput, Tag("unrecognized")],
    ],
    Discriminator(_output_tag),
]

output_adapter = TypeAdapter(OutputSpec)


# =============================================================================
# Pipelines and the forwarder spec
# =============================================================================

class PipelineSpec(ForwarderBaseModel):
    """Binds input names to output names."""
    name: str = ""
    input_refs: list[str] = Field(default_factory=list, alias="inputRefs")
    output_refs: list[str] = Field(default_factory=list, alias="outputRefs")
    labels: Optional[dict[str, str]] = None


class ClusterLogForwarderSpec(ForwarderBaseModel):
    """The declarative forwarding specification compiled by the generator.

    Usage
    -----
        spec = ClusterLogForwarderSpec.model_validate({
            "inputs": [{"name": "my-app", "application": {"namespaces": ["ns-a"]}}],
            "outputs": [{"name": "es", "type": "elasticsearch", "url": "https://es:9200"}],
            "pipelines": [{"name": "p", "inputRefs": ["my-app"], "outputRefs": ["es"]}],
        })
    """

    inputs: list[InputSpec] = Field(default_factory=list)
    outputs: list[OutputSpec] = Field(default_factory=list)
    pipelines: list[PipelineSpec] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def name_anonymous_pipelines(cls, data: Any) -> Any:
        """Give unnamed pipelines the stable name ``pipeline_<index>_``."""
        if not isinstance(data, dict) or not data.get("pipelines"):
            return data
        data = dict(data)
        pipelines = []
        for index, pipeline in enumerate(data["pipelines"]):
            default_name = f"pipeline_{index}_"
            if isinstance(pipeline, PipelineSpec):
                if not pipeline.name:
                    pipeline = pipeline.model_copy(update={"name": default_name})
            elif isinstance(pipeline, dict) and not pipeline.get("name"):
                pipeline = {**pipeline, "name": default_name}
            pipelines.append(pipeline)
        data["pipelines"] = pipelines
        return data

    @model_validator(mode="after")
    def unique_names(self):
        """Names must be unique within their kind and compile to distinct component IDs."""
        for kind, names in (
            ("input", [i.name for i in self.inputs]),
            ("output", [o.name for o in self.outputs]),
            ("pipeline", [p.name for p in self.pipelines]),
        ):
            seen = set()
            for name in names:
                if name in seen:
                    raise ValueError(f"duplicate {kind} name: {name!r}")
                seen.add(name)

        for spec in self.inputs:
            if spec.name in RESERVED_INPUT_NAMES:
                raise ValueError(f"input name {spec.name!r} is reserved")

        claimed: dict[str, str] = {
            cid: "a fixed component" for cid in (*RESERVED_INPUT_NAMES, *FIXED_COMPONENT_IDS)
        }
        for cid, owner in self.component_ids():
            if cid in claimed:
                raise ValueError(f"{owner} compiles to component id {cid!r}, already used by {claimed[cid]}")
            claimed[cid] = owner
        return self

    def component_ids(self) -> list[tuple[str, str]]:
        """Component IDs compiled from user-chosen names, with the name that claims each.

        Covers every ID an input, pipeline or output may emit, whether or
        not the compiled graph ends up needing it.
        """
        ids = []
        for spec in self.inputs:
            owner = f"input {spec.name!r}"
            if spec.application is not None and spec.has_policy():
                ids.append((USER_DEFINED_SOURCE_THROTTLE.format(spec.name), owner))
            if spec.is_audit_http_receiver():
                ids.append((RECEIVER_INPUT.format(spec.name), owner))
        for pipeline in self.pipelines:
            ids.append((pipeline.name, f"pipeline {pipeline.name!r}"))
        for output in self.outputs:
            owner = f"output {output.name!r}"
            cid = format_component_id(output.name)
            ids.append((cid, owner))
            if output.has_policy():
                ids.append((USER_DEFINED_SINK_THROTTLE.format(cid), owner))
            helper = OUTPUT_HELPER_IDS.get(output.type)
            if helper is not None:
                ids.append((helper.format(cid), owner))
        return ids

    def input_map(self) -> dict[str, InputSpec]:
        return {spec.name: spec for spec in self.inputs}

    def output_map(self) -> dict[str, BaseOutput]:
        return {spec.name: spec for spec in self.outputs}
