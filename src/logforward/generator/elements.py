"""Compiled graph elements and their collector configuration shape.

Every element carries a ``component_id`` and the ordered ``inputs`` it
reads from. ``to_config()`` gives the component table the collector
expects; ``render_config()`` turns a whole element list into a JSON
configuration document with a stable byte representation.
"""

import json
from typing import Annotated, Any, ClassVar, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field


class BaseElement(BaseModel):
    """Fields shared by every compiled element."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    section: ClassVar[str] = "transforms"

    component_id: str = Field(min_length=1)
    inputs: tuple[str, ...] = ()

    def outputs(self) -> tuple[str, ...]:
        """Names downstream elements may use to read from this one."""
        return (self.component_id,)

    def _config_head(self, component_type: str) -> dict[str, Any]:
        return {"type": component_type, "inputs": list(self.inputs)}


class Route(BaseElement):
    """Forwards its input to named branches selected by boolean expressions."""
    kind: Literal["route"] = "route"
    routes: dict[str, str]

    def outputs(self) -> tuple[str, ...]:
        return tuple(f"{self.component_id}.{name}" for name in sorted(self.routes))

    def to_config(self) -> dict[str, Any]:
        config = self._config_head("route")
        config["route"] = {name: self.routes[name] for name in sorted(self.routes)}
        return config


class Remap(BaseElement):
    """Rewrites records with a VRL program."""
    kind: Literal["remap"] = "remap"
    vrl: str
    desc: str = ""

    def to_config(self) -> dict[str, Any]:
        config = self._config_head("remap")
        config["source"] = self.vrl
        return config


class Throttle(BaseElement):
    """Bounds records per window, optionally bucketed by a key field."""
    kind: Literal["throttle"] = "throttle"
    threshold: int = Field(gt=0)
    key_field: Optional[str] = None
    window_secs: int = Field(1, ge=1)

    def to_config(self) -> dict[str, Any]:
        config = self._config_head("throttle")
        config["threshold"] = self.threshold
        config["window_secs"] = self.window_secs
        if self.key_field:
            config["key_field"] = self.key_field
        return config


class Sink(BaseElement):
    """A terminal destination; ``options`` is the family-specific table."""
    section: ClassVar[str] = "sinks"

    kind: Literal["sink"] = "sink"
    sink_type: str = Field(min_length=1)
    options: dict[str, Any] = Field(default_factory=dict)

    def to_config(self) -> dict[str, Any]:
        config = self._config_head(self.sink_type)
        config.update(self.options)
        return config


Element = Annotated[Union[Route, Remap, Throttle, Sink], Field(discriminator="kind")]


def render_config(elements: Sequence[BaseElement]) -> str:
    """Render elements as a collector JSON configuration document.

    Keys are sorted, so two renderings of equal element lists are
    byte-identical.

    Returns
    -------
    str
        JSON text with ``transforms`` and ``sinks`` tables
    """
    document: dict[str, dict[str, Any]] = {"transforms": {}, "sinks": {}}
    for element in elements:
        document[element.section][element.component_id] = element.to_config()
    return json.dumps(document, indent=2, sort_keys=True) + "\n"
