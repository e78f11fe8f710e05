"""Pipeline compiler modules.

- expressions: Boolean condition builder
- selector: Application selector compilation
- inputs: Log type classification, user routing and input throttles
- pipelines: Named pipeline stages
- outputs: Output dispatch and collector metrics
- conf: Whole-pass generator
"""

from logforward.generator.conf import CollectorConfigGenerator
from logforward.generator.elements import Element, Remap, Route, Sink, Throttle, render_config

__all__ = [
    "CollectorConfigGenerator",
    "Element",
    "Remap",
    "Route",
    "Sink",
    "Throttle",
    "render_config",
]
