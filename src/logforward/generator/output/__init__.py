"""Destination builders, one module per output family.

Each family module exposes ``conf(output, inputs, secret, config)``
returning the elements for that destination; ``default_registry()``
maps output type tags to them.
"""

from logforward.generator.output.registry import Builder, BuilderRegistry, default_registry

__all__ = ["Builder", "BuilderRegistry", "default_registry"]
