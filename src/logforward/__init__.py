"""`logforward` - compiles log-forwarder specifications into collector pipelines.

Subpackages:
- schemas: Forwarder data model and generator options
- contracts: Compiled graph invariants
- generator: Pipeline compiler (inputs, pipelines, outputs)
- cli: Command-line runner
"""

__version__ = "0.1.0"
