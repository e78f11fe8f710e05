"""Pydantic schemas for logforward.

Exports
-------
ClusterLogForwarderSpec : class
    The forwarder specification compiled by the generator
InputSpec, PipelineSpec, OutputSpec, Secret : classes
    Parts of the specification and the credentials handed to builders
resolve_config : function
    Single entrypoint for generator option resolution
InternalConfig, ParamConfig, UserConfig, CLIConfig : classes
    Generator option layers
"""

from logforward.schemas.forwarder import (
    ClusterLogForwarderSpec,
    InputSpec,
    OutputSpec,
    PipelineSpec,
    RateLimit,
)
from logforward.schemas.secret import Secret
from logforward.schemas.resolve import resolve_config
from logforward.schemas.internal import InternalConfig
from logforward.schemas.param import ParamConfig
from logforward.schemas.user import UserConfig
from logforward.schemas.cli import CLIConfig

__all__ = [
    'ClusterLogForwarderSpec',
    'InputSpec',
    'OutputSpec',
    'PipelineSpec',
    'RateLimit',
    'Secret',
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
