"""Command-line interface modules for logforward.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from logforward.cli.generate import generate_collector_config

__all__ = ['generate_collector_config']
