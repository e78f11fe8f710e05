#!/usr/bin/env python3
"""Collector Config Generator (script wrapper).

This is a thin wrapper around logforward.cli.generate.

Usage:
    python scripts/generate_collector_config.py scripts/forwarder_config.py
    python scripts/generate_collector_config.py forwarder.json --secrets secrets.json -o vector.json
    python scripts/generate_collector_config.py forwarder.json --metrics-port 9090 --listen-ipv6
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from logforward.cli.generate import main

if __name__ == "__main__":
    sys.exit(main())
