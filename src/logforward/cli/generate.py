"""Collector config generation from files on disk.

This module contains the actual runner, separated from argument parsing.
Scripts are thin wrappers; this is the real implementation.
"""

import argparse
import importlib.util
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from logforward.generator import CollectorConfigGenerator
from logforward.schemas import (
    CLIConfig,
    ClusterLogForwarderSpec,
    ParamConfig,
    Secret,
    UserConfig,
    resolve_config,
)

logger = logging.getLogger(__name__)

GENERATOR_SECTION = "generator"


def load_forwarder_dict(spec_path: str) -> dict:
    """Load the raw forwarder dict from a JSON file or a Python file.

    Python files must define a dict whose name starts with ``CONFIG``.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If no forwarder dict is found in the file.
    """
    path = Path(spec_path)
    if not path.exists():
        raise FileNotFoundError(f"Forwarder spec not found: {path}")

    if path.suffix == ".py":
        spec = importlib.util.spec_from_file_location("forwarder_module", path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        for name in dir(module):
            if name.startswith('CONFIG'):
                obj = getattr(module, name)
                if isinstance(obj, dict):
                    return obj
        raise ValueError(f"No CONFIG dict found in {path}")

    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"Forwarder spec in {path} must be a JSON object")
    return data


def load_secrets(secrets_path: Optional[str]) -> Dict[str, Secret]:
    """Load ``{"<key>": {"name": ..., "data": {...}}}`` secrets from JSON.

    Keys are output names or the fallback collector token name.
    """
    if secrets_path is None:
        return {}
    path = Path(secrets_path)
    if not path.exists():
        raise FileNotFoundError(f"Secrets file not found: {path}")
    raw = json.loads(path.read_text())
    return {key: Secret.model_validate(value) for key, value in raw.items()}


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a console handler."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)


def generate_collector_config(
    spec_path: str,
    secrets_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    output_path: Optional[str] = None,
    verbose: bool = False,
) -> str:
    """Compile a forwarder spec file into collector configuration.

    1. Loads the forwarder dict and splits off its ``generator`` section
    2. Resolves generator options (Param < User < CLI)
    3. Validates the forwarder spec and loads secrets
    4. Compiles and renders the configuration
    5. Writes it to ``output_path`` when given

    Parameters
    ----------
    spec_path : str
        JSON or Python forwarder spec file.
    secrets_path : str, optional
        JSON file of secrets keyed by output name.
    cli_args : dict, optional
        CLI overrides. Keys: log_level, metrics_port, listen_ipv6,
        trusted_ca_file. All optional.
    output_path : str, optional
        Where to write the rendered configuration.
    verbose : bool, optional
        If True, enable DEBUG logging.

    Returns
    -------
    str
        Rendered collector configuration.

    Raises
    ------
    FileNotFoundError
        If an input file does not exist.
    pydantic.ValidationError
        If the spec, secrets or options fail validation.
    """
    raw = dict(load_forwarder_dict(spec_path))
    user_cfg = UserConfig.model_validate(raw.pop(GENERATOR_SECTION, None) or {})

    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config = resolve_config(ParamConfig(), user_cfg, cli_cfg)
    setup_logging(config.logging.level)

    spec = ClusterLogForwarderSpec.model_validate(raw)
    secrets = load_secrets(secrets_path)
    logger.info("Loaded forwarder spec %s (%d secrets)", spec_path, len(secrets))

    text = CollectorConfigGenerator(config).render(spec, secrets)

    if output_path is not None:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        logger.info("Wrote collector config: %s", path)
    return text


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Compile a log forwarder spec into collector configuration")
    parser.add_argument("spec", help="Path to forwarder spec (JSON or Python CONFIG dict)")
    parser.add_argument("--secrets", help="JSON file of secrets keyed by output name")
    parser.add_argument("-o", "--output", help="Write configuration to this file instead of stdout")
    parser.add_argument("--metrics-port", type=int, help="Override metrics exporter port")
    parser.add_argument("--listen-ipv6", action="store_true", default=None, help="Listen on [::] for metrics")
    parser.add_argument("--trusted-ca-file", help="CA bundle for TLS outputs without their own")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    text = generate_collector_config(
        args.spec,
        secrets_path=args.secrets,
        cli_args={
            "metrics_port": args.metrics_port,
            "listen_ipv6": args.listen_ipv6,
            "trusted_ca_file": args.trusted_ca_file,
        },
        output_path=args.output,
        verbose=args.verbose,
    )
    if args.output is None:
        print(text, end="")
    return 0
