"""Helpers shared by the destination builders: IDs, auth and TLS blocks."""

from typing import Any, Optional
from urllib.parse import urlparse

from logforward.schemas.forwarder import BaseOutput
from logforward.schemas.ids import format_component_id
from logforward.schemas.internal import InternalConfig
from logforward.schemas.secret import Secret

TLS_SCHEMES = ("https", "tls", "ssl")

# Secret keys read by the builders
KEY_USERNAME = "username"
KEY_PASSWORD = "password"
KEY_TOKEN = "token"
KEY_TLS_CRT = "tls.crt"
KEY_TLS_KEY = "tls.key"
KEY_CA_BUNDLE = "ca-bundle.crt"
KEY_PASSPHRASE = "passphrase"

JSON_ENCODING = {"codec": "json"}


def url_scheme(output: BaseOutput) -> str:
    return urlparse(output.url).scheme.lower() if output.url else ""


def secret_path(config: InternalConfig, secret: Secret, key: str) -> str:
    """Path of one secret key as mounted in the collector pod."""
    return f"{config.secrets.mount_dir}/{secret.name}/{key}"


def basic_auth(secret: Optional[Secret]) -> Optional[dict[str, Any]]:
    if secret is None or not (secret.has(KEY_USERNAME) and secret.has(KEY_PASSWORD)):
        return None
    return {
        "strategy": "basic",
        "user": secret.get(KEY_USERNAME),
        "password": secret.get(KEY_PASSWORD),
    }


def bearer_auth(secret: Optional[Secret]) -> Optional[dict[str, Any]]:
    if secret is None or not secret.has(KEY_TOKEN):
        return None
    return {"strategy": "bearer", "token": secret.get(KEY_TOKEN)}


def http_auth(secret: Optional[Secret]) -> Optional[dict[str, Any]]:
    """Basic auth when username and password exist, else bearer token, else None."""
    return basic_auth(secret) or bearer_auth(secret)


def tls_config(output: BaseOutput, secret: Optional[Secret], config: InternalConfig,
               enableable: bool = False) -> Optional[dict[str, Any]]:
    """TLS block for outputs whose URL scheme asks for TLS.

    Parameters
    ----------
    output : BaseOutput
        Destination being configured
    secret : Secret or None
        Resolved credential; supplies client certificates and CA bundle
    config : InternalConfig
        Generator options; supplies the cluster TLS profile
    enableable : bool, optional
        Socket-style sinks need an explicit ``enabled`` flag

    Returns
    -------
    dict or None
        None when the endpoint does not use TLS
    """
    if url_scheme(output) not in TLS_SCHEMES:
        return None

    tls: dict[str, Any] = {
        "min_tls_version": config.tls.min_tls_version,
        "ciphersuites": ",".join(config.tls.ciphers),
    }
    if enableable:
        tls["enabled"] = True

    if secret is not None:
        if secret.has(KEY_TLS_CRT) and secret.has(KEY_TLS_KEY):
            tls["crt_file"] = secret_path(config, secret, KEY_TLS_CRT)
            tls["key_file"] = secret_path(config, secret, KEY_TLS_KEY)
        if secret.has(KEY_PASSPHRASE):
            tls["key_pass"] = secret.get(KEY_PASSPHRASE)
        if secret.has(KEY_CA_BUNDLE):
            tls["ca_file"] = secret_path(config, secret, KEY_CA_BUNDLE)
    if "ca_file" not in tls and config.tls.trusted_ca_file:
        tls["ca_file"] = config.tls.trusted_ca_file

    if output.tls is not None and output.tls.insecure_skip_verify:
        tls["verify_certificate"] = False
        tls["verify_hostname"] = False
    return tls


def with_optional(options: dict[str, Any], **extra: Any) -> dict[str, Any]:
    """Copy of ``options`` with every non-None keyword added."""
    result = dict(options)
    result.update({key: value for key, value in extra.items() if value is not None})
    return result
