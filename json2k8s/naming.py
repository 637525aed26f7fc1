"""
Resource name derivation.

Secret keys, volume names and claim names are referenced from more than one
manifest; every generator derives them through these helpers so the
references always line up.
"""

import posixpath
import re

_EXTENSION_RE = re.compile(r"\.[^/.]+$")


def trim_extension(filename: str) -> str:
    """Strip the last extension: ``config.json`` -> ``config``."""
    return _EXTENSION_RE.sub("", filename)


def secret_name(resource_name: str) -> str:
    """Name of the Secret holding a group's or job's values."""
    return f"{resource_name}-secrets"


def file_secret_key(filename: str) -> str:
    """Key in the Secret data under which a file-delivered secret is stored."""
    return f"{trim_extension(filename)}-file-secrets"


def file_secret_volume_name(filename: str, sidecar: bool = False) -> str:
    """Volume (and volume mount) name for a file-delivered secret."""
    suffix = "sidecar-file-secrets" if sidecar else "file-secrets"
    return f"{trim_extension(filename)}-{suffix}"


def file_secret_mount_path(file_path: str, filename: str) -> str:
    return posixpath.join(file_path, filename)


def sidecar_name(container_name: str) -> str:
    return f"{container_name}-sidecar"


def pvc_name(group_name: str, volume_name: str) -> str:
    return f"{group_name}-{volume_name}"


def hpa_name(group_name: str) -> str:
    return f"{group_name}-hpa"


def tls_secret_name(app_name: str) -> str:
    return f"{app_name}-tls"


def ingress_name(app_name: str, subdomain: bool) -> str:
    kind = "subdomain" if subdomain else "path"
    return f"{app_name}-{kind}-ingress"


def image_url(registry: str, app_name: str, image_tag: str) -> str:
    return f"{registry}/{app_name}:{image_tag}"
