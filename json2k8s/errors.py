"""
Exceptions raised while loading descriptors and generating manifests.

Everything derives from Json2K8sError so the CLI can turn any build failure
into a non-zero exit with a single except clause.
"""

from typing import Dict, List, Optional


class Json2K8sError(Exception):
    """Base class for all json2k8s failures."""


class DescriptorValidationError(Json2K8sError, ValueError):
    """One or more descriptors failed schema validation.

    ``errors`` maps the descriptor identifier (usually the file name) to the
    list of ``"path: message"`` strings reported for it.
    """

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        lines = []
        for source, messages in errors.items():
            lines.append(f"Invalid config for {source}:")
            lines.extend(f"  - {m}" for m in messages)
        super().__init__("\n".join(lines))


class ConfigurationError(Json2K8sError, ValueError):
    """A validated descriptor cannot be turned into manifests."""


class MissingImageError(ConfigurationError):
    """Neither imagePath nor imageTag is set for an environment."""

    def __init__(self, app_name: str, env: str):
        self.app_name = app_name
        self.env = env
        super().__init__(
            f"Image path and tag are not set for {app_name} in {env} environment. "
            f"Please set the image path or tag for {app_name} in {env} environment"
        )


class DuplicateReplicaGroupError(ConfigurationError):
    """Two replica groups share a name inside one environment."""

    def __init__(self, group_name: str, env: str, app_name: str):
        self.group_name = group_name
        self.env = env
        self.app_name = app_name
        super().__init__(
            f'Duplicate replica group name "{group_name}" in environment '
            f'"{env}" for app "{app_name}".'
        )


class SecretNotFoundError(Json2K8sError, LookupError):
    """A SecretRef source is absent from the resolved secret mapping."""

    def __init__(self, source: str, env: str, app_name: Optional[str] = None):
        self.source = source
        self.env = env
        self.app_name = app_name
        where = f" (app {app_name})" if app_name else ""
        super().__init__(f'Secret "{source}" not found in {env}.secret.json{where}')

    def __str__(self) -> str:
        return self.args[0]


class SecretSourceError(Json2K8sError, RuntimeError):
    """Secrets for an environment could not be resolved."""
