"""
Secret sources.

A secret source turns an environment name into the flat mapping of secret
key to plaintext value that the Secret generator reads from. The bundled
sources expect one ``<env>.secret.json`` file per environment in the secrets
directory.
"""

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

from .constants import SECRETS_FILENAME_TEMPLATE
from .errors import SecretSourceError
from .types import Environment

logger = logging.getLogger(__name__)


def secrets_file_path(env: Environment, secrets_dir: str) -> Path:
    """Path of the secrets file for an environment."""
    return Path(secrets_dir).resolve() / SECRETS_FILENAME_TEMPLATE.format(env=env.value)


def _as_flat_mapping(data: Any, env: Environment) -> Dict[str, str]:
    if not isinstance(data, dict):
        raise SecretSourceError(
            f"Secrets for {env.value} must be a JSON object, got {type(data).__name__}"
        )
    invalid = sorted(k for k, v in data.items() if not isinstance(v, str))
    if invalid:
        raise SecretSourceError(
            f"Secrets for {env.value} must map keys to strings; "
            f"invalid keys: {', '.join(invalid)}"
        )
    return dict(data)


class SecretSource(ABC):
    """Resolves the secrets of one environment."""

    @abstractmethod
    def resolve(self, env: Environment, secrets_dir: str) -> Dict[str, str]:
        """
        Return the secret mapping for an environment.

        Args:
            env: Target environment
            secrets_dir: Directory containing the secret files

        Returns:
            Flat mapping of secret key to plaintext value

        Raises:
            SecretSourceError: If the secrets cannot be resolved
        """


class SopsSecretSource(SecretSource):
    """Decrypts ``<env>.secret.json`` with the ``sops`` binary."""

    def __init__(self, binary: str = "sops"):
        self.binary = binary

    def resolve(self, env: Environment, secrets_dir: str) -> Dict[str, str]:
        path = secrets_file_path(env, secrets_dir)
        logger.info(f"Decrypting secrets for {env.value} from {path}")
        try:
            result = subprocess.run(
                [self.binary, "-d", str(path)],
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise SecretSourceError(
                f"Failed to decrypt secrets for {env.value}: '{self.binary}' is not installed"
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise SecretSourceError(
                f"Failed to decrypt secrets for {env.value}: {stderr or e}"
            ) from e

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise SecretSourceError(
                f"Decrypted secrets for {env.value} are not valid JSON: {e}"
            ) from e
        return _as_flat_mapping(data, env)


class FileSecretSource(SecretSource):
    """Reads an unencrypted ``<env>.secret.json``. Meant for local development."""

    def resolve(self, env: Environment, secrets_dir: str) -> Dict[str, str]:
        path = secrets_file_path(env, secrets_dir)
        logger.info(f"Reading plaintext secrets for {env.value} from {path}")
        try:
            with open(path) as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise SecretSourceError(f"Secrets file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise SecretSourceError(f"Secrets file {path} is not valid JSON: {e}") from e
        return _as_flat_mapping(data, env)


SECRET_SOURCES = {
    "sops": SopsSecretSource,
    "file": FileSecretSource,
}


def create_secret_source(kind: str = "sops") -> SecretSource:
    """
    Create a secret source by name.

    Raises:
        ValueError: If the kind is not supported
    """
    try:
        return SECRET_SOURCES[kind]()
    except KeyError:
        raise ValueError(f"Unsupported secret source type: {kind}") from None
