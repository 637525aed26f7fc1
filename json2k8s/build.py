"""
Build orchestration: descriptors + secrets -> manifest files on disk.

A build is all-or-nothing. Secrets are resolved once per environment, every
manifest is generated in memory, and only then is the build directory
cleared and written.
"""

import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import yaml

from . import constants
from .generators import (
    BuildContext,
    ManifestFile,
    generate_cronjob_manifests,
    generate_deployment_manifests,
)
from .schema import load_descriptors
from .secrets import SecretSource, create_secret_source
from .types import AppDescriptor, AppType, Environment

logger = logging.getLogger(__name__)

SecretSnapshot = Dict[Environment, Dict[str, str]]


@dataclass
class BuildOptions:
    """Options of one build run."""
    config_dir: str
    build_dir: str = "build"
    app_name: Optional[str] = None  # None builds every descriptor
    secrets_dir: Optional[str] = None  # None builds without secrets
    secret_source: Optional[SecretSource] = None  # defaults to sops
    ingress_domain: str = field(default_factory=constants.ingress_domain)
    registry: str = field(default_factory=constants.registry)


def rollout_timestamp() -> str:
    """Current UTC time in the format used by the rollout-trigger annotation."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def resolve_secrets(
    secret_source: Optional[SecretSource],
    secrets_dir: Optional[str],
) -> SecretSnapshot:
    """
    Resolve the secrets of every environment once.

    Args:
        secret_source: Source to resolve with; defaults to sops
        secrets_dir: Directory of secret files; None yields empty mappings

    Returns:
        Mapping of environment to its secret values

    Raises:
        SecretSourceError: If a source fails
    """
    if not secrets_dir:
        return {env: {} for env in Environment}
    if secret_source is None:
        secret_source = create_secret_source()
    return {env: secret_source.resolve(env, secrets_dir) for env in Environment}


def build_app(
    descriptor: AppDescriptor,
    secrets: SecretSnapshot,
    timestamp: str,
    ingress_domain: Optional[str] = None,
    registry: Optional[str] = None,
) -> List[ManifestFile]:
    """
    Generate the manifests of one descriptor for every defined environment.

    Args:
        descriptor: Validated descriptor
        secrets: Resolved secrets per environment
        timestamp: Rollout trigger value
        ingress_domain: Base domain for ingress hosts (defaults to
            JSON2K8S_INGRESS_DOMAIN or mrgn.app)
        registry: Image registry used with imageTag (defaults to
            JSON2K8S_REGISTRY or the shared registry)

    Returns:
        Manifest files of all environments
    """
    ingress_domain = ingress_domain or constants.ingress_domain()
    registry = registry or constants.registry()

    manifests: List[ManifestFile] = []
    for env in Environment:
        if descriptor.get_env(env) is None:
            continue

        ctx = BuildContext(
            app_name=descriptor.name,
            team=descriptor.team,
            env=env,
            rollout_timestamp=timestamp,
            ingress_domain=ingress_domain,
            registry=registry,
        )
        if descriptor.type == AppType.DEPLOYMENT:
            manifests.extend(generate_deployment_manifests(descriptor, secrets[env], ctx))
        else:
            manifests.extend(generate_cronjob_manifests(descriptor, secrets[env], ctx))
    return manifests


def build(
    descriptors: Sequence[AppDescriptor],
    secret_source: Optional[SecretSource] = None,
    secrets_dir: Optional[str] = None,
    ingress_domain: Optional[str] = None,
    registry: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> List[ManifestFile]:
    """
    Generate the manifests of every descriptor.

    Secrets are resolved before any generator runs, once per environment,
    so every descriptor sees the same snapshot.

    Args:
        descriptors: Validated descriptors
        secret_source: Source used to resolve secrets (defaults to sops)
        secrets_dir: Directory of secret files (None disables secrets)
        ingress_domain: Base domain for ingress hosts (see build_app)
        registry: Image registry used with imageTag (see build_app)
        timestamp: Rollout trigger value (defaults to now)

    Returns:
        All manifest files, in descriptor order

    Raises:
        Json2K8sError: On the first failure; nothing is returned
    """
    snapshot = resolve_secrets(secret_source, secrets_dir)
    timestamp = timestamp or rollout_timestamp()

    manifests: List[ManifestFile] = []
    for descriptor in descriptors:
        app_manifests = build_app(descriptor, snapshot, timestamp, ingress_domain, registry)
        if not app_manifests:
            logger.info(f"No environments defined for {descriptor.name}, skipping")
        manifests.extend(app_manifests)
    return manifests


def dump_manifest(document: Dict) -> str:
    """Serialize one manifest to YAML."""
    return yaml.dump(document, default_flow_style=False, sort_keys=False)


def write_manifests(manifests: Sequence[ManifestFile], build_dir: str) -> List[Path]:
    """
    Replace the contents of the build directory with the given manifests.

    Args:
        manifests: Files to write
        build_dir: Build root; removed and recreated

    Returns:
        Paths written
    """
    root = Path(build_dir)
    if root.exists():
        shutil.rmtree(root)
    root.mkdir(parents=True)

    written = []
    for manifest in manifests:
        out_file = root / manifest.path
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_text(dump_manifest(manifest.document), encoding="utf-8")
        logger.debug(f"Written: {out_file}")
        written.append(out_file)
    return written


def run_build(options: BuildOptions) -> List[Path]:
    """
    Load descriptors, generate every manifest and write the build directory.

    Args:
        options: Build options

    Returns:
        Paths written

    Raises:
        FileNotFoundError: If a requested descriptor does not exist
        Json2K8sError: If validation, secret resolution or generation fails;
            the build directory is left untouched
    """
    descriptors = load_descriptors(options.config_dir, options.app_name)

    manifests = build(
        descriptors,
        secret_source=options.secret_source,
        secrets_dir=options.secrets_dir,
        ingress_domain=options.ingress_domain,
        registry=options.registry,
    )
    written = write_manifests(manifests, options.build_dir)
    logger.info(f"Generated {len(written)} manifests for {len(descriptors)} apps")
    return written
