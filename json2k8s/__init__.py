"""
json2k8s - Kubernetes manifest generator for JSON app descriptors

Turns one JSON descriptor per app into Deployment/CronJob manifests and
their Secrets, Services, Ingresses, HPAs and PVCs for the stage and prod
environments.
"""

__version__ = "0.1.0"

from .types import (
    AppDescriptor,
    AppType,
    CronJobApp,
    CronJobConfig,
    DeploymentApp,
    DeploymentEnv,
    Environment,
    ReplicaGroup,
    SecretRef,
    SharedConfig,
    SidecarConfig,
    parse_descriptor,
)

from .errors import (
    ConfigurationError,
    DescriptorValidationError,
    DuplicateReplicaGroupError,
    Json2K8sError,
    MissingImageError,
    SecretNotFoundError,
    SecretSourceError,
)

from .schema import (
    load_descriptor,
    load_descriptors,
    validate_descriptor,
)

from .secrets import (
    FileSecretSource,
    SecretSource,
    SopsSecretSource,
    create_secret_source,
)

from .generators import (
    BuildContext,
    ManifestFile,
    generate_cronjob_manifests,
    generate_deployment_manifests,
)

from .build import (
    BuildOptions,
    build,
    run_build,
    write_manifests,
)

__all__ = [
    # Types
    "AppDescriptor",
    "AppType",
    "CronJobApp",
    "CronJobConfig",
    "DeploymentApp",
    "DeploymentEnv",
    "Environment",
    "ReplicaGroup",
    "SecretRef",
    "SharedConfig",
    "SidecarConfig",
    "parse_descriptor",
    # Errors
    "ConfigurationError",
    "DescriptorValidationError",
    "DuplicateReplicaGroupError",
    "Json2K8sError",
    "MissingImageError",
    "SecretNotFoundError",
    "SecretSourceError",
    # Schema
    "load_descriptor",
    "load_descriptors",
    "validate_descriptor",
    # Secrets
    "FileSecretSource",
    "SecretSource",
    "SopsSecretSource",
    "create_secret_source",
    # Generators
    "BuildContext",
    "ManifestFile",
    "generate_cronjob_manifests",
    "generate_deployment_manifests",
    # Build
    "BuildOptions",
    "build",
    "run_build",
    "write_manifests",
]
