"""
Type definitions for json2k8s application descriptors.

These dataclasses mirror the JSON descriptor schema. Parsing assumes the
input already passed ``schema.validate_descriptor``; the objects are frozen
and never modified after parsing.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class Environment(str, Enum):
    """Target environment overlay."""
    STAGE = "stage"
    PROD = "prod"


class AppType(str, Enum):
    """Descriptor variant tag."""
    DEPLOYMENT = "deployment"
    CRONJOB = "cronjob"


class Workflow(str, Enum):
    """Node pool / toleration selector.

    ``points`` is only accepted for cronjobs.
    """
    CRITICAL = "critical"
    NONCRITICAL = "noncritical"
    POINTS = "points"


class ConcurrencyPolicy(str, Enum):
    ALLOW = "Allow"
    FORBID = "Forbid"
    REPLACE = "Replace"


class DeploymentStrategy(str, Enum):
    ROLLING_UPDATE = "RollingUpdate"
    RECREATE = "Recreate"


class AccessMode(str, Enum):
    READ_WRITE_ONCE = "ReadWriteOnce"
    READ_WRITE_MANY = "ReadWriteMany"
    READ_ONLY_MANY = "ReadOnlyMany"


class SecretDelivery(str, Enum):
    """How a secret reaches the container."""
    ENV_VAR = "envVar"
    FILE = "file"


@dataclass(frozen=True)
class EnvVar:
    """Plain name/value environment variable."""
    name: str
    value: str

    @classmethod
    def from_dict(cls, data: Dict) -> "EnvVar":
        return cls(name=data["name"], value=data["value"])

    def to_k8s(self) -> Dict[str, str]:
        return {"name": self.name, "value": self.value}


@dataclass(frozen=True)
class SecretRef:
    """Reference into the resolved secret mapping.

    Delivered as an environment variable when ``env_var`` is set, otherwise
    as a read-only file ``name`` under ``file_path``.
    """
    source: str
    env_var: Optional[str] = None
    file_path: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "SecretRef":
        return cls(
            source=data["source"],
            env_var=data.get("envVar"),
            file_path=data.get("filePath"),
            name=data.get("name"),
        )

    @property
    def delivery(self) -> Optional[SecretDelivery]:
        if self.env_var:
            return SecretDelivery.ENV_VAR
        if self.file_path and self.name:
            return SecretDelivery.FILE
        return None

    @property
    def is_env_var(self) -> bool:
        return self.delivery == SecretDelivery.ENV_VAR

    @property
    def is_file(self) -> bool:
        return self.delivery == SecretDelivery.FILE


@dataclass(frozen=True)
class ResourceQuantities:
    cpu: str
    memory: str

    @classmethod
    def from_dict(cls, data: Dict) -> "ResourceQuantities":
        return cls(cpu=data["cpu"], memory=data["memory"])

    def to_k8s(self) -> Dict[str, str]:
        return {"cpu": self.cpu, "memory": self.memory}


@dataclass(frozen=True)
class ResourcesConfig:
    """Container resource requests and limits."""
    requests: ResourceQuantities
    limits: ResourceQuantities

    @classmethod
    def from_dict(cls, data: Dict) -> "ResourcesConfig":
        return cls(
            requests=ResourceQuantities.from_dict(data["requests"]),
            limits=ResourceQuantities.from_dict(data["limits"]),
        )

    def to_k8s(self) -> Dict[str, Dict[str, str]]:
        return {"requests": self.requests.to_k8s(), "limits": self.limits.to_k8s()}


@dataclass(frozen=True)
class PersistentVolume:
    """Persistent volume claimed and mounted per replica group."""
    name: str
    mount_path: str
    size: str
    access_mode: AccessMode
    sub_path: Optional[str] = None
    storage_class: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "PersistentVolume":
        return cls(
            name=data["name"],
            mount_path=data["mountPath"],
            size=data["size"],
            access_mode=AccessMode(data["accessMode"]),
            sub_path=data.get("subPath"),
            storage_class=data.get("storageClass"),
        )


@dataclass(frozen=True)
class AutoscalingConfig:
    enabled: bool
    min_replicas: int
    max_replicas: int
    target_cpu_utilization: Optional[int] = None
    target_memory_utilization: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["AutoscalingConfig"]:
        if not data:
            return None
        return cls(
            enabled=data["enabled"],
            min_replicas=data["minReplicas"],
            max_replicas=data["maxReplicas"],
            target_cpu_utilization=data.get("targetCPUUtilizationPercentage"),
            target_memory_utilization=data.get("targetMemoryUtilizationPercentage"),
        )


@dataclass(frozen=True)
class IngressConfig:
    enabled: bool = False
    sub_domain_created: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["IngressConfig"]:
        if not data:
            return None
        return cls(
            enabled=data["enabled"],
            sub_domain_created=data["subDomainCreated"],
        )


@dataclass(frozen=True)
class SidecarConfig:
    """Secondary container scheduled next to the primary one.

    ``security_context`` and ``volume_mounts`` are copied into the manifest
    as given.
    """
    enabled: bool
    image: str
    name: Optional[str] = None
    env: List[EnvVar] = field(default_factory=list)
    secrets: List[SecretRef] = field(default_factory=list)
    resources: Optional[ResourcesConfig] = None
    security_context: Optional[Any] = None
    volume_mounts: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "SidecarConfig":
        resources = data.get("resources")
        return cls(
            enabled=data["enabled"],
            image=data["image"],
            name=data.get("name"),
            env=[EnvVar.from_dict(e) for e in data.get("env", [])],
            secrets=[SecretRef.from_dict(s) for s in data.get("secrets", [])],
            resources=ResourcesConfig.from_dict(resources) if resources else None,
            security_context=data.get("securityContext"),
            volume_mounts=list(data.get("volumeMounts", [])),
        )


@dataclass(frozen=True)
class ReplicaGroup:
    """One independently scaled Deployment inside an app."""
    name: str
    replicas: int
    resources: ResourcesConfig
    secrets: List[SecretRef] = field(default_factory=list)
    env: List[EnvVar] = field(default_factory=list)
    persistent_volumes: List[PersistentVolume] = field(default_factory=list)
    autoscaling: Optional[AutoscalingConfig] = None
    deployment_strategy: DeploymentStrategy = DeploymentStrategy.ROLLING_UPDATE

    @classmethod
    def from_dict(cls, data: Dict) -> "ReplicaGroup":
        strategy = data.get("deploymentStrategy")
        return cls(
            name=data["name"],
            replicas=data["replicas"],
            resources=ResourcesConfig.from_dict(data["resources"]),
            secrets=[SecretRef.from_dict(s) for s in data.get("secrets", [])],
            env=[EnvVar.from_dict(e) for e in data.get("env", [])],
            persistent_volumes=[
                PersistentVolume.from_dict(v)
                for v in data.get("persistentVolumes", [])
            ],
            autoscaling=AutoscalingConfig.from_dict(data.get("autoscaling")),
            deployment_strategy=(
                DeploymentStrategy(strategy) if strategy
                else DeploymentStrategy.ROLLING_UPDATE
            ),
        )

    @property
    def autoscaling_enabled(self) -> bool:
        return self.autoscaling is not None and self.autoscaling.enabled


@dataclass(frozen=True)
class SharedConfig:
    """Settings applied to every replica group of an environment."""
    workflow: Workflow
    sidecar: SidecarConfig
    ports: List[int] = field(default_factory=list)
    image_tag: Optional[str] = None
    image_path: Optional[str] = None
    command: Optional[List[str]] = None
    args: Optional[List[str]] = None
    liveness_probe: Optional[Dict[str, Any]] = None
    readiness_probe: Optional[Dict[str, Any]] = None
    startup_probe: Optional[Dict[str, Any]] = None
    ingress: Optional[IngressConfig] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "SharedConfig":
        return cls(
            workflow=Workflow(data["workflow"]),
            sidecar=SidecarConfig.from_dict(data["sidecar"]),
            ports=list(data.get("ports", [])),
            image_tag=data.get("imageTag"),
            image_path=data.get("imagePath"),
            command=data.get("command"),
            args=data.get("args"),
            liveness_probe=data.get("livenessProbe"),
            readiness_probe=data.get("readinessProbe"),
            startup_probe=data.get("startupProbe"),
            ingress=IngressConfig.from_dict(data.get("ingress")),
        )

    @property
    def ingress_enabled(self) -> bool:
        return self.ingress is not None and self.ingress.enabled


@dataclass(frozen=True)
class DeploymentEnv:
    replica_groups: List[ReplicaGroup]
    shared: SharedConfig

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["DeploymentEnv"]:
        if not data:
            return None
        return cls(
            replica_groups=[ReplicaGroup.from_dict(g) for g in data["replicaGroups"]],
            shared=SharedConfig.from_dict(data["shared"]),
        )


@dataclass(frozen=True)
class CronJobConfig:
    """Scheduled job settings for one environment."""
    workflow: Workflow
    schedule: str
    concurrency_policy: ConcurrencyPolicy
    resources: ResourcesConfig
    successful_jobs_history_limit: Optional[int] = None
    failed_jobs_history_limit: Optional[int] = None
    starting_deadline_seconds: Optional[int] = None
    backoff_limit: Optional[int] = None
    ttl_seconds_after_finished: Optional[int] = None
    suspend: Optional[bool] = None
    env: List[EnvVar] = field(default_factory=list)
    secrets: List[SecretRef] = field(default_factory=list)
    image_tag: Optional[str] = None
    image_path: Optional[str] = None
    command: Optional[List[str]] = None
    args: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "CronJobConfig":
        return cls(
            workflow=Workflow(data["workflow"]),
            schedule=data["schedule"],
            concurrency_policy=ConcurrencyPolicy(data["concurrencyPolicy"]),
            resources=ResourcesConfig.from_dict(data["resources"]),
            successful_jobs_history_limit=data.get("successfulJobsHistoryLimit"),
            failed_jobs_history_limit=data.get("failedJobsHistoryLimit"),
            starting_deadline_seconds=data.get("startingDeadlineSeconds"),
            backoff_limit=data.get("backoffLimit"),
            ttl_seconds_after_finished=data.get("ttlSecondsAfterFinished"),
            suspend=data.get("suspend"),
            env=[EnvVar.from_dict(e) for e in data.get("env", [])],
            secrets=[SecretRef.from_dict(s) for s in data.get("secrets", [])],
            image_tag=data.get("imageTag"),
            image_path=data.get("imagePath"),
            command=data.get("command"),
            args=data.get("args"),
        )


@dataclass(frozen=True)
class CronJobEnv:
    cronjob: CronJobConfig

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["CronJobEnv"]:
        if not data:
            return None
        return cls(cronjob=CronJobConfig.from_dict(data["cronjob"]))


@dataclass(frozen=True)
class DeploymentApp:
    """Long-running app descriptor (``type: deployment``)."""
    name: str
    team: str
    stage: Optional[DeploymentEnv] = None
    prod: Optional[DeploymentEnv] = None
    type: AppType = field(default=AppType.DEPLOYMENT, init=False)

    @classmethod
    def from_dict(cls, data: Dict) -> "DeploymentApp":
        return cls(
            name=data["name"],
            team=data["team"],
            stage=DeploymentEnv.from_dict(data.get("stage")),
            prod=DeploymentEnv.from_dict(data.get("prod")),
        )

    def get_env(self, env: Environment) -> Optional[DeploymentEnv]:
        return getattr(self, env.value)


@dataclass(frozen=True)
class CronJobApp:
    """Scheduled app descriptor (``type: cronjob``)."""
    name: str
    team: str
    stage: Optional[CronJobEnv] = None
    prod: Optional[CronJobEnv] = None
    type: AppType = field(default=AppType.CRONJOB, init=False)

    @classmethod
    def from_dict(cls, data: Dict) -> "CronJobApp":
        return cls(
            name=data["name"],
            team=data["team"],
            stage=CronJobEnv.from_dict(data.get("stage")),
            prod=CronJobEnv.from_dict(data.get("prod")),
        )

    def get_env(self, env: Environment) -> Optional[CronJobEnv]:
        return getattr(self, env.value)


AppDescriptor = Union[DeploymentApp, CronJobApp]

_VARIANTS = {
    AppType.DEPLOYMENT: DeploymentApp,
    AppType.CRONJOB: CronJobApp,
}


def parse_descriptor(data: Dict) -> AppDescriptor:
    """Build the descriptor variant selected by ``data["type"]``.

    Raises:
        ValueError: If the type tag is unknown
    """
    app_type = AppType(data["type"])
    return _VARIANTS[app_type].from_dict(data)
