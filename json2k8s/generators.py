"""
Kubernetes manifest generators for application descriptors.

Generates Secret, Deployment, Service, Ingress, HorizontalPodAutoscaler,
PersistentVolumeClaim and CronJob manifests. Every generator is a pure
function returning a plain dict.
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from . import constants, naming
from .errors import (
    ConfigurationError,
    DuplicateReplicaGroupError,
    MissingImageError,
    SecretNotFoundError,
)
from .types import (
    CronJobApp,
    CronJobConfig,
    DeploymentApp,
    DeploymentEnv,
    DeploymentStrategy,
    EnvVar,
    Environment,
    PersistentVolume,
    ReplicaGroup,
    ResourcesConfig,
    SecretRef,
    SharedConfig,
    SidecarConfig,
    Workflow,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildContext:
    """Naming context shared by every generator of one app environment."""
    app_name: str
    team: str
    env: Environment
    rollout_timestamp: str
    ingress_domain: str = field(default_factory=constants.ingress_domain)
    registry: str = field(default_factory=constants.registry)


@dataclass(frozen=True)
class ManifestFile:
    """A generated document and its path relative to the build root."""
    path: str
    document: Dict[str, Any] = field(hash=False)

    @property
    def kind(self) -> str:
        return self.document["kind"]


def _output_path(ctx: BuildContext, filename: str) -> str:
    return f"{ctx.app_name}/{ctx.env.value}/{filename}"


def _encode(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def resolve_image(
    image_path: Optional[str],
    image_tag: Optional[str],
    ctx: BuildContext,
) -> str:
    """
    Resolve the container image.

    ``image_path`` is used verbatim; otherwise the image is looked up in the
    shared registry under the app name.

    Raises:
        MissingImageError: If neither is set
    """
    if image_path:
        return image_path
    if image_tag:
        return naming.image_url(ctx.registry, ctx.app_name, image_tag)
    raise MissingImageError(ctx.app_name, ctx.env.value)


def generate_secret(
    resource_name: str,
    secrets: Sequence[SecretRef],
    secret_values: Mapping[str, str],
    ctx: BuildContext,
    labels: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Generate the Secret holding a group's or job's secret values.

    Args:
        resource_name: Replica group or job name
        secrets: Secret references to materialize
        secret_values: Resolved secrets of the environment
        ctx: Build context
        labels: Extra metadata labels

    Returns:
        Secret manifest dict

    Raises:
        SecretNotFoundError: If a reference's source is not in secret_values
    """
    data: Dict[str, str] = {}
    for ref in secrets:
        if ref.source not in secret_values:
            raise SecretNotFoundError(ref.source, ctx.env.value, ctx.app_name)
        value = secret_values[ref.source]
        if ref.is_env_var:
            data[ref.env_var] = _encode(value)
        elif ref.is_file:
            data[naming.file_secret_key(ref.name)] = _encode(value)

    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {
            "name": naming.secret_name(resource_name),
            "namespace": constants.NAMESPACE,
            "labels": {
                "app": ctx.app_name,
                **(labels or {}),
            },
        },
        "type": "Opaque",
        "data": data,
    }


def _secret_env_vars(secrets: Sequence[SecretRef], resource_name: str) -> List[Dict[str, Any]]:
    return [
        {
            "name": ref.env_var,
            "valueFrom": {
                "secretKeyRef": {
                    "name": naming.secret_name(resource_name),
                    "key": ref.env_var,
                },
            },
        }
        for ref in secrets
        if ref.is_env_var
    ]


def _file_secret_mounts(secrets: Sequence[SecretRef], sidecar: bool = False) -> List[Dict[str, Any]]:
    return [
        {
            "name": naming.file_secret_volume_name(ref.name, sidecar=sidecar),
            "mountPath": naming.file_secret_mount_path(ref.file_path, ref.name),
            "subPath": ref.name,
            "readOnly": True,
        }
        for ref in secrets
        if ref.is_file
    ]


def _file_secret_volumes(
    secrets: Sequence[SecretRef],
    resource_name: str,
    sidecar: bool = False,
) -> List[Dict[str, Any]]:
    return [
        {
            "name": naming.file_secret_volume_name(ref.name, sidecar=sidecar),
            "secret": {
                "secretName": naming.secret_name(resource_name),
                "items": [
                    {
                        "key": naming.file_secret_key(ref.name),
                        "path": ref.name,
                    },
                ],
            },
        }
        for ref in secrets
        if ref.is_file
    ]


def _persistent_volume_mount(volume: PersistentVolume) -> Dict[str, Any]:
    mount: Dict[str, Any] = {
        "name": volume.name,
        "mountPath": volume.mount_path,
    }
    if volume.sub_path:
        mount["subPath"] = volume.sub_path
    return mount


def build_container(
    name: str,
    image: str,
    resources: ResourcesConfig,
    secrets: Sequence[SecretRef] = (),
    env: Sequence[EnvVar] = (),
    command: Optional[List[str]] = None,
    args: Optional[List[str]] = None,
    ports: Sequence[int] = (),
    liveness_probe: Optional[Dict[str, Any]] = None,
    readiness_probe: Optional[Dict[str, Any]] = None,
    startup_probe: Optional[Dict[str, Any]] = None,
    persistent_volumes: Sequence[PersistentVolume] = (),
) -> Dict[str, Any]:
    """
    Build the primary container spec.

    Secret-backed env vars reference ``<name>-secrets`` and come before the
    plain env vars. File secrets are mounted read-only one file each.

    Args:
        name: Container name, also the resource name of its Secret
        image: Resolved image
        resources: Requests and limits
        secrets: Secret references (env-var and file delivery)
        env: Plain env vars
        command: Entrypoint override
        args: Arguments override
        ports: Container ports
        liveness_probe: Probe passed through verbatim
        readiness_probe: Probe passed through verbatim
        startup_probe: Probe passed through verbatim
        persistent_volumes: Volumes to mount

    Returns:
        Container spec dict
    """
    container: Dict[str, Any] = {
        "name": name,
        "image": image,
        "imagePullPolicy": constants.IMAGE_PULL_POLICY,
        "resources": resources.to_k8s(),
        "env": _secret_env_vars(secrets, name) + [e.to_k8s() for e in env],
    }

    if ports:
        container["ports"] = [{"containerPort": p} for p in ports]

    if command:
        container["command"] = list(command)
    if args:
        container["args"] = list(args)

    if liveness_probe:
        container["livenessProbe"] = liveness_probe
    if readiness_probe:
        container["readinessProbe"] = readiness_probe
    if startup_probe:
        container["startupProbe"] = startup_probe

    volume_mounts = _file_secret_mounts(secrets)
    volume_mounts.extend(_persistent_volume_mount(v) for v in persistent_volumes)
    if volume_mounts:
        container["volumeMounts"] = volume_mounts

    return container


def build_sidecar_container(container_name: str, sidecar: SidecarConfig) -> Dict[str, Any]:
    """
    Build the sidecar container spec.

    The sidecar shares the primary container's Secret; its file secrets get
    their own ``-sidecar-file-secrets`` volumes.

    Args:
        container_name: Name of the primary container
        sidecar: Sidecar configuration

    Returns:
        Container spec dict
    """
    resources = (
        sidecar.resources.to_k8s() if sidecar.resources
        else {k: dict(v) for k, v in constants.SIDECAR_DEFAULT_RESOURCES.items()}
    )

    container: Dict[str, Any] = {
        "name": sidecar.name or naming.sidecar_name(container_name),
        "image": sidecar.image,
        "imagePullPolicy": constants.IMAGE_PULL_POLICY,
        "env": _secret_env_vars(sidecar.secrets, container_name)
        + [e.to_k8s() for e in sidecar.env],
        "resources": resources,
    }

    if sidecar.security_context is not None:
        container["securityContext"] = sidecar.security_context

    volume_mounts = _file_secret_mounts(sidecar.secrets, sidecar=True)
    volume_mounts.extend(sidecar.volume_mounts)
    if volume_mounts:
        container["volumeMounts"] = volume_mounts

    return container


def _pod_metadata(labels: Dict[str, str], ctx: BuildContext) -> Dict[str, Any]:
    return {
        "labels": dict(labels),
        "annotations": {
            constants.ROLLOUT_TRIGGER_ANNOTATION: ctx.rollout_timestamp,
            **constants.METRICS_ANNOTATIONS,
        },
    }


def _tolerations(workflow: Workflow) -> List[Dict[str, str]]:
    return [{
        "key": constants.TOLERATION_KEY,
        "operator": "Equal",
        "value": workflow.value,
        "effect": "NoSchedule",
    }]


def _node_selector(workflow: Workflow) -> Dict[str, str]:
    return {constants.NODE_POOL_LABEL: workflow.value}


def group_labels(group: ReplicaGroup, ctx: BuildContext) -> Dict[str, str]:
    """Pod labels of a replica group."""
    return {
        "app": ctx.app_name,
        "replicaGroup": group.name,
        "team": ctx.team,
    }


def group_selector(group_name: str, ctx: BuildContext) -> Dict[str, str]:
    """Labels selecting the pods of one replica group."""
    return {"app": ctx.app_name, "replicaGroup": group_name}


def build_pod_template(
    group: ReplicaGroup,
    shared: SharedConfig,
    container: Dict[str, Any],
    ctx: BuildContext,
) -> Dict[str, Any]:
    """
    Build the pod template of a replica group.

    Args:
        group: Replica group
        shared: Shared environment settings
        container: Primary container spec
        ctx: Build context

    Returns:
        Pod template dict (metadata + spec)
    """
    containers = [container]
    if shared.sidecar.enabled:
        containers.append(build_sidecar_container(container["name"], shared.sidecar))

    pod_spec: Dict[str, Any] = {
        "containers": containers,
        "tolerations": _tolerations(shared.workflow),
        "nodeSelector": _node_selector(shared.workflow),
        "restartPolicy": "Always",
    }

    volumes = _file_secret_volumes(group.secrets, group.name)
    if shared.sidecar.enabled:
        volumes.extend(_file_secret_volumes(shared.sidecar.secrets, group.name, sidecar=True))
    volumes.extend(
        {
            "name": volume.name,
            "persistentVolumeClaim": {
                "claimName": naming.pvc_name(group.name, volume.name),
            },
        }
        for volume in group.persistent_volumes
    )
    if volumes:
        pod_spec["volumes"] = volumes

    return {
        "metadata": _pod_metadata(group_labels(group, ctx), ctx),
        "spec": pod_spec,
    }


def _strategy(strategy: DeploymentStrategy) -> Dict[str, Any]:
    if strategy == DeploymentStrategy.RECREATE:
        return {"type": DeploymentStrategy.RECREATE.value}
    return {
        "type": DeploymentStrategy.ROLLING_UPDATE.value,
        "rollingUpdate": {
            "maxSurge": constants.ROLLING_UPDATE_MAX_SURGE,
            "maxUnavailable": constants.ROLLING_UPDATE_MAX_UNAVAILABLE,
        },
    }


def generate_deployment(
    group: ReplicaGroup,
    template: Dict[str, Any],
    ctx: BuildContext,
) -> Dict[str, Any]:
    """
    Generate the Deployment of a replica group.

    Args:
        group: Replica group
        template: Pod template from build_pod_template
        ctx: Build context

    Returns:
        Deployment manifest dict
    """
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": group.name,
            "namespace": constants.NAMESPACE,
            "labels": group_labels(group, ctx),
        },
        "spec": {
            "replicas": group.replicas,
            "strategy": _strategy(group.deployment_strategy),
            "selector": {"matchLabels": group_selector(group.name, ctx)},
            "template": template,
        },
    }


def generate_service(
    replica_group_name: str,
    ports: Sequence[int],
    ctx: BuildContext,
) -> Dict[str, Any]:
    """
    Generate the app Service.

    There is one Service per environment; it selects the pods of the given
    replica group only.

    Args:
        replica_group_name: Group whose pods back the Service
        ports: Exposed ports
        ctx: Build context

    Returns:
        Service manifest dict
    """
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {
            "name": ctx.app_name,
            "namespace": constants.NAMESPACE,
        },
        "spec": {
            "type": "ClusterIP",
            "selector": group_selector(replica_group_name, ctx),
            "ports": [
                {"name": str(port), "port": port, "targetPort": port}
                for port in ports
            ],
        },
    }


def _ingress_rule(host: str, path: str, path_type: str, port: int, ctx: BuildContext) -> Dict[str, Any]:
    return {
        "host": host,
        "http": {
            "paths": [{
                "path": path,
                "pathType": path_type,
                "backend": {
                    "service": {
                        "name": ctx.app_name,
                        "port": {"number": port},
                    },
                },
            }],
        },
    }


def ingress_hosts(ctx: BuildContext) -> Dict[str, List[str]]:
    """
    Hosts served by the app's ingresses.

    Returns:
        ``{"base": [...], "subdomain": [...]}``
    """
    base = [f"{ctx.env.value}.{ctx.ingress_domain}"]
    subdomain = [f"{ctx.app_name}.{ctx.env.value}.{ctx.ingress_domain}"]
    if ctx.env == Environment.PROD:
        subdomain.append(f"{ctx.app_name}.{ctx.ingress_domain}")
    return {"base": base, "subdomain": subdomain}


def generate_ingress(
    port: int,
    ctx: BuildContext,
    subdomain: bool = False,
    sub_domain_created: bool = False,
) -> Dict[str, Any]:
    """
    Generate a path-based or subdomain-based Ingress.

    The path ingress serves ``/<app>`` on ``<env>.<domain>`` and strips the
    prefix. The subdomain ingress serves ``<app>.<env>.<domain>``, plus
    ``<app>.<domain>`` in prod. Both share the ``<app>-tls`` certificate,
    which covers the subdomain hosts once they exist.

    Args:
        port: Service port to route to
        ctx: Build context
        subdomain: Generate the subdomain ingress instead of the path one
        sub_domain_created: Whether subdomain DNS records exist

    Returns:
        Ingress manifest dict
    """
    hosts = ingress_hosts(ctx)
    tls_hosts = hosts["subdomain"] + hosts["base"] if sub_domain_created else list(hosts["base"])

    if subdomain:
        rules = [_ingress_rule(h, "/", "Prefix", port, ctx) for h in hosts["subdomain"]]
    else:
        rules = [
            _ingress_rule(
                h, f"/{ctx.app_name}(/|$)(.*)", "ImplementationSpecific", port, ctx
            )
            for h in hosts["base"]
        ]

    annotations = {
        "kubernetes.io/ingress.class": constants.INGRESS_CLASS,
        "cert-manager.io/cluster-issuer": constants.CLUSTER_ISSUER,
    }
    if not subdomain:
        annotations["nginx.ingress.kubernetes.io/rewrite-target"] = constants.PATH_REWRITE_TARGET

    return {
        "apiVersion": "networking.k8s.io/v1",
        "kind": "Ingress",
        "metadata": {
            "name": naming.ingress_name(ctx.app_name, subdomain),
            "namespace": constants.NAMESPACE,
            "annotations": annotations,
        },
        "spec": {
            "tls": [{
                "hosts": tls_hosts,
                "secretName": naming.tls_secret_name(ctx.app_name),
            }],
            "rules": rules,
        },
    }


def _utilization_metric(resource: str, target: int) -> Dict[str, Any]:
    return {
        "type": "Resource",
        "resource": {
            "name": resource,
            "target": {
                "type": "Utilization",
                "averageUtilization": target,
            },
        },
    }


def generate_hpa(group: ReplicaGroup, ctx: BuildContext) -> Optional[Dict[str, Any]]:
    """
    Generate a HorizontalPodAutoscaler for a replica group.

    Args:
        group: Replica group
        ctx: Build context

    Returns:
        HPA manifest dict or None if autoscaling is not enabled
    """
    if not group.autoscaling_enabled:
        return None
    scaling = group.autoscaling

    metrics = []
    if scaling.target_cpu_utilization is not None:
        metrics.append(_utilization_metric("cpu", scaling.target_cpu_utilization))
    if scaling.target_memory_utilization is not None:
        metrics.append(_utilization_metric("memory", scaling.target_memory_utilization))
    if not metrics:
        logger.warning(
            f"HPA for {ctx.app_name}/{group.name} in {ctx.env.value} has no metrics"
        )

    return {
        "apiVersion": "autoscaling/v2",
        "kind": "HorizontalPodAutoscaler",
        "metadata": {
            "name": naming.hpa_name(group.name),
            "namespace": constants.NAMESPACE,
        },
        "spec": {
            "scaleTargetRef": {
                "apiVersion": "apps/v1",
                "kind": "Deployment",
                "name": group.name,
            },
            "minReplicas": scaling.min_replicas,
            "maxReplicas": scaling.max_replicas,
            "metrics": metrics,
        },
    }


def generate_pvc(group_name: str, volume: PersistentVolume, ctx: BuildContext) -> Dict[str, Any]:
    """
    Generate the PersistentVolumeClaim of one group volume.

    Args:
        group_name: Replica group name
        volume: Volume configuration
        ctx: Build context

    Returns:
        PVC manifest dict
    """
    spec: Dict[str, Any] = {
        "accessModes": [volume.access_mode.value],
        "resources": {
            "requests": {
                "storage": volume.size,
            },
        },
    }
    if volume.storage_class:
        spec["storageClassName"] = volume.storage_class

    return {
        "apiVersion": "v1",
        "kind": "PersistentVolumeClaim",
        "metadata": {
            "name": naming.pvc_name(group_name, volume.name),
            "namespace": constants.NAMESPACE,
            "labels": group_selector(group_name, ctx),
        },
        "spec": spec,
    }


def _default(value: Any, default: Any) -> Any:
    return default if value is None else value


def generate_cronjob(
    cron: CronJobConfig,
    container: Dict[str, Any],
    ctx: BuildContext,
) -> Dict[str, Any]:
    """
    Generate a CronJob.

    Args:
        cron: CronJob configuration
        container: Container spec from build_container
        ctx: Build context

    Returns:
        CronJob manifest dict
    """
    job_name = ctx.app_name
    labels = {"app": job_name, "team": ctx.team}

    pod_spec: Dict[str, Any] = {
        "restartPolicy": "OnFailure",
        "containers": [container],
        "tolerations": _tolerations(cron.workflow),
        "nodeSelector": _node_selector(cron.workflow),
    }
    volumes = _file_secret_volumes(cron.secrets, job_name)
    if volumes:
        pod_spec["volumes"] = volumes

    spec: Dict[str, Any] = {
        "schedule": cron.schedule,
        "concurrencyPolicy": cron.concurrency_policy.value,
        "successfulJobsHistoryLimit": _default(
            cron.successful_jobs_history_limit, constants.SUCCESSFUL_JOBS_HISTORY_LIMIT
        ),
        "failedJobsHistoryLimit": _default(
            cron.failed_jobs_history_limit, constants.FAILED_JOBS_HISTORY_LIMIT
        ),
    }
    if cron.starting_deadline_seconds is not None:
        spec["startingDeadlineSeconds"] = cron.starting_deadline_seconds
    spec["suspend"] = _default(cron.suspend, constants.SUSPEND)
    spec["jobTemplate"] = {
        "spec": {
            "backoffLimit": _default(cron.backoff_limit, constants.BACKOFF_LIMIT),
            "ttlSecondsAfterFinished": _default(
                cron.ttl_seconds_after_finished, constants.TTL_SECONDS_AFTER_FINISHED
            ),
            "template": {
                "metadata": _pod_metadata(labels, ctx),
                "spec": pod_spec,
            },
        },
    }

    return {
        "apiVersion": "batch/v1",
        "kind": "CronJob",
        "metadata": {
            "name": job_name,
            "namespace": constants.NAMESPACE,
            "labels": dict(labels),
        },
        "spec": spec,
    }


def validate_unique_replica_group_names(env_config: DeploymentEnv, ctx: BuildContext) -> None:
    """
    Raises:
        DuplicateReplicaGroupError: If two groups share a name
    """
    seen = set()
    for group in env_config.replica_groups:
        if group.name in seen:
            raise DuplicateReplicaGroupError(group.name, ctx.env.value, ctx.app_name)
        seen.add(group.name)


def generate_deployment_manifests(
    app: DeploymentApp,
    secret_values: Mapping[str, str],
    ctx: BuildContext,
) -> List[ManifestFile]:
    """
    Generate all manifests of a deployment app for one environment.

    Per replica group: Secret, PVCs, Deployment and (optionally) HPA. Then
    the Service and, if enabled, the path and subdomain Ingresses.

    Args:
        app: Deployment descriptor
        secret_values: Resolved secrets of ctx.env
        ctx: Build context

    Returns:
        Manifest files; empty if the environment is not defined

    Raises:
        MissingImageError: If no image source is set
        DuplicateReplicaGroupError: If group names collide
        SecretNotFoundError: If a referenced secret is missing
        ConfigurationError: If ingress is enabled without ports
    """
    env_config = app.get_env(ctx.env)
    if env_config is None:
        return []

    shared = env_config.shared
    image = resolve_image(shared.image_path, shared.image_tag, ctx)
    validate_unique_replica_group_names(env_config, ctx)
    if shared.ingress_enabled and not shared.ports:
        raise ConfigurationError(
            f"Ingress is enabled for {app.name} in {ctx.env.value} but no ports are declared"
        )

    manifests: List[ManifestFile] = []

    for group in env_config.replica_groups:
        all_secrets = list(group.secrets)
        if shared.sidecar.enabled:
            all_secrets.extend(shared.sidecar.secrets)

        secret = generate_secret(
            group.name,
            all_secrets,
            secret_values,
            ctx,
            labels={"replicaGroup": group.name},
        )
        manifests.append(ManifestFile(_output_path(ctx, f"{group.name}.secret.yaml"), secret))

        for volume in group.persistent_volumes:
            pvc = generate_pvc(group.name, volume, ctx)
            filename = f"{naming.pvc_name(group.name, volume.name)}.pvc.yaml"
            manifests.append(ManifestFile(_output_path(ctx, filename), pvc))

        container = build_container(
            name=group.name,
            image=image,
            resources=group.resources,
            secrets=group.secrets,
            env=group.env,
            command=shared.command,
            args=shared.args,
            ports=shared.ports,
            liveness_probe=shared.liveness_probe,
            readiness_probe=shared.readiness_probe,
            startup_probe=shared.startup_probe,
            persistent_volumes=group.persistent_volumes,
        )
        template = build_pod_template(group, shared, container, ctx)
        deployment = generate_deployment(group, template, ctx)
        manifests.append(
            ManifestFile(_output_path(ctx, f"{group.name}.deployment.yaml"), deployment)
        )

        hpa = generate_hpa(group, ctx)
        if hpa:
            manifests.append(ManifestFile(_output_path(ctx, f"{group.name}.hpa.yaml"), hpa))

    service = generate_service(env_config.replica_groups[0].name, shared.ports, ctx)
    manifests.append(ManifestFile(_output_path(ctx, constants.SERVICE_FILENAME), service))

    if shared.ingress_enabled:
        created = shared.ingress.sub_domain_created
        port = shared.ports[0]
        manifests.append(ManifestFile(
            _output_path(ctx, constants.PATH_INGRESS_FILENAME),
            generate_ingress(port, ctx, subdomain=False, sub_domain_created=created),
        ))
        if created:
            manifests.append(ManifestFile(
                _output_path(ctx, constants.SUBDOMAIN_INGRESS_FILENAME),
                generate_ingress(port, ctx, subdomain=True, sub_domain_created=created),
            ))

    logger.debug(f"Generated {len(manifests)} manifests for {app.name} ({ctx.env.value})")
    return manifests


def generate_cronjob_manifests(
    app: CronJobApp,
    secret_values: Mapping[str, str],
    ctx: BuildContext,
) -> List[ManifestFile]:
    """
    Generate the Secret and CronJob of a cronjob app for one environment.

    Args:
        app: CronJob descriptor
        secret_values: Resolved secrets of ctx.env
        ctx: Build context

    Returns:
        Manifest files; empty if the environment is not defined

    Raises:
        MissingImageError: If no image source is set
        SecretNotFoundError: If a referenced secret is missing
    """
    env_config = app.get_env(ctx.env)
    if env_config is None:
        return []

    cron = env_config.cronjob
    job_name = app.name
    image = resolve_image(cron.image_path, cron.image_tag, ctx)

    secret = generate_secret(job_name, cron.secrets, secret_values, ctx)
    container = build_container(
        name=job_name,
        image=image,
        resources=cron.resources,
        secrets=cron.secrets,
        env=cron.env,
        command=cron.command,
        args=cron.args,
    )
    cronjob = generate_cronjob(cron, container, ctx)

    return [
        ManifestFile(_output_path(ctx, f"{job_name}.secret.yaml"), secret),
        ManifestFile(_output_path(ctx, f"{job_name}.cronjob.yaml"), cronjob),
    ]
