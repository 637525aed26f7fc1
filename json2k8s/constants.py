"""
Defaults shared by the manifest generators.

Kept in one place so every builder that needs the same value reads it from
the same name.
"""

import os

NAMESPACE = "default"

# Image registry used when a descriptor only sets imageTag
DEFAULT_REGISTRY = "us-central1-docker.pkg.dev/mrgn-shared/shared-artifact-registry"
DEFAULT_INGRESS_DOMAIN = "mrgn.app"


def registry() -> str:
    """Image registry, overridable with JSON2K8S_REGISTRY."""
    return os.environ.get("JSON2K8S_REGISTRY", DEFAULT_REGISTRY)


def ingress_domain() -> str:
    """Ingress base domain, overridable with JSON2K8S_INGRESS_DOMAIN."""
    return os.environ.get("JSON2K8S_INGRESS_DOMAIN", DEFAULT_INGRESS_DOMAIN)


IMAGE_PULL_POLICY = "Always"

# Pod template
ROLLOUT_TRIGGER_ANNOTATION = "rollout-trigger"
METRICS_ANNOTATIONS = {
    "prometheus.io/scrape": "true",
    "prometheus.io/port": "9000",
    "prometheus.io/path": "/metrics",
}
TOLERATION_KEY = "workload-type"
NODE_POOL_LABEL = "node-pool"

# Deployment strategy
ROLLING_UPDATE_MAX_SURGE = "25%"
ROLLING_UPDATE_MAX_UNAVAILABLE = 0

# Sidecar
SIDECAR_DEFAULT_RESOURCES = {
    "requests": {"cpu": "100m", "memory": "128Mi"},
    "limits": {"cpu": "200m", "memory": "256Mi"},
}

# CronJob
SUCCESSFUL_JOBS_HISTORY_LIMIT = 3
FAILED_JOBS_HISTORY_LIMIT = 1
BACKOFF_LIMIT = 1
TTL_SECONDS_AFTER_FINISHED = 172800  # 48h
SUSPEND = False

# Ingress
INGRESS_CLASS = "nginx"
CLUSTER_ISSUER = "letsencrypt-prod"
PATH_REWRITE_TARGET = "/$2"

# Output
SERVICE_FILENAME = "service.yaml"
PATH_INGRESS_FILENAME = "path.ingress.yaml"
SUBDOMAIN_INGRESS_FILENAME = "cname.ingress.yaml"
SECRETS_FILENAME_TEMPLATE = "{env}.secret.json"
