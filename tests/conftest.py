"""Shared descriptor fixtures for json2k8s tests."""

import copy

import pytest

RESOURCES = {
    "requests": {"cpu": "250m", "memory": "256Mi"},
    "limits": {"cpu": "500m", "memory": "512Mi"},
}

DEPLOYMENT_ENV = {
    "replicaGroups": [
        {
            "name": "web",
            "replicas": 2,
            "env": [{"name": "LOG_LEVEL", "value": "info"}],
            "secrets": [
                {"source": "DB_PASSWORD", "envVar": "DATABASE_PASSWORD"},
                {"source": "GCP_KEY", "filePath": "/etc/creds", "name": "key.json"},
            ],
            "resources": RESOURCES,
        },
        {
            "name": "worker",
            "replicas": 1,
            "secrets": [],
            "resources": RESOURCES,
            "persistentVolumes": [
                {
                    "name": "data",
                    "mountPath": "/data",
                    "size": "10Gi",
                    "accessMode": "ReadWriteOnce",
                    "storageClass": "fast",
                },
            ],
            "autoscaling": {
                "enabled": True,
                "minReplicas": 1,
                "maxReplicas": 5,
                "targetCPUUtilizationPercentage": 70,
            },
            "deploymentStrategy": "Recreate",
        },
    ],
    "shared": {
        "workflow": "critical",
        "ports": [8080, 9000],
        "imageTag": "v1.2.3",
        "readinessProbe": {
            "httpGet": {"path": "/ready", "port": 8080},
            "initialDelaySeconds": 5,
            "periodSeconds": 10,
        },
        "ingress": {"enabled": True, "subDomainCreated": True},
        "sidecar": {
            "enabled": True,
            "image": "gcr.io/cloudsql-docker/gce-proxy:1.33",
            "secrets": [
                {"source": "PROXY_CREDS", "filePath": "/secrets", "name": "proxy.json"},
            ],
        },
    },
}

CRONJOB_ENV = {
    "cronjob": {
        "workflow": "points",
        "schedule": "*/5 * * * *",
        "concurrencyPolicy": "Forbid",
        "imagePath": "ghcr.io/acme/report:latest",
        "command": ["python", "report.py"],
        "env": [{"name": "MODE", "value": "daily"}],
        "secrets": [
            {"source": "API_TOKEN", "envVar": "TOKEN"},
            {"source": "REPORT_CONFIG", "filePath": "/config", "name": "report.yaml"},
        ],
        "resources": RESOURCES,
    },
}

SECRET_VALUES = {
    "DB_PASSWORD": "hunter2",
    "GCP_KEY": '{"type": "service_account"}',
    "PROXY_CREDS": "proxy-secret",
    "API_TOKEN": "token-123",
    "REPORT_CONFIG": "recipients: []",
}


@pytest.fixture
def deployment_data():
    """Deployment descriptor with stage and prod environments."""
    return {
        "name": "shop",
        "type": "deployment",
        "team": "payments",
        "stage": copy.deepcopy(DEPLOYMENT_ENV),
        "prod": copy.deepcopy(DEPLOYMENT_ENV),
    }


@pytest.fixture
def cronjob_data():
    """CronJob descriptor with a stage environment only."""
    return {
        "name": "report",
        "type": "cronjob",
        "team": "data",
        "stage": copy.deepcopy(CRONJOB_ENV),
    }


@pytest.fixture
def secret_values():
    return dict(SECRET_VALUES)
