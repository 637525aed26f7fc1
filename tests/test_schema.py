"""Tests for json2k8s schema loading and validation."""

import json

import pytest

from json2k8s.errors import DescriptorValidationError
from json2k8s.schema import (
    find_descriptor_files,
    get_schema_path,
    load_descriptor,
    load_descriptors,
    load_schema,
    validate_descriptor,
)
from json2k8s.types import CronJobApp, DeploymentApp

SECRET_REF_MESSAGE = "Either envVar must be set, or both filePath and name must be set"


def write_descriptor(directory, name, data):
    path = directory / f"{name}.json"
    path.write_text(json.dumps(data))
    return path


class TestSchemaFile:
    def test_schema_is_bundled(self):
        assert get_schema_path().exists()

    def test_variant_definitions(self):
        definitions = load_schema()["definitions"]
        assert "DeploymentApp" in definitions
        assert "CronJobApp" in definitions


class TestValidateDescriptor:
    def test_valid_deployment(self, deployment_data):
        assert validate_descriptor(deployment_data) == []

    def test_valid_cronjob(self, cronjob_data):
        assert validate_descriptor(cronjob_data) == []

    def test_no_environments_is_valid(self):
        assert validate_descriptor({"name": "idle", "type": "deployment", "team": "t"}) == []

    def test_not_an_object(self):
        errors = validate_descriptor(["a", "b"])
        assert errors == ["descriptor must be an object, got list"]

    def test_unknown_type(self, deployment_data):
        deployment_data["type"] = "statefulset"
        errors = validate_descriptor(deployment_data)
        assert len(errors) == 1
        assert errors[0].startswith("type: 'statefulset' is not one of")

    def test_missing_type(self, deployment_data):
        del deployment_data["type"]
        errors = validate_descriptor(deployment_data)
        assert len(errors) == 1
        assert errors[0].startswith("type:")

    def test_env_shape_follows_type(self, deployment_data, cronjob_data):
        # A cronjob environment under a deployment descriptor is rejected
        deployment_data["stage"] = cronjob_data["stage"]
        errors = validate_descriptor(deployment_data)
        assert "stage: 'replicaGroups' is a required property" in errors
        assert "stage: 'shared' is a required property" in errors

    def test_reports_every_violation(self, deployment_data):
        del deployment_data["team"]
        del deployment_data["stage"]["replicaGroups"][0]["resources"]
        deployment_data["prod"]["shared"]["workflow"] = "batch"

        errors = validate_descriptor(deployment_data)

        assert "'team' is a required property" in errors
        assert "stage.replicaGroups.0: 'resources' is a required property" in errors
        assert any(e.startswith("prod.shared.workflow:") for e in errors)
        assert len(errors) == 3

    def test_numbers_are_not_coerced(self, deployment_data):
        deployment_data["stage"]["replicaGroups"][0]["replicas"] = "2"
        deployment_data["stage"]["shared"]["ports"] = ["8080"]

        errors = validate_descriptor(deployment_data)

        assert "stage.replicaGroups.0.replicas: '2' is not of type 'integer'" in errors
        assert "stage.shared.ports.0: '8080' is not of type 'integer'" in errors

    def test_boolean_is_not_a_number(self, deployment_data):
        deployment_data["stage"]["replicaGroups"][0]["replicas"] = True
        errors = validate_descriptor(deployment_data)
        assert errors == ["stage.replicaGroups.0.replicas: True is not of type 'integer'"]

    def test_sidecar_required(self, deployment_data):
        del deployment_data["prod"]["shared"]["sidecar"]
        errors = validate_descriptor(deployment_data)
        assert errors == ["prod.shared: 'sidecar' is a required property"]

    def test_replica_groups_not_empty(self, deployment_data):
        deployment_data["stage"]["replicaGroups"] = []
        errors = validate_descriptor(deployment_data)
        assert len(errors) == 1
        assert errors[0].startswith("stage.replicaGroups:")

    def test_probe_contents_not_validated(self, deployment_data):
        deployment_data["stage"]["shared"]["livenessProbe"] = {"exec": {"command": ["true"]}}
        assert validate_descriptor(deployment_data) == []

    def test_cronjob_concurrency_policy(self, cronjob_data):
        cronjob_data["stage"]["cronjob"]["concurrencyPolicy"] = "Never"
        errors = validate_descriptor(cronjob_data)
        assert len(errors) == 1
        assert errors[0].startswith("stage.cronjob.concurrencyPolicy:")

    def test_cronjob_workflow_allows_points(self, cronjob_data):
        cronjob_data["stage"]["cronjob"]["workflow"] = "points"
        assert validate_descriptor(cronjob_data) == []

    def test_deployment_workflow_rejects_points(self, deployment_data):
        deployment_data["stage"]["shared"]["workflow"] = "points"
        errors = validate_descriptor(deployment_data)
        assert len(errors) == 1
        assert errors[0].startswith("stage.shared.workflow:")


class TestSecretRefValidation:
    def test_env_var_only(self, cronjob_data):
        cronjob_data["stage"]["cronjob"]["secrets"] = [{"source": "A", "envVar": "A"}]
        assert validate_descriptor(cronjob_data) == []

    def test_file_only(self, cronjob_data):
        cronjob_data["stage"]["cronjob"]["secrets"] = [
            {"source": "A", "filePath": "/etc", "name": "a.json"},
        ]
        assert validate_descriptor(cronjob_data) == []

    def test_both_modes(self, cronjob_data):
        cronjob_data["stage"]["cronjob"]["secrets"] = [
            {"source": "A", "envVar": "A", "filePath": "/etc", "name": "a.json"},
        ]
        assert validate_descriptor(cronjob_data) == []

    def test_file_path_without_name(self, cronjob_data):
        cronjob_data["stage"]["cronjob"]["secrets"] = [
            {"source": "A", "envVar": "A"},
            {"source": "B", "filePath": "/etc"},
        ]
        errors = validate_descriptor(cronjob_data)
        assert errors == [f"stage.cronjob.secrets.1: {SECRET_REF_MESSAGE}"]

    def test_source_only(self, deployment_data):
        deployment_data["stage"]["shared"]["sidecar"]["secrets"] = [{"source": "B"}]
        errors = validate_descriptor(deployment_data)
        assert errors == [f"stage.shared.sidecar.secrets.0: {SECRET_REF_MESSAGE}"]

    def test_empty_env_var(self, cronjob_data):
        cronjob_data["stage"]["cronjob"]["secrets"] = [{"source": "A", "envVar": ""}]
        errors = validate_descriptor(cronjob_data)
        assert errors == [f"stage.cronjob.secrets.0: {SECRET_REF_MESSAGE}"]


class TestLoadDescriptors:
    def test_load_single(self, tmp_path, deployment_data):
        path = write_descriptor(tmp_path, "shop", deployment_data)
        app = load_descriptor(str(path))
        assert isinstance(app, DeploymentApp)

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_descriptor(str(tmp_path / "nope.json"))

    def test_load_all_sorted(self, tmp_path, deployment_data, cronjob_data):
        write_descriptor(tmp_path, "shop", deployment_data)
        write_descriptor(tmp_path, "report", cronjob_data)
        (tmp_path / "notes.txt").write_text("ignored")

        apps = load_descriptors(str(tmp_path))

        assert [a.name for a in apps] == ["report", "shop"]
        assert isinstance(apps[0], CronJobApp)

    def test_load_one_app(self, tmp_path, deployment_data, cronjob_data):
        write_descriptor(tmp_path, "shop", deployment_data)
        write_descriptor(tmp_path, "report", cronjob_data)

        apps = load_descriptors(str(tmp_path), app_name="shop")

        assert [a.name for a in apps] == ["shop"]

    def test_load_requested_app_missing(self, tmp_path, deployment_data):
        write_descriptor(tmp_path, "shop", deployment_data)
        with pytest.raises(FileNotFoundError):
            load_descriptors(str(tmp_path), app_name="other")

    def test_errors_from_all_files(self, tmp_path, deployment_data, cronjob_data):
        del deployment_data["team"]
        cronjob_data["stage"]["cronjob"]["schedule"] = 5
        write_descriptor(tmp_path, "shop", deployment_data)
        write_descriptor(tmp_path, "report", cronjob_data)

        with pytest.raises(DescriptorValidationError) as exc_info:
            load_descriptors(str(tmp_path))

        errors = exc_info.value.errors
        assert set(errors) == {"shop", "report"}
        assert errors["shop"] == ["'team' is a required property"]
        assert "Invalid config for report" in str(exc_info.value)

    def test_invalid_json(self, tmp_path):
        (tmp_path / "broken.json").write_text("{not json")

        with pytest.raises(DescriptorValidationError) as exc_info:
            load_descriptors(str(tmp_path))

        assert exc_info.value.errors["broken"][0].startswith("invalid JSON")

    def test_find_descriptor_files(self, tmp_path, deployment_data):
        write_descriptor(tmp_path, "b", deployment_data)
        write_descriptor(tmp_path, "a", deployment_data)
        assert [p.name for p in find_descriptor_files(str(tmp_path))] == ["a.json", "b.json"]

    def test_invalid_utf8(self, tmp_path):
        (tmp_path / "latin.json").write_bytes(b'{"name": "\xff"}')

        with pytest.raises(DescriptorValidationError) as exc_info:
            load_descriptors(str(tmp_path))

        assert exc_info.value.errors["latin"][0].startswith("invalid UTF-8")

    def test_duplicate_app_names(self, tmp_path, deployment_data):
        write_descriptor(tmp_path, "a", deployment_data)
        deployment_data["stage"]["replicaGroups"] = deployment_data["stage"]["replicaGroups"][:1]
        write_descriptor(tmp_path, "b", deployment_data)

        with pytest.raises(DescriptorValidationError) as exc_info:
            load_descriptors(str(tmp_path))

        assert exc_info.value.errors == {"b": ["name: 'shop' is already declared by a.json"]}
