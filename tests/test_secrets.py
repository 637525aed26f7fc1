"""Tests for json2k8s secret sources."""

import json
import subprocess

import pytest

from json2k8s.errors import SecretSourceError
from json2k8s.secrets import (
    FileSecretSource,
    SopsSecretSource,
    create_secret_source,
    secrets_file_path,
)
from json2k8s.types import Environment


def write_secrets(directory, env, data):
    path = directory / f"{env}.secret.json"
    path.write_text(json.dumps(data))
    return path


class TestSecretsFilePath:
    def test_path(self, tmp_path):
        path = secrets_file_path(Environment.PROD, str(tmp_path))
        assert path == tmp_path.resolve() / "prod.secret.json"


class TestFileSecretSource:
    def test_resolve(self, tmp_path):
        write_secrets(tmp_path, "stage", {"A": "1", "B": "two"})
        values = FileSecretSource().resolve(Environment.STAGE, str(tmp_path))
        assert values == {"A": "1", "B": "two"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(SecretSourceError, match="not found"):
            FileSecretSource().resolve(Environment.PROD, str(tmp_path))

    def test_invalid_json(self, tmp_path):
        (tmp_path / "stage.secret.json").write_text("{oops")
        with pytest.raises(SecretSourceError, match="not valid JSON"):
            FileSecretSource().resolve(Environment.STAGE, str(tmp_path))

    def test_not_an_object(self, tmp_path):
        write_secrets(tmp_path, "stage", ["A"])
        with pytest.raises(SecretSourceError, match="must be a JSON object"):
            FileSecretSource().resolve(Environment.STAGE, str(tmp_path))

    def test_non_string_values(self, tmp_path):
        write_secrets(tmp_path, "stage", {"A": "ok", "PORT": 5432, "NESTED": {"x": "y"}})
        with pytest.raises(SecretSourceError) as exc_info:
            FileSecretSource().resolve(Environment.STAGE, str(tmp_path))
        assert "NESTED, PORT" in str(exc_info.value)


class TestSopsSecretSource:
    def test_invokes_sops(self, tmp_path, monkeypatch):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append((cmd, kwargs))
            return subprocess.CompletedProcess(cmd, 0, stdout='{"A": "secret"}', stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)

        values = SopsSecretSource().resolve(Environment.STAGE, str(tmp_path))

        assert values == {"A": "secret"}
        cmd, kwargs = calls[0]
        assert cmd == ["sops", "-d", str(tmp_path.resolve() / "stage.secret.json")]
        assert kwargs["check"] is True
        assert kwargs["capture_output"] is True

    def test_custom_binary(self, tmp_path, monkeypatch):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            return subprocess.CompletedProcess(cmd, 0, stdout="{}", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)

        SopsSecretSource(binary="/opt/bin/sops").resolve(Environment.PROD, str(tmp_path))

        assert calls[0][0] == "/opt/bin/sops"

    def test_decrypt_failure(self, tmp_path, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise subprocess.CalledProcessError(128, cmd, output="", stderr="no key found\n")

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(SecretSourceError, match="no key found"):
            SopsSecretSource().resolve(Environment.STAGE, str(tmp_path))

    def test_binary_missing(self, tmp_path, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError(cmd[0])

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(SecretSourceError, match="not installed"):
            SopsSecretSource().resolve(Environment.STAGE, str(tmp_path))

    def test_invalid_output(self, tmp_path, monkeypatch):
        def fake_run(cmd, **kwargs):
            return subprocess.CompletedProcess(cmd, 0, stdout="not json", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)

        with pytest.raises(SecretSourceError, match="not valid JSON"):
            SopsSecretSource().resolve(Environment.STAGE, str(tmp_path))


class TestCreateSecretSource:
    def test_default_is_sops(self):
        assert isinstance(create_secret_source(), SopsSecretSource)

    def test_file(self):
        assert isinstance(create_secret_source("file"), FileSecretSource)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unsupported secret source type: vault"):
            create_secret_source("vault")
