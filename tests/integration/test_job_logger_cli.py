"""
Integration tests for the job_logger.py CLI.
"""

import json

import job_logger
import pytest
from typer.testing import CliRunner

from joblogger.contexts.capture import settings_store
from joblogger.contexts.messaging.manifest import HOST_NAME
from joblogger.utils.error_log import log_error

EXTENSION_ID = "abcdefghijklmnopabcdefghijklmnop"

runner = CliRunner()


@pytest.fixture(autouse=True)
def settings_file(tmp_path, monkeypatch):
    path = tmp_path / "settings.yaml"
    monkeypatch.setattr(settings_store, "SETTINGS_PATH", path)
    return path


@pytest.fixture
def job_file(tmp_path):
    path = tmp_path / "job.json"
    path.write_text(
        json.dumps(
            {
                "title": "Backend Engineer",
                "company": "Globex",
                "location": "Remote",
                "descriptionHtml": "<p>APIs</p>",
                "sourceUrl": "https://www.linkedin.com/jobs/view/2/",
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.mark.integration
def test_no_command_shows_help():
    result = runner.invoke(job_logger.app, [])

    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.integration
def test_ping():
    result = runner.invoke(job_logger.app, ["ping", "--timeout", "30"])

    assert result.exit_code == 0, result.output
    assert "Native host is responding" in result.output


@pytest.mark.integration
class TestSettingsCommands:
    def test_set_then_show(self, settings_file, tmp_path):
        result = runner.invoke(job_logger.app, ["settings", "set", "baseFolder", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert settings_file.exists()

        result = runner.invoke(job_logger.app, ["settings", "show"])
        assert f"baseFolder: {tmp_path}" in result.output
        assert "theme: light" in result.output

    def test_invalid_value(self):
        result = runner.invoke(job_logger.app, ["settings", "set", "theme", "neon"])
        assert result.exit_code == 1

    def test_unknown_key(self):
        result = runner.invoke(job_logger.app, ["settings", "set", "colour", "blue"])
        assert result.exit_code == 1


@pytest.mark.integration
class TestSaveCommand:
    def test_save_with_base_folder(self, job_file, base_folder):
        result = runner.invoke(
            job_logger.app, ["save", str(job_file), "-b", str(base_folder), "-f", "Globex job"]
        )

        assert result.exit_code == 0, result.output
        assert "Job saved" in result.output
        assert (base_folder / "Globex job" / "ad.html").is_file()
        assert "Warning" in result.output

    def test_save_uses_settings(self, job_file, base_folder):
        settings_store.SettingsStore().set("baseFolder", str(base_folder))

        result = runner.invoke(job_logger.app, ["save", str(job_file)])

        assert result.exit_code == 0, result.output
        (folder,) = base_folder.iterdir()
        assert folder.name.endswith("Globex - Backend Engineer")

    def test_save_without_base_folder(self, job_file):
        result = runner.invoke(job_logger.app, ["save", str(job_file)])

        assert result.exit_code == 1
        assert "No base folder" in result.output

    def test_host_error_is_reported(self, job_file, tmp_path):
        missing = tmp_path / "missing"
        result = runner.invoke(job_logger.app, ["save", str(job_file), "-b", str(missing)])

        assert result.exit_code == 1
        assert "BASE_PATH_NOT_FOUND" in result.output


@pytest.mark.integration
class TestManifestCommand:
    def test_writes_manifest(self, tmp_path):
        out_dir = tmp_path / "hosts"
        host = tmp_path / "joblogger-host"
        result = runner.invoke(
            job_logger.app,
            ["manifest", str(out_dir), "-e", EXTENSION_ID, "--host-path", str(host)],
        )

        assert result.exit_code == 0, result.output
        manifest = json.loads((out_dir / f"{HOST_NAME}.json").read_text(encoding="utf-8"))
        assert manifest["allowed_origins"] == [f"chrome-extension://{EXTENSION_ID}/"]

    def test_rejects_bad_extension_id(self, tmp_path):
        result = runner.invoke(
            job_logger.app,
            ["manifest", str(tmp_path), "-e", "nope", "--host-path", str(tmp_path / "h")],
        )

        assert result.exit_code == 1
        assert not (tmp_path / f"{HOST_NAME}.json").exists()


@pytest.mark.integration
class TestErrorsCommand:
    def test_empty_log(self):
        result = runner.invoke(job_logger.app, ["errors"])

        assert result.exit_code == 0
        assert "No errors logged" in result.output

    def test_shows_recent_entries(self):
        try:
            raise RuntimeError("snapshot disk full")
        except RuntimeError as e:
            log_error(e, context="CreateJobPacket")

        result = runner.invoke(job_logger.app, ["errors", "-n", "3"])

        assert result.exit_code == 0
        assert "snapshot disk full" in result.output
