"""Unit tests for the Typer CLI."""

from typer.testing import CliRunner

from stockpile.infrastructure.maintenance import CLEANUP_HISTORY_FILE
from stockpile.presentation.cli.app import app

runner = CliRunner()


class TestSecretsGenerate:
    def test_prints_two_distinct_secrets(self):
        result = runner.invoke(app, ["secrets", "generate"])

        assert result.exit_code == 0
        values = {}
        for line in result.stdout.splitlines():
            for name in ("JWT_SECRET", "JWT_REFRESH_SECRET"):
                if line.startswith(f"{name}="):
                    values[name] = line.split("=", 1)[1]

        assert set(values) == {"JWT_SECRET", "JWT_REFRESH_SECRET"}
        assert values["JWT_SECRET"] != values["JWT_REFRESH_SECRET"]
        assert len(values["JWT_SECRET"]) >= 64


class TestLogsCleanup:
    def test_cleanup_reports_and_writes_history(self, tmp_path):
        (tmp_path / "a.log").write_text("hello")
        (tmp_path / "b.txt").write_text("keep")

        result = runner.invoke(app, ["logs", "cleanup", "--log-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "Files deleted: 1" in result.stdout
        assert not (tmp_path / "a.log").exists()
        assert (tmp_path / "b.txt").exists()
        assert "Files deleted: 1" in (tmp_path / CLEANUP_HISTORY_FILE).read_text()

    def test_missing_directory_is_not_an_error(self, tmp_path):
        missing = tmp_path / "nope"

        result = runner.invoke(app, ["logs", "cleanup", "--log-dir", str(missing)])

        assert result.exit_code == 0
        assert "does not exist" in result.stdout
        assert not missing.exists()

    def test_log_dir_from_environment(self, tmp_path, monkeypatch):
        (tmp_path / "a.log").write_text("hello")
        monkeypatch.setenv("LOG_DIR", str(tmp_path))

        result = runner.invoke(app, ["logs", "cleanup"])

        assert result.exit_code == 0
        assert not (tmp_path / "a.log").exists()

