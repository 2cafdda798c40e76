"""Integration tests for the command-line interface."""

import json
import os
import subprocess
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[2] / "src"

CATALOG_ENV = {
    "CATALOG_SOURCE_URL": "https://store.playstation.com/es-es/category/abc/1",
    "CATALOG_TARGET_URL": "https://backloggd.com/u/someone/list/ps5-pro/",
}


def run_cli(args: list[str], env: dict[str, str], cwd: Path) -> subprocess.CompletedProcess[str]:
    base_env = {k: v for k, v in os.environ.items() if not k.startswith(("CATALOG_", "LOG_"))}
    base_env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(SRC_DIR), os.environ.get("PYTHONPATH", "")) if p
    )
    return subprocess.run(
        [sys.executable, "-m", "catalog_sync.cli", *args],
        env={**base_env, **env},
        cwd=cwd,
        capture_output=True,
        text=True,
        timeout=60,
    )


class TestCLIOutput:
    """Tests that stdout carries exactly one JSON document."""

    def test_test_config_prints_json(self, tmp_path: Path) -> None:
        """Test that a successful command prints parseable JSON only."""
        result = run_cli(["test-config"], {**CATALOG_ENV, "LOG_FORMAT": "json"}, tmp_path)

        assert result.returncode == 0, result.stderr
        output = json.loads(result.stdout)
        assert output["success"] is True
        assert output["command"] == "test-config"
        assert output["data"]["source_url"] == CATALOG_ENV["CATALOG_SOURCE_URL"]
        assert output["data"]["max_pages"] == 50

    def test_failure_keeps_logs_off_stdout(self, tmp_path: Path) -> None:
        """Test that a failing command logs to stderr and prints a JSON error."""
        result = run_cli(["scrape-source"], {"LOG_FORMAT": "json"}, tmp_path)

        assert result.returncode == 1
        output = json.loads(result.stdout)
        assert output["success"] is False
        assert output["command"] == "scrape-source"
        assert output["error"]

        log_records = [json.loads(line) for line in result.stderr.splitlines() if line.startswith("{")]
        assert any(record["event"] == "CLI error" for record in log_records)
