from pathlib import Path

import pytest

from spa_host.config import ServerConfig

SHELL_HTML = "<!doctype html><html><body><div id=\"root\"></div></body></html>"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    # keep a developer's .env or shell exports out of ServerConfig
    monkeypatch.chdir(tmp_path)
    for name in ("NODE_ENV", "PORT", "HOST", "OUTPUT_DIR", "API_PREFIX", "BUILD_COMMAND", "DEV_SERVER_URL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def dist(tmp_path) -> Path:
    output_dir = tmp_path / "dist" / "public"
    (output_dir / "assets").mkdir(parents=True)
    (output_dir / "index.html").write_text(SHELL_HTML)
    (output_dir / "assets" / "app.js").write_text("console.log('app');")
    (output_dir / "assets" / "app.css").write_text("body { margin: 0; }")
    return output_dir


@pytest.fixture
def production_config(dist) -> ServerConfig:
    return ServerConfig(node_env="production", output_dir=dist)


@pytest.fixture
def no_build():
    def build(command: str) -> None:
        raise AssertionError(f"unexpected build: {command}")

    return build
