import shlex
import sys

import pytest

from spa_host import server


@pytest.fixture
def served(monkeypatch):
    calls = []
    monkeypatch.setattr(server.uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))
    return calls


def test_failed_build_exits_without_listening(monkeypatch, tmp_path, served):
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "dist" / "public"))
    monkeypatch.setenv("BUILD_COMMAND", shlex.join([sys.executable, "-c", "import sys; sys.exit(1)"]))

    with pytest.raises(SystemExit) as excinfo:
        server.main()

    assert excinfo.value.code == 1
    assert served == []


def test_invalid_config_exits(monkeypatch, served):
    monkeypatch.setenv("PORT", "not-a-port")
    with pytest.raises(SystemExit) as excinfo:
        server.main()
    assert excinfo.value.code == 1
    assert served == []


def test_verified_build_starts_server(monkeypatch, dist, served):
    monkeypatch.setenv("OUTPUT_DIR", str(dist))
    monkeypatch.setenv("PORT", "8123")

    server.main()

    assert served == [{"host": "0.0.0.0", "port": 8123, "log_level": "info"}]


def test_development_mode_skips_build(monkeypatch, tmp_path, served):
    monkeypatch.setenv("NODE_ENV", "development")
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "never-built"))

    server.main()

    assert len(served) == 1
    assert not (tmp_path / "never-built").exists()


def test_unknown_log_level_exits(monkeypatch, served):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(SystemExit) as excinfo:
        server.main()
    assert excinfo.value.code == 1
    assert served == []
