import os
import sys
import uuid
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import roadie
from roadie import Application, register


def _namespace(prefix="app"):
    return f"{prefix}-{uuid.uuid4().hex}"


def test_register_returns_one_application_per_namespace():
    name = _namespace()
    app = register(name)

    assert isinstance(app, Application)
    assert register(name) is app
    assert roadie.configuration_for(name) is app.store
    assert app.store.get("config_path") == ["config"]


def test_namespaces_are_isolated():
    first = register(_namespace())
    second = register(_namespace())

    first.config(initializers=["database"])

    assert first.store.get("initializers") == ["database"]
    assert second.store.get("initializers") == []


def test_environment_defaults_from_process(monkeypatch):
    monkeypatch.setenv("RACK_ENV", "test")
    assert register(_namespace()).store.get("environment") == "test"

    monkeypatch.delenv("RACK_ENV")
    assert register(_namespace()).store.get("environment") == "development"


def test_config_applies_options_and_callback():
    app = register(_namespace())

    store = app.config(lambda config: config.set("workers", 2), log_level="info")

    assert store is app.store
    assert store.get("log_level") == "info"
    assert store.get("workers") == 2


def test_config_path_resolution(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    app = register(_namespace())

    assert app.config_path() == "config"
    assert app.config_path("database.yml") == os.path.join("config", "database.yml")

    site = tmp_path / "site"
    site.mkdir()
    (site / "database.yml").write_text("adapter: sqlite3\n", encoding="utf-8")
    app.config(config_path=["config", str(site)])

    assert app.config_path("database.yml") == str(site / "database.yml")
    assert app.store.get("database") == {"adapter": "sqlite3"}


def test_empty_config_path_is_an_error():
    app = register(_namespace())
    app.config(config_path=[])

    with pytest.raises(roadie.ConfigurationPathError):
        app.config_path("database.yml")
    with pytest.raises(roadie.ConfigurationPathError):
        app.setup()


def test_setup_runs_registered_steps(tmp_path):
    env_dir = tmp_path / "environments"
    env_dir.mkdir()
    (env_dir / "test.yml").write_text("initializers: [logging]\nlog_level: warn\n", encoding="utf-8")

    calls = []
    app = register(_namespace())
    app.config(config_path=[str(tmp_path)], environment="test")

    @app.initializer_step("logging")
    def initialize_logging(config):
        calls.append(config.get("log_level"))

    run = app.setup()

    assert calls == ["warn"]
    assert run.state is roadie.RunState.DONE


def test_register_merges_handlers_on_later_calls(tmp_path):
    name = _namespace()
    calls = []
    register(name, {"a": lambda config: calls.append("a")})
    app = register(name, {"b": lambda config: calls.append("b")})
    app.config(config_path=[str(tmp_path)], initializers=["a", "b"])

    app.setup()
    assert calls == ["a", "b"]


def test_module_level_operations(tmp_path):
    name = _namespace()
    env_dir = tmp_path / "environments"
    env_dir.mkdir()
    (env_dir / "test.yml").write_text("x: 5\n", encoding="utf-8")

    store = roadie.install_defaults(name)
    before = store.to_dict()
    assert roadie.install_defaults(name).to_dict() == before

    store.set("config_path", [str(tmp_path)])
    store.set("environment", "test")

    assert roadie.resolve_path(name) == str(tmp_path)
    assert roadie.resolve_path(name, "environments", "test.yml") == str(env_dir / "test.yml")

    roadie.run(name, lambda config: config.set("x", 10))
    assert store.get("x") == 10


def test_run_reports_missing_initializer(tmp_path):
    name = _namespace()
    roadie.install_defaults(name).update({"config_path": [str(tmp_path)], "initializers": ["missing"]})

    with pytest.raises(roadie.MissingInitializerError) as excinfo:
        roadie.run(name)
    assert excinfo.value.step == "missing"
    assert isinstance(excinfo.value, roadie.RoadieError)


def test_config_accepts_an_option_named_callback():
    app = register(_namespace())
    calls = []

    store = app.config(calls.append, callback="on_ready")

    assert store.get("callback") == "on_ready"
    assert calls == [store]
