import os
from pathlib import Path

import mongomock
import pytest

from docwatch import main as docwatch_main
from docwatch.errors import SetupError
from docwatch.pipeline.processor import EventProcessor
from docwatch.utils.config import Settings


def test_defaults_ship_one_ignore_pattern():
    settings = Settings(_env_file=None)
    assert settings.get_ignore_patterns() == [r"\.#.*"]


def test_ignore_patterns_are_split():
    settings = Settings(ignore_patterns=r"\.#.*, ~$ ,", _env_file=None)
    assert settings.get_ignore_patterns() == [r"\.#.*", "~$"]


def test_type_routes_resolve_against_watch_root(tmp_path):
    settings = Settings(watch_root=tmp_path, type_routes="images/=image, posts/=POST", _env_file=None)

    routes = settings.get_type_routes()

    root = tmp_path.resolve()
    assert routes == [
        (str(root / "images") + os.sep, "image"),
        (str(root / "posts") + os.sep, "post"),
    ]


def test_absolute_route_prefix_is_kept(tmp_path):
    settings = Settings(watch_root=tmp_path, type_routes="/srv/media/=image", _env_file=None)
    assert settings.get_type_routes() == [(str(Path("/srv/media").resolve()) + os.sep, "image")]


def test_malformed_route_is_rejected():
    settings = Settings(type_routes="images/", _env_file=None)
    with pytest.raises(ValueError):
        settings.get_type_routes()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("DOCWATCH_DATABASE_NAME", "blog")
    monkeypatch.setenv("DOCWATCH_MONGO_URI", "mongodb://db:27017")

    settings = Settings(_env_file=None)

    assert settings.database_name == "blog"
    assert settings.mongo_uri == "mongodb://db:27017"


def test_cli_flags_override_settings(tmp_path):
    args = docwatch_main.parse_args([
        "--root", str(tmp_path),
        "--database", "blog",
        "--ignore", r"\.#.*",
        "--ignore", r"~$",
        "--route", "pics/=image",
    ])

    settings = docwatch_main.apply_overrides(Settings(_env_file=None), args)

    assert settings.watch_root == tmp_path
    assert settings.database_name == "blog"
    assert settings.get_ignore_patterns() == [r"\.#.*", "~$"]
    assert settings.get_type_routes() == [(str(tmp_path.resolve() / "pics") + os.sep, "image")]


def test_build_processor(settings, store):
    assert isinstance(docwatch_main.build_processor(settings, store), EventProcessor)


def test_build_processor_rejects_unknown_kind(store):
    settings = Settings(type_routes="videos/=video", _env_file=None)
    with pytest.raises(SetupError):
        docwatch_main.build_processor(settings, store)


def test_main_exits_non_zero_when_store_is_unreachable(monkeypatch, tmp_path):
    def _unreachable(self):
        raise SetupError("Failed to connect to MongoDB")

    monkeypatch.setattr(docwatch_main.MongoStore, "connect", _unreachable)

    assert docwatch_main.main(["--root", str(tmp_path)]) == 1


def test_main_exits_non_zero_when_root_is_missing(monkeypatch, tmp_path):
    def _in_memory(self):
        self._client = mongomock.MongoClient()

    monkeypatch.setattr(docwatch_main.MongoStore, "connect", _in_memory)
    monkeypatch.setattr(docwatch_main.signal, "signal", lambda *args: None)

    assert docwatch_main.main(["--root", str(tmp_path / "missing")]) == 1
