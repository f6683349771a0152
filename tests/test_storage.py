"""Tests for document storage backends."""

import json

import pytest

from voxt.services.errors import StorageReadError
from voxt.services.runtime_options import DAILY_LIMIT_SECONDS, RuntimeOptionRegistry, default_option_specs
from voxt.services.storage import (
    ADMIN_SETTINGS_DOCUMENT,
    USAGE_DOCUMENT,
    DocumentBackend,
    DocumentStore,
    JsonFileBackend,
    SqlDocumentBackend,
    build_backend,
)
from tests.conftest import make_settings


class TestJsonFileBackend:
    """Whole-file JSON documents."""

    @pytest.fixture
    def backend(self, tmp_path) -> JsonFileBackend:
        return JsonFileBackend({
            USAGE_DOCUMENT: tmp_path / "data" / "usage.json",
            ADMIN_SETTINGS_DOCUMENT: tmp_path / "admin-settings.json",
        })

    def test_missing_file_loads_as_none(self, backend) -> None:
        assert backend.load(USAGE_DOCUMENT) is None

    def test_save_creates_directories(self, backend, tmp_path) -> None:
        backend.save(USAGE_DOCUMENT, {"1": {"date": "2026-03-01", "usedSeconds": 5}})

        path = tmp_path / "data" / "usage.json"
        assert json.loads(path.read_text(encoding="utf-8")) == {"1": {"date": "2026-03-01", "usedSeconds": 5}}
        assert backend.load(USAGE_DOCUMENT) == {"1": {"date": "2026-03-01", "usedSeconds": 5}}

    def test_corrupt_file_raises_storage_error(self, backend, tmp_path) -> None:
        (tmp_path / "admin-settings.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageReadError):
            backend.load(ADMIN_SETTINGS_DOCUMENT)

    def test_non_object_document_raises(self, backend, tmp_path) -> None:
        (tmp_path / "admin-settings.json").write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(StorageReadError):
            backend.load(ADMIN_SETTINGS_DOCUMENT)

    def test_store_recovers_from_corrupt_file(self, backend, tmp_path, caplog) -> None:
        """A broken overlay is logged and replaced by defaults."""
        (tmp_path / "admin-settings.json").write_text("{oops", encoding="utf-8")
        registry = RuntimeOptionRegistry(backend, default_option_specs(make_settings()))

        registry.load()

        assert registry.get(DAILY_LIMIT_SECONDS) == 3600
        assert "starting fresh" in caplog.text

        registry.set(DAILY_LIMIT_SECONDS, 600)
        assert json.loads((tmp_path / "admin-settings.json").read_text()) == {DAILY_LIMIT_SECONDS: 600}


class TestSqlDocumentBackend:
    """Documents as rows in the state_documents table."""

    @pytest.fixture
    def backend(self, tmp_path):
        backend = SqlDocumentBackend(f"sqlite:///{tmp_path / 'db' / 'voxt.db'}")
        yield backend
        backend.close()

    def test_round_trip_and_overwrite(self, backend) -> None:
        assert backend.load(USAGE_DOCUMENT) is None

        backend.save(USAGE_DOCUMENT, {"1": {"date": "2026-03-01", "usedSeconds": 5}})
        backend.save(USAGE_DOCUMENT, {"2": {"date": "2026-03-01", "usedSeconds": 7}})

        assert backend.load(USAGE_DOCUMENT) == {"2": {"date": "2026-03-01", "usedSeconds": 7}}

    def test_registry_on_sql_backend(self, backend) -> None:
        registry = RuntimeOptionRegistry(backend, default_option_specs(make_settings()))
        registry.load()
        registry.set(DAILY_LIMIT_SECONDS, 900)

        reloaded = RuntimeOptionRegistry(backend, default_option_specs(make_settings()))
        reloaded.load()

        assert reloaded.get(DAILY_LIMIT_SECONDS) == 900


class TestBuildBackend:
    def test_json_default(self, tmp_path) -> None:
        settings = make_settings(
            STORAGE_BACKEND="json",
            USAGE_FILE_PATH=str(tmp_path / "u.json"),
            SUMMARY_USAGE_FILE_PATH=str(tmp_path / "s.json"),
            MESSAGE_HISTORY_FILE_PATH=str(tmp_path / "m.json"),
            ADMIN_SETTINGS_FILE_PATH=str(tmp_path / "a.json"),
        )

        assert isinstance(build_backend(settings), JsonFileBackend)

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError):
            build_backend(make_settings(STORAGE_BACKEND="redis"))


class TestAbstractBases:
    """Incomplete stores and backends fail at construction."""

    def test_store_without_dump(self) -> None:
        class HalfStore(DocumentStore):
            def _restore(self, raw: dict) -> None:
                self.raw = raw

        with pytest.raises(TypeError):
            HalfStore(JsonFileBackend({}))

    def test_backend_without_save(self) -> None:
        class ReadOnlyBackend(DocumentBackend):
            def load(self, name: str) -> dict | None:
                return None

        with pytest.raises(TypeError):
            ReadOnlyBackend()
