"""
Storage service - whole-document persistence for the bot state.

Каждая забота (usage, summary usage, история, настройки) хранится одним JSON-документом,
который целиком читается при старте и целиком перезаписывается при каждой
мутации. Бэкенд подменяемый: файлы на диске или таблица в SQL базе.
"""
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from voxt.models import Base, StateDocument
from voxt.services.errors import StorageReadError

logger = logging.getLogger(__name__)

USAGE_DOCUMENT = "usage"
SUMMARY_USAGE_DOCUMENT = "summary_usage"
MESSAGE_HISTORY_DOCUMENT = "message_history"
ADMIN_SETTINGS_DOCUMENT = "admin_settings"


class DocumentBackend(ABC):
    """Интерфейс хранилища документов."""

    @abstractmethod
    def load(self, name: str) -> dict | None:
        """Возвращает документ или None, если его ещё нет."""

    @abstractmethod
    def save(self, name: str, data: dict) -> None:
        ...

    def close(self) -> None:
        pass


class JsonFileBackend(DocumentBackend):
    """Документы в отдельных JSON-файлах, без блокировок и атомарного rename."""

    def __init__(self, paths: dict[str, str | Path]):
        self.paths = {name: Path(path) for name, path in paths.items()}

    def _path(self, name: str) -> Path:
        try:
            return self.paths[name]
        except KeyError:
            raise KeyError(f"No file configured for document '{name}'") from None

    def load(self, name: str) -> dict | None:
        path = self._path(name)
        if not path.exists():
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageReadError(f"Could not read {path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageReadError(f"{path} does not contain a JSON object")
        return data

    def save(self, name: str, data: dict) -> None:
        path = self._path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


class SqlDocumentBackend(DocumentBackend):
    """Документы строками таблицы state_documents (SQLite по умолчанию)."""

    def __init__(self, database_url: str):
        if database_url.startswith("sqlite:///"):
            db_path = Path(database_url.removeprefix("sqlite:///"))
            if str(db_path) != ":memory:":
                db_path.parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(database_url)
        Base.metadata.create_all(self.engine)
        logger.info(f"SQL storage initialized: {self.engine.url.render_as_string(hide_password=True)}")

    def load(self, name: str) -> dict | None:
        try:
            with Session(self.engine) as session:
                document = session.get(StateDocument, name)
                if document is None:
                    return None
                data = json.loads(document.payload)
        except (SQLAlchemyError, ValueError) as e:
            raise StorageReadError(f"Could not read document '{name}': {e}") from e

        if not isinstance(data, dict):
            raise StorageReadError(f"Document '{name}' is not a JSON object")
        return data

    def save(self, name: str, data: dict) -> None:
        payload = json.dumps(data, ensure_ascii=False)
        with Session(self.engine) as session:
            session.merge(StateDocument(name=name, payload=payload))
            session.commit()

    def close(self) -> None:
        self.engine.dispose()


def build_backend(settings) -> DocumentBackend:
    """Создаёт бэкенд по настройкам STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "json":
        return JsonFileBackend({
            USAGE_DOCUMENT: settings.USAGE_FILE_PATH,
            SUMMARY_USAGE_DOCUMENT: settings.SUMMARY_USAGE_FILE_PATH,
            MESSAGE_HISTORY_DOCUMENT: settings.MESSAGE_HISTORY_FILE_PATH,
            ADMIN_SETTINGS_DOCUMENT: settings.ADMIN_SETTINGS_FILE_PATH,
        })
    if settings.STORAGE_BACKEND == "sql":
        return SqlDocumentBackend(settings.DATABASE_URL)

    raise ValueError(f"Unsupported storage backend: {settings.STORAGE_BACKEND}")


class DocumentStore(ABC):
    """
    Базовый класс стора: держит состояние в памяти, читает документ один раз
    в load() и перезаписывает его целиком в flush().
    """

    document_name: str = ""

    def __init__(self, backend: DocumentBackend):
        self.backend = backend

    def load(self) -> None:
        try:
            raw = self.backend.load(self.document_name)
        except StorageReadError as e:
            logger.warning(f"Could not read '{self.document_name}', starting fresh: {e}")
            raw = None

        self._restore(raw or {})

    def flush(self) -> None:
        self.backend.save(self.document_name, self._dump())

    @abstractmethod
    def _restore(self, raw: dict) -> None:
        """Заменяет состояние в памяти разобранным документом."""

    @abstractmethod
    def _dump(self) -> dict:
        """Сериализует состояние в документ."""
