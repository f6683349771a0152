"""
Runtime options - tunable limits with an override overlay persisted to disk.

Все лимиты (квоты, размеры буферов, cooldown) читаются отсюда на каждой
операции, поэтому /admin_set применяется без перезапуска.
"""
import logging
import math
from dataclasses import dataclass

from voxt.services.errors import InvalidNumber, OutOfRange, UnknownOption
from voxt.services.storage import ADMIN_SETTINGS_DOCUMENT, DocumentBackend, DocumentStore

logger = logging.getLogger(__name__)

DAILY_LIMIT_SECONDS = "dailyLimitSeconds"
MAX_SUMMARY_MESSAGES = "maxSummaryMessages"
SUMMARY_COOLDOWN_SECONDS = "summaryCommandCooldownSeconds"
SUMMARY_DAILY_LIMIT_PER_USER = "summaryDailyLimitPerUser"
SUMMARY_REUSE_WINDOW_MINUTES = "summaryReuseWindowMinutes"
MESSAGE_BUFFER_MAX_PER_CHAT = "messageBufferMaxPerChat"
SUMMARY_HISTORY_MAX_PER_CHAT = "summaryHistoryMaxPerChat"


@dataclass(frozen=True)
class OptionSpec:
    name: str
    default: int
    minimum: int
    maximum: int


@dataclass(frozen=True)
class OptionView:
    name: str
    value: int
    default: int
    is_overridden: bool


def default_option_specs(settings) -> list[OptionSpec]:
    """Набор опций с дефолтами из окружения и жёсткими границами."""
    return [
        OptionSpec(DAILY_LIMIT_SECONDS, settings.DAILY_LIMIT_SECONDS, 60, 24 * 60 * 60),
        OptionSpec(MAX_SUMMARY_MESSAGES, 400, 5, 400),
        OptionSpec(SUMMARY_COOLDOWN_SECONDS, settings.SUMMARY_COOLDOWN_SECONDS, 0, 600),
        OptionSpec(SUMMARY_DAILY_LIMIT_PER_USER, settings.SUMMARY_DAILY_LIMIT_PER_USER, 1, 500),
        OptionSpec(SUMMARY_REUSE_WINDOW_MINUTES, settings.SUMMARY_REUSE_WINDOW_MINUTES, 1, 24 * 60),
        OptionSpec(MESSAGE_BUFFER_MAX_PER_CHAT, settings.MESSAGE_BUFFER_MAX_PER_CHAT, 20, 5000),
        OptionSpec(SUMMARY_HISTORY_MAX_PER_CHAT, settings.SUMMARY_HISTORY_MAX_PER_CHAT, 1, 100),
    ]


class RuntimeOptionRegistry(DocumentStore):
    """Реестр числовых опций: дефолт + разреженный слой переопределений."""

    document_name = ADMIN_SETTINGS_DOCUMENT

    def __init__(self, backend: DocumentBackend, specs: list[OptionSpec]):
        super().__init__(backend)
        self.specs = {spec.name: spec for spec in specs}
        self.overrides: dict[str, int] = {}

    def _restore(self, raw: dict) -> None:
        self.overrides = {}
        for name, value in raw.items():
            if name not in self.specs or not isinstance(value, int) or isinstance(value, bool):
                logger.warning(f"Ignoring invalid runtime override {name}={value!r}")
                continue
            self.overrides[name] = value

    def _dump(self) -> dict:
        return dict(self.overrides)

    def _spec(self, name: str) -> OptionSpec:
        try:
            return self.specs[name]
        except KeyError:
            raise UnknownOption(name) from None

    def is_known(self, name: str) -> bool:
        return name in self.specs

    def get(self, name: str) -> int:
        spec = self._spec(name)
        return self.overrides.get(name, spec.default)

    def list_options(self) -> list[OptionView]:
        return [
            OptionView(
                name=spec.name,
                value=self.overrides.get(spec.name, spec.default),
                default=spec.default,
                is_overridden=spec.name in self.overrides,
            )
            for spec in self.specs.values()
        ]

    def set(self, name: str, raw_value) -> int:
        """
        Устанавливает переопределение.

        Значение усекается до целого; InvalidNumber для нечисел,
        OutOfRange если результат вне [min, max].
        """
        spec = self._spec(name)

        try:
            number = float(raw_value)
        except (TypeError, ValueError, OverflowError):
            raise InvalidNumber(raw_value) from None
        if isinstance(raw_value, bool) or not math.isfinite(number):
            raise InvalidNumber(raw_value)

        value = math.trunc(number)
        if value < spec.minimum or value > spec.maximum:
            raise OutOfRange(name, spec.minimum, spec.maximum)

        self.overrides[name] = value
        self.flush()
        logger.info(f"Runtime option {name} set to {value}")
        return value

    def reset(self, name: str) -> None:
        self._spec(name)
        self.overrides.pop(name, None)
        self.flush()
        logger.info(f"Runtime option {name} reset to default")

    def reset_all(self) -> None:
        self.overrides = {}
        self.flush()
        logger.info("All runtime options reset to defaults")
