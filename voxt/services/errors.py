"""
Error taxonomy shared by stores, clients and handlers.
"""


class VoxtError(Exception):
    """Базовая ошибка бота."""


class ValidationError(VoxtError, ValueError):
    """Некорректный ввод администратора."""


class UnknownOption(ValidationError):
    def __init__(self, name: str):
        super().__init__(f"Unknown option: {name}")
        self.name = name


class InvalidNumber(ValidationError):
    def __init__(self, raw_value):
        super().__init__("Invalid number")
        self.raw_value = raw_value


class OutOfRange(ValidationError):
    def __init__(self, name: str, minimum: int, maximum: int):
        super().__init__(f"Out of range: {minimum}..{maximum}")
        self.name = name
        self.minimum = minimum
        self.maximum = maximum


class QuotaDenied(VoxtError):
    """Запрос отклонён квотой: cooldown или дневной лимит."""

    COOLDOWN = "cooldown"
    DAILY_LIMIT = "daily_limit"

    def __init__(self, reason: str, retry_after_seconds: int | None = None):
        super().__init__(reason)
        self.reason = reason
        self.retry_after_seconds = retry_after_seconds


class ExternalServiceError(VoxtError):
    """Внешний сервис (Whisper / summarizer) упал или вернул пустоту."""


class StorageReadError(VoxtError):
    """Не удалось прочитать сохранённый документ."""
