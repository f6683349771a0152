"""
Configuration of the voxt bot.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Централизованная конфигурация бота."""

    # Telegram
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", os.getenv("BOT_TOKEN", ""))

    # "auto": транскрибировать всё, "mention": только по упоминанию или ответу
    BOT_MODE: str = os.getenv("BOT_MODE", "mention")
    BOT_LANGUAGE: str = os.getenv("BOT_LANGUAGE", "uk")

    # OpenAI (Whisper всегда идёт через OpenAI)
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    TRANSCRIPTION_MODEL: str = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")

    # Summarizer provider
    AI_PROVIDER: str = os.getenv("AI_PROVIDER", "openai")
    SUMMARY_MODEL: str = os.getenv("SUMMARY_MODEL", "gpt-4o-mini")
    ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")
    ANTHROPIC_MODEL: str = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
    OLLAMA_HOST: str = os.getenv("OLLAMA_HOST", "http://localhost:11434")
    OLLAMA_MODEL: str = os.getenv("OLLAMA_MODEL", "llama3.1")

    # Limits (compiled defaults of the runtime options)
    DAILY_LIMIT_SECONDS: int = int(os.getenv("DAILY_LIMIT_SECONDS", "3600"))
    MESSAGE_BUFFER_MAX_PER_CHAT: int = int(os.getenv("MESSAGE_BUFFER_MAX_PER_CHAT", "500"))
    SUMMARY_HISTORY_MAX_PER_CHAT: int = int(os.getenv("SUMMARY_HISTORY_MAX_PER_CHAT", "12"))
    SUMMARY_REUSE_WINDOW_MINUTES: int = int(os.getenv("SUMMARY_REUSE_WINDOW_MINUTES", "30"))
    SUMMARY_COOLDOWN_SECONDS: int = int(os.getenv("SUMMARY_COOLDOWN_SECONDS", "20"))
    SUMMARY_DAILY_LIMIT_PER_USER: int = int(os.getenv("SUMMARY_DAILY_LIMIT_PER_USER", "30"))

    # Календарный день квот считается в этой зоне
    USAGE_TIMEZONE: str = os.getenv("USAGE_TIMEZONE", "UTC")

    # Storage
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "json")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./data/voxt.db")
    USAGE_FILE_PATH: str = os.getenv("USAGE_FILE_PATH", "./data/usage.json")
    MESSAGE_HISTORY_FILE_PATH: str = os.getenv("MESSAGE_HISTORY_FILE_PATH", "./data/message-history.json")
    SUMMARY_USAGE_FILE_PATH: str = os.getenv("SUMMARY_USAGE_FILE_PATH", "./data/summary-usage.json")
    ADMIN_SETTINGS_FILE_PATH: str = os.getenv("ADMIN_SETTINGS_FILE_PATH", "./data/admin-settings.json")

    # Admin
    ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "").lstrip("@")
    ADMIN_USER_ID: str = os.getenv("ADMIN_USER_ID", "")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Paths
    BASE_DIR: Path = Path(__file__).parent


settings = Settings()
