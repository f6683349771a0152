# Handlers package
from .start import register_start_handlers
from .summary import register_summary_handlers
from .transcription import register_transcription_handlers
from .admin import register_admin_handlers


def register_all_handlers(application):
    """Регистрирует все обработчики команд."""
    register_summary_handlers(application)  # Захват сообщений в группе -1, до всех команд
    register_start_handlers(application)
    register_admin_handlers(application)
    register_transcription_handlers(application)
