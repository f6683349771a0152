"""
Transcriber - speech-to-text through OpenAI Whisper.
"""
import logging

from openai import AsyncOpenAI

from voxt.services.errors import ExternalServiceError

logger = logging.getLogger(__name__)

EXTENSIONS = {
    "audio/ogg": "ogg",
    "video/mp4": "mp4",
    "audio/mpeg": "mp3",
}


class TranscriberClient:
    """Клиент транскрипции аудио."""

    def __init__(self, api_key: str, model: str = "whisper-1"):
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        """Отправляет аудио в Whisper и возвращает текст."""
        filename = f"audio.{EXTENSIONS.get(mime_type, 'ogg')}"

        try:
            result = await self.client.audio.transcriptions.create(
                file=(filename, audio, mime_type),
                model=self.model,
            )
        except Exception as e:
            logger.error(f"Transcription error: {e}")
            raise ExternalServiceError(str(e) or type(e).__name__) from e

        text = (result.text or "").strip()
        if not text:
            raise ExternalServiceError("Empty transcription response from model")
        return text
