"""
AI service - wrapper for the chat summarization model.
"""
import logging

from voxt.models import StoredMessage
from voxt.services.errors import ExternalServiceError
from voxt.utils.clock import to_iso

logger = logging.getLogger(__name__)

SYSTEM_PROMPTS = {
    "uk": (
        "You summarize chat history updates. Keep response concise, factual, and in Ukrainian. "
        "Include: 1) short overview, 2) key points as bullets, 3) action items if any."
    ),
    "en": (
        "You summarize chat history updates. Keep response concise, factual, and in English. "
        "Include: 1) short overview, 2) key points as bullets, 3) action items if any."
    ),
}

PREVIOUS_SUMMARY_BLOCK = {
    "uk": "Попередній підсумок (може бути частково застарілий):\n{summary}\n\n",
    "en": "Previous summary (may be partially outdated):\n{summary}\n\n",
}

UPDATE_INSTRUCTION = {
    "uk": "Онови/створи підсумок на основі нових повідомлень:\n\n",
    "en": "Update/create the summary based on the new messages:\n\n",
}


def format_messages(messages: list[StoredMessage]) -> str:
    """Рендерит сообщения как `[timestamp] author: text`, от старых к новым."""
    return "\n".join(
        f"[{to_iso(m.date)}] {m.user_name}: {m.text}"
        for m in messages
    )


def build_summary_prompt(messages: list[StoredMessage], previous_summary: str | None, language: str = "uk") -> str:
    """Формирует пользовательский промпт: прошлое саммари обновляется, а не заменяется."""
    block = ""
    if previous_summary:
        template = PREVIOUS_SUMMARY_BLOCK.get(language, PREVIOUS_SUMMARY_BLOCK["en"])
        block = template.format(summary=previous_summary)

    instruction = UPDATE_INSTRUCTION.get(language, UPDATE_INSTRUCTION["en"])
    return block + instruction + format_messages(messages)


class SummarizerClient:
    """Клиент модели саммаризации (OpenAI, Anthropic или Ollama)."""

    def __init__(self, provider: str, config: dict, language: str = "uk"):
        self.provider = provider
        self.config = config
        self.language = language
        self.client = None
        self.system_prompt = SYSTEM_PROMPTS.get(language, SYSTEM_PROMPTS["en"])
        self._init_client()

    def _init_client(self):
        """Инициализирует AI клиент."""
        if self.provider == "openai":
            from openai import AsyncOpenAI
            self.client = AsyncOpenAI(api_key=self.config["api_key"])
            self.model = self.config.get("model", "gpt-4o-mini")
        elif self.provider == "anthropic":
            from anthropic import AsyncAnthropic
            self.client = AsyncAnthropic(api_key=self.config["api_key"])
            self.model = self.config.get("model", "claude-sonnet-4-20250514")
        elif self.provider == "ollama":
            import ollama
            self.client = ollama.AsyncClient(host=self.config.get("host", "http://localhost:11434"))
            self.model = self.config.get("model", "llama3.1")
        else:
            raise ValueError(f"Unsupported AI provider: {self.provider}")

        logger.info(f"Initialized summarizer: {self.provider} ({self.model})")

    async def summarize(self, messages: list[StoredMessage], previous_summary: str | None = None) -> str:
        """
        Генерирует обновлённое саммари.

        Любая ошибка провайдера или пустой ответ превращаются в
        ExternalServiceError. Повторов нет.
        """
        prompt = build_summary_prompt(messages, previous_summary, self.language)

        try:
            if self.provider == "openai":
                content = await self._generate_openai(prompt)
            elif self.provider == "anthropic":
                content = await self._generate_anthropic(prompt)
            else:
                content = await self._generate_ollama(prompt)
        except Exception as e:
            logger.error(f"Summarizer error ({self.provider}): {e}")
            raise ExternalServiceError(str(e) or type(e).__name__) from e

        content = (content or "").strip()
        if not content:
            raise ExternalServiceError("Empty summary response from model")
        return content

    async def _generate_openai(self, prompt: str) -> str | None:
        response = await self.client.chat.completions.create(
            model=self.model,
            temperature=0.2,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    async def _generate_anthropic(self, prompt: str) -> str | None:
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=1024,
            temperature=0.2,
            system=self.system_prompt,
            messages=[{"role": "user", "content": prompt}],
        )
        if not response.content:
            return None
        return response.content[0].text

    async def _generate_ollama(self, prompt: str) -> str | None:
        response = await self.client.chat(
            model=self.model,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
            options={"temperature": 0.2},
        )
        return response["message"]["content"]


def build_summarizer(settings) -> SummarizerClient:
    """Создаёт клиент по AI_PROVIDER, как это делает post_init."""
    provider = settings.AI_PROVIDER

    if provider == "openai":
        config = {"api_key": settings.OPENAI_API_KEY, "model": settings.SUMMARY_MODEL}
    elif provider == "anthropic":
        config = {"api_key": settings.ANTHROPIC_API_KEY, "model": settings.ANTHROPIC_MODEL}
    elif provider == "ollama":
        config = {"host": settings.OLLAMA_HOST, "model": settings.OLLAMA_MODEL}
    else:
        config = {}

    return SummarizerClient(provider, config, language=settings.BOT_LANGUAGE)
