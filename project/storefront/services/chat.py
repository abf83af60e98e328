# storefront/services/chat.py

from typing import Optional

from openai import AsyncOpenAI

from storefront.services.assistant import SYSTEM_PROMPT
from storefront.services.gpt import gpt_request
from storefront.utils.log import Log

OFFLINE_REPLY = "I apologize, but I am currently offline. Please check back later."
EMPTY_REPLY = "I'm having trouble understanding. Could you rephrase that?"
ERROR_REPLY = "I am currently experiencing high traffic. Please try again shortly."


class ChatResponder:
    """
    AI-консультант магазина.

    Каждый вызов независим: модели уходит только системная инструкция и
    текущее сообщение, история переписки не передаётся. Виджет чата не
    должен ломаться, поэтому respond() никогда не бросает исключений и при
    любой ошибке отвечает заготовленной фразой.
    """

    def __init__(self, client: Optional[AsyncOpenAI], model: str, log: Log):
        self.client = client
        self.model = model
        self.log = log

    def build_messages(self, utterance: str) -> list[dict]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": utterance},
        ]

    async def respond(self, utterance: str) -> str:
        if self.client is None:
            await self.log.log_warning("chat", "OPENAI_API_KEY не задан, консультант офлайн")
            return OFFLINE_REPLY

        try:
            text = await gpt_request(self.client, self.build_messages(utterance), self.model)
        except Exception as e:
            await self.log.log_error("chat", f"Ошибка запроса к модели: {e}")
            return ERROR_REPLY

        if not text or not text.strip():
            await self.log.log_warning("chat", "Модель вернула пустой ответ")
            return EMPTY_REPLY

        await self.log.log_info("chat", "Ответ модели получен", {"length": len(text)})
        return text
