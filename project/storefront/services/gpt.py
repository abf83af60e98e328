# storefront/services/gpt.py

from typing import Optional
from openai import AsyncOpenAI


def create_client(api_key: Optional[str]) -> Optional[AsyncOpenAI]:
    """Клиент OpenAI, один на всё приложение. Без ключа: None."""
    if not api_key:
        return None
    return AsyncOpenAI(api_key=api_key)


async def gpt_request(client: AsyncOpenAI, messages: list[dict], model: str) -> str:
    """
    Асинхронный запрос к OpenAI ChatCompletion API.
    """
    response = await client.chat.completions.create(
        model=model,
        messages=messages,
    )
    return response.choices[0].message.content or ""
