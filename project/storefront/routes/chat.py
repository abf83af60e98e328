# storefront/routes/chat.py

from fastapi import APIRouter, Request, status
from pydantic import BaseModel

from storefront.exceptions import StorefrontError

router = APIRouter()


class ChatRequest(BaseModel):
    message: str = ""


class ChatResponse(BaseModel):
    response: str


class EmptyMessage(StorefrontError):
    status_code = 400


@router.post(
    "",
    response_model=ChatResponse,
    status_code=status.HTTP_200_OK,
    summary="Сообщение AI-консультанту",
    responses={
        200: {"description": "Ответ консультанта (или заготовленная фраза при сбое модели)"},
        400: {"description": "Пустое сообщение"},
    },
)
async def chat(request: Request, payload: ChatRequest):
    if not payload.message.strip():
        await request.app.state.log.log_warning("chat", "Пустое сообщение в чате")
        raise EmptyMessage("Message is required")

    text = await request.app.state.chat.respond(payload.message.strip())
    return {"response": text}
