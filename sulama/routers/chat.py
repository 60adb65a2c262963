from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from sulama.core.rate_limiter import rate_limit_ip
from sulama.core.utils import payload_model
from sulama.services.chat_service import ChatRequest, ChatService

router = APIRouter(tags=["chat"])

TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"


def _get_chat_service(request: Request) -> ChatService:
    svc = getattr(getattr(request.app, "state", None), "chat_service", None)
    if not svc:
        raise RuntimeError("ChatService yapılandırılmamış")
    return svc


@router.post("/chat")
async def chat(request: Request, body: ChatRequest = Depends(payload_model(ChatRequest))):
    svc = _get_chat_service(request)
    rate_limit_ip(request, "chat", limit=svc.settings.chat_rate_limit)
    result = await svc.handle(body)
    headers = {"X-Remaining": str(result.remaining)}

    if result.refusal is not None:
        return PlainTextResponse(result.refusal, headers=headers, media_type=TEXT_MEDIA_TYPE)
    if result.chunks is None:
        return JSONResponse({"reply": result.reply or "", "remaining": result.remaining}, headers=headers)
    return StreamingResponse(
        result.chunks,
        media_type=TEXT_MEDIA_TYPE,
        headers={**headers, "Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
