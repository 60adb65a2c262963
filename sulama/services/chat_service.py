"""
Chat use case: quota check, classification, prompt assembly, model call and
the per-user memory/project bookkeeping that follows a reply.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional

from pydantic import BaseModel, ConfigDict, Field

from sulama.core.config import Settings
from sulama.core.errors import ForbiddenError, NotFoundError, UpstreamError, ValidationError
from sulama.core.llm import build_client
from sulama.domain import prompts
from sulama.domain.classifier import NON_IRRIGATION, classify
from sulama.domain.pagination import is_continuation_request
from sulama.domain.products import build_product_context, find_related_products
from sulama.repositories import json_storage
from sulama.repositories.catalog import CatalogStore
from sulama.services.project_service import new_design_project

logger = logging.getLogger(__name__)

HISTORY_WINDOW = 20
MEMORY_LIMIT = 40
PRODUCT_LIMIT = 8
SERVER_ERROR = "Sunucu hatası: Asistan şu anda yanıt veremiyor."
STREAM_WARNING = "\n\n[Uyarı] Cevap tam olarak tamamlanamadı, lütfen tekrar deneyin."


class ChatUser(BaseModel):
    email: Optional[str] = None


class ChatRequest(BaseModel):
    """``/chat`` body; ``designData`` arrives camel-cased from the widget."""

    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    user: Optional[ChatUser] = None
    mode: Optional[str] = None
    design_data: Any = Field(default=None, alias="designData")
    stream: Optional[bool] = None

    @property
    def email(self) -> str:
        return ((self.user.email if self.user else None) or "").strip()

    @property
    def text(self) -> str:
        return self.message or ""

    @property
    def design(self) -> bool:
        return self.mode == "design"

    @property
    def streaming(self) -> bool:
        return self.stream is not False


@dataclass
class ChatResult:
    remaining: int
    refusal: Optional[str] = None
    reply: Optional[str] = None
    chunks: Optional[AsyncIterator[str]] = None


async def _deltas(stream) -> AsyncIterator[str]:
    async for part in stream:
        if not part.choices:
            continue
        delta = part.choices[0].delta.content or ""
        if delta:
            yield delta


async def _close_stream(stream: Any) -> None:
    close = getattr(stream, "close", None)
    if close is None:
        return
    try:
        await close()
    except Exception:
        logger.warning("OpenAI stream kapatılamadı", exc_info=True)


class ChatService:
    def __init__(self, settings: Settings, catalog: CatalogStore, client: Any = None) -> None:
        self.settings = settings
        self.catalog = catalog
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = build_client(self.settings)
        return self._client

    @client.setter
    def client(self, value) -> None:
        self._client = value

    # -------------------------------------- prompt --------------------------------------
    def build_messages(self, req: ChatRequest, user_message: str, history: list, continuation: bool) -> list[dict]:
        catalog = self.catalog.current
        messages = [
            {"role": "system", "content": prompts.system_prompt(req.mode)},
            {"role": "system", "content": prompts.data_context(catalog)},
        ]
        if not continuation:
            related = find_related_products(req.text, catalog.price_list, PRODUCT_LIMIT)
            product_context = build_product_context(related)
            if product_context:
                messages.append({"role": "system", "content": prompts.product_context_message(product_context)})
        else:
            messages.append({"role": "system", "content": prompts.CONTINUATION_HINT})
        messages.extend(
            {"role": m.get("role"), "content": m.get("content")}
            for m in history[-HISTORY_WINDOW:]
            if isinstance(m, dict)
        )
        messages.append({"role": "user", "content": user_message})
        return messages

    # -------------------------------------- akış --------------------------------------
    async def handle(self, req: ChatRequest) -> ChatResult:
        if not req.email:
            raise ValidationError("Kullanıcı bilgisi eksik.")

        users = json_storage.load_users()
        user = json_storage.find_user(users, req.email)
        if not user:
            raise NotFoundError("Kullanıcı bulunamadı.")
        if int(user.get("used") or 0) >= int(user.get("limit") or 0):
            raise ForbiddenError("Soru hakkınız doldu. Paket satın almanız gerekiyor.")

        continuation = False
        if not req.design:
            if not req.text.strip():
                raise ValidationError("Mesaj boş olamaz.")
            continuation = is_continuation_request(req.text)
            category = await classify(self.client, req.text, self.settings.classifier_model)
            if category == NON_IRRIGATION:
                return ChatResult(remaining=json_storage.remaining(user), refusal=prompts.OUT_OF_SCOPE_REPLY)

        user_message = prompts.design_request_message(req.design_data) if req.design else req.text
        history = user.get("memory") if isinstance(user.get("memory"), list) else []
        messages = self.build_messages(req, user_message, history, continuation)

        user["used"] = int(user.get("used") or 0) + 1
        json_storage.save_users(users)
        remaining = json_storage.remaining(user)

        if not req.streaming:
            reply = await self._complete(req, messages)
            self._remember(req, user_message, reply)
            return ChatResult(remaining=remaining, reply=reply)

        chunks = await self._open_stream(req, messages)
        return ChatResult(remaining=remaining, chunks=chunks)

    async def _complete(self, req: ChatRequest, messages: list[dict]) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=self.settings.chat_model,
                messages=messages,
            )
        except Exception:
            logger.exception("OpenAI hata: %s", req.email)
            self._refund(req.email)
            raise UpstreamError(SERVER_ERROR)
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    async def _open_stream(self, req: ChatRequest, messages: list[dict]) -> AsyncIterator[str]:
        """Start the model stream and wait for its first text so early failures can still be a 500."""
        stream = None
        try:
            stream = await self.client.chat.completions.create(
                model=self.settings.chat_model,
                messages=messages,
                stream=True,
            )
            deltas = _deltas(stream)
            try:
                first = await anext(deltas)
            except StopAsyncIteration:
                first = ""
        except Exception:
            logger.exception("OpenAI streaming hata: %s", req.email)
            if stream is not None:
                await _close_stream(stream)
            self._refund(req.email)
            raise UpstreamError(SERVER_ERROR)
        return self._relay(req, messages[-1]["content"], stream, first, deltas)

    async def _relay(
        self,
        req: ChatRequest,
        user_message: str,
        stream: Any,
        first: str,
        deltas: AsyncIterator[str],
    ) -> AsyncIterator[str]:
        reply = first
        try:
            if first:
                yield first
            try:
                async for delta in deltas:
                    reply += delta
                    yield delta
            except Exception:
                logger.exception("OpenAI streaming yarıda kesildi: %s", req.email)
                yield STREAM_WARNING
                return
            self._remember(req, user_message, reply)
        finally:
            # also runs when the client disconnects and the response closes the generator
            await _close_stream(stream)

    # -------------------------------------- kayıt --------------------------------------
    def _refund(self, email: str) -> None:
        try:
            users = json_storage.load_users()
            user = json_storage.find_user(users, email)
            if not user:
                return
            user["used"] = max(0, int(user.get("used") or 0) - 1)
            json_storage.save_users(users)
        except Exception:
            logger.exception("Soru hakkı iade edilemedi: %s", email)

    def _remember(self, req: ChatRequest, user_message: str, reply: str) -> None:
        try:
            users = json_storage.load_users()
            user = json_storage.find_user(users, req.email)
            if not user:
                return
            memory = user.get("memory") if isinstance(user.get("memory"), list) else []
            memory.append({"role": "user", "content": user_message})
            memory.append({"role": "assistant", "content": reply})
            user["memory"] = memory[-MEMORY_LIMIT:]

            if req.design:
                projects = user.get("projects") if isinstance(user.get("projects"), list) else []
                projects.append(new_design_project(reply, req.design_data))
                user["projects"] = projects

            json_storage.save_users(users)
        except Exception:
            logger.exception("Cevap sonrası kullanıcı kaydetme hatası: %s", req.email)
