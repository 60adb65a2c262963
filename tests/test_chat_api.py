from __future__ import annotations

import asyncio

from sulama.domain import prompts
from sulama.repositories import json_storage
from sulama.services.chat_service import SERVER_ERROR, STREAM_WARNING

EMAIL = "ali@example.com"


def _register(client, email=EMAIL):
    resp = client.post("/register", json={"email": email, "password": "parola"})
    assert resp.status_code == 200
    return resp.json()


def _user(email=EMAIL):
    return json_storage.find_user(json_storage.load_users(), email)


def _set_user(**fields):
    users = json_storage.load_users()
    json_storage.find_user(users, EMAIL).update(fields)
    json_storage.save_users(users)


def test_streamed_answer_consumes_quota_and_is_remembered(client, fake_llm):
    _register(client)
    resp = client.post("/chat", json={"message": "TM2 4 istasyon kontrol ünitesi fiyatı?", "user": {"email": EMAIL}})

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.headers["x-remaining"] == "19"
    assert resp.text == "Merhaba, bahçeniz kaç m²?"

    user = _user()
    assert user["used"] == 1
    assert user["memory"] == [
        {"role": "user", "content": "TM2 4 istasyon kontrol ünitesi fiyatı?"},
        {"role": "assistant", "content": "Merhaba, bahçeniz kaç m²?"},
    ]

    assert fake_llm.classifier_calls == []
    call = fake_llm.chat_calls[0]
    assert call["stream"] is True
    messages = call["messages"]
    assert messages[0] == {"role": "system", "content": prompts.SYSTEM_PROMPT}
    assert "PRICE_LIST = [" in messages[1]["content"]
    assert "K_FACTORS = []" in messages[1]["content"]
    assert "- SKU: TM2-4 |" in messages[2]["content"]
    assert "4.250,00 TL (CSV)" in messages[2]["content"]
    assert messages[-1] == {"role": "user", "content": "TM2 4 istasyon kontrol ünitesi fiyatı?"}


def test_out_of_scope_message_is_refused_without_using_quota(client, fake_llm):
    _register(client)
    fake_llm.label = "NON_IRRIGATION"
    resp = client.post("/chat", json={"message": "Python'da liste nasıl sıralanır?", "user": {"email": EMAIL}})

    assert resp.status_code == 200
    assert resp.text == prompts.OUT_OF_SCOPE_REPLY
    assert resp.headers["x-remaining"] == "20"
    assert _user()["used"] == 0
    assert fake_llm.chat_calls == []
    assert len(fake_llm.classifier_calls) == 1


def test_request_validation(client):
    _register(client)
    resp = client.post("/chat", json={"message": "sulama"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Kullanıcı bilgisi eksik."}

    resp = client.post("/chat", json={"message": "sulama", "user": {"email": "yok@example.com"}})
    assert resp.status_code == 404

    resp = client.post("/chat", json={"message": "   ", "user": {"email": EMAIL}})
    assert resp.status_code == 400


def test_exhausted_quota_is_rejected(client, fake_llm):
    _register(client)
    _set_user(used=20)
    resp = client.post("/chat", json={"message": "damla sulama", "user": {"email": EMAIL}})
    assert resp.status_code == 403
    assert resp.json() == {"error": "Soru hakkınız doldu. Paket satın almanız gerekiyor."}
    assert fake_llm.calls == []


def test_design_mode_saves_project(client, fake_llm):
    _register(client)
    design = {"title": "Villa Bahçesi", "alan_m2": 300, "su_kaynagi": "şebeke"}
    resp = client.post("/chat", json={"mode": "design", "designData": design, "user": {"email": EMAIL}})
    assert resp.status_code == 200

    messages = fake_llm.chat_calls[0]["messages"]
    assert "KULLANICI ÖZEL TASARIM MODUNU AÇTI." in messages[0]["content"]
    assert messages[-1]["content"].startswith("ÖZEL TASARIM TALEBİ:\n")
    assert '"alan_m2": 300' in messages[-1]["content"]
    assert fake_llm.classifier_calls == []

    user = _user()
    assert len(user["projects"]) == 1
    project = user["projects"][0]
    assert project["title"] == "Villa Bahçesi"
    assert project["type"] == "design"
    assert project["content"] == resp.text
    assert project["summary"] == resp.text[:400]
    assert project["rawDesignData"] == design
    assert project["id"].isdigit()


def test_design_project_gets_default_title(client):
    _register(client)
    client.post("/chat", json={"mode": "design", "designData": {"alan_m2": 50}, "user": {"email": EMAIL}})
    assert _user()["projects"][0]["title"].startswith("Özel Tasarım - ")


def test_buffered_reply(client):
    _register(client)
    resp = client.post("/chat", json={"message": "sprinkler önerisi", "user": {"email": EMAIL}, "stream": False})
    assert resp.status_code == 200
    assert resp.json() == {"reply": "Merhaba, bahçeniz kaç m²?", "remaining": 19}
    assert resp.headers["x-remaining"] == "19"
    assert len(_user()["memory"]) == 2


def test_upstream_failure_refunds_question(client, fake_llm):
    _register(client)
    fake_llm.fail_open = True
    resp = client.post("/chat", json={"message": "damla sulama", "user": {"email": EMAIL}})
    assert resp.status_code == 500
    assert resp.json() == {"error": SERVER_ERROR}
    assert _user()["used"] == 0
    assert _user()["memory"] == []


def test_failure_mid_stream_appends_warning(client, fake_llm):
    _register(client)
    fake_llm.fail_after = 1
    resp = client.post("/chat", json={"message": "damla sulama", "user": {"email": EMAIL}})
    assert resp.status_code == 200
    assert resp.text == "Merhaba" + STREAM_WARNING
    assert _user()["used"] == 1
    assert _user()["memory"] == []
    assert fake_llm.streams[0].closed


def test_history_window_and_memory_cap(client, fake_llm):
    _register(client)
    history = [{"role": "user" if i % 2 == 0 else "assistant", "content": f"m{i}"} for i in range(45)]
    _set_user(memory=history)

    client.post("/chat", json={"message": "vana kaç tane lazım?", "user": {"email": EMAIL}})

    messages = fake_llm.chat_calls[0]["messages"]
    sent_history = [m["content"] for m in messages if m["content"].startswith("m") and m["content"][1:].isdigit()]
    assert sent_history == [f"m{i}" for i in range(25, 45)]

    memory = _user()["memory"]
    assert len(memory) == 40
    assert memory[-1]["role"] == "assistant"
    assert memory[0]["content"] == "m7"


def test_continuation_request_skips_product_lookup(client, fake_llm):
    _register(client)
    client.post("/chat", json={"message": "devam et", "user": {"email": EMAIL}})
    messages = fake_llm.chat_calls[0]["messages"]
    assert {"role": "system", "content": prompts.CONTINUATION_HINT} in messages
    assert not any("İLGİLİ ÜRÜNLER" in m["content"] for m in messages)


def test_model_stream_is_closed_after_reply(client, fake_llm):
    _register(client)
    client.post("/chat", json={"message": "damla sulama", "user": {"email": EMAIL}})
    assert len(fake_llm.streams) == 1
    assert fake_llm.streams[0].closed


def test_abandoned_stream_is_closed(app_env, fake_llm):
    from conftest import make_client
    from sulama.app import create_app
    from sulama.services.auth_service import AuthService
    from sulama.services.chat_service import ChatRequest

    AuthService().register(EMAIL, "parola")
    service = create_app(client=make_client(fake_llm)).state.chat_service
    req = ChatRequest.model_validate({"message": "damla sulama", "user": {"email": EMAIL}})

    async def read_first_chunk():
        result = await service.handle(req)
        first = await anext(result.chunks)
        await result.chunks.aclose()
        return first

    assert asyncio.run(read_first_chunk()) == "Merhaba"
    assert fake_llm.streams[0].closed
    assert _user()["memory"] == []


def test_wrongly_typed_chat_fields_are_rejected(client, fake_llm):
    _register(client)
    resp = client.post("/chat", json={"message": ["damla"], "user": {"email": EMAIL}})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Geçersiz değer: message."}
    resp = client.post("/chat", json={"message": "damla", "user": "ali"})
    assert resp.status_code == 400
    assert fake_llm.calls == []
    assert _user()["used"] == 0
