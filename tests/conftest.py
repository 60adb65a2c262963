from __future__ import annotations

import json
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# sulama paketinin kurulum olmadan import edilebilmesi için
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sulama.core import config as core_config  # noqa: E402
from sulama.core.rate_limiter import reset_limits  # noqa: E402

ADMIN_KEY = "gizli-anahtar"

PRICE_LIST = [
    {
        "SKU": "TM2-4",
        "Ürün Adı": "Hunter TM2 4 İstasyonlu Kontrol Ünitesi",
        "Kategori": "Kontrol Ünitesi",
        "Fiyat TL (KDV dahil)": "4.250,00",
    },
    {
        "SKU": "PGV-101",
        "Ürün Adı": "Hunter PGV 1\" Selenoid Vana",
        "Kategori": "Vana",
        "Fiyat TL": "1.150",
    },
    {
        "SKU": "PE-20",
        "Ürün Adı": "PE100 Boru 20 mm",
        "Kategori": "Boru",
        "Fiyat": "0",
    },
]


@pytest.fixture()
def app_env(tmp_path, monkeypatch):
    """Temporary users/data files and a fresh settings cache."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "price_list.json").write_text(json.dumps(PRICE_LIST, ensure_ascii=False), encoding="utf-8")
    monkeypatch.setenv("USERS_FILE", str(tmp_path / "users.json"))
    monkeypatch.setenv("DATA_DIR", str(data_dir))
    monkeypatch.setenv("PUBLIC_DIR", str(ROOT / "public"))
    monkeypatch.setenv("ADMIN_KEY", ADMIN_KEY)
    monkeypatch.setenv("CHAT_RATE_LIMIT", "0")
    monkeypatch.setenv("AUTH_RATE_LIMIT", "0")
    monkeypatch.setenv("CLASSIFIER_MODEL", "classifier-test")
    monkeypatch.setenv("CHAT_MODEL", "chat-test")
    core_config.get_settings.cache_clear()
    reset_limits()

    yield tmp_path

    core_config.get_settings.cache_clear()
    reset_limits()


def _chunk(text):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


class FakeStream:
    """Async iterable with the ``close()`` coroutine of ``openai.AsyncStream``."""

    def __init__(self, chunks, fail_after=None):
        self.chunks = chunks
        self.fail_after = fail_after
        self.closed = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for index, text in enumerate(self.chunks):
            if self.fail_after is not None and index >= self.fail_after:
                raise RuntimeError("connection reset")
            yield _chunk(text)

    async def close(self):
        self.closed = True


class FakeCompletions:
    """Stands in for ``client.chat.completions`` of the OpenAI SDK."""

    def __init__(self, label="IRRIGATION", chunks=("Merhaba", ", ", "bahçeniz kaç m²?"), fail_open=False, fail_after=None):
        self.label = label
        self.chunks = list(chunks)
        self.fail_open = fail_open
        self.fail_after = fail_after
        self.calls = []
        self.streams = []

    @property
    def chat_calls(self):
        return [c for c in self.calls if c["model"] == "chat-test"]

    @property
    def classifier_calls(self):
        return [c for c in self.calls if c["model"] == "classifier-test"]

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if kwargs["model"] == "classifier-test":
            if isinstance(self.label, Exception):
                raise self.label
            return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.label))])
        if self.fail_open:
            raise RuntimeError("upstream down")
        if not kwargs.get("stream"):
            return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="".join(self.chunks)))])
        stream = FakeStream(self.chunks, self.fail_after)
        self.streams.append(stream)
        return stream


def make_client(completions: FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture()
def fake_llm():
    return FakeCompletions()


@pytest.fixture()
def client(app_env, fake_llm):
    from fastapi.testclient import TestClient

    from sulama.app import create_app

    app = create_app(client=make_client(fake_llm))
    with TestClient(app) as test_client:
        yield test_client
