"""
Irrigation / non-irrigation classification of user messages.

Obvious cases are settled with keyword heuristics; everything else goes to a
small chat model with a fixed prompt. Classification never blocks a user: any
model failure counts as an irrigation question.
"""
from __future__ import annotations

import logging
import re
from typing import Any

from .pagination import is_continuation_request
from .products import fold

logger = logging.getLogger(__name__)

IRRIGATION = "IRRIGATION"
NON_IRRIGATION = "NON_IRRIGATION"

CLASSIFIER_PROMPT = (
    "Kullanıcının mesajını sınıflandır. Eğer mesaj bahçe, tarla, sera veya peyzaj SULAMA sistemleri, "
    "sulama ürünleri, sulama projeleri, debi-basınç hesabı, otomatik sulama cihazları gibi konularla "
    "ilgiliyse sadece 'IRRIGATION' yaz. Diğer tüm konular (yazılım, JSON, kod, bilgisayar, internet, "
    "sağlık, ilişkiler, tarih, finans, oyun, eğitim vb.) için sadece 'NON_IRRIGATION' yaz. "
    "Başka hiçbir şey yazma."
)

# words shared with other domains (basınç, debi, vana, filtre, istasyon) are left to the model
IRRIGATION_KEYWORDS = re.compile(
    r"""\b(?:
        sulama\w*|sula(?:r|y|m)\w*|damla\w*|damlat\w*|sprink\w*|sprey|spray|pop[\s-]?up|rotor\w*
      | yağmurlama\w*|yagmurlama\w*|mini[\s-]?spring\w*|mikro[\s-]?sprink\w*
      | selenoid\w*|kolekt[öo]r\w*|pe[\s-]?100|lateral\w*|nozul\w*|nozzle\w*
      | hidrofor\w*|terfi\s+(?:pompa|sistem)\w*|reg[üu]lat[öo]r\w*
      | kontrol\s+[üu]nitesi\w*|zaman\s+ayarl[ıi]\w*|zone|tm2\w*
    )\b""",
    re.IGNORECASE | re.VERBOSE,
)


def quick_classify(message: str | None) -> str | None:
    """Answer without a model call when the message is unambiguous."""
    if not message or not str(message).strip():
        return None
    if is_continuation_request(message):
        return IRRIGATION
    if IRRIGATION_KEYWORDS.search(fold(message)):
        return IRRIGATION
    return None


def normalize_label(raw: str | None) -> str:
    label = (raw or "").strip().upper()
    if label in (IRRIGATION, NON_IRRIGATION):
        return label
    if "NON" in label:
        return NON_IRRIGATION
    return IRRIGATION


async def classify(client: Any, message: str | None, model: str) -> str:
    label = quick_classify(message)
    if label:
        return label
    try:
        completion = await client.chat.completions.create(
            model=model,
            temperature=0,
            messages=[
                {"role": "system", "content": CLASSIFIER_PROMPT},
                {"role": "user", "content": str(message or "")},
            ],
        )
        raw = completion.choices[0].message.content if completion.choices else ""
    except Exception:
        logger.exception("Sınıflandırma hatası, varsayılan IRRIGATION")
        return IRRIGATION
    return normalize_label(raw)
