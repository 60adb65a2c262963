"""Continuation detection for long answers and list pagination."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Sequence

from .products import fold

MAX_PER_PAGE = 100

CONTINUATION_PATTERN = re.compile(
    r"""^\s*(?:
        devam(?:\s+(?:et|edin|edelim|eder\s+misin|ediniz))?
      | (?:kald[ıi]ğ[ıi]n\s+yerden|kaldigin\s+yerden)(?:\s+devam(?:\s+et)?)?
      | sonraki(?:\s+(?:k[ıi]s[ıi]m|b[öo]l[üu]m|sayfa|ad[ıi]m))?
      | (?:daha\s+fazla|devam[ıi]|gerisi|geri\s+kalan[ıi])(?:\s+(?:l[üu]tfen|ver|yaz|g[öo]ster))?
      | continue|go\s+on|more
    )(?:\s+l[üu]tfen)?[\s.!?…]*$""",
    re.IGNORECASE | re.VERBOSE,
)


def is_continuation_request(message: str | None) -> bool:
    """True for short follow-ups such as "devam et" or "sonraki kısım"."""
    if not message:
        return False
    text = fold(message)
    if len(text) > 60:
        return False
    return bool(CONTINUATION_PATTERN.match(text))


@dataclass
class Page:
    items: list[Any]
    page: int
    per_page: int
    total: int
    pages: int


def paginate(items: Sequence[Any], page: int = 1, per_page: int = 20) -> Page:
    page = max(1, int(page or 1))
    per_page = min(MAX_PER_PAGE, max(1, int(per_page or 1)))
    total = len(items)
    pages = math.ceil(total / per_page) if total else 0
    start = (page - 1) * per_page
    return Page(items=list(items[start : start + per_page]), page=page, per_page=per_page, total=total, pages=pages)
