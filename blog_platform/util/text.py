from __future__ import annotations

import re
import unicodedata
from typing import Iterable, List


_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def slugify(name: str | None) -> str:
    """Lowercase ASCII slug: "Food & Travel" -> "food-travel"."""
    s = unicodedata.normalize("NFKD", name or "")
    s = s.encode("ascii", "ignore").decode("ascii").lower()
    return _NON_ALNUM.sub("-", s).strip("-")


def clean_tags(tags: Iterable[str] | None) -> List[str]:
    """Trim, drop blanks and dedupe while keeping first-seen order."""
    out: List[str] = []
    seen = set()
    for t in tags or []:
        s = str(t).strip()
        if not s or s in seen:
            continue
        seen.add(s)
        out.append(s)
    return out
