import re
from typing import Any, Iterable


def normalize_token(s: str) -> str:
    if not s: return ""
    t = re.sub(r"[^a-z0-9\s\-]", "", str(s).lower()).strip()
    t = re.sub(r"\s+", " ", t)
    return t


def split_csv(val: Any) -> list[str]:
    """Flatten ``"a,b"``, ``["a", "b,c"]`` or None into unique, stripped, non-empty values."""
    if val is None:
        return []
    parts: Iterable[Any] = [val] if isinstance(val, str) else val
    out: list[str] = []
    for part in parts:
        if part is None:
            continue
        for piece in str(part).split(","):
            piece = piece.strip()
            if piece and piece not in out:
                out.append(piece)
    return out


def unique_stripped(values: Iterable[Any] | None) -> list[str]:
    """Like ``split_csv`` but keeps commas inside values."""
    out: list[str] = []
    for v in values or []:
        if v is None:
            continue
        s = str(v).strip()
        if s and s not in out:
            out.append(s)
    return out
