from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from resumefit.errors import ValidationError


@dataclass(frozen=True)
class LoadedText:
    text: str
    path: Optional[str] = None

    @property
    def empty(self) -> bool:
        return not self.text.strip()


def load_text(path: str, *, field: Optional[str] = None) -> LoadedText:
    """
    Read a plain-text resume or job description (UTF-8, undecodable bytes replaced).
    Missing or unreadable files raise ValidationError; document formats are the
    caller's job, this loader only accepts text.
    """
    p = Path(path).expanduser()
    if not p.is_file():
        raise ValidationError(f"File not found: {p}", field=field)
    try:
        raw = p.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ValidationError(f"Could not read {p}: {exc.strerror or type(exc).__name__}", field=field) from None
    return LoadedText(text=raw, path=str(p))
