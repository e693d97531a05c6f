"""Loading text files for navigation.

Navigation offsets index into the decoded string, so files are decoded once,
their byte order mark removed and line endings folded to ``\\n`` the way an
editor displays them. The original encoding and newline convention are kept
on :class:`LoadedText` for display.
"""

from __future__ import annotations

import codecs
import locale
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "LoadedText",
    "detect_encoding",
    "detect_newline",
    "load_text_file",
    "read_text",
]

# Order matters: the UTF-32 LE mark starts with the UTF-16 LE mark.
_BYTE_ORDER_MARKS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)
_FALLBACK_ENCODING = "latin-1"


@dataclass(slots=True, frozen=True)
class LoadedText:
    """Decoded file contents plus how they were stored on disk."""

    path: Path
    text: str
    encoding: str
    newline: str


def load_text_file(
    path: Path | str,
    *,
    encoding: str | None = None,
    errors: str = "strict",
    normalize_newlines: bool = True,
) -> LoadedText:
    """Decode ``path`` and describe its encoding and dominant line ending."""

    target = Path(path)
    raw = target.read_bytes()
    chosen = encoding or detect_encoding(raw)
    text = raw.decode(chosen, errors=errors)
    if text.startswith("\ufeff"):
        text = text[1:]
    newline = detect_newline(text)
    if normalize_newlines and "\r" in text:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
    return LoadedText(path=target, text=text, encoding=chosen, newline=newline)


def read_text(
    path: Path | str,
    *,
    encoding: str | None = None,
    errors: str = "strict",
    normalize_newlines: bool = True,
) -> str:
    """Return only the decoded text of ``path``; see :func:`load_text_file`."""

    loaded = load_text_file(
        path,
        encoding=encoding,
        errors=errors,
        normalize_newlines=normalize_newlines,
    )
    return loaded.text


def detect_encoding(raw: bytes) -> str:
    """Guess the encoding of ``raw`` from its byte order mark or by trial decoding."""

    for mark, name in _BYTE_ORDER_MARKS:
        if raw.startswith(mark):
            return name
    candidates = ["utf-8"]
    preferred = locale.getpreferredencoding(False)
    if preferred and codecs.lookup(preferred).name != "utf-8":
        candidates.append(preferred)
    for name in candidates:
        try:
            raw.decode(name)
        except UnicodeDecodeError:
            continue
        return name
    return _FALLBACK_ENCODING


def detect_newline(text: str) -> str:
    """Return the most frequent line ending in ``text`` (``"\\n"`` when there is none)."""

    crlf = text.count("\r\n")
    counts = {
        "\r\n": crlf,
        "\n": text.count("\n") - crlf,
        "\r": text.count("\r") - crlf,
    }
    newline, count = max(counts.items(), key=lambda item: item[1])
    return newline if count else "\n"
