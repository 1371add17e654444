"""Content sniffing and MIME-type to file-extension lookup.

detect_content_type() inspects only the leading bytes of a payload and never
trusts client-supplied headers. extensions_by_type() returns the candidate
extensions for a type, canonical one first.
"""

import mimetypes
from typing import Dict, List

import filetype


SNIFF_LEN = 512
OCTET_STREAM = "application/octet-stream"
TEXT_PLAIN = "text/plain; charset=utf-8"

ACCEPTED_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/gif",
    "image/png",
    "application/pdf",
})

# Canonical extension first; the platform registry orders these inconsistently.
_PREFERRED_EXTENSIONS: Dict[str, List[str]] = {
    "image/jpeg": [".jpeg", ".jpg"],
    "image/jpg": [".jpg", ".jpeg"],
    "image/gif": [".gif"],
    "image/png": [".png"],
    "application/pdf": [".pdf"],
}

# Bytes that never show up in plain text (C0 controls minus TAB, LF, FF, CR, ESC).
_BINARY_BYTES = frozenset([*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)])


class UnknownContentType(LookupError):
    pass


def detect_content_type(data: bytes) -> str:
    head = bytes(data[:SNIFF_LEN])
    kind = filetype.guess(head)
    if kind is not None:
        return kind.mime
    if any(b in _BINARY_BYTES for b in head):
        return OCTET_STREAM
    return TEXT_PLAIN


def is_accepted(mime: str) -> bool:
    return mime in ACCEPTED_TYPES


def extensions_by_type(mime: str) -> List[str]:
    """Extensions for `mime`, each with a leading dot.

    Raises UnknownContentType when nothing is registered for the type.
    """
    base = mime.split(";", 1)[0].strip().lower()
    if not base:
        raise UnknownContentType(f"empty mime type {mime!r}")
    found = list(_PREFERRED_EXTENSIONS.get(base, []))
    for ext in mimetypes.guess_all_extensions(base, strict=False):
        if ext not in found:
            found.append(ext)
    if not found:
        raise UnknownContentType(f"no extension for mime type {base!r}")
    return found
