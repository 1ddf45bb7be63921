"""Content sniffing.

Guesses a coarse MIME category from the leading bytes of a file, following
the WHATWG MIME sniffing rules used by browsers and most HTTP stacks. The
result only selects a rendering branch and is never a security decision.
"""

import os
from collections.abc import Callable
from dataclasses import dataclass

SNIFF_LENGTH = 512

TEXT_HTML = "text/html; charset=utf-8"
TEXT_PLAIN = "text/plain; charset=utf-8"
TEXT_XML = "text/xml; charset=utf-8"
OCTET_STREAM = "application/octet-stream"

_WHITESPACE = b"\t\n\x0c\r "
_TAG_TERMINATORS = b" >"
_BINARY_BYTES = frozenset(
    [*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)]
)

_HTML_TAGS = (
    b"<!DOCTYPE HTML",
    b"<HTML",
    b"<HEAD",
    b"<SCRIPT",
    b"<IFRAME",
    b"<H1",
    b"<DIV",
    b"<FONT",
    b"<TABLE",
    b"<A",
    b"<STYLE",
    b"<TITLE",
    b"<B",
    b"<BODY",
    b"<BR",
    b"<P",
    b"<!--",
)


@dataclass(frozen=True)
class _Signature:
    """Leading-byte pattern; zero mask bytes match anything at that offset."""

    pattern: bytes
    mask: bytes | None = None

    def __call__(self, data: bytes) -> bool:
        if self.mask is None:
            return data.startswith(self.pattern)
        if len(data) < len(self.mask):
            return False
        return all(
            data[i] & mask == expected
            for i, (mask, expected) in enumerate(zip(self.mask, self.pattern))
        )


def _container(outer: bytes, form: bytes) -> _Signature:
    # outer tag, 4 size bytes, form type
    return _Signature(
        pattern=outer + b"\x00" * 4 + form,
        mask=b"\xff" * len(outer) + b"\x00" * 4 + b"\xff" * len(form),
    )


def _is_mp4(data: bytes) -> bool:
    if len(data) < 12:
        return False
    box_size = int.from_bytes(data[:4], "big")
    if len(data) < box_size or box_size % 4 != 0 or data[4:8] != b"ftyp":
        return False
    for offset in range(8, box_size, 4):
        if offset == 12:
            # minor version, not a brand
            continue
        if data[offset : offset + 3] == b"mp4":
            return True
    return False


# Checked in order after the HTML and XML rules; first match wins.
_SIGNATURES: tuple[tuple[Callable[[bytes], bool], str], ...] = (
    (_Signature(b"%PDF-"), "application/pdf"),
    (_Signature(b"%!PS-Adobe-"), "application/postscript"),
    (_Signature(b"\xfe\xff"), "text/plain; charset=utf-16be"),
    (_Signature(b"\xff\xfe"), "text/plain; charset=utf-16le"),
    (_Signature(b"\xef\xbb\xbf"), "text/plain; charset=utf-8"),
    (_Signature(b"\x00\x00\x01\x00"), "image/x-icon"),
    (_Signature(b"\x00\x00\x02\x00"), "image/x-icon"),
    (_Signature(b"BM"), "image/bmp"),
    (_Signature(b"GIF87a"), "image/gif"),
    (_Signature(b"GIF89a"), "image/gif"),
    (_container(b"RIFF", b"WEBPVP"), "image/webp"),
    (_Signature(b"\x89PNG\r\n\x1a\n"), "image/png"),
    (_Signature(b"\xff\xd8\xff"), "image/jpeg"),
    (_container(b"FORM", b"AIFF"), "audio/aiff"),
    (_Signature(b"ID3"), "audio/mpeg"),
    (_Signature(b"OggS\x00"), "application/ogg"),
    (_Signature(b"MThd\x00\x00\x00\x06"), "audio/midi"),
    (_container(b"RIFF", b"AVI "), "video/avi"),
    (_container(b"RIFF", b"WAVE"), "audio/wave"),
    (_is_mp4, "video/mp4"),
    (_Signature(b"\x1a\x45\xdf\xa3"), "video/webm"),
    (
        _Signature(pattern=b"\x00" * 34 + b"LP", mask=b"\x00" * 34 + b"\xff\xff"),
        "application/vnd.ms-fontobject",
    ),
    (_Signature(b"\x00\x01\x00\x00"), "font/ttf"),
    (_Signature(b"OTTO"), "font/otf"),
    (_Signature(b"ttcf"), "font/collection"),
    (_Signature(b"wOFF"), "font/woff"),
    (_Signature(b"wOF2"), "font/woff2"),
    (_Signature(b"\x1f\x8b\x08"), "application/x-gzip"),
    (_Signature(b"PK\x03\x04"), "application/zip"),
    (_Signature(b"Rar!\x1a\x07\x00"), "application/x-rar-compressed"),
    (_Signature(b"Rar!\x1a\x07\x01\x00"), "application/x-rar-compressed"),
    (_Signature(b"\x00\x61\x73\x6d"), "application/wasm"),
)


@dataclass(frozen=True)
class Classification:
    """Content bytes with their sniffed category and file extension."""

    content: bytes
    category: str
    extension: str


def classify(content: bytes) -> str:
    """Return the sniffed MIME category of ``content``.

    Only the first SNIFF_LENGTH bytes are examined. Empty content is plain text.
    """
    data = content[:SNIFF_LENGTH]
    start = _skip_whitespace(data)

    for sniffer in _SNIFFERS:
        category = sniffer(data, start)
        if category is not None:
            return category

    return OCTET_STREAM


def classify_file(path: str, content: bytes) -> Classification:
    """Classify file content read from ``path``.

    The extension is everything from the last dot of the final path element,
    so a dotfile such as ``.md`` has the extension ``.md``.
    """
    name = os.path.basename(path)
    dot = name.rfind(".")
    extension = name[dot:] if dot >= 0 else ""
    return Classification(content=content, category=classify(content), extension=extension)


def is_html(category: str) -> bool:
    return category.startswith("text/html")


def is_plain_text(category: str) -> bool:
    return category.startswith("text/plain")


def _skip_whitespace(data: bytes) -> int:
    start = 0
    while start < len(data) and data[start] in _WHITESPACE:
        start += 1
    return start


def _sniff_html(data: bytes, start: int) -> str | None:
    for tag in _HTML_TAGS:
        end = start + len(tag)
        if len(data) <= end:
            continue
        if data[start:end].upper() == tag and data[end] in _TAG_TERMINATORS:
            return TEXT_HTML
    return None


def _sniff_xml(data: bytes, start: int) -> str | None:
    if data.startswith(b"<?xml", start):
        return TEXT_XML
    return None


def _sniff_signature(data: bytes, start: int) -> str | None:
    for matches, category in _SIGNATURES:
        if matches(data):
            return category
    return None


def _sniff_text(data: bytes, start: int) -> str | None:
    if any(byte in _BINARY_BYTES for byte in data[start:]):
        return None
    return TEXT_PLAIN


_SNIFFERS: tuple[Callable[[bytes, int], str | None], ...] = (
    _sniff_html,
    _sniff_xml,
    _sniff_signature,
    _sniff_text,
)
