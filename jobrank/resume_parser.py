"""Extract plain text from resume bytes.

Supports PDF (via pypdf), DOCX (via stdlib zipfile) and plain text. Any
format-specific failure falls back to decoding the raw bytes.
"""
from __future__ import annotations

import io
import re
import zipfile
from pathlib import PurePath
from xml.etree import ElementTree

from jobrank.errors import ResumeParseError
from jobrank.log import get_logger
from jobrank.models import ResumeSource

log = get_logger(__name__)

_EXTENSIONS: dict[str, str] = {
    ".pdf": "pdf",
    ".docx": "docx",
    ".txt": "text",
    ".md": "text",
    ".text": "text",
}


def infer_format(filename: str, data: bytes = b"") -> str:
    """Guess ``pdf`` / ``docx`` / ``text`` from the extension, then magic bytes."""
    suffix = PurePath(filename or "").suffix.lower()
    if suffix in _EXTENSIONS:
        return _EXTENSIONS[suffix]
    if data.startswith(b"%PDF"):
        return "pdf"
    if data.startswith(b"PK\x03\x04"):
        return "docx"
    return "text"


# pypdf can return whole pages without inter-word spaces; split such pages
# at lower→Upper and ",;:!?"→letter boundaries. "." is left alone so tokens
# like node.js survive.
_GLUED_RE = re.compile(r"(?<=[a-z])(?=[A-Z])|(?<=[,;:!?])(?=[A-Za-z])")
_MIN_SPACE_RATIO = 0.08


def _unglue(page: str) -> str:
    if len(page) < 50 or page.count(" ") / len(page) > _MIN_SPACE_RATIO:
        return page
    log.debug("PDF page has %d spaces in %d chars; re-spacing", page.count(" "), len(page))
    return _GLUED_RE.sub(" ", page)


def _extract_pdf(data: bytes) -> str:
    from pypdf import PdfReader

    # pypdf raises a wide range of types on malformed input
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [_unglue(page.extract_text() or "") for page in reader.pages]
    except Exception as exc:
        raise ResumeParseError(f"PDF extraction failed: {exc}") from exc
    return "\n".join(pages)


_W = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"
# Name and contact lines often live in the page header.
_DOCX_PARTS = re.compile(r"word/(header\d*|document|footer\d*)\.xml$")


def _docx_paragraphs(root: ElementTree.Element) -> list[str]:
    lines: list[str] = []
    for para in root.iter(f"{_W}p"):
        chunks: list[str] = []
        for node in para.iter():
            if node.tag == f"{_W}t" and node.text:
                chunks.append(node.text)
            elif node.tag in (f"{_W}tab", f"{_W}br"):
                chunks.append(" ")
        line = "".join(chunks).strip()
        if line:
            lines.append(line)
    return lines


def _extract_docx(data: bytes) -> str:
    """Text of the headers, body and footers, one line per paragraph."""
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            names = [n for n in zf.namelist() if _DOCX_PARTS.match(n)]
            if "word/document.xml" not in names:
                raise ResumeParseError("DOCX has no word/document.xml")
            # headers first, then body, then footers
            names.sort(key=lambda n: ("header" not in n, "footer" in n, n))
            lines: list[str] = []
            for name in names:
                lines.extend(_docx_paragraphs(ElementTree.fromstring(zf.read(name))))
    except (zipfile.BadZipFile, ElementTree.ParseError) as exc:
        raise ResumeParseError(f"DOCX extraction failed: {exc}") from exc
    return "\n".join(lines)


def decode_raw(data: bytes) -> str:
    return data.decode("utf-8", errors="ignore")


def extract_text(resume: ResumeSource) -> str:
    """Return plain text for *resume*; never raises for malformed content."""
    if resume.fmt == "pdf":
        extractor = _extract_pdf
    elif resume.fmt == "docx":
        extractor = _extract_docx
    else:
        return decode_raw(resume.data)

    try:
        text = extractor(resume.data)
    except ResumeParseError as exc:
        log.warning("%s; falling back to raw text decoding for %s", exc, resume.filename)
        return decode_raw(resume.data)

    if not text.strip():
        log.warning("No text extracted from %s; falling back to raw decoding", resume.filename)
        return decode_raw(resume.data)
    return text
