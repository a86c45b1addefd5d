"""Reduce a raw HTML page to a bounded plain-text payload.

Every step is a single left-to-right scan, so the cost grows linearly with the
page size no matter how many tags are left unclosed.
"""

import logging
import re

logger = logging.getLogger(__name__)

MAX_CONTENT_CHARS = 10_000
TRUNCATION_MARKER = "... [content truncated]"

_BODY_OPEN = re.compile(r"<body\b", re.IGNORECASE)
_BODY_CLOSE = re.compile(r"</body>", re.IGNORECASE)

# Openers and closers of the blocks removed together with their content
_BLOCK_TOKEN = re.compile(r"<(script|style|svg|noscript)|</(script|style|svg|noscript)>|(<!--)|(-->)", re.IGNORECASE)
_MAX_TOKEN_LEN = len("</noscript>")
_WHITESPACE_RUN = re.compile(r"\s+")


def _classify(match: re.Match[str]) -> tuple[str, bool]:
    """Return (block kind, is opener) for a ``_BLOCK_TOKEN`` match."""
    if match.group(1):
        return match.group(1).lower(), True
    if match.group(2):
        return match.group(2).lower(), False
    return "comment", match.group(3) is not None


class _BlockStripper:
    """Remove script/style/svg/noscript blocks and HTML comments in one pass.

    A block runs from the earliest unclosed opener of a kind to the next closer
    of the same kind. Removing a block can join the text on both sides into a
    new opener or closer; that is checked at the seam right away, so the output
    never contains a complete block.
    """

    def __init__(self) -> None:
        self._pieces: list[str] = []
        self._length = 0
        # kind -> offset of its earliest unclosed opener in the kept text
        self._open_at: dict[str, int] = {}

    def _append(self, text: str) -> None:
        if text:
            self._pieces.append(text)
            self._length += len(text)

    def _truncate(self, size: int) -> None:
        while self._pieces and self._length - len(self._pieces[-1]) >= size:
            self._length -= len(self._pieces.pop())
        if self._length > size:
            last = self._pieces.pop()
            self._pieces.append(last[: len(last) - (self._length - size)])
            self._length = size
        self._open_at = {kind: offset for kind, offset in self._open_at.items() if offset < size}

    def _tail(self, size: int) -> str:
        parts: list[str] = []
        total = 0
        for piece in reversed(self._pieces):
            parts.append(piece)
            total += len(piece)
            if total >= size:
                break
        return "".join(reversed(parts))[-size:]

    def _token(self, kind: str, opening: bool, offset: int, unseen: str) -> bool:
        """Apply one token starting at *offset* of the kept text.

        *unseen* is the part of the token not yet kept. Returns True when a
        block was removed.
        """
        if opening:
            self._open_at.setdefault(kind, offset)
        elif kind in self._open_at:
            self._truncate(self._open_at[kind])
            return True
        self._append(unseen)
        return False

    def _rejoin(self, text: str, pos: int) -> tuple[int, bool]:
        """Handle a token straddling the seam between the kept text and ``text[pos:]``."""
        tail = self._tail(_MAX_TOKEN_LEN - 1)
        probe = tail + text[pos : pos + _MAX_TOKEN_LEN]
        for start in range(len(tail)):
            match = _BLOCK_TOKEN.match(probe, start)
            if match is None or match.end() <= len(tail):
                continue
            kept = len(tail) - start
            removed = self._token(*_classify(match), self._length - kept, match.group(0)[kept:])
            return pos + match.end() - len(tail), removed
        return pos, False

    def strip(self, text: str) -> str:
        pos = 0
        while True:
            match = _BLOCK_TOKEN.search(text, pos)
            if match is None:
                self._append(text[pos:])
                break
            self._append(text[pos : match.start()])
            pos = match.end()
            removed = self._token(*_classify(match), self._length, match.group(0))
            while removed:
                pos, removed = self._rejoin(text, pos)
        return "".join(self._pieces)


def _body_region(html: str) -> str | None:
    """Return the inside of the first ``<body>`` element.

    A document without any body tag is its own body region. An opening body
    tag that is never finished or closed is malformed and yields ``None``.
    """
    opening = _BODY_OPEN.search(html)
    if opening is None:
        return html
    tag_end = html.find(">", opening.end())
    if tag_end == -1:
        return None
    closing = _BODY_CLOSE.search(html, tag_end + 1)
    if closing is None:
        return None
    return html[tag_end + 1 : closing.start()]


def normalize_body(raw_body: str, max_chars: int = MAX_CONTENT_CHARS) -> str:
    """Extract the body text of *raw_body*, collapse whitespace and cap its length.

    Never raises: malformed input, or any failure while extracting, returns
    *raw_body* unchanged.
    """
    try:
        content = _body_region(raw_body)
        if content is None:
            return raw_body

        content = _BlockStripper().strip(content)
        content = _WHITESPACE_RUN.sub(" ", content).strip()

        if len(content) > max_chars:
            content = content[:max_chars] + TRUNCATION_MARKER
        return content
    except Exception:
        logger.debug("Body extraction failed, returning raw content", exc_info=True)
        return raw_body
