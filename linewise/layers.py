"""Resolve binmode layer strings into text-handle arguments.

A binmode is a colon-separated list of layers such as ``encoding(UTF-8)``,
``raw`` or ``raw:crlf``. Layers are applied left to right, so a later layer
overrides an earlier one (``raw:encoding(UTF-8)`` writes UTF-8).
"""

from __future__ import annotations

import codecs
import logging
import re

from pydantic import BaseModel, ConfigDict

from linewise.errors import InvalidArgumentError

DEFAULT_BINMODE = "encoding(UTF-8)"

# Octet semantics: code points 0-255 map one-to-one onto bytes.
OCTET_ENCODING = "latin-1"

# Error handlers. Wide characters on an octet layer are written as their
# UTF-8 bytes; characters a named encoding cannot represent become escapes.
WIDE_CHAR_ERRORS = "linewise.wide_char"
FALLBACK_ERRORS = "backslashreplace"

logger = logging.getLogger(__name__)

_OCTET_LAYERS = {"raw", "bytes", "unix", "perlio", "stdio"}
_ENCODING_RE = re.compile(r"^encoding\(\s*([^()\s]+)\s*\)$")


def _wide_char(exc: UnicodeError) -> tuple[bytes, int]:
    if not isinstance(exc, UnicodeEncodeError):
        raise exc
    chunk = exc.object[exc.start : exc.end]
    logger.warning("wide character in output, writing %d code point(s) as UTF-8", len(chunk))
    return chunk.encode("utf-8", "surrogatepass"), exc.end


codecs.register_error(WIDE_CHAR_ERRORS, _wide_char)


class LayerSpec(BaseModel):
    """Resolved form of a binmode string."""

    model_config = ConfigDict(frozen=True)

    binmode: str
    layers: tuple[str, ...] = ()
    encoding: str = OCTET_ENCODING
    newline: str = ""
    errors: str = WIDE_CHAR_ERRORS

    @property
    def octets(self) -> bool:
        return self.errors == WIDE_CHAR_ERRORS

    def open_kwargs(self) -> dict[str, str]:
        """Keyword arguments for ``open()`` or ``io.TextIOWrapper``."""
        return {"encoding": self.encoding, "errors": self.errors, "newline": self.newline}


def normalize_binmode(binmode: str) -> str:
    """Strip surrounding whitespace and a single leading colon."""
    if not isinstance(binmode, str):
        raise InvalidArgumentError(f"binmode must be a string, got {type(binmode).__name__}")
    text = binmode.strip()
    if text.startswith(":"):
        text = text[1:]
    return text


def parse_binmode(binmode: str) -> LayerSpec:
    """Parse *binmode* into a :class:`LayerSpec`.

    Encoding names are passed through untouched; an unknown codec only fails
    when a handle is actually opened with it.
    """
    normalized = normalize_binmode(binmode)
    encoding = OCTET_ENCODING
    errors = WIDE_CHAR_ERRORS
    newline = ""
    layers: list[str] = []

    for token in (part.strip() for part in normalized.split(":")):
        if not token:
            continue
        if token in _OCTET_LAYERS:
            encoding, errors, newline = OCTET_ENCODING, WIDE_CHAR_ERRORS, ""
        elif token == "utf8":
            encoding, errors = "utf-8", FALLBACK_ERRORS
        elif token == "crlf":
            newline = "\r\n"
        else:
            match = _ENCODING_RE.match(token)
            if match is None:
                raise InvalidArgumentError(f"unknown I/O layer {token!r} in binmode {binmode!r}")
            encoding, errors = match.group(1), FALLBACK_ERRORS
        layers.append(token)

    return LayerSpec(
        binmode=normalized,
        layers=tuple(layers),
        encoding=encoding,
        newline=newline,
        errors=errors,
    )
