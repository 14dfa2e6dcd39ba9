"""Base64 encoding of images and documents.

Accepted inputs:
    str                              base64 text, optionally with a data URI header
    bytes / bytearray / memoryview   raw buffer
    os.PathLike, binary file object, PIL image
                                     blob-like, read off the event loop
"""

import asyncio
import binascii
import io
import logging
import os
import re
from base64 import b64decode, b64encode
from collections.abc import Callable
from typing import Any, BinaryIO

from PIL import Image

from umi_ocr_client.errors import EncodingError, UnsupportedEnvironment

logger = logging.getLogger(__name__)

Base64 = str
FileInput = Base64 | bytes | bytearray | memoryview | os.PathLike | BinaryIO | Image.Image

DEFAULT_UPLOAD_NAME = "document.pdf"

# One or more leading "data:<mime>;base64," headers
_HEADER_RE = re.compile(r"^(?:data:.+?base64,)+")


def _is_buffer(obj: Any) -> bool:
    return isinstance(obj, (bytes, bytearray, memoryview))


def _read_image(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format=img.format or "PNG")
    return buf.getvalue()


def _read_path(path: os.PathLike) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _read_stream(stream: BinaryIO) -> bytes:
    data = stream.read()
    if isinstance(data, str):
        raise TypeError("file object must be opened in binary mode")
    return data


# (accepts, read) pairs, probed in order
_BLOB_READERS: list[tuple[Callable[[Any], bool], Callable[[Any], bytes]]] = [
    (lambda obj: isinstance(obj, Image.Image), _read_image),
    (lambda obj: isinstance(obj, os.PathLike), _read_path),
    (lambda obj: callable(getattr(obj, "read", None)), _read_stream),
]


async def _read_blob(file: Any) -> bytes:
    for accepts, read in _BLOB_READERS:
        if not accepts(file):
            continue
        try:
            data = await asyncio.to_thread(read, file)
        except Exception as exc:
            raise EncodingError(f"Could not read {type(file).__name__}: {exc}") from exc
        logger.debug("Read %d bytes from %s", len(data), type(file).__name__)
        return bytes(data)
    raise UnsupportedEnvironment(f"No reader available for {type(file).__name__}")


def remove_base64_header(base64: Base64) -> Base64:
    """Strip a leading ``data:<mime>;base64,`` header. Idempotent."""
    return _HEADER_RE.sub("", base64, count=1)


async def get_base64(file: FileInput) -> Base64:
    """Base64 of ``file``; text input is returned as is, header included."""
    if isinstance(file, str):
        return file
    if _is_buffer(file):
        return b64encode(file).decode("ascii")
    return b64encode(await _read_blob(file)).decode("ascii")


async def get_base64_without_header(file: FileInput) -> Base64:
    return remove_base64_header(await get_base64(file))


async def read_file_bytes(file: FileInput) -> bytes:
    """Raw bytes of ``file`` for multipart upload."""
    if isinstance(file, str):
        try:
            return b64decode(remove_base64_header(file), validate=True)
        except binascii.Error as exc:
            raise EncodingError(f"Invalid base64 text: {exc}") from exc
    if _is_buffer(file):
        return bytes(file)
    return await _read_blob(file)


def file_name_of(file: FileInput) -> str:
    if isinstance(file, os.PathLike):
        return os.path.basename(os.fspath(file))
    name = getattr(file, "name", None)
    if isinstance(name, str) and name:
        return os.path.basename(name)
    return DEFAULT_UPLOAD_NAME
