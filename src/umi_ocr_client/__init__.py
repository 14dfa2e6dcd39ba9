"""Async client for the local Umi-OCR HTTP service."""

from umi_ocr_client.doc_ocr import (
    DocOcrJob,
    doc_clear,
    doc_download,
    doc_result,
    doc_upload,
)
from umi_ocr_client.encoding import (
    get_base64,
    get_base64_without_header,
    remove_base64_header,
)
from umi_ocr_client.errors import (
    ApplicationError,
    EncodingError,
    RequestFailed,
    UmiOcrError,
    UnsupportedEnvironment,
)
from umi_ocr_client.image_ocr import image_ocr
from umi_ocr_client.qrcode import qrcode_generation, qrcode_recognition

__all__ = [
    "DocOcrJob",
    "doc_clear",
    "doc_download",
    "doc_result",
    "doc_upload",
    "get_base64",
    "get_base64_without_header",
    "remove_base64_header",
    "ApplicationError",
    "EncodingError",
    "RequestFailed",
    "UmiOcrError",
    "UnsupportedEnvironment",
    "image_ocr",
    "qrcode_generation",
    "qrcode_recognition",
]
