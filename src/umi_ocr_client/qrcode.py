"""QR code generation and recognition."""

import logging

import httpx

from umi_ocr_client.config import get_settings
from umi_ocr_client.encoding import FileInput, get_base64_without_header
from umi_ocr_client.schemas.qrcode import (
    JPEG_DATA_URI_PREFIX,
    QrcodeGenerationOptions,
    QrcodeGenerationResult,
    QrcodeRecognitionOptions,
    QrcodeRecognitionResult,
)
from umi_ocr_client.transport import request_json

logger = logging.getLogger(__name__)

QRCODE_PATH = "/api/qrcode"


async def qrcode_generation(
    text: str,
    options: QrcodeGenerationOptions | None = None,
    *,
    url: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> QrcodeGenerationResult:
    """Render ``text`` as a barcode image.

    On success ``data`` is a ``data:image/jpeg;base64,`` URI ready to display;
    on failure it is the service's diagnostic text.
    """
    options = options or QrcodeGenerationOptions()
    payload = await request_json(
        "qrcodeGeneration",
        "POST",
        url or get_settings().endpoint(QRCODE_PATH),
        json={"text": text, "options": options.to_payload()},
        client=client,
    )
    result = QrcodeGenerationResult.model_validate(payload)
    if result.ok and result.data:
        result.data = JPEG_DATA_URI_PREFIX + result.data
    elif not result.ok:
        logger.warning("qrcodeGeneration: code=%d %s", result.code, result.data)
    return result


async def qrcode_recognition(
    image: FileInput,
    options: QrcodeRecognitionOptions | None = None,
    *,
    url: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> QrcodeRecognitionResult:
    """Decode every barcode found in ``image``."""
    options = options or QrcodeRecognitionOptions()
    base64 = await get_base64_without_header(image)
    payload = await request_json(
        "qrcodeRecognition",
        "POST",
        url or get_settings().endpoint(QRCODE_PATH),
        json={"base64": base64, "options": options.to_payload()},
        client=client,
    )
    return QrcodeRecognitionResult.model_validate(payload)
