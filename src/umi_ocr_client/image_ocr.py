"""Image OCR: one image in, recognized text blocks out."""

import logging

import httpx

from umi_ocr_client.config import get_settings
from umi_ocr_client.encoding import FileInput, get_base64_without_header
from umi_ocr_client.models.enums import DataFormat
from umi_ocr_client.schemas.image_ocr import (
    ImageOcrDictResult,
    ImageOcrOptions,
    ImageOcrTextResult,
)
from umi_ocr_client.transport import request_json

logger = logging.getLogger(__name__)

OCR_PATH = "/api/ocr"


async def image_ocr(
    image: FileInput,
    options: ImageOcrOptions | None = None,
    *,
    url: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> ImageOcrDictResult | ImageOcrTextResult:
    """Recognize text in ``image``.

    The requested ``data_format`` decides the result type: ImageOcrTextResult
    for ``text``, ImageOcrDictResult (text blocks with boxes) otherwise.
    """
    options = options or ImageOcrOptions()
    base64 = await get_base64_without_header(image)
    payload = await request_json(
        "imageOcr",
        "POST",
        url or get_settings().endpoint(OCR_PATH),
        json={"base64": base64, "options": options.to_payload()},
        client=client,
    )
    if options.format == DataFormat.text:
        result = ImageOcrTextResult.model_validate(payload)
    else:
        result = ImageOcrDictResult.model_validate(payload)
    logger.debug("imageOcr: code=%d time=%s", result.code, result.time)
    return result
