"""Request/response schemas for every service endpoint."""

from umi_ocr_client.schemas.common import SUCCESS_CODE, Point, ServiceResult
from umi_ocr_client.schemas.doc import (
    DocClearResult,
    DocDownloadRequest,
    DocDownloadResult,
    DocOcrDictResult,
    DocOcrOptions,
    DocOcrResult,
    DocOcrTextResult,
    DocPageResult,
    DocResultRequest,
    DocUploadResult,
    JobFailure,
)
from umi_ocr_client.schemas.image_ocr import (
    ImageOcrDictResult,
    ImageOcrOptions,
    ImageOcrResult,
    ImageOcrTextResult,
    OcrTextBlock,
)
from umi_ocr_client.schemas.qrcode import (
    JPEG_DATA_URI_PREFIX,
    QrcodeGenerationOptions,
    QrcodeGenerationResult,
    QrcodeRecognitionData,
    QrcodeRecognitionOptions,
    QrcodeRecognitionResult,
)

__all__ = [
    "SUCCESS_CODE",
    "Point",
    "ServiceResult",
    "DocClearResult",
    "DocDownloadRequest",
    "DocDownloadResult",
    "DocOcrDictResult",
    "DocOcrOptions",
    "DocOcrResult",
    "DocOcrTextResult",
    "DocPageResult",
    "DocResultRequest",
    "DocUploadResult",
    "JobFailure",
    "ImageOcrDictResult",
    "ImageOcrOptions",
    "ImageOcrResult",
    "ImageOcrTextResult",
    "OcrTextBlock",
    "JPEG_DATA_URI_PREFIX",
    "QrcodeGenerationOptions",
    "QrcodeGenerationResult",
    "QrcodeRecognitionData",
    "QrcodeRecognitionOptions",
    "QrcodeRecognitionResult",
]
