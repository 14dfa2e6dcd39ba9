"""QR code generation and recognition schemas."""

from base64 import b64decode
from typing import Literal

from pydantic import BaseModel, Field

from umi_ocr_client.models.enums import QrcodeFormat
from umi_ocr_client.schemas.common import Point, RequestOptions, ServiceResult

JPEG_DATA_URI_PREFIX = "data:image/jpeg;base64,"


class QrcodeGenerationOptions(RequestOptions):
    format: QrcodeFormat | None = None
    w: int | None = Field(default=None, ge=0)
    h: int | None = Field(default=None, ge=0)
    quiet_zone: int | None = Field(default=None, ge=-1)
    # -1 auto, 1: 7%, 0: 15%, 3: 25%, 2: 30%; Aztec, PDF417 and QRCode only
    ec_level: Literal[-1, 0, 1, 2, 3] | None = None


class QrcodeGenerationResult(ServiceResult):
    data: str

    def image_bytes(self) -> bytes:
        """Decode the generated JPEG. Only valid for a successful result."""
        self.raise_for_code()
        return b64decode(self.data.removeprefix(JPEG_DATA_URI_PREFIX))


class QrcodeRecognitionOptions(RequestOptions):
    median_filter_size: Literal[1, 3, 5, 7, 9] | None = Field(
        default=None, alias="preprocessing.median_filter_size",
    )
    sharpness_factor: float | None = Field(
        default=None, gt=0, le=10, alias="preprocessing.sharpness_factor",
    )
    contrast_factor: float | None = Field(
        default=None, gt=0, le=10, alias="preprocessing.contrast_factor",
    )
    grayscale: bool | None = Field(default=None, alias="preprocessing.grayscale")
    # only applied when grayscale is enabled
    threshold: int | None = Field(default=None, ge=0, le=255, alias="preprocessing.threshold")


class QrcodeRecognitionData(BaseModel):
    orientation: int
    box: list[Point]
    score: float = 1
    format: QrcodeFormat
    text: str


class QrcodeRecognitionResult(ServiceResult):
    data: list[QrcodeRecognitionData] | str
    time: float | None = None
    timestamp: float | None = None
