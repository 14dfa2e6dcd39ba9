"""Image OCR request/response schemas."""

from pydantic import BaseModel, Field

from umi_ocr_client.models.enums import DataFormat, LimitSideLen, OcrLanguage, TbpuParser
from umi_ocr_client.schemas.common import Point, RequestOptions, ServiceResult


class OcrTuning(RequestOptions):
    language: OcrLanguage | None = Field(default=None, alias="ocr.language")
    correct_orientation: bool | None = Field(default=None, alias="ocr.cls")
    limit_side_len: LimitSideLen | None = Field(default=None, alias="ocr.limit_side_len")
    parser: TbpuParser | None = Field(default=None, alias="tbpu.parser")
    # each area is [[left, top], [right, bottom]]
    ignore_area: list[tuple[Point, Point]] | None = Field(default=None, alias="tbpu.ignoreArea")
    data_format: DataFormat | None = Field(default=None, alias="data.format")

    @property
    def format(self) -> DataFormat:
        return self.data_format or DataFormat.dict


class ImageOcrOptions(OcrTuning):
    pass


class OcrTextBlock(BaseModel):
    # clockwise from top-left
    box: list[Point]
    score: float
    text: str
    end: str = ""


class ImageOcrResult(ServiceResult):
    score: float | None = None
    time: float | None = None
    timestamp: float | None = None


class ImageOcrDictResult(ImageOcrResult):
    data: list[OcrTextBlock] | str


class ImageOcrTextResult(ImageOcrResult):
    data: str
