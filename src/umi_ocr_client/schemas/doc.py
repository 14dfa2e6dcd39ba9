"""Document OCR job schemas: upload options, query/download/clear bodies and answers."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator

from umi_ocr_client.models.enums import (
    TERMINAL_STATES,
    DataFormat,
    DocExtractionMode,
    DocFileType,
    DocOcrState,
)
from umi_ocr_client.schemas.common import ServiceResult
from umi_ocr_client.schemas.image_ocr import OcrTextBlock, OcrTuning


def _resolve_end(end: int | None, pages_count: int) -> int:
    """Page range ends may count back from the last page (-1 is the last page)."""
    if end is None:
        return pages_count
    if end < 0:
        return pages_count + end + 1
    return end


def _page_range(start: int | None, end: int | None, pages_count: int) -> list[int]:
    first = max(start or 1, 1)
    last = min(_resolve_end(end, pages_count), pages_count)
    return list(range(first, last + 1))


class DocOcrOptions(OcrTuning):
    """Configuration captured when a document is uploaded.

    Frozen: a job keeps these settings for its whole lifetime, and query,
    download and clear never resend them.
    """

    # Page range over which ``ignore_area`` applies, 1-based
    ignore_range_start: int | None = Field(default=None, ge=1, alias="tbpu.ignoreRangeStart")
    ignore_range_end: int | None = Field(default=None, alias="tbpu.ignoreRangeEnd")

    page_range_start: int | None = Field(default=None, ge=1, alias="pageRangeStart")
    page_range_end: int | None = Field(default=None, alias="pageRangeEnd")
    # Takes precedence over the page range when both are given
    page_list: tuple[int, ...] | None = Field(default=None, alias="pageList")

    password: str | None = None
    extraction_mode: DocExtractionMode | None = Field(default=None, alias="doc.extractionMode")

    @field_validator("ignore_range_end", "page_range_end")
    @classmethod
    def _end_not_zero(cls, v: int | None) -> int | None:
        if v == 0:
            raise ValueError("range end must be a positive page number or a negative offset from the last page")
        return v

    @field_validator("page_list")
    @classmethod
    def _pages_positive(cls, v: tuple[int, ...] | None) -> tuple[int, ...] | None:
        if v is not None and any(p < 1 for p in v):
            raise ValueError("page numbers start at 1")
        return v

    def select_pages(self, pages_count: int) -> list[int]:
        """Pages that will be recognized in a document of ``pages_count`` pages."""
        if self.page_list is not None:
            return sorted({p for p in self.page_list if p <= pages_count})
        return _page_range(self.page_range_start, self.page_range_end, pages_count)

    def ignore_pages(self, pages_count: int) -> list[int]:
        """Pages on which ``ignore_area`` is applied."""
        if not self.ignore_area:
            return []
        return _page_range(self.ignore_range_start, self.ignore_range_end, pages_count)


class DocUploadResult(ServiceResult):
    data: str

    @property
    def job_id(self) -> str | None:
        return self.data if self.ok else None


class DocResultRequest(BaseModel):
    id: str
    is_data: bool = False
    is_unread: bool = True
    format: DataFormat = DataFormat.dict


class DocPageResult(BaseModel):
    """Recognition result of one page, as returned in ``dict`` format."""

    model_config = ConfigDict(extra="allow")

    page: int
    code: int = 100
    data: list[OcrTextBlock] | str = []
    score: float | None = None
    time: float | None = None
    timestamp: float | None = None

    @property
    def is_blank(self) -> bool:
        return not self.data or isinstance(self.data, str)

    @property
    def text(self) -> str:
        if isinstance(self.data, str) or not self.data:
            return ""
        # the last block's separator is dropped
        head = "".join(block.text + block.end for block in self.data[:-1])
        return head + self.data[-1].text


@dataclass(frozen=True)
class JobFailure:
    """A job that stopped in the ``failure`` state.

    Pages processed before the failure stay retrievable with ``is_data=True``.
    """

    message: str
    processed_count: int
    pages_count: int


class DocOcrResult(ServiceResult):
    processed_count: int = 0
    pages_count: int = 0
    is_done: bool = False
    state: DocOcrState | None = None
    message: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def failure(self) -> JobFailure | None:
        if self.state != DocOcrState.failure:
            return None
        return JobFailure(
            message=self.message or "",
            processed_count=self.processed_count,
            pages_count=self.pages_count,
        )


class DocOcrDictResult(DocOcrResult):
    data: list[DocPageResult] | str = []


class DocOcrTextResult(DocOcrResult):
    data: list[str] | str = []


class DocDownloadRequest(BaseModel):
    id: str
    file_types: list[DocFileType] = Field(min_length=1)
    ignore_blank: bool = True


class DocDownloadResult(ServiceResult):
    # download URL on success, failure reason otherwise
    data: str
    name: str | None = None


class DocClearResult(ServiceResult):
    data: str = ""
