"""Option vocabularies shared by requests and responses."""

from umi_ocr_client.models.enums import (
    TERMINAL_STATES,
    DataFormat,
    DocExtractionMode,
    DocFileType,
    DocOcrState,
    LimitSideLen,
    OcrLanguage,
    QrcodeFormat,
    TbpuParser,
)

__all__ = [
    "TERMINAL_STATES",
    "DataFormat",
    "DocExtractionMode",
    "DocFileType",
    "DocOcrState",
    "LimitSideLen",
    "OcrLanguage",
    "QrcodeFormat",
    "TbpuParser",
]
