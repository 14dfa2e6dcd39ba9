import enum


class OcrLanguage(str, enum.Enum):
    zh = "models/config_chinese.txt"
    en = "models/config_en.txt"
    zh_tw = "models/config_chinese_cht(v2).txt"
    ja = "models/config_japan.txt"
    ko = "models/config_korean.txt"
    ru = "models/config_cyrillic.txt"


class LimitSideLen(int, enum.Enum):
    default = 960
    large = 2880
    extra_large = 4320
    unlimited = 999999


class TbpuParser(str, enum.Enum):
    multi_para = "multi_para"
    multi_line = "multi_line"
    multi_none = "multi_none"
    single_para = "single_para"
    single_line = "single_line"
    single_none = "single_none"
    single_code = "single_code"
    none = "none"


class DataFormat(str, enum.Enum):
    dict = "dict"
    text = "text"


class QrcodeFormat(str, enum.Enum):
    Aztec = "Aztec"
    Codabar = "Codabar"
    Code128 = "Code128"
    Code39 = "Code39"
    Code93 = "Code93"
    DataBar = "DataBar"
    DataBarExpanded = "DataBarExpanded"
    DataMatrix = "DataMatrix"
    EAN13 = "EAN13"
    EAN8 = "EAN8"
    ITF = "ITF"
    LinearCodes = "LinearCodes"
    MatrixCodes = "MatrixCodes"
    MaxiCode = "MaxiCode"
    MicroQRCode = "MicroQRCode"
    PDF417 = "PDF417"
    QRCode = "QRCode"
    UPCA = "UPCA"
    UPCE = "UPCE"


class DocExtractionMode(str, enum.Enum):
    mixed = "mixed"
    full_page = "fullPage"
    image_only = "imageOnly"
    text_only = "textOnly"


class DocOcrState(str, enum.Enum):
    waiting = "waiting"
    running = "running"
    success = "success"
    failure = "failure"


TERMINAL_STATES = frozenset({DocOcrState.success, DocOcrState.failure})


class DocFileType(str, enum.Enum):
    pdf_layered = "pdfLayered"
    pdf_one_layer = "pdfOneLayer"
    txt = "txt"
    txt_plain = "txtPlain"
    jsonl = "jsonl"
    csv = "csv"
