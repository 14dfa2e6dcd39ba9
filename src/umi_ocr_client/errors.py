"""Exception types raised by the client."""


class UmiOcrError(Exception):
    """Base class for every error raised by umi_ocr_client."""


class EncodingError(UmiOcrError):
    """The image or document could not be converted to base64 or bytes."""


class UnsupportedEnvironment(EncodingError):
    """No reader strategy is able to handle the given input."""


class RequestFailed(UmiOcrError):
    """Transport failure or non-2xx HTTP status. Never retried."""

    def __init__(self, operation: str, reason: str, status_code: int | None = None, url: str | None = None):
        self.operation = operation
        self.reason = reason
        self.status_code = status_code
        self.url = url
        super().__init__(f"{operation} failed: {reason}")


class ApplicationError(UmiOcrError):
    """The service answered with a non-100 code.

    Request functions return such answers as data; this is only raised on
    explicit request (``raise_for_code``) or when no job id exists to continue.
    """

    def __init__(self, code: int, detail: str):
        self.code = code
        self.detail = detail
        super().__init__(f"service returned code {code}: {detail}")
