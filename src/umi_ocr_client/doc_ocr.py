"""Document OCR jobs: upload, poll, download, clear.

A document is recognized asynchronously by the service. ``doc_upload``
creates a job and returns its id; ``doc_result`` reports progress and
optionally the recognized pages; ``doc_download`` exports the result;
``doc_clear`` releases the job on the server.

The library never polls on its own. Callers decide the cadence and when
to give up, e.g.::

    job = await DocOcrJob.submit(Path("scan.pdf"), client=client)
    while not job.is_done:
        await asyncio.sleep(1)
        await job.query()
    await job.query(is_data=True, is_unread=False)
    exported = await job.download([DocFileType.pdf_layered])
    await job.clear()
"""

import logging
from collections.abc import Iterable

import httpx

from umi_ocr_client.config import get_settings
from umi_ocr_client.encoding import FileInput, file_name_of, read_file_bytes
from umi_ocr_client.errors import ApplicationError
from umi_ocr_client.models.enums import DataFormat, DocFileType, DocOcrState
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
from umi_ocr_client.transport import request_json

logger = logging.getLogger(__name__)

DOC_UPLOAD_PATH = "/api/doc/upload"
DOC_RESULT_PATH = "/api/doc/result"
DOC_DOWNLOAD_PATH = "/api/doc/download"
DOC_CLEAR_PATH = "/api/doc/clear"


async def doc_upload(
    file: FileInput,
    options: DocOcrOptions | None = None,
    *,
    filename: str | None = None,
    url: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> DocUploadResult:
    """Upload a document and start recognition. ``data`` is the job id on success."""
    options = options or DocOcrOptions()
    content = await read_file_bytes(file)
    name = filename or file_name_of(file)
    payload = await request_json(
        "docUpload",
        "POST",
        url or get_settings().endpoint(DOC_UPLOAD_PATH),
        files={"file": (name, content)},
        data={"json": options.model_dump_json(by_alias=True, exclude_none=True)},
        client=client,
    )
    result = DocUploadResult.model_validate(payload)
    if result.ok:
        logger.info("Uploaded %s (%d bytes) as job %s", name, len(content), result.data)
    else:
        logger.warning("docUpload: code=%d %s", result.code, result.data)
    return result


async def doc_result(
    id: str,
    *,
    is_data: bool = False,
    is_unread: bool = True,
    format: DataFormat = DataFormat.dict,
    url: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> DocOcrDictResult | DocOcrTextResult:
    """Query the status of job ``id``.

    is_data: include recognized content (otherwise ``data`` is ``[]``).
    is_unread: only entries not yet returned to a previous query, instead
        of everything recognized so far.
    format: ``dict`` returns DocPageResult entries, ``text`` plain text.
    """
    body = DocResultRequest(id=id, is_data=is_data, is_unread=is_unread, format=format)
    payload = await request_json(
        "docResult",
        "POST",
        url or get_settings().endpoint(DOC_RESULT_PATH),
        json=body.model_dump(mode="json"),
        client=client,
    )
    if format == DataFormat.text:
        return DocOcrTextResult.model_validate(payload)
    return DocOcrDictResult.model_validate(payload)


async def doc_download(
    id: str,
    file_types: Iterable[DocFileType],
    *,
    ignore_blank: bool = True,
    url: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> DocDownloadResult:
    """Export job ``id``. One file type yields a file link, several a zip link.

    ignore_blank: skip pages without text in txt/csv style exports.
    """
    body = DocDownloadRequest(id=id, file_types=list(file_types), ignore_blank=ignore_blank)
    payload = await request_json(
        "docDownload",
        "POST",
        url or get_settings().endpoint(DOC_DOWNLOAD_PATH),
        json=body.model_dump(mode="json"),
        client=client,
    )
    result = DocDownloadResult.model_validate(payload)
    if not result.ok:
        logger.warning("docDownload %s: code=%d %s", id, result.code, result.data)
    return result


async def doc_clear(
    id: str,
    *,
    url: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> DocClearResult:
    """Release job ``id`` on the server. Clearing an unknown id returns a non-100 code."""
    base = (url or get_settings().endpoint(DOC_CLEAR_PATH)).rstrip("/")
    payload = await request_json("docClear", "GET", f"{base}/{id}", client=client)
    result = DocClearResult.model_validate(payload)
    if result.ok:
        logger.info("Cleared job %s", id)
    else:
        logger.warning("docClear %s: code=%d %s", id, result.code, result.data)
    return result


class DocOcrJob:
    """Client-side handle of one document job.

    Keeps the most advanced snapshot seen and every page delivered so far.
    """

    def __init__(
        self,
        id: str,
        options: DocOcrOptions | None = None,
        *,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.id = id
        self.options = options or DocOcrOptions()
        self.base_url = (base_url or get_settings().base_url).rstrip("/")
        self.client = client
        self.snapshot: DocOcrResult | None = None
        self._pages: dict[int, DocPageResult] = {}
        self._texts: list[str] = []
        self.cleared = False

    @classmethod
    async def submit(
        cls,
        file: FileInput,
        options: DocOcrOptions | None = None,
        *,
        filename: str | None = None,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> "DocOcrJob":
        """Upload ``file`` and return a handle on the new job.

        Raises ApplicationError when the service refuses the upload.
        """
        base = (base_url or get_settings().base_url).rstrip("/")
        result = await doc_upload(
            file, options, filename=filename, url=base + DOC_UPLOAD_PATH, client=client,
        )
        if not result.ok:
            raise ApplicationError(result.code, result.data)
        return cls(result.data, options, base_url=base, client=client)

    @property
    def format(self) -> DataFormat:
        return self.options.format

    @property
    def state(self) -> DocOcrState | None:
        return self.snapshot.state if self.snapshot else None

    @property
    def is_done(self) -> bool:
        return bool(self.snapshot and self.snapshot.is_done)

    @property
    def progress(self) -> tuple[int, int]:
        """(processed_count, pages_count) of the latest snapshot."""
        if self.snapshot is None:
            return 0, 0
        return self.snapshot.processed_count, self.snapshot.pages_count

    @property
    def failure(self) -> JobFailure | None:
        return self.snapshot.failure if self.snapshot else None

    @property
    def pages(self) -> list[DocPageResult]:
        """Every page received so far, in page order."""
        return [self._pages[n] for n in sorted(self._pages)]

    @property
    def text(self) -> str:
        """Recognized text so far, one line per chunk. Blank pages are skipped."""
        if self.format == DataFormat.text:
            return "\n".join(self._texts)
        return "\n".join(page.text for page in self.pages if not page.is_blank)

    def _merge_snapshot(self, result: DocOcrResult) -> None:
        # Overlapping queries may answer out of order: keep the most advanced one
        current = self.snapshot
        if current is None:
            self.snapshot = result
        elif current.is_done and not result.is_done:
            return
        elif result.is_done or result.processed_count >= current.processed_count:
            self.snapshot = result
        if result.is_done and (current is None or not current.is_done):
            if result.state == DocOcrState.failure:
                logger.warning(
                    "Job %s failed after %d/%d pages: %s",
                    self.id, result.processed_count, result.pages_count, result.message,
                )
            else:
                logger.info("Job %s finished: %s", self.id, result.state)

    def _merge_data(self, result: DocOcrDictResult | DocOcrTextResult) -> None:
        if isinstance(result.data, str):
            # An empty string means nothing unread, not an empty page
            if isinstance(result, DocOcrTextResult) and result.ok and result.data:
                self._texts.append(result.data)
            return
        for entry in result.data:
            if isinstance(entry, DocPageResult):
                self._pages[entry.page] = entry
            elif entry:
                self._texts.append(entry)

    async def query(
        self, *, is_data: bool = False, is_unread: bool = True,
    ) -> DocOcrDictResult | DocOcrTextResult:
        """One status query. Failed queries (code != 100) are returned untouched."""
        result = await doc_result(
            self.id,
            is_data=is_data,
            is_unread=is_unread,
            format=self.format,
            url=self.base_url + DOC_RESULT_PATH,
            client=self.client,
        )
        if not result.ok:
            logger.warning("docResult %s: code=%d %s", self.id, result.code, result.data)
            return result
        self._merge_snapshot(result)
        if is_data:
            if not is_unread:
                # The full set replaces whatever was accumulated
                self._pages.clear()
                self._texts.clear()
            self._merge_data(result)
        return result

    async def download(
        self, file_types: Iterable[DocFileType], *, ignore_blank: bool = True,
    ) -> DocDownloadResult:
        return await doc_download(
            self.id,
            file_types,
            ignore_blank=ignore_blank,
            url=self.base_url + DOC_DOWNLOAD_PATH,
            client=self.client,
        )

    async def clear(self) -> DocClearResult:
        result = await doc_clear(self.id, url=self.base_url + DOC_CLEAR_PATH, client=self.client)
        if result.ok:
            self.cleared = True
        return result
