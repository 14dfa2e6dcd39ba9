from __future__ import annotations

import csv
import io
import json
import tempfile
import unittest
import zipfile
from pathlib import Path

import httpx

from fake_service import BASE_URL, FakeUmiService, document
from umi_ocr_client.doc_ocr import (
    DocOcrJob,
    doc_clear,
    doc_download,
    doc_result,
    doc_upload,
)
from umi_ocr_client.errors import ApplicationError, RequestFailed
from umi_ocr_client.models.enums import DataFormat, DocFileType, DocOcrState
from umi_ocr_client.schemas.doc import DocOcrDictResult, DocOcrOptions, DocOcrTextResult, DocPageResult
from umi_ocr_client.transport import download_to

MAX_POLLS = 20


class _BrokenStream(httpx.AsyncByteStream):
    async def __aiter__(self):
        yield b"partial"
        raise httpx.ReadError("connection reset")


class DocOcrTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.service = FakeUmiService()
        self.client = self.service.client()

    async def asyncTearDown(self) -> None:
        await self.client.aclose()

    async def upload(self, *pages: str, options: DocOcrOptions | None = None) -> str:
        result = await doc_upload(document(*pages), options, filename="doc.pdf", client=self.client)
        self.assertTrue(result.ok, result.data)
        return result.data

    async def poll_until_done(self, job_id: str) -> list[DocOcrDictResult]:
        history = []
        for _ in range(MAX_POLLS):
            result = await doc_result(job_id, client=self.client)
            history.append(result)
            if result.is_done:
                return history
        self.fail(f"job {job_id} never finished")


class TestDocFunctions(DocOcrTestCase):
    async def test_upload_sends_file_and_options(self) -> None:
        options = DocOcrOptions(password="pw", page_range_end=-1)
        await self.upload("a", options=options)
        request = self.service.requests[-1]
        self.assertTrue(request.headers["content-type"].startswith("multipart/form-data"))
        self.assertIn(b'name="file"; filename="doc.pdf"', request.content)
        self.assertIn(b'{"pageRangeEnd":-1,"password":"pw"}', request.content)

    async def test_three_page_document_completes(self) -> None:
        job_id = await self.upload("one", "two", "three")
        history = await self.poll_until_done(job_id)
        last = history[-1]
        self.assertEqual(last.pages_count, 3)
        self.assertEqual(last.processed_count, 3)
        self.assertEqual(last.state, DocOcrState.success)
        self.assertIsNone(last.message)
        self.assertEqual(history[0].state, DocOcrState.running)
        self.assertEqual(last.data, [])

    async def test_progress_is_monotonic_and_terminal(self) -> None:
        job_id = await self.upload("a", "b", "c", "d")
        history = await self.poll_until_done(job_id)
        for _ in range(3):
            history.append(await doc_result(job_id, client=self.client))

        counts = [r.processed_count for r in history]
        self.assertEqual(counts, sorted(counts))
        self.assertEqual({r.pages_count for r in history}, {4})
        done_index = next(i for i, r in enumerate(history) if r.is_done)
        for r in history[done_index:]:
            self.assertTrue(r.is_done)
            self.assertEqual(r.state, history[done_index].state)
        for r in history:
            self.assertEqual(r.is_done, r.is_terminal)

    async def test_failure_keeps_processed_pages(self) -> None:
        job_id = await self.upload("first", "second", "FAIL", "fourth")
        last = (await self.poll_until_done(job_id))[-1]
        self.assertEqual(last.state, DocOcrState.failure)
        self.assertEqual(last.processed_count, 2)
        self.assertIn("Page 3", last.message)
        self.assertEqual(last.failure.processed_count, 2)

        result = await doc_result(job_id, is_data=True, is_unread=False, client=self.client)
        self.assertGreaterEqual(len(result.data), 2)
        self.assertEqual([p.page for p in result.data], [1, 2])

    async def test_unread_queries_are_disjoint(self) -> None:
        job_id = await self.upload("a", "b", "c")
        await self.poll_until_done(job_id)
        first = await doc_result(job_id, is_data=True, client=self.client)
        second = await doc_result(job_id, is_data=True, client=self.client)
        self.assertEqual([p.page for p in first.data], [1, 2, 3])
        self.assertEqual(second.data, [])
        everything = await doc_result(job_id, is_data=True, is_unread=False, client=self.client)
        self.assertEqual(len(everything.data), 3)

    async def test_text_format(self) -> None:
        job_id = await self.upload("alpha", "beta")
        await self.poll_until_done(job_id)
        result = await doc_result(job_id, is_data=True, format=DataFormat.text, client=self.client)
        self.assertIsInstance(result, DocOcrTextResult)
        self.assertEqual(result.data, "alpha\nbeta")
        body = json.loads(self.service.requests[-1].content)
        self.assertEqual(body, {"id": job_id, "is_data": True, "is_unread": True, "format": "text"})

    async def test_page_selection_limits_pages_count(self) -> None:
        options = DocOcrOptions(page_range_start=2, page_range_end=-2)
        job_id = await self.upload("1", "2", "3", "4", "5", options=options)
        last = (await self.poll_until_done(job_id))[-1]
        self.assertEqual(last.pages_count, 3)
        result = await doc_result(job_id, is_data=True, client=self.client)
        self.assertEqual([p.page for p in result.data], [2, 3, 4])

    async def test_page_list_beats_range(self) -> None:
        options = DocOcrOptions(page_list=(4, 1, 9), page_range_start=2)
        job_id = await self.upload("1", "2", "3", "4", "5", options=options)
        last = (await self.poll_until_done(job_id))[-1]
        self.assertEqual(last.pages_count, 2)
        result = await doc_result(job_id, is_data=True, client=self.client)
        self.assertEqual([p.page for p in result.data], [1, 4])

    async def test_unknown_job_is_reported_not_raised(self) -> None:
        result = await doc_result("missing", client=self.client)
        self.assertFalse(result.ok)
        self.assertIn("does not exist", result.data)
        with self.assertRaises(ApplicationError):
            result.raise_for_code()

    async def test_clear_twice(self) -> None:
        job_id = await self.upload("a")
        first = await doc_clear(job_id, client=self.client)
        second = await doc_clear(job_id, client=self.client)
        self.assertEqual(first.code, 100)
        self.assertNotEqual(second.code, 100)
        self.assertEqual(self.service.requests[-1].url.path, f"/api/doc/clear/{job_id}")
        self.assertFalse((await doc_result(job_id, client=self.client)).ok)

    async def test_csv_export_skips_blank_pages(self) -> None:
        job_id = await self.upload("first", "", "third")
        await self.poll_until_done(job_id)
        result = await doc_download(job_id, [DocFileType.csv], client=self.client)
        self.assertTrue(result.ok)
        self.assertEqual(result.name, f"{job_id}.csv")

        with tempfile.TemporaryDirectory() as tmp:
            path = await download_to(result.data, Path(tmp) / result.name, client=self.client)
            rows = list(csv.reader(io.StringIO(path.read_text())))
        self.assertEqual(rows, [["page", "text"], ["1", "first"], ["3", "third"]])

        kept = await doc_download(job_id, [DocFileType.csv], ignore_blank=False, client=self.client)
        content = self.service.files[kept.name].decode()
        self.assertEqual(len(list(csv.reader(io.StringIO(content)))), 4)

    async def test_several_file_types_bundle_into_zip(self) -> None:
        job_id = await self.upload("a", "b")
        await self.poll_until_done(job_id)
        result = await doc_download(job_id, [DocFileType.txt, DocFileType.jsonl], client=self.client)
        self.assertTrue(result.name.endswith(".zip"))
        with zipfile.ZipFile(io.BytesIO(self.service.files[result.name])) as zf:
            self.assertEqual(sorted(zf.namelist()), ["result.jsonl", "result.txt"])
        body = json.loads(self.service.requests[-1].content)
        self.assertEqual(body, {"id": job_id, "file_types": ["txt", "jsonl"], "ignore_blank": True})

    async def test_download_failure_has_no_name(self) -> None:
        result = await doc_download("missing", [DocFileType.txt], client=self.client)
        self.assertFalse(result.ok)
        self.assertIsNone(result.name)

    async def test_http_error_raises_before_parsing(self) -> None:
        self.service.fail_status = 503
        with self.assertRaises(RequestFailed) as ctx:
            await doc_result("any", client=self.client)
        self.assertEqual(ctx.exception.status_code, 503)
        self.assertEqual(ctx.exception.operation, "docResult")

    async def test_missing_download_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(RequestFailed):
                await download_to(f"{BASE_URL}/files/nothing.zip", Path(tmp) / "x.zip", client=self.client)

    async def test_interrupted_download_leaves_no_file(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, stream=_BrokenStream()))
        async with httpx.AsyncClient(transport=transport) as client:
            with tempfile.TemporaryDirectory() as tmp:
                dest = Path(tmp) / "out.txt"
                with self.assertRaises(RequestFailed) as ctx:
                    await download_to(f"{BASE_URL}/files/out.txt", dest, client=client)
                self.assertFalse(dest.exists())
        self.assertIn("connection reset", ctx.exception.reason)


class TestDocOcrJob(DocOcrTestCase):
    async def test_lifecycle(self) -> None:
        job = await DocOcrJob.submit(document("one", "two", "three"), client=self.client)
        self.assertIsNone(job.state)
        self.assertEqual(job.progress, (0, 0))

        for _ in range(MAX_POLLS):
            await job.query(is_data=True)
            if job.is_done:
                break
        self.assertEqual(job.state, DocOcrState.success)
        self.assertEqual(job.progress, (3, 3))
        self.assertIsNone(job.failure)
        self.assertEqual([p.page for p in job.pages], [1, 2, 3])
        self.assertEqual(job.text, "one\ntwo\nthree")

        exported = await job.download([DocFileType.txt_plain])
        self.assertTrue(exported.ok)
        self.assertEqual((await job.clear()).code, 100)
        self.assertTrue(job.cleared)
        self.assertNotEqual((await job.clear()).code, 100)

    async def test_failure_snapshot(self) -> None:
        job = await DocOcrJob.submit(document("ok", "FAIL"), client=self.client)
        while not job.is_done:
            await job.query()
        self.assertEqual(job.state, DocOcrState.failure)
        self.assertEqual(job.failure.processed_count, 1)
        await job.query(is_data=True, is_unread=False)
        self.assertEqual([p.page for p in job.pages], [1])

    async def test_submit_refused_raises(self) -> None:
        with self.assertRaises(ApplicationError) as ctx:
            await DocOcrJob.submit(document("a"), DocOcrOptions(password="wrong"), client=self.client)
        self.assertEqual(ctx.exception.code, 102)

    async def test_failed_query_leaves_snapshot(self) -> None:
        job = await DocOcrJob.submit(document("a"), client=self.client)
        await job.query()
        snapshot = job.snapshot
        self.service.jobs.clear()
        result = await job.query()
        self.assertFalse(result.ok)
        self.assertIs(job.snapshot, snapshot)

    async def test_text_format_accumulates(self) -> None:
        options = DocOcrOptions(data_format=DataFormat.text)
        job = await DocOcrJob.submit(document("x", "y"), options, client=self.client)
        while not job.is_done:
            await job.query()
        await job.query(is_data=True)
        self.assertEqual(job.text, "x\ny")

    async def test_text_format_streaming_ignores_empty_answers(self) -> None:
        options = DocOcrOptions(data_format=DataFormat.text)
        job = await DocOcrJob.submit(document("x", "y"), options, client=self.client)
        for _ in range(MAX_POLLS):
            await job.query(is_data=True)
            if job.is_done:
                break
        await job.query(is_data=True)
        self.assertEqual(job.text, "x\ny")

    async def test_blank_pages_left_out_of_text(self) -> None:
        job = await DocOcrJob.submit(document("x", "", "z"), client=self.client)
        for _ in range(MAX_POLLS):
            await job.query(is_data=True)
            if job.is_done:
                break
        self.assertEqual([p.page for p in job.pages], [1, 2, 3])
        self.assertTrue(job.pages[1].is_blank)
        self.assertEqual(job.text, "x\nz")


class TestSnapshotMerge(unittest.TestCase):
    def make(self, processed: int, state: str, done: bool = False) -> DocOcrDictResult:
        return DocOcrDictResult(
            code=100, data=[], processed_count=processed, pages_count=5, is_done=done, state=state,
        )

    def test_overlapping_answers_keep_highest_progress(self) -> None:
        job = DocOcrJob("job", base_url=BASE_URL)
        job._merge_snapshot(self.make(3, "running"))
        job._merge_snapshot(self.make(2, "running"))
        self.assertEqual(job.progress, (3, 5))

    def test_terminal_snapshot_is_never_replaced(self) -> None:
        job = DocOcrJob("job", base_url=BASE_URL)
        job._merge_snapshot(self.make(5, "success", done=True))
        job._merge_snapshot(self.make(4, "running"))
        self.assertTrue(job.is_done)
        self.assertEqual(job.state, DocOcrState.success)

    def test_empty_text_chunks_are_dropped(self) -> None:
        job = DocOcrJob("job", DocOcrOptions(data_format=DataFormat.text), base_url=BASE_URL)
        job._merge_data(DocOcrTextResult(code=100, data=""))
        job._merge_data(DocOcrTextResult(code=100, data=["a", "", "b"]))
        job._merge_data(DocOcrTextResult(code=100, data=""))
        self.assertEqual(job.text, "a\nb")

    def test_blank_page(self) -> None:
        page = DocPageResult(page=2, code=101, data="")
        self.assertTrue(page.is_blank)
        self.assertEqual(page.text, "")


if __name__ == "__main__":
    unittest.main()
