"""Command line front end.

Usage:
    umi-ocr ocr scan.png --text
    umi-ocr qrcode-gen "hello" -o hello.jpg
    umi-ocr qrcode-read hello.jpg
    umi-ocr doc report.pdf --type pdfLayered --type txt -o out/
"""

import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path

import httpx

from umi_ocr_client.config import get_settings
from umi_ocr_client.doc_ocr import DocOcrJob
from umi_ocr_client.errors import ApplicationError, UmiOcrError
from umi_ocr_client.image_ocr import image_ocr
from umi_ocr_client.models.enums import DataFormat, DocFileType, OcrLanguage
from umi_ocr_client.qrcode import qrcode_generation, qrcode_recognition
from umi_ocr_client.schemas.doc import DocOcrOptions
from umi_ocr_client.schemas.image_ocr import ImageOcrOptions
from umi_ocr_client.schemas.qrcode import QrcodeGenerationOptions
from umi_ocr_client.transport import download_to

logger = logging.getLogger(__name__)


class PollTimeout(UmiOcrError):
    pass


def _print(result) -> None:
    print(result.model_dump_json(indent=2, exclude_none=True))


async def _run_ocr(args, client: httpx.AsyncClient) -> int:
    options = ImageOcrOptions(
        language=OcrLanguage[args.lang] if args.lang else None,
        data_format=DataFormat.text if args.text else None,
    )
    result = await image_ocr(Path(args.image), options, client=client)
    _print(result)
    return 0 if result.ok else 1


async def _run_qrcode_gen(args, client: httpx.AsyncClient) -> int:
    options = QrcodeGenerationOptions(w=args.size, h=args.size)
    result = await qrcode_generation(args.text, options, client=client)
    if not result.ok:
        _print(result)
        return 1
    args.output.write_bytes(result.image_bytes())
    logger.info("Wrote %s", args.output)
    return 0


async def _run_qrcode_read(args, client: httpx.AsyncClient) -> int:
    result = await qrcode_recognition(Path(args.image), client=client)
    _print(result)
    return 0 if result.ok else 1


async def _wait_for_job(job: DocOcrJob, interval: float, timeout: float) -> None:
    deadline = time.monotonic() + timeout
    while True:
        await job.query()
        processed, total = job.progress
        logger.info("Job %s: %s %d/%d", job.id, job.state, processed, total)
        if job.is_done:
            return
        if time.monotonic() >= deadline:
            raise PollTimeout(f"job {job.id} not done after {timeout:.0f}s")
        await asyncio.sleep(interval)


async def _clear_quietly(job: DocOcrJob) -> None:
    # Runs in a finally block: a failing clear must not hide the first error
    try:
        await job.clear()
    except UmiOcrError as exc:
        logger.warning("Could not clear job %s: %s", job.id, exc)


async def _run_doc(args, client: httpx.AsyncClient) -> int:
    settings = get_settings()
    options = DocOcrOptions(
        language=OcrLanguage[args.lang] if args.lang else None,
        password=args.password,
        page_range_start=args.first_page,
        page_range_end=args.last_page,
    )
    job = await DocOcrJob.submit(Path(args.file), options, client=client)
    try:
        await _wait_for_job(job, settings.poll_interval, settings.poll_timeout)
        if job.failure is not None:
            logger.warning("Job %s failed: %s", job.id, job.failure.message)

        file_types = [DocFileType(t) for t in args.type] or [DocFileType.pdf_layered]
        result = await job.download(file_types, ignore_blank=not args.keep_blank)
        if not result.ok:
            _print(result)
            return 1

        dest = args.output
        if dest.is_dir():
            dest = dest / (result.name or Path(result.data).name)
        await download_to(result.data, dest, client=client)
        print(dest)
        return 0 if job.failure is None else 1
    finally:
        await _clear_quietly(job)


COMMANDS = {
    "ocr": _run_ocr,
    "qrcode-gen": _run_qrcode_gen,
    "qrcode-read": _run_qrcode_read,
    "doc": _run_doc,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="umi-ocr", description="Umi-OCR service client")
    sub = parser.add_subparsers(dest="command", required=True)
    languages = [lang.name for lang in OcrLanguage]

    p = sub.add_parser("ocr", help="Recognize text in an image")
    p.add_argument("image")
    p.add_argument("--lang", choices=languages)
    p.add_argument("--text", action="store_true", help="Return plain text instead of text blocks")

    p = sub.add_parser("qrcode-gen", help="Generate a QR code image")
    p.add_argument("text")
    p.add_argument("-o", "--output", type=Path, default=Path("qrcode.jpg"))
    p.add_argument("--size", type=int, default=0, help="Width and height in pixels, 0 = minimum")

    p = sub.add_parser("qrcode-read", help="Decode barcodes in an image")
    p.add_argument("image")

    p = sub.add_parser("doc", help="Recognize a document and download the result")
    p.add_argument("file")
    p.add_argument("--lang", choices=languages)
    p.add_argument("--password")
    p.add_argument("--first-page", type=int)
    p.add_argument("--last-page", type=int, help="Negative values count from the last page")
    p.add_argument(
        "--type",
        action="append",
        default=[],
        choices=[t.value for t in DocFileType],
        help="Export format; repeat for a zip with several formats",
    )
    p.add_argument("--keep-blank", action="store_true", help="Keep pages without text in exports")
    p.add_argument("-o", "--output", type=Path, default=Path("."))
    return parser


async def _run(args) -> int:
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.timeout) as client:
        return await COMMANDS[args.command](args, client)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(_run(args))
    except ApplicationError as exc:
        logger.error("%s", exc)
        return 1
    except UmiOcrError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
