"""FastAPI application exposing the DocuForge engines over HTTP."""

from __future__ import annotations

import json
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Callable, List, TypeVar

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docuforge.core.config import get_settings
from docuforge.core.exceptions import (
    DecodeError,
    DocuForgeError,
    ExternalServiceError,
    InsufficientInputError,
    UnsupportedFormatError,
)
from docuforge.core.model import CompressionResult
from docuforge.core.utils import configure_logging, get_logger
from docuforge.imaging.compress import QUICK_QUALITY, compress_image, compress_to_target_with_report
from docuforge.imaging.formats import ImageFormat, resolve_format
from docuforge.imaging.passport import PassportPhotoOptions, compose, remove_background
from docuforge.imaging.transform import convert_image_format, crop_image
from docuforge.pdf.compress import PDF_MIME_TYPE, compress_pdf_simple
from docuforge.pdf.extract import PypdfTextExtractor, extract
from docuforge.pdf.merge import MergeJob
from docuforge.pdf.office import convert_to_pdf, resolve_conversion_type
from docuforge.pdf.templates import TEMPLATES, render_template

LOGGER = get_logger("docuforge.backend")
configure_logging(get_settings().log_level)

app = FastAPI(title="DocuForge API", version="0.1.0")

T = TypeVar("T")

_BAD_REQUEST_ERRORS = (DecodeError, UnsupportedFormatError, InsufficientInputError, ValueError)
_GENERIC_CONTENT_TYPES = {"", "application/octet-stream"}


def _safe_filename(filename: str | None, default: str) -> str:
    """Return a filesystem-safe filename derived from user input."""

    if not filename:
        return default

    candidate = Path(filename).name
    return candidate or default


def _with_suffix(filename: str | None, default: str, suffix: str) -> str:
    return Path(_safe_filename(filename, default)).with_suffix(suffix).name


def _parse_json_mapping(raw_value: str | None, *, field_name: str) -> dict[str, object] | None:
    """Parse an optional JSON encoded mapping from a multipart form field."""

    if raw_value is None:
        return None

    try:
        payload = json.loads(raw_value)
    except JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail=f"{field_name} must be valid JSON.") from exc

    if payload is None:
        return None

    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail=f"{field_name} must be a JSON object.")

    return payload


def _parse_box(raw_value: str | None) -> tuple[int, int, int, int] | None:
    if not raw_value:
        return None
    try:
        parts = [int(part.strip()) for part in raw_value.split(",")]
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="box must be four comma separated integers.") from exc
    if len(parts) != 4:
        raise HTTPException(status_code=400, detail="box must be four comma separated integers.")
    return parts[0], parts[1], parts[2], parts[3]


async def _read_upload(upload: UploadFile) -> bytes:
    """Read an upload, enforcing the configured size ceiling."""

    limit = get_settings().max_upload_bytes
    contents = await upload.read(limit + 1)
    if not contents:
        raise HTTPException(status_code=400, detail=f"File '{upload.filename}' is empty.")
    if len(contents) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"File '{upload.filename}' exceeds the {limit} byte upload limit.",
        )
    return contents


async def _call_engine(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking engine call and translate its errors into HTTP errors."""

    try:
        return await run_in_threadpool(func, *args, **kwargs)
    except ExternalServiceError as exc:
        LOGGER.error("External service failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except NotImplementedError as exc:
        raise HTTPException(status_code=501, detail=str(exc)) from exc
    except _BAD_REQUEST_ERRORS as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except DocuForgeError as exc:
        LOGGER.error("Engine failure: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _image_mime_type(upload: UploadFile) -> str | None:
    """Declared type of an image upload, or ``None`` to detect it from the bytes."""

    content_type = (upload.content_type or "").strip().lower()
    return None if content_type in _GENERIC_CONTENT_TYPES else content_type


def _image_filename(filename: str | None, default: str, media_type: str) -> str:
    try:
        extension = resolve_format(media_type).extension
    except UnsupportedFormatError:
        return _safe_filename(filename, default)
    return _with_suffix(filename, default, "." + extension)


def _attachment(data: bytes, media_type: str, filename: str, headers: dict[str, str] | None = None) -> Response:
    merged = {"Content-Disposition": f'attachment; filename="{filename}"'}
    if headers:
        merged.update(headers)
    return Response(content=data, media_type=media_type, headers=merged)


def _compression_headers(result: CompressionResult) -> dict[str, str]:
    headers = {
        "X-DocuForge-Original-Size": str(result.original_size),
        "X-DocuForge-Compressed-Size": str(result.compressed_size),
        "X-DocuForge-Percent-Saved": str(result.percent_saved),
    }
    if result.quality is not None:
        headers["X-DocuForge-Quality"] = str(result.quality)
    return headers


@app.get("/health", response_class=JSONResponse)
async def health() -> dict[str, str]:
    """Lightweight health endpoint for uptime checks."""
    return {"status": "ok"}


@app.post("/pdf-extract", response_class=JSONResponse)
async def pdf_extract(file: UploadFile = File(..., description="PDF to read.")) -> dict[str, object]:
    """Text-layer extraction backend.

    Always reads locally; this endpoint is what ``RemoteTextExtractor``
    talks to, so it must not delegate again.
    """

    contents = await _read_upload(file)
    result = await _call_engine(extract, contents, extractor=PypdfTextExtractor())
    return {"text": result.text or "", "pageCount": result.page_count, "info": result.info}


@app.post("/convert/pdf")
async def convert_file_to_pdf(
    file: UploadFile = File(..., description="PNG, JPEG, .docx or .xlsx file."),
    file_type: str | None = Form(
        None,
        alias="fileType",
        description="image, word, excel or a MIME type; defaults to the upload content type.",
    ),
) -> Response:
    """Convert an uploaded image or Office document to PDF."""

    contents = await _read_upload(file)
    mime_type = await _call_engine(resolve_conversion_type, file_type, file.content_type)
    data = await _call_engine(convert_to_pdf, contents, mime_type)
    return _attachment(data, PDF_MIME_TYPE, _with_suffix(file.filename, "document", ".pdf"))


@app.post("/merge")
async def merge_documents(
    files: List[UploadFile] = File(..., description="PDF files to merge"),
    document_info: str | None = Form(
        None,
        description="Optional JSON encoded metadata to apply to the merged PDF.",
    ),
    add_bookmarks: bool = Form(
        False,
        description="When true, create bookmarks for each merged document.",
    ),
) -> Response:
    """Merge two or more PDF uploads into a single document."""

    if len(files) < 2:
        raise HTTPException(status_code=400, detail="At least two PDF files are required to merge.")

    job = MergeJob()
    for index, upload in enumerate(files, start=1):
        contents = await _read_upload(upload)
        name = Path(_safe_filename(upload.filename, f"document_{index}.pdf")).stem
        job.add(contents, name or f"Document {index}")

    metadata_overrides = _parse_json_mapping(document_info, field_name="document_info")
    data = await _call_engine(
        job.run,
        document_info=metadata_overrides,
        with_bookmarks=add_bookmarks,
    )
    return _attachment(data, PDF_MIME_TYPE, "merged.pdf")


@app.post("/images/compress")
async def compress_image_endpoint(
    file: UploadFile = File(..., description="Image to compress."),
    max_size: int | None = Form(None, alias="maxSize", ge=1, description="Target size in bytes."),
    quality: float = Form(QUICK_QUALITY, description="Quality for quick JPEG compression."),
    max_dimension: int | None = Form(None, alias="maxDimension", ge=1),
) -> Response:
    """Quick JPEG compression, or best-effort compression to ``maxSize`` bytes."""

    contents = await _read_upload(file)
    if max_size is not None:
        result = await _call_engine(compress_to_target_with_report, contents, _image_mime_type(file), max_size)
    else:
        result = await _call_engine(
            compress_image,
            contents,
            _image_mime_type(file),
            quality=quality,
            max_dimension=max_dimension,
        )

    return _attachment(
        result.data,
        result.media_type,
        _image_filename(file.filename, "image", result.media_type),
        _compression_headers(result),
    )


@app.post("/images/convert")
async def convert_image_endpoint(
    file: UploadFile = File(..., description="Image to convert."),
    target_format: str = Form(..., alias="format", description="png, jpeg, webp or bmp."),
    background: str | None = Form(None, description="Fill colour for formats without alpha."),
) -> Response:
    contents = await _read_upload(file)
    target = await _call_engine(resolve_format, target_format)
    data = await _call_engine(
        convert_image_format,
        contents,
        _image_mime_type(file),
        target,
        background_color=background,
    )
    return _attachment(data, target.mime_type, _with_suffix(file.filename, "image", "." + target.extension))


@app.post("/images/crop")
async def crop_image_endpoint(
    file: UploadFile = File(..., description="Image to crop."),
    box: str | None = Form(None, description="left,top,right,bottom in pixels."),
    scale: float = Form(1.0, gt=0),
    target_format: str = Form(ImageFormat.PNG.value, alias="format"),
) -> Response:
    contents = await _read_upload(file)
    target = await _call_engine(resolve_format, target_format)
    data = await _call_engine(
        crop_image,
        contents,
        _image_mime_type(file),
        box=_parse_box(box),
        scale=scale,
        target_format=target,
    )
    return _attachment(data, target.mime_type, _with_suffix(file.filename, "image", "." + target.extension))


@app.post("/images/passport")
async def passport_photo_endpoint(
    file: UploadFile = File(..., description="Portrait to fit."),
    preset: str = Form("US Passport"),
    width: int | None = Form(None, ge=1),
    height: int | None = Form(None, ge=1),
    background: str | None = Form(None, alias="backgroundColor"),
    brightness: float | None = Form(None),
    contrast: float | None = Form(None),
    remove_bg: bool = Form(False, alias="removeBackground"),
) -> Response:
    """Compose a passport photo JPEG from a preset or explicit dimensions."""

    contents = await _read_upload(file)
    if remove_bg:
        data = await _call_engine(remove_background, contents, background or "#FFFFFF", _image_mime_type(file))
    else:
        tone = {"background_color": background, "brightness": brightness, "contrast": contrast}
        if width and height:
            options = await _call_engine(PassportPhotoOptions, width=width, height=height, **tone)
        else:
            options = await _call_engine(PassportPhotoOptions.for_preset, preset, **tone)
        data = await _call_engine(compose, contents, options, _image_mime_type(file))
    return _attachment(data, ImageFormat.JPEG.mime_type, _with_suffix(file.filename, "passport", ".jpg"))


@app.post("/pdf/compress")
async def compress_pdf_endpoint(file: UploadFile = File(..., description="PDF to compress.")) -> Response:
    contents = await _read_upload(file)
    result = await _call_engine(compress_pdf_simple, contents)
    return _attachment(
        result.data,
        PDF_MIME_TYPE,
        _with_suffix(file.filename, "document", ".pdf"),
        _compression_headers(result),
    )


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InvoiceItemModel(_CamelModel):
    description: str
    quantity: float
    price: float


class InvoiceRequest(_CamelModel):
    invoice_number: str
    date: str
    bill_from: str = Field(alias="from")
    bill_to: str = Field(alias="to")
    items: list[InvoiceItemModel] = Field(default_factory=list)
    total: float


class CertificateRequest(_CamelModel):
    recipient_name: str
    course_name: str
    date: str
    instructor_name: str


class ResumeRequest(_CamelModel):
    name: str
    email: str = ""
    phone: str = ""
    summary: str = ""
    experience: str = ""
    education: str = ""
    skills: str = ""


async def _render(name: str, payload: BaseModel) -> Response:
    data = await _call_engine(render_template, name, payload.model_dump())
    return _attachment(data, PDF_MIME_TYPE, TEMPLATES[name].filename)


@app.post("/pdf/make/invoice")
async def make_invoice(payload: InvoiceRequest) -> Response:
    return await _render("invoice", payload)


@app.post("/pdf/make/certificate")
async def make_certificate(payload: CertificateRequest) -> Response:
    return await _render("certificate", payload)


@app.post("/pdf/make/resume")
async def make_resume(payload: ResumeRequest) -> Response:
    return await _render("resume", payload)


__all__ = ["app"]
