"""PDF engines: document model, assembly, templates, office conversion,
merge, extraction and compression."""

from __future__ import annotations

from .assembly import IMAGE_PAGE_MIME_TYPES, ImagePage, PageSpec, TextPage, assemble, image_to_pdf, text_to_pdf
from .compress import PDF_MIME_TYPE, compress_pdf_simple
from .document import A4_LANDSCAPE, A4_PORTRAIT, HELVETICA, HELVETICA_BOLD, PageModel, PDFDocumentModel
from .extract import (
    PypdfTextExtractor,
    RemoteTextExtractor,
    TextExtractor,
    TextLayerResult,
    extract,
    get_default_extractor,
    get_page_count,
)
from .layout import TextFlow, TextLayout, column_budget, wrap_text
from .merge import MergeJob, merge_pdfs
from .office import (
    DOCX_MIME_TYPE,
    XLSX_MIME_TYPE,
    DocxReader,
    OfficeContent,
    OfficeDocumentReader,
    XlsxReader,
    convert_excel_to_pdf,
    convert_to_pdf,
    convert_word_to_pdf,
    resolve_conversion_type,
)
from .templates import (
    TEMPLATES,
    CertificateData,
    InvoiceData,
    InvoiceItem,
    ResumeData,
    generate_certificate_pdf,
    generate_invoice_pdf,
    generate_resume_pdf,
    render_template,
)

__all__ = [
    "A4_LANDSCAPE",
    "A4_PORTRAIT",
    "HELVETICA",
    "HELVETICA_BOLD",
    "PageModel",
    "PDFDocumentModel",
    "TextFlow",
    "TextLayout",
    "column_budget",
    "wrap_text",
    "IMAGE_PAGE_MIME_TYPES",
    "ImagePage",
    "TextPage",
    "PageSpec",
    "assemble",
    "image_to_pdf",
    "text_to_pdf",
    "TEMPLATES",
    "InvoiceItem",
    "InvoiceData",
    "CertificateData",
    "ResumeData",
    "generate_invoice_pdf",
    "generate_certificate_pdf",
    "generate_resume_pdf",
    "render_template",
    "DOCX_MIME_TYPE",
    "XLSX_MIME_TYPE",
    "OfficeContent",
    "OfficeDocumentReader",
    "DocxReader",
    "XlsxReader",
    "convert_word_to_pdf",
    "convert_excel_to_pdf",
    "convert_to_pdf",
    "resolve_conversion_type",
    "merge_pdfs",
    "MergeJob",
    "TextLayerResult",
    "TextExtractor",
    "PypdfTextExtractor",
    "RemoteTextExtractor",
    "get_default_extractor",
    "get_page_count",
    "extract",
    "PDF_MIME_TYPE",
    "compress_pdf_simple",
]
