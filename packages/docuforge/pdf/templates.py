"""Fixed-layout document templates: invoice, certificate and resume.

Every field sits at a hard-coded position. Single-line fields are not
wrapped and may overflow; prose fields go through the word wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from .document import A4_LANDSCAPE, A4_PORTRAIT, HELVETICA_BOLD, PDFDocumentModel
from .layout import TextFlow

TITLE_BLUE = (0.2, 0.2, 0.8)
RESUME_WRAP_CHARS = 80

# Invoice columns: description, quantity, unit price, line total.
INVOICE_COLUMNS = (50, 300, 400, 480)


def format_money(value: float) -> str:
    return f"${value:.2f}"


def format_quantity(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _require(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    raise ValueError(f"Missing required field: {keys[0]}")


@dataclass(frozen=True)
class InvoiceItem:
    description: str
    quantity: float
    price: float

    @property
    def line_total(self) -> float:
        return self.quantity * self.price


@dataclass(frozen=True)
class InvoiceData:
    """Invoice content; ``total`` is printed as given and never recomputed."""

    invoice_number: str
    date: str
    bill_from: str
    bill_to: str
    items: Sequence[InvoiceItem]
    total: float

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "InvoiceData":
        items = [
            InvoiceItem(
                description=str(_require(item, "description")),
                quantity=float(_require(item, "quantity")),
                price=float(_require(item, "price")),
            )
            for item in payload.get("items") or []
        ]
        return cls(
            invoice_number=str(_require(payload, "invoice_number", "invoiceNumber")),
            date=str(_require(payload, "date")),
            bill_from=str(_require(payload, "bill_from", "from")),
            bill_to=str(_require(payload, "bill_to", "to")),
            items=items,
            total=float(_require(payload, "total")),
        )


@dataclass(frozen=True)
class CertificateData:
    recipient_name: str
    course_name: str
    date: str
    instructor_name: str

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CertificateData":
        return cls(
            recipient_name=str(_require(payload, "recipient_name", "recipientName")),
            course_name=str(_require(payload, "course_name", "courseName")),
            date=str(_require(payload, "date")),
            instructor_name=str(_require(payload, "instructor_name", "instructorName")),
        )


@dataclass(frozen=True)
class ResumeData:
    name: str
    email: str
    phone: str
    summary: str = ""
    experience: str = ""
    education: str = ""
    skills: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ResumeData":
        return cls(
            name=str(_require(payload, "name")),
            email=str(payload.get("email") or ""),
            phone=str(payload.get("phone") or ""),
            summary=str(payload.get("summary") or ""),
            experience=str(payload.get("experience") or ""),
            education=str(payload.get("education") or ""),
            skills=str(payload.get("skills") or ""),
        )

    def sections(self) -> list[tuple[str, str]]:
        return [
            ("PROFESSIONAL SUMMARY", self.summary),
            ("EXPERIENCE", self.experience),
            ("EDUCATION", self.education),
            ("SKILLS", self.skills),
        ]


def generate_invoice_pdf(data: InvoiceData) -> bytes:
    document = PDFDocumentModel()
    flow = TextFlow(document, A4_PORTRAIT, margin=50, top=800)

    flow.line("INVOICE", size=24, font=HELVETICA_BOLD, advance=40)
    flow.row([(50, f"Invoice #: {data.invoice_number}"), (400, f"Date: {data.date}")], size=12, advance=40)

    flow.line("From:", size=12, font=HELVETICA_BOLD, advance=20)
    flow.line(data.bill_from, size=10, advance=40)
    flow.line("To:", size=12, font=HELVETICA_BOLD, advance=20)
    flow.line(data.bill_to, size=10, advance=40)

    headers = ("Description", "Qty", "Price", "Total")
    flow.row(zip(INVOICE_COLUMNS, headers), size=12, font=HELVETICA_BOLD, advance=20)
    for item in data.items:
        cells = (
            item.description,
            format_quantity(item.quantity),
            format_money(item.price),
            format_money(item.line_total),
        )
        flow.row(zip(INVOICE_COLUMNS, cells), size=10, advance=20)

    flow.skip(20)
    flow.row(
        [(INVOICE_COLUMNS[2], "TOTAL:"), (INVOICE_COLUMNS[3], format_money(data.total))],
        size=14,
        font=HELVETICA_BOLD,
    )
    return document.serialize()


def generate_certificate_pdf(data: CertificateData) -> bytes:
    document = PDFDocumentModel()
    page = document.add_page(*A4_LANDSCAPE)

    page.draw_rectangle(30, 30, 782, 535, border_color=TITLE_BLUE, border_width=3)
    page.draw_text("CERTIFICATE OF COMPLETION", 200, 480, size=28, font=HELVETICA_BOLD, color=TITLE_BLUE)
    page.draw_text("This certificate is presented to", 280, 400, size=14)
    # Centring approximates glyph width from the character count.
    page.draw_text(
        data.recipient_name,
        421 - len(data.recipient_name) * 6,
        350,
        size=24,
        font=HELVETICA_BOLD,
    )
    page.draw_text("For successfully completing the course:", 260, 300, size=12)
    page.draw_text(
        data.course_name,
        421 - len(data.course_name) * 5,
        270,
        size=16,
        font=HELVETICA_BOLD,
    )
    page.draw_text(f"Date: {data.date}", 100, 150, size=12)
    page.draw_text(f"Instructor: {data.instructor_name}", 550, 150, size=12)
    return document.serialize()


def generate_resume_pdf(data: ResumeData) -> bytes:
    document = PDFDocumentModel()
    flow = TextFlow(document, A4_PORTRAIT, margin=50, top=800)

    flow.line(data.name, size=24, font=HELVETICA_BOLD, advance=30)
    flow.line(f"{data.email} | {data.phone}", size=10, advance=40)

    for index, (heading, body) in enumerate(data.sections()):
        if index:
            flow.skip(20)
        flow.line(heading, size=14, font=HELVETICA_BOLD, advance=20)
        flow.paragraph(body, max_chars=RESUME_WRAP_CHARS, size=10, advance=15)
    return document.serialize()


@dataclass(frozen=True)
class Template:
    name: str
    parse: Callable[[Mapping[str, Any]], Any]
    render: Callable[[Any], bytes]
    filename: str = "document.pdf"


TEMPLATES: dict[str, Template] = {
    "invoice": Template("invoice", InvoiceData.from_dict, generate_invoice_pdf, "invoice.pdf"),
    "certificate": Template("certificate", CertificateData.from_dict, generate_certificate_pdf, "certificate.pdf"),
    "resume": Template("resume", ResumeData.from_dict, generate_resume_pdf, "resume.pdf"),
}


def render_template(name: str, payload: Mapping[str, Any]) -> bytes:
    """Render template *name* from a plain mapping (snake or camel case keys)."""

    try:
        template = TEMPLATES[name]
    except KeyError as exc:
        raise ValueError(f"Unknown template: {name}") from exc
    return template.render(template.parse(payload))


__all__ = [
    "InvoiceItem",
    "InvoiceData",
    "CertificateData",
    "ResumeData",
    "TEMPLATES",
    "format_money",
    "format_quantity",
    "generate_invoice_pdf",
    "generate_certificate_pdf",
    "generate_resume_pdf",
    "render_template",
]
