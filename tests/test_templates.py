from __future__ import annotations

import io

import pytest
from pypdf import PdfReader

from docuforge.pdf.templates import (
    TEMPLATES,
    CertificateData,
    InvoiceData,
    InvoiceItem,
    ResumeData,
    format_money,
    format_quantity,
    generate_certificate_pdf,
    generate_invoice_pdf,
    generate_resume_pdf,
    render_template,
)

INVOICE_PAYLOAD = {
    "invoiceNumber": "INV-042",
    "date": "2024-05-01",
    "from": "Acme Ltd",
    "to": "Globex Corp",
    "items": [
        {"description": "Widgets", "quantity": 2, "price": 10},
        {"description": "Gadget", "quantity": 1.5, "price": 4},
    ],
    "total": 999,
}


def _text(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(page.extract_text() for page in reader.pages)


def test_format_helpers() -> None:
    assert format_money(12) == "$12.00"
    assert format_money(0.5) == "$0.50"
    assert format_quantity(2.0) == "2"
    assert format_quantity(1.5) == "1.5"


def test_invoice_from_camel_case_payload() -> None:
    data = InvoiceData.from_dict(INVOICE_PAYLOAD)

    assert data.invoice_number == "INV-042"
    assert data.bill_from == "Acme Ltd"
    assert data.items[0] == InvoiceItem("Widgets", 2, 10)
    assert data.items[0].line_total == 20


def test_invoice_from_snake_case_payload() -> None:
    data = InvoiceData.from_dict(
        {
            "invoice_number": "1",
            "date": "today",
            "bill_from": "a",
            "bill_to": "b",
            "total": 0,
        }
    )
    assert data.items == []


def test_invoice_missing_field() -> None:
    payload = dict(INVOICE_PAYLOAD)
    del payload["total"]
    with pytest.raises(ValueError, match="total"):
        InvoiceData.from_dict(payload)


def test_invoice_prints_supplied_total() -> None:
    text = _text(generate_invoice_pdf(InvoiceData.from_dict(INVOICE_PAYLOAD)))

    assert "INVOICE" in text
    assert "INV-042" in text
    assert "$20.00" in text
    assert "$6.00" in text
    assert "$999.00" in text
    assert "$26.00" not in text


def test_invoice_with_many_items_continues_on_new_pages() -> None:
    payload = dict(INVOICE_PAYLOAD)
    payload["items"] = [{"description": f"Item {index}", "quantity": 1, "price": 1} for index in range(60)]

    reader = PdfReader(io.BytesIO(render_template("invoice", payload)))

    assert len(reader.pages) > 1
    assert "Item 59" in reader.pages[-1].extract_text()


def test_certificate_is_landscape() -> None:
    data = CertificateData(
        recipient_name="Ada Lovelace",
        course_name="Analytical Engines",
        date="1843-09-01",
        instructor_name="Charles Babbage",
    )
    reader = PdfReader(io.BytesIO(generate_certificate_pdf(data)))
    page = reader.pages[0]

    assert (float(page.mediabox.width), float(page.mediabox.height)) == (842, 595)
    text = page.extract_text()
    assert "CERTIFICATE OF COMPLETION" in text
    assert "Ada Lovelace" in text


def test_resume_sections_and_wrapping() -> None:
    data = ResumeData(
        name="Grace Hopper",
        email="grace@example.com",
        phone="555-0100",
        experience="Compilers " * 60,
        skills="COBOL",
    )

    text = _text(generate_resume_pdf(data))

    for heading in ("PROFESSIONAL SUMMARY", "EXPERIENCE", "EDUCATION", "SKILLS"):
        assert heading in text
    assert "grace@example.com | 555-0100" in text


def test_render_template_registry() -> None:
    assert set(TEMPLATES) == {"invoice", "certificate", "resume"}
    assert render_template("resume", {"name": "Solo"}).startswith(b"%PDF")
    with pytest.raises(ValueError):
        render_template("letter", {})
