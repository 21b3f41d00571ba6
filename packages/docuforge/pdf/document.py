"""In-memory PDF document model.

Pages are built up with draw operations and the whole document is written
once through :mod:`pypdf`. After :meth:`PDFDocumentModel.serialize` the model
is sealed.
"""

from __future__ import annotations

import io
import logging
import zlib
from dataclasses import dataclass, field
from typing import Mapping, Union

from PIL import Image
from pypdf import PdfWriter
from pypdf.generic import ArrayObject, DictionaryObject, NameObject, NumberObject, StreamObject

from ..core.exceptions import DocumentFinalizedError, EncodeError
from ..imaging.transform import decode_image

LOGGER = logging.getLogger("docuforge.pdf")

A4_PORTRAIT = (595, 842)
A4_LANDSCAPE = (842, 595)

HELVETICA = "Helvetica"
HELVETICA_BOLD = "Helvetica-Bold"
_FONT_ALIASES = {HELVETICA: "/F1", HELVETICA_BOLD: "/F2"}

Color = tuple[float, float, float]
BLACK: Color = (0.0, 0.0, 0.0)

_EXIF_ORIENTATION = 0x0112


def _num(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return text if text not in {"", "-0"} else "0"


def _color(values: Color) -> str:
    return " ".join(_num(channel) for channel in values)


def encode_pdf_string(text: str) -> str:
    """Return *text* as an escaped PDF literal string in WinAnsi encoding."""

    raw = text.encode("cp1252", errors="replace")
    parts = []
    for byte in raw:
        if byte in b"\\()":
            parts.append("\\" + chr(byte))
        elif 32 <= byte <= 126:
            parts.append(chr(byte))
        else:
            parts.append(f"\\{byte:03o}")
    return "(" + "".join(parts) + ")"


@dataclass(frozen=True, slots=True)
class EmbeddedImage:
    """Image payload ready to be written as a PDF image XObject."""

    width: int
    height: int
    data: bytes
    color_space: str
    filter: str
    soft_mask: bytes | None = None


def _exif_orientation(data: bytes) -> int:
    with Image.open(io.BytesIO(data)) as opened:
        return int(opened.getexif().get(_EXIF_ORIENTATION, 1))


def embed_image(data: bytes, mime_type: str | None = None) -> EmbeddedImage:
    """Prepare *data* for embedding.

    Baseline RGB or greyscale JPEG streams are embedded as-is; everything
    else is stored as Flate-compressed RGB with an optional soft mask.
    """

    raster = decode_image(data, mime_type)
    pixels = raster.pixels
    if (
        raster.source_format == "JPEG"
        and pixels.mode in {"RGB", "L"}
        and _exif_orientation(data) == 1
    ):
        return EmbeddedImage(
            width=pixels.width,
            height=pixels.height,
            data=data,
            color_space="/DeviceRGB" if pixels.mode == "RGB" else "/DeviceGray",
            filter="/DCTDecode",
        )

    soft_mask = None
    if pixels.has_transparency_data:
        rgba = pixels.convert("RGBA")
        soft_mask = zlib.compress(rgba.getchannel("A").tobytes())
        rgb = rgba.convert("RGB")
    else:
        rgb = pixels.convert("RGB")
    return EmbeddedImage(
        width=rgb.width,
        height=rgb.height,
        data=zlib.compress(rgb.tobytes()),
        color_space="/DeviceRGB",
        filter="/FlateDecode",
        soft_mask=soft_mask,
    )


@dataclass(slots=True)
class TextRun:
    text: str
    x: float
    y: float
    size: float = 12
    font: str = HELVETICA
    color: Color = BLACK

    def to_content(self, font_alias: str) -> str:
        return (
            f"BT {font_alias} {_num(self.size)} Tf {_color(self.color)} rg "
            f"{_num(self.x)} {_num(self.y)} Td {encode_pdf_string(self.text)} Tj ET"
        )


@dataclass(slots=True)
class ImagePlacement:
    image: EmbeddedImage
    x: float
    y: float
    width: float
    height: float

    def to_content(self, image_alias: str) -> str:
        return (
            f"q {_num(self.width)} 0 0 {_num(self.height)} {_num(self.x)} {_num(self.y)} cm "
            f"{image_alias} Do Q"
        )


@dataclass(slots=True)
class RectangleOp:
    x: float
    y: float
    width: float
    height: float
    border_color: Color | None = BLACK
    border_width: float = 1
    fill_color: Color | None = None

    def to_content(self) -> str:
        commands = ["q"]
        if self.fill_color is not None:
            commands.append(f"{_color(self.fill_color)} rg")
        if self.border_color is not None:
            commands.append(f"{_color(self.border_color)} RG {_num(self.border_width)} w")
        commands.append(
            f"{_num(self.x)} {_num(self.y)} {_num(self.width)} {_num(self.height)} re"
        )
        if self.fill_color is not None and self.border_color is not None:
            commands.append("B")
        elif self.fill_color is not None:
            commands.append("f")
        else:
            commands.append("S")
        commands.append("Q")
        return " ".join(commands)


DrawOperation = Union[TextRun, ImagePlacement, RectangleOp]


@dataclass(eq=False)
class PageModel:
    """A fixed-size page holding ordered draw operations."""

    document: "PDFDocumentModel" = field(repr=False)
    width: float
    height: float
    operations: list[DrawOperation] = field(default_factory=list)

    def _append(self, operation: DrawOperation) -> DrawOperation:
        self.document._ensure_open()
        self.operations.append(operation)
        return operation

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        size: float = 12,
        font: str = HELVETICA,
        color: Color = BLACK,
    ) -> TextRun:
        if font not in _FONT_ALIASES:
            raise ValueError(f"Unsupported font: {font}")
        return self._append(TextRun(text, x, y, size, font, color))

    def draw_image(
        self,
        image: EmbeddedImage,
        x: float = 0,
        y: float = 0,
        width: float | None = None,
        height: float | None = None,
    ) -> ImagePlacement:
        return self._append(
            ImagePlacement(
                image,
                x,
                y,
                image.width if width is None else width,
                image.height if height is None else height,
            )
        )

    def draw_rectangle(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        border_color: Color | None = BLACK,
        border_width: float = 1,
        fill_color: Color | None = None,
    ) -> RectangleOp:
        return self._append(RectangleOp(x, y, width, height, border_color, border_width, fill_color))


class PDFDocumentModel:
    """Ordered pages of draw operations, serialized exactly once."""

    def __init__(self, metadata: Mapping[str, str] | None = None) -> None:
        self._pages: list[PageModel] = []
        self._metadata = dict(metadata or {})
        self._finalized = False

    @property
    def pages(self) -> tuple[PageModel, ...]:
        return tuple(self._pages)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _ensure_open(self) -> None:
        if self._finalized:
            raise DocumentFinalizedError()

    def add_page(self, width: float, height: float) -> PageModel:
        self._ensure_open()
        if width <= 0 or height <= 0:
            raise ValueError("Page dimensions must be positive")
        page = PageModel(self, width, height)
        self._pages.append(page)
        return page

    def serialize(self) -> bytes:
        """Write the document to PDF bytes and seal the model."""

        self._ensure_open()
        writer = PdfWriter()
        font_refs: dict[str, object] = {}
        image_refs: dict[int, object] = {}

        def font_ref(font: str):
            if font not in font_refs:
                font_refs[font] = writer._add_object(
                    DictionaryObject(
                        {
                            NameObject("/Type"): NameObject("/Font"),
                            NameObject("/Subtype"): NameObject("/Type1"),
                            NameObject("/BaseFont"): NameObject("/" + font),
                            NameObject("/Encoding"): NameObject("/WinAnsiEncoding"),
                        }
                    )
                )
            return font_refs[font]

        def image_ref(image: EmbeddedImage):
            key = id(image)
            if key not in image_refs:
                image_refs[key] = writer._add_object(_image_xobject(writer, image))
            return image_refs[key]

        try:
            for page_model in self._pages:
                page = writer.add_blank_page(width=page_model.width, height=page_model.height)
                fonts = DictionaryObject()
                xobjects = DictionaryObject()
                commands: list[str] = []
                image_aliases: dict[int, str] = {}

                for operation in page_model.operations:
                    if isinstance(operation, TextRun):
                        alias = _FONT_ALIASES[operation.font]
                        fonts[NameObject(alias)] = font_ref(operation.font)
                        commands.append(operation.to_content(alias))
                    elif isinstance(operation, ImagePlacement):
                        key = id(operation.image)
                        if key not in image_aliases:
                            image_aliases[key] = f"/Im{len(image_aliases) + 1}"
                            xobjects[NameObject(image_aliases[key])] = image_ref(operation.image)
                        commands.append(operation.to_content(image_aliases[key]))
                    else:
                        commands.append(operation.to_content())

                resources = DictionaryObject(
                    {
                        NameObject("/ProcSet"): ArrayObject(
                            [NameObject("/PDF"), NameObject("/Text"), NameObject("/ImageC")]
                        )
                    }
                )
                if fonts:
                    resources[NameObject("/Font")] = fonts
                if xobjects:
                    resources[NameObject("/XObject")] = xobjects
                page[NameObject("/Resources")] = resources

                if commands:
                    stream = StreamObject()
                    stream[NameObject("/Filter")] = NameObject("/FlateDecode")
                    stream._data = zlib.compress("\n".join(commands).encode("latin-1"))
                    page[NameObject("/Contents")] = writer._add_object(stream)

            if self._metadata:
                writer.add_metadata(
                    {key if key.startswith("/") else f"/{key}": value for key, value in self._metadata.items()}
                )

            buffer = io.BytesIO()
            writer.write(buffer)
        except (OSError, ValueError, TypeError) as exc:
            LOGGER.error("Failed to serialize PDF document: %s", exc)
            raise EncodeError(f"Failed to serialize PDF document: {exc}") from exc

        self._finalized = True
        LOGGER.debug("Serialized PDF with %d page(s), %d bytes", len(self._pages), buffer.tell())
        return buffer.getvalue()


def _image_xobject(writer: PdfWriter, image: EmbeddedImage) -> StreamObject:
    stream = StreamObject()
    stream.update(
        {
            NameObject("/Type"): NameObject("/XObject"),
            NameObject("/Subtype"): NameObject("/Image"),
            NameObject("/Width"): NumberObject(image.width),
            NameObject("/Height"): NumberObject(image.height),
            NameObject("/ColorSpace"): NameObject(image.color_space),
            NameObject("/BitsPerComponent"): NumberObject(8),
            NameObject("/Filter"): NameObject(image.filter),
        }
    )
    stream._data = image.data

    if image.soft_mask is not None:
        mask = StreamObject()
        mask.update(
            {
                NameObject("/Type"): NameObject("/XObject"),
                NameObject("/Subtype"): NameObject("/Image"),
                NameObject("/Width"): NumberObject(image.width),
                NameObject("/Height"): NumberObject(image.height),
                NameObject("/ColorSpace"): NameObject("/DeviceGray"),
                NameObject("/BitsPerComponent"): NumberObject(8),
                NameObject("/Filter"): NameObject("/FlateDecode"),
            }
        )
        mask._data = image.soft_mask
        stream[NameObject("/SMask")] = writer._add_object(mask)
    return stream


__all__ = [
    "A4_PORTRAIT",
    "A4_LANDSCAPE",
    "HELVETICA",
    "HELVETICA_BOLD",
    "BLACK",
    "EmbeddedImage",
    "embed_image",
    "encode_pdf_string",
    "TextRun",
    "ImagePlacement",
    "RectangleOp",
    "PageModel",
    "PDFDocumentModel",
]
