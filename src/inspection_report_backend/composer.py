"""
Paginated PDF composition of vehicle inspection reports.

The ReportComposer renders one InspectionRecord into a single PDF document
using a reportlab canvas. Layout is a single top-to-bottom pass: every text
line and image first asks the page writer for vertical space, and the writer
starts a new page (repeating the current section header) when the space left
above the bottom margin is too small.

Failures are handled in two tiers:
- A bad photo or signature payload becomes an inline diagnostic line and the
  document carries on.
- Failing to open or finalize the document raises RenderError.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import BinaryIO, List, Optional, Tuple

from omegaconf import DictConfig
from reportlab.lib import pagesizes
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from .images import load_image
from .models import InspectionRecord
from .utils import display_value

logger = logging.getLogger(__name__)

CUSTOMER_FIELDS = (
    "location",
    "first_name",
    "last_name",
    "phone",
    "car_brand",
    "car_model",
    "color",
    "license_plate",
)


class RenderError(Exception):
    """Raised when the report document cannot be created or finalized."""


def resolve_page_size(name: str) -> Tuple[float, float]:
    size = getattr(pagesizes, str(name).upper(), None)
    if not (isinstance(size, tuple) and len(size) == 2):
        raise RenderError(f"Unknown page size: {name}")
    return size


def fit_lines(text: str, font: str, size: float, width: float) -> List[str]:
    """Wrap text at spaces, then cut any line still wider than ``width`` into chunks that fit."""
    lines: List[str] = []
    for line in simpleSplit(text, font, size, width) or [""]:
        if pdfmetrics.stringWidth(line, font, size) <= width:
            lines.append(line)
            continue
        current, current_width = "", 0.0
        for char in line:
            char_width = pdfmetrics.stringWidth(char, font, size)
            if current and current_width + char_width > width:
                lines.append(current)
                current, current_width = "", 0.0
            current += char
            current_width += char_width
        lines.append(current)
    return lines


def register_fonts(embedded) -> None:
    for font in embedded:
        if font.name not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(TTFont(font.name, font.path))


class _PageWriter:
    """
    Per-document layout state: the canvas, the vertical cursor and the
    section whose header is repeated after a page break.

    The cursor ``y`` is the baseline position in canvas coordinates, so
    content moves downwards by decreasing it.
    """

    def __init__(self, pdf: canvas.Canvas, page_size: Tuple[float, float], config: DictConfig) -> None:
        self.pdf = pdf
        self.page_width, self.page_height = page_size
        self.margin = float(config.document.margin)
        self.fonts = config.fonts
        self.continued_suffix = config.labels.continued_suffix
        self.page_count = 1
        self.section: Optional[str] = None
        self.y = self.page_height - self.margin
        self._fresh_page_y = self.y

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    def remaining(self) -> float:
        return self.y - self.margin

    def new_page(self) -> None:
        self.pdf.showPage()
        self.page_count += 1
        self.y = self.page_height - self.margin
        if self.section:
            self._draw_heading(f"{self.section}{self.continued_suffix}")
        self._fresh_page_y = self.y

    def ensure_space(self, height: float) -> None:
        # A fresh page is the best we can do for content taller than the page.
        if self.remaining() < height and self.y < self._fresh_page_y:
            self.new_page()

    def gap(self, amount: float) -> None:
        self.y -= amount

    def title(self, text: str) -> None:
        size = self.fonts.title_size
        self.y -= size
        self.pdf.setFont(self.fonts.bold, size)
        self.pdf.drawCentredString(self.page_width / 2, self.y, text)
        self.y -= self.fonts.leading / 2

    def heading(self, text: str) -> None:
        self.section = None
        self.ensure_space(self.fonts.heading_size + 2 * self.fonts.leading)
        self._draw_heading(text)
        self.section = text

    def _draw_heading(self, text: str) -> None:
        size = self.fonts.heading_size
        self.y -= size
        self.pdf.setFont(self.fonts.bold, size)
        self.pdf.drawString(self.margin, self.y, text)
        self.pdf.setLineWidth(0.5)
        self.pdf.line(self.margin, self.y - 4, self.page_width - self.margin, self.y - 4)
        self.y -= self.fonts.leading / 2

    def text(self, value: str, bold: bool = False, size: Optional[float] = None, indent: float = 0.0) -> None:
        font = self.fonts.bold if bold else self.fonts.regular
        size = size or self.fonts.body_size
        lines = fit_lines(value, font, size, self.content_width - indent)
        for line in lines:
            self.ensure_space(self.fonts.leading)
            self.y -= self.fonts.leading
            self.pdf.setFont(font, size)
            self.pdf.drawString(self.margin + indent, self.y, line)

    def image(self, image: ImageReader, box_width: float, box_height: float, gap: float, indent: float = 0.0) -> None:
        """Fit the image into the box, anchored to its top-left corner, breaking the page first if needed."""
        self.ensure_space(box_height + gap)
        width, height = image.getSize()
        scale = min(box_width / width, box_height / height, 1.0)
        draw_width, draw_height = width * scale, height * scale
        self.y -= gap / 2
        self.pdf.drawImage(
            image,
            self.margin + indent,
            self.y - draw_height,
            width=draw_width,
            height=draw_height,
            mask="auto",
        )
        self.y -= draw_height + gap / 2


class ReportComposer:
    """
    Renders inspection records into PDF bytes.

    The composer only keeps its configuration; every call builds its own
    canvas and page writer, so one instance can serve concurrent requests.
    """

    def __init__(self, config: DictConfig) -> None:
        self.config = config
        self.labels = config.labels

    def compose(self, record: InspectionRecord) -> bytes:
        """
        Render a record into a complete PDF document.

        Raises:
            RenderError: If the document cannot be initialized or finalized
        """
        buffer = BytesIO()
        try:
            page_count = self._render(record, buffer)
            payload = buffer.getvalue()
        finally:
            buffer.close()
        logger.info(f"Rendered inspection report: {page_count} page(s), {len(payload)} bytes")
        return payload

    def compose_to(self, record: InspectionRecord, sink: BinaryIO) -> int:
        """
        Render a record and write the finished document to ``sink``.

        Nothing is written unless composition succeeded. Returns the number
        of bytes written.
        """
        payload = self.compose(record)
        sink.write(payload)
        return len(payload)

    def _open_document(self, buffer: BytesIO) -> _PageWriter:
        document = self.config.document
        page_size = resolve_page_size(document.page_size)
        try:
            register_fonts(self.config.fonts.embedded)
            pdf = canvas.Canvas(buffer, pagesize=page_size, invariant=bool(document.invariant))
            pdf.setTitle(document.title)
            pdf.setSubject(document.subject)
            pdf.setAuthor(document.author)
        except Exception as exc:
            raise RenderError(f"Could not initialize report document: {exc}") from exc
        return _PageWriter(pdf, page_size, self.config)

    def _render(self, record: InspectionRecord, buffer: BytesIO) -> int:
        try:
            writer = self._open_document(buffer)
        except RenderError as exc:
            logger.error(f"Report rendering failed: {exc}")
            raise

        self._write_title(writer, record)
        self._write_customer(writer, record)
        self._write_inspection(writer, record)
        self._write_agreement(writer, record)

        try:
            writer.pdf.save()
        except Exception as exc:
            logger.error(f"Report finalization failed: {exc}")
            raise RenderError(f"Could not finalize report document: {exc}") from exc
        return writer.page_count

    def _write_title(self, writer: _PageWriter, record: InspectionRecord) -> None:
        writer.title(self.config.document.title)
        writer.text(f"{self.labels.date}: {record.date.strftime(self.config.document.date_format)}")
        writer.gap(self.config.layout.section_gap)

    def _write_customer(self, writer: _PageWriter, record: InspectionRecord) -> None:
        writer.heading(self.labels.customer_section)
        field_labels = self.labels.fields
        for field in CUSTOMER_FIELDS:
            value = display_value(getattr(record.customer, field), self.labels.placeholder)
            writer.text(f"{field_labels[field]}: {value}")
        writer.gap(self.config.layout.section_gap)

    def _write_inspection(self, writer: _PageWriter, record: InspectionRecord) -> None:
        layout = self.config.layout
        statuses = self.config.statuses
        writer.heading(self.labels.inspection_section)
        legend = "   ".join(f"{code} = {word}" for code, word in statuses.items())
        writer.text(legend, size=self.config.fonts.small_size)

        if not record.inspection:
            writer.text(self.labels.no_items)

        for name, entry in record.inspection.items():
            writer.gap(layout.item_gap)
            code = entry.status.value
            writer.text(name, bold=True)
            writer.text(f"{self.labels.status}: {code} ({statuses.get(code, code)})", indent=12)
            notes = entry.notes.strip() or self.labels.no_notes
            writer.text(f"{self.labels.notes}: {notes}", indent=12)

            if entry.photo is not None:
                label = f"{self.labels.photo} {entry.photo.name}"
                # keep the caption on the same page as its image
                writer.ensure_space(self.config.fonts.leading + layout.photo_box.height + layout.image_gap)
                writer.text(f"{label}:", size=self.config.fonts.small_size, indent=12)
                self._place_image(writer, entry.photo.data_url or "", layout.photo_box, label, indent=12)

        writer.gap(layout.section_gap)

    def _write_agreement(self, writer: _PageWriter, record: InspectionRecord) -> None:
        writer.heading(self.labels.agreement_section)
        for number, term in enumerate(self.config.terms, start=1):
            writer.text(f"{number}. {term}", size=self.config.fonts.small_size)

        writer.gap(self.config.layout.item_gap)
        answer = self.labels["yes"] if record.agreed else self.labels["no"]
        writer.text(f"{self.labels.agreed}: {answer}", bold=True)

        if record.signature is not None:
            writer.text(f"{self.labels.signature}:")
            self._place_image(writer, record.signature, self.config.layout.signature_box, self.labels.signature)

    def _place_image(
        self,
        writer: _PageWriter,
        payload: str,
        box: DictConfig,
        label: str,
        indent: float = 0.0,
    ) -> None:
        try:
            image = load_image(payload, max_bytes=self.config.layout.max_image_bytes)
            writer.image(image, float(box.width), float(box.height), float(self.config.layout.image_gap), indent=indent)
        except Exception as exc:
            logger.warning(f"Skipping image '{label}': {exc}")
            message = self.labels.image_error.format(name=label, reason=exc)
            writer.text(message, size=self.config.fonts.small_size, indent=indent)
