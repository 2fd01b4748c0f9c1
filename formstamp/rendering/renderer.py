### formstamp/rendering/renderer.py

"""
Draws company values onto a PDF template.

Every call parses the template bytes again, so no document object is ever
shared between two renders.
"""

# Standard library imports
import math
from collections import defaultdict
from dataclasses import dataclass
from io import BytesIO
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

# Third party imports
from pypdf import PageObject, PdfReader, PdfWriter, Transformation
from reportlab.pdfgen import canvas

# Local imports
from formstamp.rendering.transform import clamp_page_index, to_page_coordinates
from formstamp.utils.general import page_number_or, positive_or, to_number

DEFAULT_FONT_NAME = "Helvetica"
DEFAULT_FONT_SIZE = 12.0


@dataclass(frozen=True)
class Placement:
    """Plain snapshot of a stored mapping, safe to hand to a worker thread"""
    datapoint_id: int
    page: int
    x: float
    y: float
    font_size: float

    @classmethod
    def from_mapping(cls, mapping, default_font_size: float = DEFAULT_FONT_SIZE) -> "Placement":
        """Build from a TemplateMapping row; x/y stay NaN when unreadable"""
        return cls(
            datapoint_id=mapping.datapoint_id,
            page=page_number_or(mapping.page),
            x=to_number(mapping.x),
            y=to_number(mapping.y),
            font_size=positive_or(mapping.font_size, default_font_size),
        )


@dataclass(frozen=True)
class DrawCommand:
    page_index: int
    text: str
    x: float
    y: float
    font_size: float


def plan_draws(
    placements: Iterable[Placement],
    values: Mapping[int, str],
    page_sizes: Sequence[Tuple[float, float]],
) -> List[DrawCommand]:
    """
    Draw commands for one company.

    Placements with an empty value or a non-finite position produce nothing.
    """
    if not page_sizes:
        raise ValueError("template has no pages")

    commands = []
    for placement in placements:
        text = values.get(placement.datapoint_id) or ""
        if not text:
            continue

        page_index = clamp_page_index(placement.page, len(page_sizes))
        width, height = page_sizes[page_index]
        position = to_page_coordinates(placement.x, placement.y, width, height)
        if position is None:
            continue

        font_size = placement.font_size
        if not (math.isfinite(font_size) and font_size > 0):
            font_size = DEFAULT_FONT_SIZE
        commands.append(DrawCommand(page_index, text, position[0], position[1], font_size))
    return commands


def _build_overlay(
    width: float, height: float, commands: List[DrawCommand], font_name: str
) -> PageObject:
    """Single page holding only the text for one template page"""
    packet = BytesIO()
    pdf_canvas = canvas.Canvas(packet, pagesize=(width, height))
    pdf_canvas.setFillColorRGB(0, 0, 0)
    for command in commands:
        pdf_canvas.setFont(font_name, command.font_size)
        pdf_canvas.drawString(command.x, command.y, command.text)
    pdf_canvas.save()
    packet.seek(0)
    return PdfReader(packet).pages[0]


def render_document(
    template_bytes: bytes,
    placements: Sequence[Placement],
    values: Mapping[int, str],
    font_name: str = DEFAULT_FONT_NAME,
) -> bytes:
    """
    Fill a fresh copy of the template and return the serialized PDF.

    Page geometry comes from the parsed document, never from the page count
    cached on the template row.
    """
    reader = PdfReader(BytesIO(template_bytes))
    writer = PdfWriter(clone_from=reader)

    boxes = [page.mediabox for page in writer.pages]
    page_sizes = [(float(box.width), float(box.height)) for box in boxes]

    by_page: Dict[int, List[DrawCommand]] = defaultdict(list)
    for command in plan_draws(placements, values, page_sizes):
        by_page[command.page_index].append(command)

    for page_index, commands in by_page.items():
        width, height = page_sizes[page_index]
        overlay = _build_overlay(width, height, commands, font_name)
        # Overlay origin is (0, 0); shift it onto the page's media box
        box = boxes[page_index]
        writer.pages[page_index].merge_transformed_page(
            overlay, Transformation().translate(float(box.left), float(box.bottom))
        )

    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
