import io
import math

import pytest
from pypdf import PdfReader, PdfWriter
from pypdf.generic import RectangleObject

from formstamp.rendering.renderer import Placement, plan_draws, render_document
from tests.utils import LETTER, make_pdf, page_texts

DATAPOINT = 1


def placement(**overrides):
    fields = {"datapoint_id": DATAPOINT, "page": 1, "x": 0.5, "y": 0.5, "font_size": 12.0}
    fields.update(overrides)
    return Placement(**fields)


def test_plan_places_value_at_page_midpoint():
    commands = plan_draws([placement()], {DATAPOINT: "Acme"}, [LETTER])

    assert len(commands) == 1
    command = commands[0]
    assert command.text == "Acme"
    assert command.page_index == 0
    assert command.x == pytest.approx(LETTER[0] / 2)
    assert command.y == pytest.approx(LETTER[1] / 2)
    assert command.font_size == 12.0


def test_plan_skips_empty_and_missing_values():
    placements = [placement(), placement(datapoint_id=2)]
    assert plan_draws(placements, {DATAPOINT: ""}, [LETTER]) == []


def test_plan_skips_non_finite_positions():
    placements = [placement(x=math.nan), placement(y=math.inf)]
    assert plan_draws(placements, {DATAPOINT: "Acme"}, [LETTER]) == []


def test_plan_puts_pages_past_the_end_on_last_page():
    commands = plan_draws([placement(page=5)], {DATAPOINT: "Acme"}, [LETTER, (300.0, 400.0)])

    assert commands[0].page_index == 1
    assert (commands[0].x, commands[0].y) == pytest.approx((150.0, 200.0))


def test_plan_rejects_document_without_pages():
    with pytest.raises(ValueError):
        plan_draws([placement()], {DATAPOINT: "Acme"}, [])


def test_placement_from_mapping_keeps_bad_positions_unreadable():
    class Row:
        datapoint_id = 3
        page = None
        x = None
        y = "0.2"
        font_size = "huge"

    result = Placement.from_mapping(Row())
    assert result.page == 1
    assert math.isnan(result.x)
    assert result.y == 0.2
    assert result.font_size == 12.0


def test_render_draws_text_on_the_mapped_page():
    template = make_pdf([LETTER, LETTER])
    output = render_document(template, [placement(page=2)], {DATAPOINT: "Acme"})

    texts = page_texts(output)
    assert len(texts) == 2
    assert "Acme" not in texts[0]
    assert "Acme" in texts[1]


def test_render_without_value_leaves_page_blank():
    template = make_pdf()
    output = render_document(template, [placement()], {})

    assert "Acme" not in page_texts(output)[0]


def test_each_render_starts_from_the_pristine_template():
    template = make_pdf()
    original = bytes(template)

    first = render_document(template, [placement()], {DATAPOINT: "Acme"})
    second = render_document(template, [placement()], {DATAPOINT: "Globex"})

    assert template == original
    assert "Acme" in page_texts(first)[0]
    assert "Globex" in page_texts(second)[0]
    assert "Acme" not in page_texts(second)[0]


def test_render_keeps_page_geometry():
    template = make_pdf([(300.0, 500.0)])
    output = render_document(template, [placement()], {DATAPOINT: "Acme"})

    box = PdfReader(io.BytesIO(output)).pages[0].mediabox
    assert (float(box.width), float(box.height)) == (300.0, 500.0)


def text_positions(pdf_bytes, needle):
    """Device-space origins of every text run containing `needle` on page 1."""
    found = []

    def visitor(text, cm, tm, font_dict, font_size):
        if needle in text:
            x = tm[4] * cm[0] + tm[5] * cm[2] + cm[4]
            y = tm[4] * cm[1] + tm[5] * cm[3] + cm[5]
            found.append((x, y))

    PdfReader(io.BytesIO(pdf_bytes)).pages[0].extract_text(visitor_text=visitor)
    return found


def offset_pdf(box):
    writer = PdfWriter()
    page = writer.add_blank_page(width=box[2] - box[0], height=box[3] - box[1])
    page.mediabox = RectangleObject(box)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def test_rendered_text_sits_at_page_midpoint():
    output = render_document(make_pdf(), [placement()], {DATAPOINT: "Acme"})

    positions = text_positions(output, "Acme")
    assert positions
    assert positions[0] == pytest.approx((306.0, 396.0))


def test_rendered_text_follows_offset_media_box():
    template = offset_pdf([100, 200, 712, 992])
    output = render_document(template, [placement()], {DATAPOINT: "Acme"})

    positions = text_positions(output, "Acme")
    assert positions
    assert positions[0] == pytest.approx((406.0, 596.0))
