"""
Tests for image extraction and restoration.
"""

import logging

import pytest

from rag_pipeline.entities import ExtractionResult
from rag_pipeline.services import ContentPreservationService
from rag_pipeline.services.content_preservation_service import placeholder

PNG = '<img src="data:image/png;base64,iVBORw0KGgo=" alt="chart">'


@pytest.fixture
def preservation():
    return ContentPreservationService()


def test_restore_inverts_extract(preservation):
    html = f"<p>Intro</p>{PNG}<p>Outro</p>"

    extracted = preservation.extract(html)

    assert extracted.clean_text == "<p>Intro</p>{{IMAGE_0}}<p>Outro</p>"
    assert extracted.placeholder_map == {"{{IMAGE_0}}": PNG}
    assert preservation.restore(extracted.clean_text, extracted.placeholder_map) == html


def test_placeholders_follow_document_order(preservation):
    html = (
        '<img src="data:image/png;base64,AAA">'
        "<p>text</p>"
        '<IMG class="wide" SRC="https://cdn.example.com/b.jpg">'
        "<img alt='x' src='data:image/gif;base64,CCC' />"
    )

    extracted = preservation.extract(html)

    assert extracted.clean_text == "{{IMAGE_0}}<p>text</p>{{IMAGE_1}}{{IMAGE_2}}"
    assert extracted.image_count == 3
    assert "https://cdn.example.com/b.jpg" in extracted.placeholder_map["{{IMAGE_1}}"]
    assert "CCC" in extracted.placeholder_map["{{IMAGE_2}}"]


def test_tag_spanning_lines_is_matched(preservation):
    html = '<p>a</p><img\n  class="x"\n  src="data:image/png;base64,AAA"\n>'

    extracted = preservation.extract(html)

    assert extracted.clean_text == "<p>a</p>{{IMAGE_0}}"


@pytest.mark.parametrize("html", [None, ""])
def test_empty_input(preservation, html):
    extracted = preservation.extract(html)

    assert extracted == ExtractionResult(clean_text="", placeholder_map={})
    assert not extracted.has_images


def test_text_without_images_is_unchanged(preservation):
    extracted = preservation.extract("<p>No pictures here</p>")

    assert extracted.clean_text == "<p>No pictures here</p>"
    assert extracted.placeholder_map == {}


def test_img_without_src_is_left_alone(preservation):
    extracted = preservation.extract('<img alt="missing">')

    assert extracted.clean_text == '<img alt="missing">'
    assert not extracted.has_images


def test_escaped_quote_ends_src_at_first_quote(preservation):
    html = '<img src="a\\"b.png">'

    extracted = preservation.extract(html)

    assert extracted.clean_text == "{{IMAGE_0}}"
    assert extracted.placeholder_map["{{IMAGE_0}}"] == html


def test_restore_replaces_every_occurrence(preservation):
    restored = preservation.restore("{{IMAGE_0}} and again {{IMAGE_0}}", {"{{IMAGE_0}}": PNG})

    assert restored == f"{PNG} and again {PNG}"


def test_placeholder_text_inside_restored_tag_is_kept(preservation):
    html = '<img src="a.png" alt="{{IMAGE_1}}"><p>x</p><img src="b.png">'

    extracted = preservation.extract(html)

    assert extracted.clean_text == "{{IMAGE_0}}<p>x</p>{{IMAGE_1}}"
    assert preservation.restore(extracted.clean_text, extracted.placeholder_map) == html


def test_restore_order_does_not_matter(preservation):
    html = f'<img src="a.png" alt="{{{{IMAGE_1}}}}">{PNG}<img src="c.png">'
    extracted = preservation.extract(html)
    reversed_map = dict(reversed(list(extracted.placeholder_map.items())))

    assert preservation.restore(extracted.clean_text, reversed_map) == html


def test_restore_logs_and_skips_missing_placeholder(preservation, caplog):
    mapping = {placeholder(0): "<img src='a.png'>", placeholder(1): "<img src='b.png'>"}

    with caplog.at_level(logging.WARNING):
        restored = preservation.restore("<p>only {{IMAGE_1}}</p>", mapping)

    assert restored == "<p>only <img src='b.png'></p>"
    assert "{{IMAGE_0}} not found" in caplog.text


def test_restore_without_map_returns_text(preservation):
    assert preservation.restore("plain", {}) == "plain"
    assert preservation.restore(None, None) == ""


def test_validate(preservation):
    good = preservation.extract(f"{PNG}{PNG}")
    broken = ExtractionResult(clean_text="{{IMAGE_1}}", placeholder_map={"{{IMAGE_0}}": PNG})

    assert preservation.validate(good)
    assert not preservation.validate(broken)
    assert not preservation.validate(None)
