"""Tests for media type negotiation."""
import pytest

from xmlmarshal.utils.media_types import accepts_xml, is_xml_content_type


@pytest.mark.parametrize(
    "accept",
    [None, "", "*/*", "application/xml", "text/html, application/xml;q=0.9", "text/html, */*;q=0.1"],
)
def test_accepts_xml(accept):
    assert accepts_xml(accept)


@pytest.mark.parametrize("accept", ["application/json", "text/html", "text/xml"])
def test_rejects_other_media_types(accept):
    assert not accepts_xml(accept)


@pytest.mark.parametrize("content_type", ["application/xml", "application/xml; charset=utf-8"])
def test_xml_content_type(content_type):
    assert is_xml_content_type(content_type)


@pytest.mark.parametrize("content_type", [None, "", "text/plain", "text/xml", "application/json"])
def test_other_content_types(content_type):
    assert not is_xml_content_type(content_type)
