import pytest

from d3lite import Document, DocumentConfig


@pytest.fixture
def doc():
    return Document.create(DocumentConfig(width=100, height=100))


@pytest.fixture
def grouped_doc():
    """Three groups; only the middle one holds a rect."""
    return Document.from_string(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<g id="g0"/>'
        '<g id="g1"><rect id="r1"/></g>'
        '<g id="g2"/>'
        '</svg>'
    )
