"""
Routines for parsing Markdown documents with :py:mod:`marko` and turning
parts of the resulting tree back into Markdown source.
"""

from typing import Any, Iterable, List, cast

from marko import Markdown, block, inline
from marko.helpers import MarkoExtension
from marko.md_renderer import MarkdownRenderer


BYTE_ORDER_MARK = "\ufeff"


def normalize_source(text: str) -> str:
    """
    Normalise a Markdown document in the same way :py:mod:`marko` does
    internally (newlines become '\\n') and drop any leading byte order mark.
    Source offsets reported by :py:mod:`marko` are offsets into this
    normalised string.
    """
    if text.startswith(BYTE_ORDER_MARK):
        text = text[len(BYTE_ORDER_MARK):]
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n")
    return text.replace("\x00", "\ufffd")


class Document(block.Document):
    """
    Makes a copy of the (normalised) markdown source in the :py:attr:`text`
    attribute.
    """

    override = True

    text: str = ""


class SourceRecordingParserMixin:
    """
    Mixin for :py:class:`marko.parser.Parser` which records the parsed source
    in the resulting :py:class:`Document`.
    """

    def parse(self, text: str) -> Document:
        document = cast(Document, super().parse(text))  # type: ignore
        document.text = text
        return document


class RecipeMDRenderer(MarkdownRenderer):
    """
    Renders (parts of) a document back into markdown, leaving text exactly as
    it was parsed.
    """

    def render_raw_text(self, element: inline.RawText) -> str:
        return cast(str, element.children)


RecipeMDExtension = MarkoExtension(
    elements=[Document],
    parser_mixins=[SourceRecordingParserMixin],
)


def parse_markdown(text: str) -> Document:
    """
    Parse a markdown document (see :py:func:`normalize_source`), returning the
    :py:class:`Document`.
    """
    markdown = Markdown(renderer=RecipeMDRenderer, extensions=[RecipeMDExtension])
    return cast(Document, markdown.parse(normalize_source(text)))


def block_source(document: Document, element: block.BlockElement) -> str:
    """Return the markdown source of a top-level block, without the final newline."""
    assert element.source_span is not None
    start, end = element.source_span
    return document.text[start:end].rstrip("\n")


def significant_children(element: Any) -> List[inline.InlineElement]:
    """
    The inline children of an element, ignoring any purely whitespace text
    (e.g. trailing spaces at the end of a paragraph).
    """
    return [
        child
        for child in element.children
        if not (
            isinstance(child, (inline.RawText, inline.LineBreak))
            and not cast(str, child.children).strip()
        )
    ]


def render_markdown(elements: Iterable[inline.InlineElement]) -> str:
    """Render inline elements back into markdown source."""
    with RecipeMDRenderer() as renderer:
        return "".join(renderer.render(element) for element in elements)


def render_text(element: Any) -> str:
    """
    Render the children of an inline element back into markdown source with
    runs of whitespace (including newlines) collapsed into single spaces.
    """
    return " ".join(render_markdown(element.children).split())
