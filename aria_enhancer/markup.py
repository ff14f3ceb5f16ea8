"""
Markup helpers shared by the enhancer and the validators.

BeautifulSoup gives us a read-only view of the document; edits are made on
the original string. Elements found in the parse are mapped back onto the
buffer through the start-tag position that ``html.parser`` records, so only
the exact opening-tag text of each element is ever rewritten.
"""

import re
import warnings
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag, XMLParsedAsHTMLWarning

from .config import MAX_HTML_SIZE
from .errors import HtmlTooLargeError, MalformedHtmlError


# Attribute and tag grammar below follows html.parser's tolerant rules, so
# spans found here agree with what BeautifulSoup reports for the same markup.
# Quotes only open a value directly after '=', and an attribute name may
# follow a quoted value with no whitespace in between.

TAG_NAME_PATTERN = re.compile(r'<[a-zA-Z][^\t\n\r\f />\x00]*')

# Opening tag; a '>' inside a quoted value does not end it
OPEN_TAG_PATTERN = re.compile(r'''
    <(?P<name>[a-zA-Z][^\t\n\r\f />\x00]*)
    (?:[\s/]*
      (?:(?<=['"\s/])[^\s/>][^\s/=>]*
        (?:\s*=+\s*(?:'[^']*'|"[^"]*"|(?!['"])[^>\s]*))?
        (?:\s|/(?!>))*
      )*
    )?
    \s*/?>
''', re.VERBOSE)

ATTRIBUTE_PATTERN = re.compile(r'''
    (?P<name>(?<=['"\s/])[^\s/>][^\s/=>]*)
    (?P<assign>\s*=+\s*
      (?P<value>'[^']*'|"[^"]*"|(?!['"])[^>\s]*)
    )?
    (?:\s|/(?!>))*
''', re.VERBOSE)

SEPARATOR_PATTERN = re.compile(r'(?:\s|/(?!>))*')

NEWLINE_PATTERN = re.compile(r'\n')


@dataclass(frozen=True)
class Attribute:
    """An attribute as written in an opening tag."""
    name: str
    value: Optional[str]  # None for valueless attributes
    start: int
    end: int


def check_size(html: str) -> int:
    """
    Reject input larger than MAX_HTML_SIZE bytes.

    Returns:
        The UTF-8 byte length of the input
    """
    size = len(html.encode('utf-8'))
    if size > MAX_HTML_SIZE:
        raise HtmlTooLargeError(size, MAX_HTML_SIZE)
    return size


def parse_html(html: str) -> BeautifulSoup:
    """Parse markup with the builder that records source positions."""
    # Input is always treated as HTML, even with an XML declaration
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', XMLParsedAsHTMLWarning)
        return BeautifulSoup(html, 'html.parser')


def line_offsets(text: str) -> List[int]:
    """Character offset of the start of every line (html.parser counts '\\n')."""
    offsets = [0]
    offsets.extend(match.end() for match in NEWLINE_PATTERN.finditer(text))
    return offsets


def locate_open_tag(buffer: str, offsets: Sequence[int], tag: Tag) -> Tuple[int, int]:
    """
    Find the span of an element's opening tag in the buffer it was parsed from.

    Args:
        buffer: The markup the element was parsed from
        offsets: Result of line_offsets(buffer)
        tag: Element from parse_html(buffer)

    Returns:
        (start, end) character offsets of the opening tag
    """
    if tag.sourceline is None or tag.sourcepos is None:
        raise MalformedHtmlError(f"No source position recorded for <{tag.name}>")

    start = offsets[tag.sourceline - 1] + tag.sourcepos
    match = OPEN_TAG_PATTERN.match(buffer, start)
    if not match or match.group('name').lower() != tag.name:
        raise MalformedHtmlError(
            f"Cannot locate opening tag of <{tag.name}>",
            fragment=buffer[start:start + 80]
        )
    return match.start(), match.end()


def iter_attributes(open_tag: str) -> Iterator[Attribute]:
    """
    Tokenise the attributes of an opening tag.

    Offsets are relative to open_tag and cover the name and value only, not
    the whitespace around them. Quotes are removed from values but character
    references are left as written.
    """
    name_match = TAG_NAME_PATTERN.match(open_tag)
    pos = name_match.end() if name_match else 0
    end = len(open_tag) - 1 if open_tag.endswith('>') else len(open_tag)
    pos = SEPARATOR_PATTERN.match(open_tag, pos, end).end()

    while pos < end:
        match = ATTRIBUTE_PATTERN.match(open_tag, pos, end)
        if not match:
            break
        value = match.group('value')
        if value is not None and value[:1] in ('"', "'"):
            value = value[1:-1]
        span_end = match.end('assign') if match.group('assign') else match.end('name')
        yield Attribute(match.group('name'), value, match.start(), span_end)
        pos = match.end()


def has_attribute(open_tag: str, name: str) -> bool:
    """Check whether an opening tag carries an attribute, whatever its value."""
    name = name.lower()
    return any(attr.name.lower() == name for attr in iter_attributes(open_tag))


def remove_attributes(open_tag: str, attributes: Sequence[Attribute]) -> str:
    """
    Cut attributes (and the whitespace before each) out of an opening tag.

    A neighbour written flush against a removed attribute, as in
    ``a="1"b="2"``, is kept apart from the tag name by a single space.
    """
    for attr in sorted(attributes, key=lambda a: a.start, reverse=True):
        start = attr.start
        while start > 0 and open_tag[start - 1].isspace():
            start -= 1
        rest = open_tag[attr.end:]
        if rest[:1] and not rest[:1].isspace() and rest[:1] not in '>/':
            rest = ' ' + rest
        open_tag = open_tag[:start] + rest
    return open_tag


def splice(buffer: str, edits: Sequence[Tuple[int, int, str]]) -> str:
    """
    Apply non-overlapping (start, end, replacement) edits to a buffer.

    Edits are applied back to front so the offsets of earlier ones stay valid.
    """
    ordered = sorted(edits, key=lambda edit: edit[0], reverse=True)
    limit = len(buffer)
    for start, end, replacement in ordered:
        if end > limit:
            raise MalformedHtmlError(
                "Overlapping edits", fragment=buffer[start:end]
            )
        buffer = buffer[:start] + replacement + buffer[end:]
        limit = start
    return buffer
