"""
ARIA attribute validation and cleanup.

Provides the closed set of recognised ARIA attributes, the value rules that
go with them, the pass that strips invalid ARIA attributes from markup and
the fail-closed check run on the final output.
"""

import logging
from typing import List

from bs4 import BeautifulSoup, Tag

from .errors import InvalidAriaAttributeError
from .markup import (
    iter_attributes,
    line_offsets,
    locate_open_tag,
    parse_html,
    remove_attributes,
    splice,
)

logger = logging.getLogger(__name__)


VALID_ARIA_ATTRIBUTES = frozenset([
    'aria-label',
    'aria-labelledby',
    'aria-describedby',
    'aria-hidden',
    'aria-expanded',
    'aria-haspopup',
    'aria-controls',
    'aria-pressed',
    'aria-checked',
    'aria-current',
    'aria-disabled',
    'aria-dropeffect',
    'aria-grabbed',
    'aria-invalid',
    'aria-live',
    'aria-owns',
    'aria-relevant',
    'aria-required',
    'aria-role',
    'aria-selected',
    'aria-valuemax',
    'aria-valuemin',
    'aria-valuenow',
    'aria-valuetext',
])

# Attributes restricted to a true/false value
BOOLEAN_ARIA_ATTRIBUTES = frozenset([
    'aria-hidden',
    'aria-expanded',
    'aria-pressed',
    'aria-invalid',
])

BOOLEAN_VALUES = frozenset(['true', 'false'])


def is_valid_aria_attribute(name: str, value: str) -> bool:
    """
    Check an ARIA attribute name and value.

    Args:
        name: Attribute name, e.g. 'aria-hidden'
        value: Attribute value as it would be read from the parsed document

    Returns:
        False for names outside VALID_ARIA_ATTRIBUTES; for boolean attributes
        True only for exactly "true" or "false"; otherwise True for any
        non-empty value.
    """
    if name not in VALID_ARIA_ATTRIBUTES:
        return False
    if name in BOOLEAN_ARIA_ATTRIBUTES:
        return value in BOOLEAN_VALUES
    return bool(value)


def _has_aria(tag: Tag) -> bool:
    return any(name.startswith('aria-') for name in tag.attrs)


def _attr_text(value) -> str:
    # Multi-valued attributes come back from BeautifulSoup as lists
    if isinstance(value, list):
        return ' '.join(value)
    return value


def _invalid_aria_names(element: Tag) -> List[str]:
    # Names and values as html.parser read them, character references decoded
    return [
        name for name, value in element.attrs.items()
        if name.startswith('aria-')
        and not is_valid_aria_attribute(name, _attr_text(value))
    ]


def strip_invalid_aria_attributes(html: str) -> str:
    """
    Remove every aria-* attribute that fails is_valid_aria_attribute.

    Which attributes fail is decided on the parsed element, so the same
    reading of the markup is used here and by validate_aria_attributes.
    Other attributes, including their quoting, are left exactly as written.
    Running this twice gives the same result as running it once.
    """
    soup = parse_html(html)
    offsets = line_offsets(html)
    edits = []

    for element in soup.find_all(_has_aria):
        invalid_names = _invalid_aria_names(element)
        if not invalid_names:
            continue

        start, end = locate_open_tag(html, offsets, element)
        open_tag = html[start:end]
        invalid = [
            attr for attr in iter_attributes(open_tag)
            if attr.name.lower() in invalid_names
        ]

        logger.debug(f"Removing {', '.join(invalid_names)} from <{element.name}>")
        edits.append((start, end, remove_attributes(open_tag, invalid)))

    return splice(html, edits)


def find_invalid_aria_attributes(soup: BeautifulSoup) -> List[tuple]:
    """
    List (element, attribute, value) for every invalid aria-* attribute.

    Returns:
        Tuples of (Tag, attribute name, attribute value) in document order
    """
    invalid = []
    for element in soup.find_all(_has_aria):
        for name in _invalid_aria_names(element):
            invalid.append((element, name, _attr_text(element.attrs[name])))
    return invalid


def validate_aria_attributes(html: str) -> None:
    """
    Fail closed on the first invalid aria-* attribute in the markup.

    Raises:
        InvalidAriaAttributeError: naming the offending attribute
    """
    invalid = find_invalid_aria_attributes(parse_html(html))
    if invalid:
        element, name, value = invalid[0]
        raise InvalidAriaAttributeError(
            name, f"value {value!r} on <{element.name}> is not valid"
        )
