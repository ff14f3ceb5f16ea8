"""
ARIA Attribute Enhancer

Adds missing ARIA attributes to HTML fragments and cleans up invalid ones.

Features:
- Accessible names for buttons, navigation landmarks and inputs (WCAG 4.1.2)
- aria-labelledby on forms (WCAG 1.3.1)
- Removal of unknown or badly valued aria-* attributes
- Fail-closed validation of the final markup

The parse tree is only ever read. Each rule re-parses the current markup,
locates the opening tags it wants to change, and rewrites just those tags in
the string, so everything else in the input comes back byte for byte.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from .aria_attributes import (
    strip_invalid_aria_attributes,
    validate_aria_attributes,
)
from .config import (
    AccessibilityConfig,
    DEFAULT_BUTTON_LABEL,
    DEFAULT_FORM_LABELLEDBY,
    DEFAULT_INPUT_LABEL,
    DEFAULT_NAV_LABEL,
)
from .markup import (
    TAG_NAME_PATTERN,
    check_size,
    has_attribute,
    line_offsets,
    locate_open_tag,
    parse_html,
    splice,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Rules
# =============================================================================

# Inputs are found on the raw text so void and self-closing forms both match.
# The name must end right after "input", so <input-field> is not an input.
INPUT_TAG_PATTERN = re.compile(r'<input(?=[\s/>])[^>]*>', re.IGNORECASE)


@dataclass(frozen=True)
class Rule:
    """
    Adds one attribute to elements of one kind that lack it.

    Rules with a selector locate elements through the parse tree; the input
    rule (selector None) scans the markup with INPUT_TAG_PATTERN instead.
    """
    name: str
    tag: str
    attribute: str
    value: str
    selector: Optional[str] = None

    def apply(self, open_tag: str) -> str:
        """Return open_tag with the attribute inserted right after the tag name."""
        match = TAG_NAME_PATTERN.match(open_tag)
        if not match:
            raise ValueError(f"Not an opening tag: {open_tag!r}")
        insert_at = match.end()
        return (
            f'{open_tag[:insert_at]} {self.attribute}="{self.value}"'
            f'{open_tag[insert_at:]}'
        )


BUTTON_RULE = Rule(
    name='buttons',
    tag='button',
    attribute='aria-label',
    value=DEFAULT_BUTTON_LABEL,
    selector='button:not([aria-label])',
)

NAV_RULE = Rule(
    name='navigation',
    tag='nav',
    attribute='aria-label',
    value=DEFAULT_NAV_LABEL,
    selector='nav:not([aria-label])',
)

FORM_RULE = Rule(
    name='forms',
    tag='form',
    attribute='aria-labelledby',
    value=DEFAULT_FORM_LABELLEDBY,
    selector='form:not([aria-labelledby])',
)

INPUT_RULE = Rule(
    name='inputs',
    tag='input',
    attribute='aria-label',
    value=DEFAULT_INPUT_LABEL,
)

# Application order is fixed
RULES = (BUTTON_RULE, NAV_RULE, FORM_RULE, INPUT_RULE)


# =============================================================================
# Main Enhancer Class
# =============================================================================

class ARIAEnhancer:
    """
    Adds ARIA attributes to HTML and validates the result.

    Usage:
        enhancer = ARIAEnhancer()
        enhanced_html = enhancer.enhance(html_content)
    """

    def __init__(self, config: AccessibilityConfig = None):
        """
        Initialize the enhancer.

        Args:
            config: Configuration options (default: AccessibilityConfig())
        """
        if config is None:
            config = AccessibilityConfig()
        config.validate()
        self.config = config

    @property
    def rules(self) -> Tuple[Rule, ...]:
        """Enabled rules, in application order."""
        enabled = {
            BUTTON_RULE: self.config.label_buttons,
            NAV_RULE: self.config.label_navs,
            FORM_RULE: self.config.label_forms,
            INPUT_RULE: self.config.label_inputs,
        }
        return tuple(rule for rule in RULES if enabled[rule])

    def enhance(self, html: str) -> str:
        """
        Add missing ARIA attributes and strip invalid ones.

        Args:
            html: Input HTML string

        Returns:
            Enhanced HTML string

        Raises:
            HtmlTooLargeError: input is over MAX_HTML_SIZE bytes
            InvalidAriaAttributeError: the output still holds an invalid
                ARIA attribute after cleanup
            MalformedHtmlError: an element could not be mapped back onto
                the markup
        """
        size = check_size(html)
        logger.debug(f"Enhancing {size} bytes of HTML")

        # Phase 1: Injection rules
        for rule in self.rules:
            html = self.apply_rule(rule, html)

        # Phase 2: Cleanup
        html = strip_invalid_aria_attributes(html)

        # Phase 3: Final gate
        validate_aria_attributes(html)

        return html

    def apply_rule(self, rule: Rule, html: str) -> str:
        """Apply one rule to the markup and return the rewritten markup."""
        if rule.selector is None:
            edits = self._pattern_edits(rule, html)
        else:
            edits = self._selector_edits(rule, html)

        if edits:
            logger.debug(
                f"Rule '{rule.name}': added {rule.attribute} to {len(edits)} element(s)"
            )
        return splice(html, edits)

    def _selector_edits(self, rule: Rule, html: str) -> List[Tuple[int, int, str]]:
        soup = parse_html(html)
        offsets = line_offsets(html)
        edits = []
        for element in soup.select(rule.selector):
            start, end = locate_open_tag(html, offsets, element)
            edits.append((start, end, rule.apply(html[start:end])))
        return edits

    def _pattern_edits(self, rule: Rule, html: str) -> List[Tuple[int, int, str]]:
        edits = []
        for match in INPUT_TAG_PATTERN.finditer(html):
            open_tag = match.group(0)
            if has_attribute(open_tag, rule.attribute):
                continue
            edits.append((match.start(), match.end(), rule.apply(open_tag)))
        return edits


# =============================================================================
# Convenience Functions
# =============================================================================

def enhance_html_aria(html: str, config: AccessibilityConfig = None) -> str:
    """
    Convenience function to add ARIA attributes to HTML.

    Args:
        html: Input HTML string
        config: Optional configuration

    Returns:
        Enhanced HTML string
    """
    enhancer = ARIAEnhancer(config)
    return enhancer.enhance(html)


def enhance_html_file(input_path: str, output_path: str = None,
                      config: AccessibilityConfig = None) -> str:
    """
    Add ARIA attributes to an HTML file.

    Args:
        input_path: Path to input HTML file
        output_path: Path for output file (default: input.aria.html)
        config: Optional configuration

    Returns:
        Path to output file
    """
    input_path = Path(input_path)
    if output_path is None:
        output_path = input_path.with_suffix('.aria.html')
    else:
        output_path = Path(output_path)

    with open(input_path, 'r', encoding='utf-8') as f:
        html = f.read()

    enhanced = enhance_html_aria(html, config)

    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(enhanced)

    logger.info(f"Enhanced HTML written to: {output_path}")
    return str(output_path)
