"""
ARIA Enhancer

Adds accessibility metadata to HTML fragments and checks them against a
subset of WCAG structural rules.

Features:
- aria-label on buttons, navigation landmarks and inputs that lack one
- aria-labelledby on forms that lack one
- Removal of unknown or badly valued aria-* attributes
- Fail-closed validation of the enhanced markup
- Fail-fast WCAG audit: alt text, heading order, input labels
- Full accessibility report with language, keyboard and ARIA role checks

Existing attributes are never overridden, and markup outside the rewritten
opening tags is returned unchanged.
"""

from .config import (
    AccessibilityConfig,
    WcagLevel,
    MAX_HTML_SIZE,
)

from .errors import (
    AccessibilityError,
    HtmlTooLargeError,
    InvalidAriaAttributeError,
    WcagViolationError,
    MalformedHtmlError,
    ConfigurationError,
)

from .aria_attributes import (
    VALID_ARIA_ATTRIBUTES,
    BOOLEAN_ARIA_ATTRIBUTES,
    is_valid_aria_attribute,
    strip_invalid_aria_attributes,
)

from .enhancer import (
    ARIAEnhancer,
    Rule,
    RULES,
    enhance_html_aria,
    enhance_html_file,
)

from .wcag_validator import (
    WCAGValidator,
    AccessibilityReport,
    Issue,
    IssueType,
    audit_html,
    validate_html_wcag,
    validate_html_file,
)

__version__ = '0.1.0'
__all__ = [
    # Configuration
    'AccessibilityConfig',
    'WcagLevel',
    'MAX_HTML_SIZE',
    # Errors
    'AccessibilityError',
    'HtmlTooLargeError',
    'InvalidAriaAttributeError',
    'WcagViolationError',
    'MalformedHtmlError',
    'ConfigurationError',
    # ARIA attributes
    'VALID_ARIA_ATTRIBUTES',
    'BOOLEAN_ARIA_ATTRIBUTES',
    'is_valid_aria_attribute',
    'strip_invalid_aria_attributes',
    # Enhancement
    'ARIAEnhancer',
    'Rule',
    'RULES',
    'enhance',
    'enhance_html_aria',
    'enhance_html_file',
    # Validation
    'WCAGValidator',
    'AccessibilityReport',
    'Issue',
    'IssueType',
    'audit',
    'audit_html',
    'validate_html_wcag',
    'validate_html_file',
]


def enhance(html: str, config: AccessibilityConfig = None) -> str:
    """
    Add missing ARIA attributes to HTML and strip invalid ones.

    Args:
        html: Input HTML string (at most MAX_HTML_SIZE bytes as UTF-8)
        config: Optional configuration

    Returns:
        Enhanced HTML string

    Raises:
        HtmlTooLargeError, InvalidAriaAttributeError, MalformedHtmlError

    Example:
        >>> from aria_enhancer import enhance
        >>> enhance('<button>Click me</button>')
        '<button aria-label="button">Click me</button>'
    """
    return enhance_html_aria(html, config)


def audit(html: str, config: AccessibilityConfig = None) -> None:
    """
    Check alt text, heading order and input labels.

    Raises:
        WcagViolationError: on the first violation found
        MalformedHtmlError: if a heading level cannot be read
    """
    audit_html(html, config)
