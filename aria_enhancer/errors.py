"""
Exceptions raised by the ARIA enhancer and WCAG auditor.

Every public operation either returns its result or raises one of these;
nothing is retried, since all operations are deterministic over their input.
"""

from typing import Optional


class AccessibilityError(Exception):
    """Base exception for accessibility processing failures."""
    pass


class HtmlTooLargeError(AccessibilityError):
    """Input exceeds the maximum accepted size."""

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"HTML input too large: size {size} exceeds maximum {max_size}"
        )


class InvalidAriaAttributeError(AccessibilityError):
    """An ARIA attribute survived into the output with an invalid value."""

    def __init__(self, attribute: str, message: str):
        self.attribute = attribute
        self.message = message
        super().__init__(f"Invalid ARIA attribute '{attribute}': {message}")


class WcagViolationError(AccessibilityError):
    """A structural WCAG check failed."""

    def __init__(self, message: str, guideline: Optional[str] = None,
                 issue_type=None):
        self.message = message
        self.guideline = guideline
        self.issue_type = issue_type
        super().__init__(message)


class MalformedHtmlError(AccessibilityError):
    """Markup could not be interpreted structurally."""

    def __init__(self, message: str, fragment: Optional[str] = None):
        self.message = message
        self.fragment = fragment
        super().__init__(f"Malformed HTML: {message}")


class ConfigurationError(AccessibilityError):
    """Invalid AccessibilityConfig."""
    pass
