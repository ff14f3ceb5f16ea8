"""
WCAG Structural Validator

Checks HTML fragments against a narrow subset of WCAG rules. Two modes:

- audit(): fail fast. Runs the structural checks (alt text, heading order,
  input labels) in that order and raises on the first violation.
- validate(): report. Runs every check and collects all issues into an
  AccessibilityReport.

Checks:
- Alt text on images (1.1.1)
- Heading hierarchy (2.4.6)
- Input labelling (1.3.1)
- ARIA attribute validity (4.1.2)
- Language declaration (3.1.1, 3.1.2)
- Keyboard navigation (2.1.1)
- ARIA roles and required properties (4.1.2), Level AA and above

Usage:
    from aria_enhancer.wcag_validator import WCAGValidator

    validator = WCAGValidator()
    validator.audit(html_content)          # raises WcagViolationError
    report = validator.validate(html_content)
    print(report.to_text())
"""

import json
import logging
import re
import time
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Set

from bs4 import BeautifulSoup, Tag

from .aria_attributes import find_invalid_aria_attributes
from .config import AccessibilityConfig, WcagLevel
from .errors import MalformedHtmlError, WcagViolationError
from .markup import parse_html

logger = logging.getLogger(__name__)


class IssueType(Enum):
    """Kinds of accessibility issue"""
    MISSING_ALT_TEXT = "missing_alt_text"
    HEADING_STRUCTURE = "heading_structure"
    MISSING_LABELS = "missing_labels"
    INVALID_ARIA = "invalid_aria"
    KEYBOARD_NAVIGATION = "keyboard_navigation"
    LANGUAGE_DECLARATION = "language_declaration"


@dataclass
class Issue:
    """Represents a single accessibility issue"""
    issue_type: IssueType
    message: str
    guideline: Optional[str] = None
    element: Optional[str] = None
    suggestion: Optional[str] = None


@dataclass
class AccessibilityReport:
    """Complete accessibility validation report"""
    file_path: str
    timestamp: str
    wcag_level: WcagLevel = WcagLevel.AA
    elements_checked: int = 0
    issue_count: int = 0
    check_duration_ms: int = 0
    issues: List[Issue] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.issue_count == 0

    def to_json(self) -> str:
        """Export report as JSON"""
        def serialize(obj):
            if isinstance(obj, Enum):
                return obj.value
            return obj

        data = asdict(self)
        data['passed'] = self.passed
        return json.dumps(data, indent=2, default=serialize)

    def to_text(self) -> str:
        """Generate human-readable report"""
        lines = [
            "=" * 70,
            f"WCAG {self.wcag_level} ACCESSIBILITY REPORT",
            "=" * 70,
            f"File: {self.file_path}",
            f"Timestamp: {self.timestamp}",
            "-" * 70,
            f"Elements checked: {self.elements_checked}",
            f"Total Issues: {self.issue_count}",
        ]
        for issue_type, count in sorted(self.summary.items()):
            lines.append(f"  {issue_type}: {count}")
        lines.extend([
            "-" * 70,
            f"Passed: {'YES' if self.passed else 'NO'}",
            "=" * 70,
        ])

        if self.issues:
            lines.append("\nISSUES FOUND:\n")
            for i, issue in enumerate(self.issues, 1):
                lines.append(f"{i}. [{issue.issue_type.value}] {issue.guideline or ''}".rstrip())
                if issue.element:
                    lines.append(f"   Element: {issue.element}")
                lines.append(f"   Issue: {issue.message}")
                if issue.suggestion:
                    lines.append(f"   Fix: {issue.suggestion}")
                lines.append("")

        return "\n".join(lines)


# Simplified BCP 47: primary language plus optional subtags
LANGUAGE_CODE_PATTERN = re.compile(r'^[a-z]{2,3}(-[a-z0-9]{2,8})*$', re.IGNORECASE)

# Roles accepted per element; elements not listed here accept no role
VALID_ROLES = {
    'button': {'button', 'link', 'menuitem'},
    'input': {'textbox', 'radio', 'checkbox', 'button'},
    'div': {'alert', 'tooltip', 'dialog', 'slider'},
    'a': {'link', 'button', 'menuitem'},
}

# Elements that accept any role
PERMISSIVE_ROLE_ELEMENTS = {'div', 'span', 'a'}

REQUIRED_ARIA_PROPERTIES = {
    'slider': ['aria-valuenow', 'aria-valuemin', 'aria-valuemax'],
    'combobox': ['aria-expanded'],
}

INTERACTIVE_SELECTOR = 'a, button, input, select, textarea, [tabindex]'

HEADING_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']


def is_valid_language_code(lang: str) -> bool:
    """Validate a language code against simplified BCP 47 rules."""
    return bool(LANGUAGE_CODE_PATTERN.match(lang)) and not lang.endswith('-')


def _describe(element: Tag, limit: int = 80) -> str:
    text = str(element)
    return text if len(text) <= limit else text[:limit] + '...'


class WCAGValidator:
    """
    WCAG structural validator for HTML fragments.

    Holds only its configuration, so one instance can be shared between
    threads.
    """

    def __init__(self, config: AccessibilityConfig = None):
        """
        Initialize the validator.

        Args:
            config: Configuration options (default: AccessibilityConfig())
        """
        if config is None:
            config = AccessibilityConfig()
        config.validate()
        self.config = config

    # =========================================================================
    # Fail-fast audit
    # =========================================================================

    def audit(self, html: str) -> None:
        """
        Check alt text, heading order and input labels, stopping at the first
        violation.

        Raises:
            WcagViolationError: describing the first violation found
            MalformedHtmlError: a heading level could not be read
        """
        soup = parse_html(html)
        checks = (self._check_images, self._check_headings, self._check_inputs)
        for check in checks:
            for issue in check(soup):
                logger.debug(f"Audit failed: {issue.message}")
                raise WcagViolationError(
                    issue.message,
                    guideline=issue.guideline,
                    issue_type=issue.issue_type
                )

    # =========================================================================
    # Full report
    # =========================================================================

    def validate(self, html: str, file_path: str = "inline",
                 disable_checks: Iterable[IssueType] = None) -> AccessibilityReport:
        """
        Run every check and collect the issues.

        Args:
            html: HTML content string
            file_path: Optional file path for reporting
            disable_checks: Issue types to skip

        Returns:
            AccessibilityReport with all issues found
        """
        started = time.perf_counter()
        disabled: Set[IssueType] = set(disable_checks or ())
        report = AccessibilityReport(
            file_path=file_path,
            timestamp=datetime.now().isoformat(),
            wcag_level=self.config.wcag_level,
        )

        if not html.strip():
            return report

        soup = parse_html(html)
        checks = [
            (IssueType.MISSING_ALT_TEXT, self._check_images),
            (IssueType.HEADING_STRUCTURE, self._check_headings),
            (IssueType.MISSING_LABELS, self._check_inputs),
            (IssueType.INVALID_ARIA, self._check_aria_attributes),
            (IssueType.LANGUAGE_DECLARATION, self._check_language),
            (IssueType.KEYBOARD_NAVIGATION, self._check_keyboard_navigation),
        ]
        if WcagLevel.AA <= self.config.wcag_level:
            checks.append((IssueType.INVALID_ARIA, self._check_roles))

        for issue_type, check in checks:
            if issue_type in disabled:
                continue
            report.issues.extend(check(soup))

        report.elements_checked = len(soup.find_all(True))
        report.issue_count = len(report.issues)
        for issue in report.issues:
            key = issue.issue_type.value
            report.summary[key] = report.summary.get(key, 0) + 1
        report.check_duration_ms = int((time.perf_counter() - started) * 1000)

        logger.debug(
            f"Checked {report.elements_checked} elements, found {report.issue_count} issue(s)"
        )
        return report

    def validate_file(self, file_path: Path,
                      disable_checks: Iterable[IssueType] = None) -> AccessibilityReport:
        """
        Validate an HTML file.

        Args:
            file_path: Path to HTML file
            disable_checks: Issue types to skip

        Returns:
            AccessibilityReport with all issues found
        """
        file_path = Path(file_path)

        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()

        return self.validate(content, str(file_path), disable_checks)

    # =========================================================================
    # Checks
    # =========================================================================

    def _check_images(self, soup: BeautifulSoup) -> Iterator[Issue]:
        """Every image needs an alt attribute; empty alt is allowed (WCAG 1.1.1)"""
        for img in soup.find_all('img'):
            if img.get('alt') is None:
                src = img.get('src', 'unknown')
                yield Issue(
                    issue_type=IssueType.MISSING_ALT_TEXT,
                    message=f"Image missing alt attribute: {src}",
                    guideline="WCAG 1.1.1",
                    element=_describe(img),
                    suggestion="Add alt text, or alt=\"\" for decorative images"
                )

    def _check_headings(self, soup: BeautifulSoup) -> Iterator[Issue]:
        """Heading levels may drop freely but rise by at most max_heading_jump (WCAG 2.4.6)"""
        max_jump = self.config.max_heading_jump
        prev_level = 0
        for heading in soup.find_all(HEADING_TAGS):
            try:
                level = int(heading.name[1:])
            except ValueError:
                raise MalformedHtmlError(
                    f"Cannot read heading level from <{heading.name}>",
                    fragment=_describe(heading)
                )

            if prev_level > 0 and level > prev_level + max_jump:
                yield Issue(
                    issue_type=IssueType.HEADING_STRUCTURE,
                    message=f"Skipped heading level from h{prev_level} to h{level}",
                    guideline="WCAG 2.4.6",
                    element=_describe(heading),
                    suggestion=f"Use h{prev_level + 1} instead of h{level}"
                )
            prev_level = level

    def _check_inputs(self, soup: BeautifulSoup) -> Iterator[Issue]:
        """Every input needs an id (for a <label for>) or an aria-label (WCAG 1.3.1)"""
        for input_elem in soup.find_all('input'):
            if input_elem.get('id') is None and input_elem.get('aria-label') is None:
                name = input_elem.get('name', 'unnamed')
                yield Issue(
                    issue_type=IssueType.MISSING_LABELS,
                    message=f"Input missing id or aria-label: {name}",
                    guideline="WCAG 1.3.1",
                    element=_describe(input_elem),
                    suggestion="Add <label for='id'> or aria-label attribute"
                )

    def _check_aria_attributes(self, soup: BeautifulSoup) -> Iterator[Issue]:
        """ARIA attributes must be recognised and carry a legal value (WCAG 4.1.2)"""
        for element, name, value in find_invalid_aria_attributes(soup):
            yield Issue(
                issue_type=IssueType.INVALID_ARIA,
                message=f"Invalid ARIA attribute {name}={value!r}",
                guideline="WCAG 4.1.2",
                element=_describe(element),
                suggestion="Use a recognised ARIA attribute with a valid value"
            )

    def _check_language(self, soup: BeautifulSoup) -> Iterator[Issue]:
        """Check html lang declaration and lang codes (WCAG 3.1.1, 3.1.2)"""
        html_tag = soup.find('html')
        if html_tag is not None and html_tag.get('lang') is None:
            yield Issue(
                issue_type=IssueType.LANGUAGE_DECLARATION,
                message="Missing language declaration on html element",
                guideline="WCAG 3.1.1",
                element="<html>",
                suggestion='Add lang attribute: <html lang="en">'
            )

        for element in soup.find_all(lang=True):
            lang = element['lang']
            if not is_valid_language_code(lang):
                yield Issue(
                    issue_type=IssueType.LANGUAGE_DECLARATION,
                    message=f"Invalid language code: {lang}",
                    guideline="WCAG 3.1.2",
                    element=_describe(element),
                    suggestion="Use a valid BCP 47 language code"
                )

    def _check_keyboard_navigation(self, soup: BeautifulSoup) -> Iterator[Issue]:
        """Check for keyboard traps and mouse-only handlers (WCAG 2.1.1)"""
        for element in soup.select(INTERACTIVE_SELECTOR):
            tabindex = element.get('tabindex')
            if tabindex is not None:
                try:
                    negative = int(tabindex) < 0
                except ValueError:
                    negative = False
                if negative:
                    yield Issue(
                        issue_type=IssueType.KEYBOARD_NAVIGATION,
                        message="Negative tabindex prevents keyboard focus",
                        guideline="WCAG 2.1.1",
                        element=_describe(element),
                        suggestion="Remove negative tabindex value"
                    )

            if (element.get('onclick') is not None
                    and element.get('onkeypress') is None
                    and element.get('onkeydown') is None):
                yield Issue(
                    issue_type=IssueType.KEYBOARD_NAVIGATION,
                    message="Click handler without keyboard equivalent",
                    guideline="WCAG 2.1.1",
                    element=_describe(element),
                    suggestion="Add keyboard event handlers"
                )

    def _check_roles(self, soup: BeautifulSoup) -> Iterator[Issue]:
        """Check roles fit their element and carry required properties (WCAG 4.1.2)"""
        for element in soup.find_all(role=True):
            role = element['role']
            if element.name not in PERMISSIVE_ROLE_ELEMENTS:
                if role not in VALID_ROLES.get(element.name, ()):
                    yield Issue(
                        issue_type=IssueType.INVALID_ARIA,
                        message=f"Invalid ARIA role '{role}' for <{element.name}>",
                        guideline="WCAG 4.1.2",
                        element=_describe(element),
                        suggestion="Use appropriate ARIA role"
                    )

            missing = [
                prop for prop in REQUIRED_ARIA_PROPERTIES.get(role, [])
                if element.get(prop) is None
            ]
            if missing:
                yield Issue(
                    issue_type=IssueType.INVALID_ARIA,
                    message=f"Missing required ARIA properties: {', '.join(missing)}",
                    guideline="WCAG 4.1.2",
                    element=_describe(element),
                    suggestion="Add required ARIA properties"
                )


# =============================================================================
# Convenience Functions
# =============================================================================

def audit_html(html: str, config: AccessibilityConfig = None) -> None:
    """
    Convenience function for the fail-fast structural audit.

    Args:
        html: HTML content string
        config: Optional configuration

    Raises:
        WcagViolationError: on the first violation found
    """
    WCAGValidator(config).audit(html)


def validate_html_wcag(html: str, config: AccessibilityConfig = None,
                       disable_checks: Iterable[IssueType] = None) -> AccessibilityReport:
    """
    Convenience function to build an accessibility report for HTML.

    Args:
        html: HTML content string
        config: Optional configuration
        disable_checks: Issue types to skip

    Returns:
        AccessibilityReport with all issues found
    """
    validator = WCAGValidator(config)
    return validator.validate(html, disable_checks=disable_checks)


def validate_html_file(file_path: str, config: AccessibilityConfig = None) -> AccessibilityReport:
    """
    Convenience function to build an accessibility report for an HTML file.

    Args:
        file_path: Path to HTML file
        config: Optional configuration

    Returns:
        AccessibilityReport with all issues found
    """
    validator = WCAGValidator(config)
    return validator.validate_file(Path(file_path))
