"""
Tests for the WCAG structural validator.
"""

import json

import pytest
import aria_enhancer
from aria_enhancer.config import AccessibilityConfig, WcagLevel
from aria_enhancer.errors import WcagViolationError
from aria_enhancer.wcag_validator import (
    WCAGValidator,
    AccessibilityReport,
    IssueType,
    audit_html,
    is_valid_language_code,
    validate_html_file,
    validate_html_wcag,
)


def headings(levels):
    return "".join(f"<h{level}>Heading</h{level}>" for level in levels)


class TestAudit:
    """Tests for the fail-fast audit."""

    def test_missing_alt_text(self):
        """Test an image without alt fails."""
        with pytest.raises(WcagViolationError) as excinfo:
            audit_html('<img src="x.jpg">')

        assert excinfo.value.issue_type == IssueType.MISSING_ALT_TEXT
        assert excinfo.value.guideline == "WCAG 1.1.1"
        assert "alt" in str(excinfo.value)

    def test_empty_alt_allowed(self):
        """Test decorative images with alt="" pass."""
        audit_html('<img src="divider.png" alt="">')

    def test_skipped_heading_level(self):
        """Test h1 followed by h3 fails."""
        with pytest.raises(WcagViolationError) as excinfo:
            audit_html('<h1>T</h1><h3>S</h3>')

        assert excinfo.value.issue_type == IssueType.HEADING_STRUCTURE
        assert "h1" in str(excinfo.value) and "h3" in str(excinfo.value)

    def test_sequential_headings_pass(self):
        """Test h1 followed by h2 passes."""
        audit_html('<h1>T</h1><h2>S</h2>')

    @pytest.mark.parametrize("levels", [
        [1, 2, 1, 2],
        [1, 2, 3, 4, 5, 6],
        [1, 2, 3, 1],
        [3, 1],
        [2, 3, 2, 3, 4],
        [6, 5, 4, 3, 2, 1],
        [1],
        [],
    ])
    def test_monotonic_headings_accepted(self, levels):
        """Test sequences that never rise by more than one pass."""
        audit_html(headings(levels))

    @pytest.mark.parametrize("levels", [
        [1, 3],
        [1, 2, 4],
        [2, 1, 3],
        [1, 2, 3, 1, 6],
    ])
    def test_heading_jumps_rejected(self, levels):
        """Test any rise of more than one fails."""
        with pytest.raises(WcagViolationError):
            audit_html(headings(levels))

    def test_headings_across_nesting(self):
        """Test headings are walked in document order through nested markup."""
        html = '<section><h1>A</h1><div><h2>B</h2></div></section><article><h4>C</h4></article>'
        with pytest.raises(WcagViolationError):
            audit_html(html)

    def test_max_heading_jump_config(self):
        """Test a wider jump allowance."""
        config = AccessibilityConfig(max_heading_jump=2)
        audit_html('<h1>T</h1><h3>S</h3>', config)
        with pytest.raises(WcagViolationError):
            audit_html('<h1>T</h1><h4>S</h4>', config)

    def test_input_without_label(self):
        """Test an input with neither id nor aria-label fails."""
        with pytest.raises(WcagViolationError) as excinfo:
            audit_html('<input type="text" name="q">')

        assert excinfo.value.issue_type == IssueType.MISSING_LABELS

    @pytest.mark.parametrize("html", [
        '<label for="q">Query</label><input id="q">',
        '<input aria-label="Search">',
    ])
    def test_labelled_inputs_pass(self, html):
        """Test id or aria-label satisfies the label check."""
        audit_html(html)

    def test_checks_run_in_order(self):
        """Test alt text is reported before heading and label problems."""
        html = '<input><h1>T</h1><h3>S</h3><img src="a.png">'
        with pytest.raises(WcagViolationError) as excinfo:
            audit_html(html)
        assert excinfo.value.issue_type == IssueType.MISSING_ALT_TEXT

        html = '<input><h1>T</h1><h3>S</h3>'
        with pytest.raises(WcagViolationError) as excinfo:
            audit_html(html)
        assert excinfo.value.issue_type == IssueType.HEADING_STRUCTURE

    def test_enhanced_inputs_pass_audit(self):
        """Test enhance() output satisfies the label check."""
        enhanced = aria_enhancer.enhance('<form><input name="q"></form>')
        aria_enhancer.audit(enhanced)

    def test_package_level_audit(self):
        """Test the package-level entry point."""
        with pytest.raises(aria_enhancer.WcagViolationError):
            aria_enhancer.audit('<img src="x.jpg">')
        aria_enhancer.audit('<p>No images here</p>')


class TestValidate:
    """Tests for the accumulating report."""

    def test_collects_every_issue(self):
        """Test the report does not stop at the first issue."""
        html = '<img src="a.png"><img src="b.png"><h1>A</h1><h3>B</h3><input>'
        report = validate_html_wcag(html)

        types = [issue.issue_type for issue in report.issues]
        assert types.count(IssueType.MISSING_ALT_TEXT) == 2
        assert IssueType.HEADING_STRUCTURE in types
        assert IssueType.MISSING_LABELS in types
        assert report.issue_count == len(report.issues)
        assert not report.passed

    def test_clean_fragment_passes(self):
        """Test accessible markup produces no issues."""
        html = (
            '<html lang="en"><body><h1>Title</h1>'
            '<img src="a.png" alt="Chart of sales">'
            '<label for="q">Search</label><input id="q">'
            '</body></html>'
        )
        report = validate_html_wcag(html)
        assert report.issues == []
        assert report.passed

    def test_empty_input(self):
        """Test whitespace-only input gives an empty report."""
        report = validate_html_wcag("   \n ")
        assert report.issue_count == 0
        assert report.elements_checked == 0

    def test_elements_checked(self):
        """Test every element is counted."""
        report = validate_html_wcag('<div><p>x</p><p>y</p></div>')
        assert report.elements_checked == 3

    def test_invalid_aria_reported(self):
        """Test invalid ARIA attributes are reported."""
        report = validate_html_wcag('<div aria-hidden="maybe">x</div>')
        assert [i.issue_type for i in report.issues] == [IssueType.INVALID_ARIA]

    def test_missing_language(self):
        """Test html element without lang is reported."""
        report = validate_html_wcag('<html><body><p>x</p></body></html>')
        lang_issues = [i for i in report.issues if i.issue_type == IssueType.LANGUAGE_DECLARATION]
        assert len(lang_issues) == 1
        assert lang_issues[0].guideline == "WCAG 3.1.1"

    def test_invalid_language_code(self):
        """Test malformed lang values are reported."""
        report = validate_html_wcag('<html lang="en"><p lang="english_uk">x</p></html>')
        lang_issues = [i for i in report.issues if i.issue_type == IssueType.LANGUAGE_DECLARATION]
        assert len(lang_issues) == 1
        assert "english_uk" in lang_issues[0].message

    def test_keyboard_navigation(self):
        """Test negative tabindex and mouse-only handlers are reported."""
        html = '<div tabindex="-1">x</div><a href="#" onclick="go()">Go</a>'
        report = validate_html_wcag(html)
        messages = [i.message for i in report.issues if i.issue_type == IssueType.KEYBOARD_NAVIGATION]
        assert len(messages) == 2
        assert any("tabindex" in m for m in messages)
        assert any("keyboard" in m.lower() for m in messages)

    def test_click_with_key_handler_ok(self):
        """Test onclick paired with a key handler passes."""
        html = '<button aria-label="Go" onclick="go()" onkeydown="go()">Go</button>'
        report = validate_html_wcag(html)
        assert report.issues == []

    def test_roles_checked_at_level_aa(self):
        """Test bad roles and missing required properties at AA."""
        html = '<button role="slider">x</button>'
        report = validate_html_wcag(html, AccessibilityConfig(wcag_level=WcagLevel.AA))
        messages = [i.message for i in report.issues]
        assert len(messages) == 2
        assert any("Invalid ARIA role" in m for m in messages)
        assert any("aria-valuenow" in m for m in messages)

    def test_roles_skipped_at_level_a(self):
        """Test role checks do not run at level A."""
        html = '<button role="slider">x</button>'
        report = validate_html_wcag(html, AccessibilityConfig(wcag_level=WcagLevel.A))
        assert report.issues == []
        assert report.wcag_level == WcagLevel.A

    def test_permissive_elements(self):
        """Test div accepts any role but still needs required properties."""
        report = validate_html_wcag('<div role="combobox" aria-expanded="false">x</div>')
        assert report.issues == []

        report = validate_html_wcag('<div role="combobox">x</div>')
        assert len(report.issues) == 1

    def test_disable_checks(self):
        """Test disabled issue types are skipped."""
        html = '<img src="a.png"><html><p>x</p></html>'
        report = validate_html_wcag(
            html,
            disable_checks=[IssueType.MISSING_ALT_TEXT, IssueType.LANGUAGE_DECLARATION]
        )
        assert report.issues == []

    def test_to_json(self):
        """Test JSON export."""
        report = validate_html_wcag('<img src="a.png">')
        data = json.loads(report.to_json())

        assert data['issue_count'] == 1
        assert data['passed'] is False
        assert data['wcag_level'] == "AA"
        assert data['issues'][0]['issue_type'] == "missing_alt_text"
        assert data['summary'] == {"missing_alt_text": 1}

    def test_to_text(self):
        """Test text export."""
        report = validate_html_wcag('<img src="a.png">')
        text = report.to_text()

        assert "WCAG AA ACCESSIBILITY REPORT" in text
        assert "Total Issues: 1" in text
        assert "Image missing alt attribute" in text
        assert "Passed: NO" in text

    def test_validate_file(self, tmp_path):
        """Test validating a file records its path."""
        path = tmp_path / "page.html"
        path.write_text('<h1>A</h1><h2>B</h2>', encoding='utf-8')

        report = validate_html_file(str(path))

        assert isinstance(report, AccessibilityReport)
        assert report.file_path == str(path)
        assert report.passed


class TestLanguageCodes:
    """Tests for simplified BCP 47 validation."""

    @pytest.mark.parametrize("code", ["en", "en-US", "zh-Hant-TW", "EN-gb", "ast"])
    def test_valid(self, code):
        assert is_valid_language_code(code)

    @pytest.mark.parametrize("code", ["", "e", "english", "en-", "en_US", "123"])
    def test_invalid(self, code):
        assert not is_valid_language_code(code)


class TestWCAGValidator:
    """Tests for WCAGValidator construction."""

    def test_default_config(self):
        """Test the default configuration."""
        validator = WCAGValidator()
        assert validator.config.wcag_level == WcagLevel.AA
        assert validator.config.max_heading_jump == 1

    def test_shared_instance_is_stateless(self):
        """Test one instance gives independent results per call."""
        validator = WCAGValidator()
        first = validator.validate('<img src="a.png">')
        second = validator.validate('<p>fine</p>')

        assert first.issue_count == 1
        assert second.issue_count == 0
