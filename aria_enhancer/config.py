"""
Configuration for ARIA enhancement and WCAG validation.
"""

from dataclasses import dataclass
from enum import Enum

from .errors import ConfigurationError


# =============================================================================
# Constants
# =============================================================================

MAX_HTML_SIZE = 1_000_000  # bytes, UTF-8 encoded

DEFAULT_BUTTON_LABEL = "button"
DEFAULT_NAV_LABEL = "navigation"
DEFAULT_FORM_LABELLEDBY = "form-label"
DEFAULT_INPUT_LABEL = "input"


class WcagLevel(Enum):
    """WCAG conformance levels"""
    A = "A"      # Minimum conformance
    AA = "AA"    # Standard conformance for most sites
    AAA = "AAA"  # Highest conformance

    @property
    def rank(self) -> int:
        return ["A", "AA", "AAA"].index(self.value)

    def __lt__(self, other):
        if not isinstance(other, WcagLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, WcagLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class AccessibilityConfig:
    """Configuration options for ARIA enhancement and WCAG checks."""
    wcag_level: WcagLevel = WcagLevel.AA
    # Largest upward step allowed between consecutive headings
    max_heading_jump: int = 1
    # Enhancement rules (applied in fixed order when enabled)
    label_buttons: bool = True
    label_navs: bool = True
    label_forms: bool = True
    label_inputs: bool = True

    def validate(self) -> None:
        """Raise ConfigurationError if the configuration is unusable."""
        if not isinstance(self.wcag_level, WcagLevel):
            raise ConfigurationError(
                f"wcag_level must be a WcagLevel, got {self.wcag_level!r}"
            )
        if self.max_heading_jump < 1:
            raise ConfigurationError(
                f"max_heading_jump must be at least 1, got {self.max_heading_jump}"
            )
