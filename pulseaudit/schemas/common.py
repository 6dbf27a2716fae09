"""Common schemas and enums shared across the application."""

from enum import Enum


class MetricCategory(str, Enum):
    """Grouping used when displaying a metric."""

    SPEED = "speed"
    UX = "ux"
    SEO = "seo"
    ACCESSIBILITY = "accessibility"
    SECURITY = "security"


class Strategy(str, Enum):
    """PSI device strategy."""

    MOBILE = "mobile"
    DESKTOP = "desktop"


class AnalysisStatus(str, Enum):
    """Progress of a single analysis run."""

    IDLE = "IDLE"
    SCANNING = "SCANNING"
    ANALYZING_AI = "ANALYZING_AI"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"
