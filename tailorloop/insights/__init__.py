"""Job description insights."""

from tailorloop.insights.jd import JobInsights, extract_insights

__all__ = ["JobInsights", "extract_insights"]
