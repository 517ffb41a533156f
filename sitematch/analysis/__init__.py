"""Analysis module for SiteMatch.

Rolls ranked matches up into project cost, timeline and risk reports.
"""

from sitematch.analysis.progress import summarize_progress
from sitematch.analysis.project import ProjectAnalyzer, analyze_project

__all__ = ["ProjectAnalyzer", "analyze_project", "summarize_progress"]
