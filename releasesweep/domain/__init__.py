"""
Domain layer for releasesweep.

Contains pure domain objects with no I/O or side effects:
- GitHubRelease: One record from the release listing
- ReleaseSummary: A release selected for deletion
"""

from .release import GitHubRelease, ReleaseSummary, format_timestamp, parse_timestamp

__all__ = [
    'GitHubRelease',
    'ReleaseSummary',
    'format_timestamp',
    'parse_timestamp',
]
