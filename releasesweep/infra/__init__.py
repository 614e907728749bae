"""
Infrastructure layer for releasesweep.

Contains abstractions for external systems:
- GitHubClient: GitHub REST API access (list releases, delete releases and refs)

These provide clean interfaces that can be mocked for testing.
"""

from .github_client import GitHubClient, RateLimitStatus

__all__ = [
    'GitHubClient',
    'RateLimitStatus',
]
