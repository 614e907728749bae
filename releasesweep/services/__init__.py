"""
Service layer for releasesweep.

Contains the cleanup logic that sits between the parsed inputs and the
GitHub client:
- fetch_and_filter_releases: Select releases to delete
- delete_releases: Delete them (and their tags)
"""

from .release_service import PAGE_SIZE, delete_releases, fetch_and_filter_releases

__all__ = [
    'PAGE_SIZE',
    'delete_releases',
    'fetch_and_filter_releases',
]
