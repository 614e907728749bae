"""
Release selection and removal for releasesweep.

fetch_and_filter_releases walks the paginated release listing and picks the
releases to delete. delete_releases removes them one at a time.

Both run strictly in order: the name check keeps per-run group state, so the
releases must be seen in the listing's newest-first order, page after page.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from ..domain import GitHubRelease, ReleaseSummary
from ..inputs import Inputs

logger = logging.getLogger(__name__)

# Releases requested per listing page; a shorter page is the last one
PAGE_SIZE = 100


class ReleaseLister(Protocol):
    def list_releases(self, owner: str, repo: str, page: int, per_page: int) -> List[Dict[str, Any]]:
        ...


class ReleaseDeleter(Protocol):
    def delete_release(self, owner: str, repo: str, release_id: Any) -> None:
        ...

    def delete_ref(self, owner: str, repo: str, ref: str) -> None:
        ...


def _is_older(inputs: Inputs, date: Optional[datetime]) -> bool:
    return date is not None and inputs.date_cutoff > date


def fetch_and_filter_releases(client: ReleaseLister, inputs: Inputs) -> List[ReleaseSummary]:
    """
    Fetch the repository's releases using pagination and select those to delete.

    Draft releases are always ignored and never count towards group
    retention. For every other release the name check runs first, then the
    effective date (publish date, else creation date) must be before the
    cutoff.

    Args:
        client: Anything with list_releases(owner, repo, page, per_page)
        inputs: Parsed inputs

    Returns:
        Releases to delete, in listing order
    """
    releases_to_delete: List[ReleaseSummary] = []
    previous_created: Optional[datetime] = None
    page = 0

    while True:
        # Pages in the GitHub API start at 1
        page += 1
        records = client.list_releases(inputs.owner, inputs.repo, page, PAGE_SIZE)

        for record in records:
            release = GitHubRelease.from_api_response(record)
            if release.draft:
                logger.debug(f"Skipping draft release {release.name}")
                continue

            if previous_created and release.created_at and release.created_at > previous_created:
                logger.warning(
                    f"Release {release.name} is newer than the release listed before it; "
                    f"keep-latest-releases assumes newest-first order"
                )
            if release.created_at:
                previous_created = release.created_at

            if inputs.check_release_name(release.name) and _is_older(inputs, release.effective_date):
                releases_to_delete.append(ReleaseSummary.from_release(release))

        if len(records) != PAGE_SIZE:
            break

    logger.debug(f"Scanned {page} page(s), selected {len(releases_to_delete)} releases")
    return releases_to_delete


def delete_releases(client: ReleaseDeleter, releases: List[ReleaseSummary], inputs: Inputs) -> None:
    """
    Delete the releases and, if delete-tags is set, their tags, unless dry-run is enabled.

    A release's tag is deleted right after the release itself. Any failure
    stops the run; releases already deleted stay deleted.

    Args:
        client: Anything with delete_release() and delete_ref()
        releases: Releases as selected by fetch_and_filter_releases
        inputs: Parsed inputs
    """
    logger.info(
        f"Removing {len(releases)} releases"
        + (' with tags' if inputs.delete_tags else '')
        + (' (but not actually)' if inputs.dry_run else '')
    )
    for release in releases:
        logger.info(f"Removing release {release.name}")
        if inputs.dry_run:
            continue

        client.delete_release(inputs.owner, inputs.repo, release.id)
        if inputs.delete_tags:
            client.delete_ref(inputs.owner, inputs.repo, 'tags/' + release.tag)
