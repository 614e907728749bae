"""
Release domain objects for releasesweep.

GitHubRelease is a typed view of one record from the release listing.
ReleaseSummary is what the collector hands to the remover: just enough
to delete a release and its tag and to report it.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import json


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a GitHub API timestamp into an aware UTC datetime.

    Accepts "2022-01-23T00:00:00Z", offsets and plain dates. Values without
    a timezone are taken as UTC.
    """
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Format as UTC with millisecond precision, e.g. "2022-01-24T00:00:00.000Z"."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec='milliseconds')
    return text.replace('+00:00', 'Z')


@dataclass(frozen=True)
class GitHubRelease:
    """One release as returned by the GitHub release listing."""
    id: Any
    name: str
    tag_name: str
    draft: bool = False
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'GitHubRelease':
        """Create from a GitHub API release object."""
        return cls(
            id=data.get('id'),
            name=data.get('name') or '',
            tag_name=data.get('tag_name') or '',
            draft=bool(data.get('draft', False)),
            published_at=parse_timestamp(data.get('published_at')),
            created_at=parse_timestamp(data.get('created_at')),
        )

    @property
    def effective_date(self) -> Optional[datetime]:
        """Publish date, or creation date for releases never published."""
        return self.published_at or self.created_at


@dataclass(frozen=True)
class ReleaseSummary:
    """A release selected for deletion."""
    id: Any
    name: str
    tag: str

    @classmethod
    def from_release(cls, release: GitHubRelease) -> 'ReleaseSummary':
        return cls(id=release.id, name=release.name, tag=release.tag_name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'name': self.name,
            'tag': self.tag,
        }

    def to_jsonl(self) -> str:
        """Convert to single-line JSON for streaming output."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def __str__(self) -> str:
        return f"{self.name} ({self.tag})"
