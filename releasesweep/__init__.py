"""
releasesweep - Delete old GitHub releases and, optionally, their tags.

Releases are selected by name (prefix and/or regex), by age (ISO-8601
max-age, default one week) and, optionally, by keeping the newest release
of every group captured from the name.

Quick Start:
    from releasesweep import MappingInputSource, run

    source = MappingInputSource({
        'token': '...',
        'regex': r'^(?<group>.*)-\\d+$',
        'keep-latest-releases': 'true',
        'dry-run': 'true',
    })
    result = run(source, repository="owner/repo")
    for release in result.releases:
        print(release.name)

Runs as a GitHub Action step too: inputs are then read from the
INPUT_<NAME> environment variables.
"""

__version__ = "1.0.0"

from .config import ActionInputSource, MappingInputSource, build_input_source
from .domain import GitHubRelease, ReleaseSummary
from .exit_codes import APIError, AuthenticationError, CommandError, ConfigError
from .infra import GitHubClient
from .inputs import Inputs, ReleaseGroupTracker, ReleaseNameCheck, parse_inputs
from .runner import RunResult, run
from .services import delete_releases, fetch_and_filter_releases

__all__ = [
    "__version__",
    # Inputs
    "ActionInputSource",
    "MappingInputSource",
    "build_input_source",
    "Inputs",
    "ReleaseGroupTracker",
    "ReleaseNameCheck",
    "parse_inputs",
    # Domain objects
    "GitHubRelease",
    "ReleaseSummary",
    # Errors
    "APIError",
    "AuthenticationError",
    "CommandError",
    "ConfigError",
    # Client and services
    "GitHubClient",
    "fetch_and_filter_releases",
    "delete_releases",
    "run",
    "RunResult",
]
