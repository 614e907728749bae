"""
Run orchestration for releasesweep.

One run: resolve the repository and inputs, build the GitHub client, select
the releases to delete and delete them. Errors from any step are caught here
and nowhere else, reported once, and turned into a non-zero exit code.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Mapping, Optional

from .config import InputSource, resolve_repository
from .domain import ReleaseSummary, format_timestamp
from .exit_codes import SUCCESS, get_exit_code_for_exception
from .infra import GitHubClient
from .inputs import parse_inputs
from .services import delete_releases, fetch_and_filter_releases

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of a run."""
    exit_code: int = SUCCESS
    releases: List[ReleaseSummary] = field(default_factory=list)
    error: Optional[str] = None
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == SUCCESS


def _escape_command_data(message: str) -> str:
    return message.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')


def set_failed(message: str, environ: Optional[Mapping[str, str]] = None) -> None:
    """
    Report the failure of a run.

    Logs the error and, inside GitHub Actions, also emits an ``::error::``
    workflow command so the message shows up on the run summary.
    """
    env = os.environ if environ is None else environ
    logger.error(message)
    if env.get('GITHUB_ACTIONS') == 'true':
        print(f"::error::{_escape_command_data(message)}", file=sys.stdout, flush=True)


def run(
    source: InputSource,
    repository: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    client_factory: Optional[Callable[[str], GitHubClient]] = None,
    now: Optional[datetime] = None,
) -> RunResult:
    """
    Parse and validate the inputs, fetch the old releases and delete them.

    Args:
        source: Input lookup (see releasesweep.config)
        repository: "owner/repo"; defaults to GITHUB_REPOSITORY
        environ: Environment to read from (defaults to os.environ)
        client_factory: Builds the API client from the token (default: GitHubClient)
        now: Current time, for computing the age cutoff

    Returns:
        RunResult with the selected releases, or the failure
    """
    try:
        owner, repo = resolve_repository(repository, environ)
        inputs = parse_inputs(source, owner, repo, now=now)
        logger.info('Searching for releases older than ' + format_timestamp(inputs.date_cutoff))

        client = (client_factory or GitHubClient)(inputs.token)
        releases = fetch_and_filter_releases(client, inputs)

        delete_releases(client, releases, inputs)
    except Exception as e:
        set_failed(str(e), environ)
        return RunResult(exit_code=get_exit_code_for_exception(e), error=str(e))

    return RunResult(releases=releases, dry_run=inputs.dry_run)
