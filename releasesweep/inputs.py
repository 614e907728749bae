"""
Input parsing and release-name matching for releasesweep.

Turns the raw string inputs into an immutable Inputs object holding:
- the repository coordinates and token
- the age cutoff (now minus max-age)
- the delete-tags and dry-run switches
- a ReleaseNameCheck combining the prefix, regex and keep-latest-releases inputs

Group retention relies on releases being checked newest first: the first
release seen for a group is the one that is kept.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional
from re import Pattern

from .config import InputSource
from .duration import parse_duration
from .exit_codes import ConfigError

logger = logging.getLogger(__name__)

# Name of the capture group used to group releases for retention
GROUP_NAME = 'group'

# "(?<name>" as written for JavaScript / .NET regex engines, but not the
# lookbehinds "(?<=" and "(?<!"
_JS_NAMED_GROUP_RE = re.compile(r'(?<!\\)\(\?<(?![=!])([A-Za-z_][A-Za-z0-9_]*)>')

NameCheck = Callable[[str], bool]


def translate_pattern(regex: str) -> str:
    """
    Rewrite ``(?<name>...)`` named groups into Python's ``(?P<name>...)``.

    Release workflows commonly write patterns such as ``^(?<group>.*)-\\d+$``.
    Python's re module only understands the ``(?P<name>...)`` spelling.
    """
    return _JS_NAMED_GROUP_RE.sub(r'(?P<\1>', regex)


def compile_pattern(regex: str) -> Pattern[str]:
    """
    Compile a regex input.

    Raises:
        ConfigError: If the pattern is not a valid regular expression
    """
    try:
        return re.compile(translate_pattern(regex))
    except re.error as e:
        raise ConfigError(f"Invalid regex input {regex!r}: {e}") from e


def parse_flag(value: Optional[str]) -> bool:
    """Only the literal "true" enables a flag input."""
    return value == 'true'


class ReleaseGroupTracker:
    """
    Remembers which release groups have already been seen during a run.

    Groups are kept in first-seen order. Since releases are listed newest
    first, the first release of each group is the most recent one.
    """

    def __init__(self):
        self._seen: Dict[str, None] = {}

    def check_and_record(self, group: str) -> bool:
        """
        Record a group sighting.

        Returns:
            True if this is the first release seen for the group
        """
        if group in self._seen:
            return False
        self._seen[group] = None
        return True

    @property
    def groups(self) -> List[str]:
        """Groups seen so far, in first-seen order."""
        return list(self._seen)

    def __contains__(self, group: str) -> bool:
        return group in self._seen

    def __len__(self) -> int:
        return len(self._seen)


def _always(_name: str) -> bool:
    return True


def prefix_check(prefix: Optional[str]) -> NameCheck:
    """Names must start with prefix; no prefix accepts every name."""
    if not prefix:
        return _always
    return lambda name: name.startswith(prefix)


def regex_check(pattern: Optional[Pattern[str]]) -> NameCheck:
    """Names must contain a match for pattern; no pattern accepts every name."""
    if pattern is None:
        return _always
    return lambda name: pattern.search(name) is not None


def retention_check(pattern: Optional[Pattern[str]], tracker: Optional[ReleaseGroupTracker]) -> NameCheck:
    """
    Keep the newest release of every group.

    The first name seen for a group is rejected (it is kept), every later
    name of the same group is accepted for deletion.
    """
    if pattern is None or tracker is None:
        return _always

    def check(name: str) -> bool:
        match = pattern.search(name)
        if match is None:
            return False
        return not tracker.check_and_record(match.group(GROUP_NAME))

    return check


class ReleaseNameCheck:
    """
    Decides from its name whether a release may be deleted.

    All checks must pass. They run in order and stop at the first failure,
    so a name rejected by the prefix or the regex never counts towards
    group retention.

    Example:
        check = ReleaseNameCheck.build(regex="^(?<group>.*)-\\d+$", keep_latest=True)
        check("develop-2")   # False, newest develop release is kept
        check("develop-1")   # True
    """

    def __init__(self, checks: List[NameCheck], tracker: Optional[ReleaseGroupTracker] = None):
        self.checks = checks
        self.tracker = tracker

    @classmethod
    def build(
        cls,
        prefix: Optional[str] = None,
        regex: Optional[str] = None,
        keep_latest: bool = False,
    ) -> 'ReleaseNameCheck':
        """
        Build the check from the prefix, regex and keep-latest-releases inputs.

        Raises:
            ConfigError: If keep_latest is set without a regex, or the regex
                has no capture group named "group"
        """
        if keep_latest and not regex:
            raise ConfigError('When using the keep-latest-releases option, a regex input is required.')

        pattern = compile_pattern(regex) if regex else None

        tracker = None
        if keep_latest:
            if GROUP_NAME not in pattern.groupindex:
                raise ConfigError(
                    'When using the keep-latest-releases option, regex needs to contain '
                    'a capturing group named "group".'
                )
            tracker = ReleaseGroupTracker()

        checks = [
            prefix_check(prefix),
            regex_check(pattern),
            retention_check(pattern, tracker),
        ]
        return cls(checks, tracker)

    def __call__(self, name: str) -> bool:
        return all(check(name) for check in self.checks)


@dataclass(frozen=True)
class Inputs:
    """Validated inputs for one run."""
    owner: str
    repo: str
    token: str = field(repr=False)
    date_cutoff: datetime
    check_release_name: ReleaseNameCheck = field(repr=False)
    delete_tags: bool = False
    dry_run: bool = False


def parse_inputs(
    source: InputSource,
    owner: str,
    repo: str,
    now: Optional[datetime] = None,
) -> Inputs:
    """
    Parse and validate the raw inputs.

    Args:
        source: Input lookup (see releasesweep.config)
        owner: Repository owner
        repo: Repository name
        now: Current time (defaults to the current UTC time)

    Returns:
        Inputs

    Raises:
        ConfigError: On any invalid input. Nothing has touched the API yet.
    """
    prefix = source.get_input('prefix')
    regex = source.get_input('regex')
    max_age = source.get_input('max-age') or 'P1W'
    delete_tags = parse_flag(source.get_input('delete-tags'))
    keep_latest = parse_flag(source.get_input('keep-latest-releases'))
    dry_run = parse_flag(source.get_input('dry-run'))
    token = source.get_input('token')

    check_release_name = ReleaseNameCheck.build(prefix=prefix, regex=regex, keep_latest=keep_latest)

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    try:
        date_cutoff = parse_duration(max_age).subtract_from(now)
    except (ValueError, OverflowError) as e:
        raise ConfigError(f"Invalid max-age input: {e}") from e

    if not token:
        raise ConfigError('A token input is required.')

    logger.debug(
        f"Inputs: prefix={prefix!r} regex={regex!r} max-age={max_age} "
        f"delete-tags={delete_tags} keep-latest-releases={keep_latest} dry-run={dry_run}"
    )

    return Inputs(
        owner=owner,
        repo=repo,
        token=token,
        date_cutoff=date_cutoff,
        check_release_name=check_release_name,
        delete_tags=delete_tags,
        dry_run=dry_run,
    )
