#!/usr/bin/env python3
"""
Input sources and logging setup for releasesweep.

Inputs are plain string lookups by key. Where the value comes from depends
on how releasesweep is run:

1. Command-line options (highest priority)
2. An inputs file given with --config (JSON, TOML or YAML)
3. GitHub Actions inputs (INPUT_<NAME> environment variables)

An empty string means "not provided", matching how GitHub Actions
passes unset inputs.
"""

import json
import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Sequence, Tuple

import yaml

from .exit_codes import ConfigError

logger = logging.getLogger("releasesweep")

# Input keys understood by releasesweep
INPUT_KEYS = (
    'token',
    'prefix',
    'regex',
    'max-age',
    'delete-tags',
    'keep-latest-releases',
    'dry-run',
)

DEFAULT_INPUTS = {
    'max-age': 'P1W',
}


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for a run.

    Args:
        verbose: Enable DEBUG level logging if True, otherwise INFO level

    Returns:
        The releasesweep package logger
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr)
        ],
        force=True,
    )

    if not verbose:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("requests").setLevel(logging.WARNING)

    return logger


class InputSource(Protocol):
    """Anything that can look up an input by key."""

    def get_input(self, name: str) -> str:
        ...


class ActionInputSource:
    """
    Reads inputs the way GitHub Actions passes them.

    The input ``max-age`` is read from ``INPUT_MAX-AGE``; spaces in the
    name become underscores and the value is whitespace-trimmed.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def get_input(self, name: str) -> str:
        key = 'INPUT_' + name.replace(' ', '_').upper()
        return (self.environ.get(key) or '').strip()


class MappingInputSource:
    """Inputs backed by a dictionary (command-line options, input files, tests)."""

    def __init__(self, values: Optional[Mapping[str, object]] = None):
        self.values = dict(values or {})

    def get_input(self, name: str) -> str:
        value = self.values.get(name)
        if value is None:
            return ''
        # YAML and TOML files give real booleans; inputs are strings
        if isinstance(value, bool):
            return 'true' if value else 'false'
        return str(value).strip()


class ChainedInputSource:
    """The first source with a non-empty value wins."""

    def __init__(self, sources: Sequence[InputSource]):
        self.sources = list(sources)

    def get_input(self, name: str) -> str:
        for source in self.sources:
            value = source.get_input(name)
            if value:
                return value
        return ''


class DefaultsInputSource(MappingInputSource):
    """Built-in input defaults (currently only max-age)."""

    def __init__(self):
        super().__init__(DEFAULT_INPUTS)


def load_input_file(path: Path) -> MappingInputSource:
    """
    Load inputs from a JSON, TOML or YAML file.

    The file holds a flat mapping of input names to values, e.g.::

        prefix: nightly-
        max-age: P2W
        delete-tags: true

    Args:
        path: Path to the inputs file

    Returns:
        MappingInputSource over the file's values

    Raises:
        ConfigError: If the file cannot be read or is not a mapping
    """
    path = Path(path)
    try:
        if path.suffix.lower() == '.toml':
            with open(path, 'rb') as f:
                data = tomllib.load(f)
        elif path.suffix.lower() in ['.yaml', '.yml']:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        else:
            with open(path, 'r') as f:
                data = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read inputs file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Inputs file {path} must contain a mapping of input names to values")

    unknown = sorted(set(data) - set(INPUT_KEYS))
    if unknown:
        logger.warning(f"Ignoring unknown inputs in {path}: {', '.join(unknown)}")

    logger.debug(f"Loaded inputs from {path}")
    return MappingInputSource(data)


def build_input_source(
    options: Optional[Dict[str, object]] = None,
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> InputSource:
    """
    Build the input lookup used for a run.

    Args:
        options: Values given on the command line (None entries are skipped)
        config_file: Optional inputs file
        environ: Environment to read action inputs from (defaults to os.environ)

    Returns:
        Chained source: options, then file, then action inputs, then defaults
    """
    sources: list = [MappingInputSource(options)]
    if config_file is not None:
        sources.append(load_input_file(config_file))
    sources.append(ActionInputSource(environ))

    env = os.environ if environ is None else environ
    sources.append(MappingInputSource({'token': env.get('GITHUB_TOKEN')}))
    sources.append(DefaultsInputSource())
    return ChainedInputSource(sources)


def resolve_repository(
    repository: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Tuple[str, str]:
    """
    Resolve the owner and name of the repository to clean up.

    Args:
        repository: "owner/repo", or None to use GITHUB_REPOSITORY

    Returns:
        Tuple of (owner, repo)

    Raises:
        ConfigError: If no repository is given or it is not "owner/repo"
    """
    env = os.environ if environ is None else environ
    value = (repository or env.get('GITHUB_REPOSITORY') or '').strip()
    if not value:
        raise ConfigError("No repository given. Pass --repository owner/repo or set GITHUB_REPOSITORY.")

    owner, sep, repo = value.partition('/')
    if not sep or not owner or not repo or '/' in repo:
        raise ConfigError(f"Repository must be given as owner/repo, got: {value}")
    return owner, repo
