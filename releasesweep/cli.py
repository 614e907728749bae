#!/usr/bin/env python3

import sys
from pathlib import Path
from typing import Optional

import click

from releasesweep.config import build_input_source, setup_logging
from releasesweep.exit_codes import ConfigError, get_exit_code_for_exception
from releasesweep.render import format_releases_jsonl, render_releases_table
from releasesweep.runner import run, set_failed


def _flag(value: bool) -> Optional[str]:
    # Unset flags fall through to the other input sources
    return 'true' if value else None


def _switch(value: Optional[bool]) -> Optional[str]:
    # --delete-tags/--keep-tags overrides the other sources either way
    if value is None:
        return None
    return 'true' if value else 'false'


@click.command()
@click.version_option(package_name='releasesweep')
@click.option('--repository', '-R', metavar='OWNER/REPO',
              help='Repository to clean up (default: $GITHUB_REPOSITORY)')
@click.option('--token', envvar='RELEASESWEEP_TOKEN',
              help='GitHub token (default: token input or $GITHUB_TOKEN)')
@click.option('--prefix', help='Only delete releases whose name starts with this prefix')
@click.option('--regex', help='Only delete releases whose name matches this regular expression')
@click.option('--max-age', help='Only delete releases older than this ISO-8601 duration (default: P1W)')
@click.option('--delete-tags/--keep-tags', default=None,
              help='Also delete the tag of each deleted release, or explicitly keep tags')
@click.option('--keep-latest-releases', is_flag=True,
              help='Keep the newest release of every group captured by (?<group>...) in --regex')
@click.option('--dry-run', is_flag=True, help='Only report what would be deleted')
@click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Read inputs from a JSON, TOML or YAML file')
@click.option('--format', 'output_format', type=click.Choice(['table', 'jsonl']), default='table',
              show_default=True, help='How to print the selected releases')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(
    repository: Optional[str],
    token: Optional[str],
    prefix: Optional[str],
    regex: Optional[str],
    max_age: Optional[str],
    delete_tags: Optional[bool],
    keep_latest_releases: bool,
    dry_run: bool,
    config_file: Optional[Path],
    output_format: str,
    verbose: bool,
):
    """releasesweep - Delete old GitHub releases and their tags.

    Options not given on the command line are read from GitHub Actions
    inputs (INPUT_PREFIX, INPUT_MAX-AGE, ...), so the same command works
    locally and as a workflow step.

    \b
    Examples:
        # Show what would be removed
        releasesweep -R owner/repo --prefix nightly- --dry-run
        # Delete releases older than 30 days, with their tags
        releasesweep -R owner/repo --max-age P30D --delete-tags
        # Keep the newest release of every branch
        releasesweep -R owner/repo --regex '^(?<group>.*)-\\d+$' --keep-latest-releases
    """
    setup_logging(verbose)

    options = {
        'token': token,
        'prefix': prefix,
        'regex': regex,
        'max-age': max_age,
        'delete-tags': _switch(delete_tags),
        'keep-latest-releases': _flag(keep_latest_releases),
        'dry-run': _flag(dry_run),
    }

    try:
        source = build_input_source(options, config_file)
    except ConfigError as e:
        set_failed(str(e))
        sys.exit(get_exit_code_for_exception(e))

    result = run(source, repository=repository)

    if result.ok:
        if output_format == 'jsonl':
            for line in format_releases_jsonl(result.releases):
                click.echo(line)
        else:
            render_releases_table(
                result.releases,
                title="Dry run: releases that would be deleted" if result.dry_run else "Deleted releases",
            )

    sys.exit(result.exit_code)


def main():
    cli()


if __name__ == "__main__":
    main()
