"""
Handles the 'generate' command for building a changelog.

Thin CLI layer: load config, run ChangelogService, render the result.
"""

import click

from ..config import load_config, configure_logging
from ..cli_utils import standard_command, add_common_options
from ..infra.git_client import GitClient
from ..render import render_markdown, render_json
from ..services.changelog_service import ChangelogService


@click.command(name='generate')
@click.option('--tag-from', default=None, help='Start of the tag range (default: last tag)')
@click.option('--tag-to', default=None, help='End of the tag range (default: HEAD)')
@click.option('--next-version', default=None, help='Title for unreleased changes (default: "Unreleased")')
@click.option('--format', 'output_format', type=click.Choice(['markdown', 'json']),
              default='markdown', show_default=True, help='Output format')
@add_common_options('verbose', 'quiet')
@standard_command
def generate_handler(tag_from, tag_to, next_version, output_format, progress, verbose=False, quiet=False, **kwargs):
    """Generate a changelog for a tag range.

    \b
    Commits are grouped by release tag, then by configured GitHub label,
    then by the packages/<name> directories they touched.

    Examples:

    \b
        repochangelog generate                          # Since the last tag
        repochangelog generate --tag-from v1.0.0        # Since v1.0.0
        repochangelog generate --tag-from v1.0.0 --tag-to v2.0.0
        repochangelog generate --next-version v2.1.0    # Name unreleased changes
        repochangelog generate --format json            # Structured output
    """
    root = GitClient().root_path()
    config = load_config(root)
    configure_logging(config, verbose=verbose)

    service = ChangelogService.from_config(config, cwd=root, progress=progress)
    releases = service.build(tag_from=tag_from, tag_to=tag_to)

    if output_format == 'json':
        return render_json(releases, pretty=True)
    return render_markdown(releases, next_version=next_version)
