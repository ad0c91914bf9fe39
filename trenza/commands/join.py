"""
Handles the 'join' command for merging repositories into a monorepo.

This command follows our design principles:
- Progress messages go to stderr, results to stdout
- --json for machine-readable output
- Thin CLI layer that connects the join service to output
"""

import json
import sys

import click

from ..config import configure_logging, get_setting, load_config
from ..exit_codes import (
    INTERRUPTED,
    SUCCESS,
    CommandError,
    JoinError,
    format_error_chain,
    get_exit_code_for_exception,
)
from ..render import render_join_summary
from ..services.join_service import JoinOptions, JoinService


def _fail(exc: BaseException, as_json: bool) -> None:
    lines = format_error_chain(exc)
    click.echo(f"Error: {lines[0]}", err=True)
    for line in lines[1:]:
        click.echo(f"  {line}", err=True)
    exit_code = get_exit_code_for_exception(exc)
    if as_json:
        root_cause = exc
        while root_cause.__cause__ is not None:
            root_cause = root_cause.__cause__
        error_obj = {
            "error": lines[0],
            "causes": lines[1:],
            "type": type(root_cause).__name__,
            "exit_code": exit_code,
        }
        print(json.dumps(error_obj, ensure_ascii=False), flush=True)
    sys.exit(exit_code)


@click.command(name='join')
@click.argument('root', type=click.Path(file_okay=False))
@click.option('--suffix', default=None,
              help='Suffix appended to ROOT to form the joined repository path (default: _joined)')
@click.option('--branch', default=None,
              help='Branch to merge from every repository (default: the branch the manifest points at)')
@click.option('--dry-run', is_flag=True, help='Show which repositories would be merged without changing anything')
@click.option('--json', 'as_json', is_flag=True, help='Output JSONL instead of a table')
@click.option('-v', '--verbose', is_flag=True, help='Log every git command')
def join_handler(root, suffix, branch, dry_run, as_json, verbose):
    """Join all git repositories below ROOT into one repository.

    \b
    The joined repository is created at ROOT plus suffix, e.g.
    ~/checkout_joined. Every repository's history is merged and its
    content moved into a directory named after its path below ROOT.

    Without --branch, each repository is merged at the branch or tag
    its manifest remote (m/<name> -> <ref>) points at.

    Examples:

    \b
        trenza join ~/checkout                  # manifest branches
        trenza join ~/checkout --branch main    # main everywhere
        trenza join ~/checkout --suffix _mono   # ~/checkout_mono
        trenza join ~/checkout --dry-run        # list what would be merged
    """
    try:
        config = load_config()
        configure_logging(config, verbose=verbose)
        options = JoinOptions(
            root=root,
            suffix=suffix if suffix is not None else get_setting(config, 'join', 'suffix', '_joined'),
            branch=branch or get_setting(config, 'join', 'branch'),
            dry_run=dry_run,
        )

        service = JoinService(config=config)
        try:
            for message in service.join(options):
                click.echo(message, err=True)
        except CommandError as e:
            raise JoinError("failed to join repositories", e.exit_code) from e

    except KeyboardInterrupt:
        click.echo("Interrupted by user", err=True)
        sys.exit(INTERRUPTED)
    except CommandError as e:
        _fail(e, as_json)

    result = service.last_result
    if as_json:
        for detail in result.details:
            print(json.dumps(detail.to_dict(), ensure_ascii=False), flush=True)
        print(json.dumps(result.to_dict(), ensure_ascii=False), flush=True)
    else:
        render_join_summary(result)
    sys.exit(SUCCESS)
