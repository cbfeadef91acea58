"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
import click
from functools import wraps
from .progress import get_progress
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Progress reporting on stderr
    - Command output on stdout
    - --quiet/-q suppresses the output
    - Consistent error handling: the originating error message is shown
      unmodified and the process exits with the error's exit code
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        quiet = kwargs.get('quiet', False)

        progress = get_progress(enabled=True if verbose else None)
        kwargs['progress'] = progress

        try:
            result = func(*args, **kwargs)

            if result is not None and not quiet:
                click.echo(result)

            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            progress.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except CommandError as e:
            progress.error(str(e))
            sys.exit(e.exit_code)
        except Exception as e:
            progress.error(f"Command failed: {e}")
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


def add_common_options(*options):
    """
    Add common options to a command.

    Available options: 'verbose', 'quiet'
    """
    def decorator(func):
        if 'quiet' in options:
            func = click.option('-q', '--quiet', is_flag=True,
                                help='Suppress output')(func)
        if 'verbose' in options:
            func = click.option('-v', '--verbose', is_flag=True,
                                help='Show progress and debug logging on stderr')(func)
        return func
    return decorator
