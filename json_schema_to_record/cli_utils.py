"""
CLI helpers: rebuilding the invoking command line for the generation comment.
"""

from pathlib import Path

import click

from . import __version__

COMMAND_NAME = "json_schema_to_record"


def _display_value(value) -> str:
    """Existing files are shown by name only, so output does not depend on the machine."""
    text = str(value)
    if isinstance(value, (str, Path)) and Path(text).exists():
        return Path(text).name
    return text


def _option_tokens(option: click.Option, value) -> list[str]:
    """Tokens for one option, or none when it was left at its default."""
    if value == option.default:
        return []
    flag = option.opts[0] if option.opts else f"--{option.name}"
    if option.is_flag:
        return [flag]
    return [flag, _display_value(value)]


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Rebuild the command line that invoked ``click_command``.

    Positional arguments come first, then options in declaration order. Falls
    back to the bare command name outside of a click context.

    Args:
        click_command: The click command being run

    Returns:
        The command line as a single string
    """
    ctx = click.get_current_context(silent=True)
    if ctx is None or not ctx.params:
        return COMMAND_NAME

    positional: list[str] = []
    options: list[str] = []
    for param in click_command.params:
        value = ctx.params.get(param.name)
        if not value:
            continue
        if isinstance(param, click.Argument):
            positional.append(_display_value(value))
        elif isinstance(param, click.Option):
            options.extend(_option_tokens(param, value))

    return " ".join([COMMAND_NAME, *positional, *options])


def generation_comment(click_command: click.Command) -> str:
    """First line of generated files: tool version and the command that produced them."""
    return f"# Generated by {COMMAND_NAME} {__version__}: {reconstruct_command_line(click_command)}"
