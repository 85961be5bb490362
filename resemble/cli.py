"""
Command-line interface for Resemble.

Provides commands for comparing two Rust source files and for
inspecting the feature map of a single file.
"""

import sys
from pathlib import Path

import click

from resemble import __version__
from resemble.core.config import OUTPUT_FORMATS, Config
from resemble.core.exceptions import ResembleError, SourceParseError
from resemble.utils.logging_config import setup_logging
from resemble.utils.validation import validate_files

EXIT_MISSING_INPUT = 1
EXIT_FAILURE = 1


class DefaultCommandGroup(click.Group):
    """
    Click group that falls back to a default command.

    `resemble a.rs b.rs` runs `resemble compare a.rs b.rs`. Arguments
    that name a subcommand are dispatched as usual. Without any
    arguments the group fails with a usage error instead of printing help.
    """

    def __init__(self, *args, default_command: str = None, **kwargs):
        kwargs.setdefault("no_args_is_help", False)
        super().__init__(*args, **kwargs)
        self.default_command = default_command

    def resolve_command(self, ctx, args):
        if self.default_command and args and self.get_command(ctx, args[0]) is None:
            args = [self.default_command, *args]
        return super().resolve_command(ctx, args)


@click.group(cls=DefaultCommandGroup, default_command="compare")
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
@click.option(
    "--log-file",
    type=click.Path(),
    help="Path to log file"
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a JSON configuration file"
)
@click.pass_context
def cli(ctx, verbose, log_file, config_path):
    """
    Resemble

    Estimate how structurally alike two Rust source files are by
    comparing their syntax-tree fingerprints.

    Examples:

        resemble file_a.rs file_b.rs

        resemble features src/lib.rs
    """
    ctx.ensure_object(dict)

    if config_path:
        try:
            config = Config.load_from_file(config_path)
        except ResembleError as e:
            raise click.BadParameter(str(e), param_hint="--config")
    else:
        try:
            config = Config.load_from_env()
        except ResembleError as e:
            raise click.ClickException(str(e))

    verbose = verbose or config.verbose
    log_file = log_file or config.log_file

    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config

    log_level = "DEBUG" if verbose else "WARNING"
    setup_logging(level=log_level, log_file=Path(log_file) if log_file else None)


@cli.command()
@click.argument("file_a", type=click.Path())
@click.argument("file_b", type=click.Path())
@click.option(
    "--format", "-f",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (default: text)"
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Also write the result to this file"
)
@click.pass_context
def compare(ctx, file_a, file_b, format, output):
    """
    Compare two Rust source files.

    Prints the cosine similarity of their syntax-tree fingerprints,
    from 0.0 (nothing in common) to 1.0 (same structure).

    Examples:

        resemble file_a.rs file_b.rs

        resemble compare old.rs new.rs -f json -o result.json
    """
    config = ctx.obj["config"]

    if validate_files([file_a, file_b]):
        click.echo("Error: One or both files do not exist.", err=True)
        click.echo(
            "Please create `file_a.rs` and `file_b.rs` or provide valid paths.",
            err=True,
        )
        sys.exit(EXIT_MISSING_INPUT)

    from resemble.engine import ResembleEngine
    from resemble.reporting.formatter import get_formatter

    try:
        engine = ResembleEngine(config)
        result = engine.compare_files(file_a, file_b)
    except SourceParseError as e:
        click.echo(f"Error: Failed to parse '{e.path}': {e.description}", err=True)
        sys.exit(EXIT_FAILURE)
    except ResembleError as e:
        click.echo(f"Error: {e}", err=True)
        if ctx.obj.get("verbose"):
            import traceback
            traceback.print_exc()
        sys.exit(EXIT_FAILURE)

    formatter = get_formatter(format or config.output.format, config.output.precision)
    click.echo(formatter.format(result))

    if output:
        formatter.save(result, Path(output))


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format", "-f",
    type=click.Choice(OUTPUT_FORMATS),
    default="text",
    help="Output format"
)
@click.pass_context
def features(ctx, source, format):
    """
    Show the feature map of a single Rust source file.

    Examples:

        resemble features src/lib.rs

        resemble features src/lib.rs -f json
    """
    config = ctx.obj["config"]

    from resemble.engine import ResembleEngine
    from resemble.reporting.formatter import get_formatter

    try:
        counts = ResembleEngine(config).fingerprint_file(source)
    except SourceParseError as e:
        click.echo(f"Error: Failed to parse '{e.path}': {e.description}", err=True)
        sys.exit(EXIT_FAILURE)
    except ResembleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAILURE)

    formatter = get_formatter(format, config.output.precision)
    click.echo(formatter.format_features(counts))


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(),
    default="config.json",
    help="Output path for configuration file"
)
def init(output):
    """
    Initialize configuration file.

    Creates a default configuration file that can be customized.
    """
    Config.reset()
    Config.save_to_file(output)
    click.echo(f"Configuration saved to: {output}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
