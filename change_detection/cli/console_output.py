# change_detection/cli/console_output.py
"""
Handles printing summary information to the console (stderr) during CLI execution.
"""
import click
import structlog

log = structlog.get_logger(__name__)

def print_cli_summary_output(config, emitted_count: int):
    """
    Prints the number of declared roots and emitted instructions to stderr.
    'config' is an instance of ChangeDetectionConfig.
    """
    log.debug("console_summary_output_requested")

    if not config.console_show_summary:
        return

    click.secho("--- Change Detection Summary ---", fg="cyan", err=True)
    click.echo(f"Declared paths: {len(config.input_paths)}", err=True)
    if config.include_patterns:
        click.echo(f"Global include: {', '.join(config.include_patterns)}", err=True)
    if config.exclude_patterns:
        click.echo(f"Global exclude: {', '.join(config.exclude_patterns)}", err=True)
    destination = str(config.output_file) if config.output_file else "stdout"
    click.secho(f"Instructions emitted: {emitted_count:,} (to {destination})", fg="yellow", err=True)
