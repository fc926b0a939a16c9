# change_detection/main.py
"""Main entry point for the change-detection CLI application."""

from change_detection.cli.interface import main_cli_group


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli_group(prog_name="change-detection")

if __name__ == '__main__':
    entrypoint()
