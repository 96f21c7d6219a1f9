import logging
import sys

import typer

from ketplan.commands import plan
from ketplan.logging import setup_logger

app = typer.Typer()

debug_mode = False


# Configure logging
def setup_logging(debug_mode: bool = False) -> logging.Logger:
    """Configure the package logger based on debug mode."""
    logger = setup_logger("ketplan", logging.DEBUG if debug_mode else None)
    for handler in logger.handlers:
        handler.setLevel(logger.level)
        # stdout is swapped per invocation under typer's CliRunner; write to the current one
        if isinstance(handler, logging.StreamHandler):
            handler.setStream(sys.stdout)
    return logger


app.add_typer(plan.app, name="plan")


# Global options callback
@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """ketplan - cluster plan file management."""
    global debug_mode
    debug_mode = debug
    logger = setup_logging(debug)
    if debug:
        logger.debug("Debug mode enabled")


if __name__ == "__main__":
    try:
        app()
    except Exception as e:
        if debug_mode:
            import traceback
            logging.error(f"Unhandled exception: {e}\n{traceback.format_exc()}")
        else:
            logging.error(f"Error: {e}")
        sys.exit(1)
