# src/gptsession/cli.py
"""
Command-line interface for one conversational turn.

    gptsession [--history chat.history] [--system TEXT] [--image PATH] PROMPT

With ``--history`` the conversation is resumed from (and appended to) a
JSON Lines file, so repeated invocations continue the same conversation.
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .api import GPTClient
from .logging_config import configure_logging, enable_console_logging, log_display

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gptsession",
        description="Send a prompt to a chat completion endpoint, optionally continuing a saved conversation.",
    )
    parser.add_argument("prompt", help="The user prompt to send")
    parser.add_argument("--config", "-c", dest="config_file", help="Path to .openai.yaml (default: search upwards from cwd)")
    parser.add_argument("--token", help="API token (default: config file, then OPENAI_API_KEY)")
    parser.add_argument("--model", "-m", help="Model identifier (default: config file)")
    parser.add_argument("--history", help="JSON Lines history file to resume and append to")
    parser.add_argument("--system", help="System prompt for a new conversation")
    parser.add_argument("--image", help="Image file to attach to the prompt")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show log output on the console")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Run one turn. Returns the process exit code."""
    parsed = create_parser().parse_args(args)

    configure_logging(app_name="gptsession", config_file_path=parsed.config_file)
    if parsed.verbose:
        enable_console_logging("DEBUG")

    with GPTClient(token=parsed.token, model=parsed.model, config_file=parsed.config_file) as client:
        session = client.new_session()

        if parsed.history:
            def seed() -> None:
                if parsed.system:
                    session.append(session.new_message("system").set_text(parsed.system))

            session.enable_auto_sync(parsed.history, seed)
            log_display(logger, logging.INFO, "Conversation history: %s (%d records)", parsed.history, len(session))
        elif parsed.system:
            session.append(session.new_message("system").set_text(parsed.system))

        session.append(lambda s: s.new_message("user").set_text(parsed.prompt).set_image(parsed.image))

        response = client.new_request(lambda req: req.attach_session(session))

        if not response.success:
            sys.stderr.write(f"{response.error}\n")
            return 1

        if response.completion:
            sys.stdout.write(response.completion)
            session.append(session.new_message("assistant").set_text(response.completion))
        elif response.function_call:
            sys.stdout.write(f"Function call: {response.function_call.get('name')}\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
