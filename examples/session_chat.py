# examples/session_chat.py
"""
Example demonstrating a persistent multi-turn conversation with gptsession.

This script shows how to:
1. Create a GPTClient (reads .openai.yaml from the current directory or a parent).
2. Arm auto-sync so every turn is appended to a JSON Lines history file.
3. Seed a system prompt only when the history file is new.
4. Send several prompts, appending each reply back into the session.
5. Reload the history file and inspect it.

To run this example:
- Install the package (`pip install .`).
- Provide a model in .openai.yaml and a token there or in OPENAI_API_KEY.
- Run it twice: the second run resumes the conversation from example_chat.history.
"""

import logging

from gptsession import GPTClient, Session
from gptsession.logging_config import configure_logging

configure_logging(app_name="session_chat", config={"console_enabled": True, "console_level": "INFO"})
logger = logging.getLogger(__name__)

HISTORY_FILE = "example_chat.history"


def main():
    """Runs the session chat example."""
    with GPTClient() as client:
        session = client.new_session()

        # --- Resume the conversation, or start it with a system message ---
        session.enable_auto_sync(HISTORY_FILE, lambda: session.append(
            session.new_message("system").set_text("You are a helpful AI assistant explaining complex topics simply.")))
        logger.info(f"Session has {len(session)} records after enabling auto-sync.")

        prompts = [
            "My name is Alex. Give me a brief overview of Large Language Models.",
            "What was the first topic I asked about, and what is my name?",
        ]

        for prompt in prompts:
            logger.info(f"Alex: {prompt}")
            session.append(lambda s: s.new_message("user").set_text(prompt))

            response = client.new_request(lambda req: req.attach_session(session))
            if not response.success:
                logger.error(f"Request failed: {response.error}")
                return

            if response.completion:
                logger.info(f"LLM: {response.completion}")
                session.append(session.new_message("assistant").set_text(response.completion))

        # --- Verify the history file ---
        saved = Session.load(HISTORY_FILE)
        logger.info(f"History file holds {len(saved)} records; last role: {saved.dump()[-1]['role']}")


if __name__ == "__main__":
    main()
