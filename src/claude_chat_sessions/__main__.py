"""Entry point for `python -m claude_chat_sessions`."""

import sys


def main():
    from claude_chat_sessions.cli import cli
    sys.exit(cli())


if __name__ == "__main__":
    main()
