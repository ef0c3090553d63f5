#!/usr/bin/env python
"""Chat with the dialogue manager from a terminal, one transcript per line."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive text client for the banking dialogue manager")
    parser.add_argument(
        "--templates",
        type=Path,
        help="Optional YAML file overriding response templates.",
    )
    parser.add_argument(
        "--balance",
        type=int,
        default=5000,
        help="Mock balance reported for balance enquiries.",
    )
    parser.add_argument(
        "--show-state",
        action="store_true",
        help="Print the conversation state after every turn.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

    from gazapay.dialogue.manager import DialogueManager  # noqa: WPS433
    from gazapay.dialogue.templates import load_catalog  # noqa: WPS433
    from gazapay.dialogue.types import ConversationState  # noqa: WPS433

    manager = DialogueManager(catalog=load_catalog(args.templates), mock_balance=args.balance)
    state = ConversationState.idle()

    print("Type a request (Ctrl-D to quit).")
    for line in sys.stdin:
        transcript = line.strip()
        if not transcript:
            continue
        result = manager.process(transcript, state)
        state = result.new_state
        print(f"[{result.intent.value}] {result.response}")
        if args.show_state:
            print(json.dumps(state.to_dict(), ensure_ascii=False))


if __name__ == "__main__":
    main()
