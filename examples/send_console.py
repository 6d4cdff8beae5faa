"""Load a message from JSON and "send" it with the console provider."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from owl import Message, Params, send

_REQUEST = """
{
    "message": {"from": "contato@example.com", "to": ["cliente@example.com"],
                "subject": "Bem-vindo", "body": "Olá!"},
    "params": {"provider": "console"}
}
"""


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    request = json.loads(_REQUEST)
    send(Message.from_dict(request["message"]), Params.from_dict(request["params"]))


if __name__ == "__main__":
    main()
