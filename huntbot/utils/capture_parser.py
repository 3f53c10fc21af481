# huntbot/utils/capture_parser.py
from __future__ import annotations

import re
from dataclasses import dataclass

CAPTURE_TAG = "#capture"

_MENTION_RE = re.compile(r"^@([A-Za-z0-9_]{3,64})$")


@dataclass(frozen=True, slots=True)
class ParsedCaption:
    recipient_username: str | None
    capture: bool
    claimed_challenge: str | None
    text: str


def parse_post_caption(caption: str | None) -> ParsedCaption:
    """
    Accepts:
      @mina sketching at the fountain          -> plain drop tagging @mina
      #capture @mina | Catch your ghost ...    -> drop + capture claim
      #capture @mina Catch your ghost ...      -> same, without the pipe

    Raises ValueError for a #capture caption without a target or challenge.
    """
    raw = (caption or "").strip()
    if not raw:
        return ParsedCaption(recipient_username=None, capture=False, claimed_challenge=None, text="")

    tokens = raw.split(maxsplit=1)
    capture = tokens[0].lower() == CAPTURE_TAG
    rest = tokens[1].strip() if capture and len(tokens) > 1 else ("" if capture else raw)

    parts = rest.split(maxsplit=1)
    recipient: str | None = None
    tail = rest
    if parts:
        m = _MENTION_RE.match(parts[0])
        if m:
            recipient = m.group(1)
            tail = parts[1].strip() if len(parts) > 1 else ""

    if not capture:
        return ParsedCaption(recipient_username=recipient, capture=False, claimed_challenge=None, text=raw)

    if recipient is None:
        raise ValueError("Tag the ghost you caught. Example: #capture @username | challenge")

    challenge = tail.lstrip("|").strip()
    if not challenge:
        raise ValueError("Add this week's challenge after the ghost. Example: #capture @username | challenge")

    return ParsedCaption(recipient_username=recipient, capture=True, claimed_challenge=challenge, text=raw)
