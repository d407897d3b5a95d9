# routines/intent_lines.py

from typing import List


def split_intent_lines(text: str) -> List[str]:
    """
    Split the multi-line authoring text into candidate commands.

    Each line is trimmed and blank lines are dropped, so the index of an item
    in the returned list (plus one) is the line number the user sees.
    """
    if not text:
        return []
    lines = []
    # only "\n" separates commands; strip() takes care of "\r\n"
    for raw in text.split("\n"):
        line = raw.strip()
        if line:
            lines.append(line)
    return lines
