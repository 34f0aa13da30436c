from __future__ import annotations

from typing import Callable, List

Measure = Callable[[str], float]


def wrap_text(text: str, measure: Measure, max_width: float) -> List[str]:
    """Greedy word wrap.

    A word is appended to the current line while the measured result stays
    below ``max_width``; otherwise the line is closed and the word starts the
    next one. Words are never split, so a single word wider than
    ``max_width`` overflows on its own line.
    """
    words = (text or "").split()
    if not words:
        return []
    lines: List[str] = []
    line = words[0]
    for word in words[1:]:
        candidate = f"{line} {word}"
        if max_width > 0 and measure(candidate) < max_width:
            line = candidate
        else:
            lines.append(line)
            line = word
    if line:
        lines.append(line)
    return lines
