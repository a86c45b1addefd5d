"""Character counting against a length limit."""

import re

from .models import CountResult

_WHITESPACE = re.compile(r"\s")

# Counts below this fraction of the limit are flagged as too short
FALL_BELOW_RATIO = 0.8


def count_characters(text: str, number_limit: float) -> CountResult:
    """Count non-whitespace characters in *text* and compare with *number_limit*.

    Returns:
        CountResult with the count, both threshold flags and a two-line message.
    """
    count = len(_WHITESPACE.sub("", text))
    threshold = number_limit * FALL_BELOW_RATIO
    is_exceeded = count > number_limit
    is_fall_below = count < threshold

    if is_exceeded:
        message = f"Character count exceeds the limit ({_fmt(number_limit)}). Current count: {count}"
    else:
        message = f"Character count is within the limit. Current count: {count}"
    if is_fall_below:
        message += f"\nCharacter count is below 80% of the limit ({_fmt(threshold)})."
    else:
        message += f"\nCharacter count is at or above 80% of the limit ({_fmt(threshold)})."

    return CountResult(
        success=True,
        message=message,
        count=count,
        is_exceeded=is_exceeded,
        is_fall_below=is_fall_below,
    )


def _fmt(value: float) -> str:
    # 100.0 -> "100", 0.8 * 7 -> "5.6"
    return f"{value:.10g}"
