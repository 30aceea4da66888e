import os
from typing import Optional


def number_lines(text: str) -> str:
    """Prefix every line with its 1-based index, e.g. `1> #!/bin/bash`."""
    return "\n".join(f"{idx}> {line}" for idx, line in enumerate(text.split("\n"), start=1))


def load_file_with_line_numbers(path: str) -> Optional[str]:
    """Returns the line-numbered content of `path`, or None if it is not an existing file."""
    if not os.path.isfile(path):
        return None

    with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
        return number_lines(f.read())
