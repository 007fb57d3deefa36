"""JSON interchange format for rendered sequences.

The format is read by external viewers and must round-trip exactly:

    {
        "fps": 30.0,
        "columns": 80,
        "rows": 24,
        "color": true,
        "frames": [[[{"char": "#", "color": [r, g, b]}, ...], ...], ...]
    }

Frames hold rows, rows hold cells. Cells carry a color only when the sequence
was written with color enabled.
"""

import json
from pathlib import Path

from img2ascii.domain import AnimationSequence
from img2ascii.exceptions import OutputError


def dumps_sequence(sequence: AnimationSequence, color: bool = True) -> str:
    """Encode a sequence as interchange JSON."""
    return json.dumps(sequence.to_dict(color=color), ensure_ascii=False, separators=(",", ":"))


def loads_sequence(text: str) -> AnimationSequence:
    """Decode interchange JSON into a sequence.

    Raises:
        ValueError: If the document is not valid interchange JSON
    """
    try:
        return AnimationSequence.from_dict(json.loads(text))
    except (KeyError, TypeError, IndexError) as e:
        raise ValueError(f"Invalid sequence document: {e}") from e


def write_sequence_json(sequence: AnimationSequence, path: Path, color: bool = True) -> None:
    """Write a sequence to a JSON file.

    Raises:
        OutputError: If the file cannot be written
    """
    try:
        path.write_text(dumps_sequence(sequence, color=color), encoding="utf-8")
    except OSError as e:
        raise OutputError(str(path), str(e)) from e


def read_sequence_json(path: Path) -> AnimationSequence:
    """Read a sequence from a JSON file."""
    return loads_sequence(path.read_text(encoding="utf-8"))
