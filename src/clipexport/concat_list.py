"""Concat list files for ffmpeg's concat demuxer.

Format: UTF-8 text, one entry per line, `file '<path>'`. Order matters.
Embedded single quotes are not escaped, so paths containing one cannot be
represented. Lines that don't match the grammar exactly are ignored.
"""

from pathlib import Path

from .errors import ValidationError

_PREFIX = "file '"
_SUFFIX = "'"


def format_entry(path: str | Path) -> str:
    """One list line for `path`, with Windows separators flipped to '/'."""
    text = str(path).replace("\\", "/")
    if "'" in text:
        raise ValidationError(f"Concat list paths cannot contain single quotes: {text}")
    return f"{_PREFIX}{text}{_SUFFIX}"


def parse_entries(content: str) -> list[str]:
    """Paths referenced by `file '...'` lines, in order."""
    paths = []
    for line in content.splitlines():
        if not (line.startswith(_PREFIX) and line.endswith(_SUFFIX)):
            continue
        path = line[len(_PREFIX):-len(_SUFFIX)]
        if len(line) > len(_PREFIX) and path:
            paths.append(path)
    return paths


def write_concat_list(paths, list_path: str | Path) -> Path:
    """Write a concat list for `paths` and return the list's path."""
    list_path = Path(list_path)
    list_path.parent.mkdir(parents=True, exist_ok=True)
    lines = [format_entry(p) for p in paths]
    list_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return list_path


def read_concat_list(list_path: str | Path) -> list[str]:
    """Read a concat list back into its paths.

    Raises:
        ValidationError: No valid `file '...'` entries in the list.
    """
    content = Path(list_path).read_text(encoding="utf-8")
    paths = parse_entries(content)
    if not paths:
        raise ValidationError(f"No valid input files found in concat list: {list_path}")
    return paths
