from __future__ import annotations

_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size_bytes: int) -> str:
    """Человекочитаемый размер: `0 Bytes`, `1.5 KB`, `2 MB`."""
    if size_bytes < 0:
        raise ValueError("size_bytes must be non-negative")
    value = float(size_bytes)
    i = 0
    while value >= 1024 and i < len(_UNITS) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {_UNITS[i]}"
