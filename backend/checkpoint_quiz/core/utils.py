from typing import Any


def normalize_text(text: str) -> str:
    """
    Canonical form used for answer comparison: case-folded, runs of
    whitespace collapsed to a single space, leading/trailing space trimmed.
    """
    if not text:
        return ""
    return " ".join(text.split()).casefold()


def sanitize_null_bytes(data: Any) -> Any:
    """
    Recursively remove null bytes (x00) from strings, lists, and dictionaries.
    Model output occasionally carries them and they break line splitting.
    """
    if isinstance(data, str):
        return data.replace("\x00", "")
    elif isinstance(data, list):
        return [sanitize_null_bytes(item) for item in data]
    elif isinstance(data, dict):
        return {key: sanitize_null_bytes(value) for key, value in data.items()}
    else:
        return data
