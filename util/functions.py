def clip_chars(text: str | None, max_chars: int = 200) -> str:
    """
    - Trim 'text' to at most `max_chars` characters for log previews.
    - Adds an ellipsis when trimming occurs.
    """
    if not text:
        return ""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + " …"


def clean_str(value) -> str:
    """Return a stripped string for str inputs, '' for anything else."""
    return value.strip() if isinstance(value, str) else ""


def clean_context(value) -> str:
    """Stripped text for strings, str() for plain numbers, '' for anything else."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return clean_str(value)
