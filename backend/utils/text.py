# utils/text.py


def split_comma_separated(value):
    """
    Split comma separated form text into trimmed, non-empty segments.

    >>> split_comma_separated("wifi, parking, ")
    ['wifi', 'parking']
    """
    if not value:
        return []
    return [segment.strip() for segment in value.split(",") if segment.strip()]


def join_comma_separated(values):
    return ", ".join(values or [])
