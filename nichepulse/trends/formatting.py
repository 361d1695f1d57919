"""Display formatting for counts shown in the dashboard."""


def format_view_count(count: int) -> str:
    """
    Compact display string for a count.

    >>> format_view_count(1_200_000)
    '1.2M'
    >>> format_view_count(850_000)
    '850.0K'
    """
    if count >= 1_000_000_000:
        return f"{count / 1_000_000_000:.1f}B"
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1_000:
        return f"{count / 1_000:.1f}K"
    return str(count)
