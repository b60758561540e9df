def split_lines(text: str) -> list[str]:
    """Non-blank lines of `text`, each stripped."""
    return [line.strip() for line in text.splitlines() if line.strip()]
