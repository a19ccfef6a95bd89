from combparse.source import EOF


def drain(source) -> str:
    """Read everything left in a source."""
    chars = []
    while (c := source.read()) is not EOF:
        chars.append(c)
    return "".join(chars)
