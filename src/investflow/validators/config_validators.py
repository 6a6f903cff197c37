def to_uppercase(value: str | None) -> str | None:
    """
    Uppercase a settings value, passing None through.
    """
    if value is None:
        return None
    return value.strip().upper()

def to_lowercase(value: str | None) -> str | None:
    """
    Lowercase a settings value, passing None through.
    """
    if value is None:
        return None
    return value.strip().lower()
