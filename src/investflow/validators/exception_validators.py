"""
Model-introspection helpers used by `BaseRepository.update` to reject bad
input before any UPDATE is attempted.
"""
from sqlalchemy import inspect as sa_inspect


def find_unknown_model_kwargs(model, kwargs: dict) -> list[str]:
    """
    Keys in `kwargs` that are not mapped attributes of `model` (the class, not an instance).
    """
    allowed = {attr.key for attr in sa_inspect(model).attrs}
    return [k for k in kwargs if k not in allowed]
