"""
Single import point for the ORM models, so every model is registered on
`Base.metadata` before tables are created:

    from investflow.models import Portfolio
"""

from .portfolio import Portfolio

__all__ = [
    "Portfolio",
]
