"""InvestFlow: investment portfolio lifecycle backend."""

__version__ = "0.1.0"
