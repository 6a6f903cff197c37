from .portfolio_mapper import to_entity, to_response, to_changes

__all__ = ["to_entity", "to_response", "to_changes"]
