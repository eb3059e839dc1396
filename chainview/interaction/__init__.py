from .actions import ActionType, InteractionRequest

__all__ = ['ActionType', 'InteractionRequest']
