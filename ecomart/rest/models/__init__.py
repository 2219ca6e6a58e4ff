# Export all models for easy importing
from .chat import ChatRequest

__all__ = [
    # Chat models
    "ChatRequest",
]
