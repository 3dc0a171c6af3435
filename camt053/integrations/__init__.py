"""
Integrations with third-party libraries like Pydantic and FastAPI.
"""

from .pydantic import PydanticMessage, from_message
from .fastapi import get_camt053_message

__all__ = ["from_message", "PydanticMessage", "get_camt053_message"]
