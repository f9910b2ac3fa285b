"""
Pydantic models for identity-provider webhook events.
"""

from typing import Any, Dict
from pydantic import BaseModel, Field


class IdentityEvent(BaseModel):
    """User lifecycle event pushed by the identity provider."""
    type: str  # "user.created" | "user.updated" | "user.deleted"
    data: Dict[str, Any] = Field(default_factory=dict)
