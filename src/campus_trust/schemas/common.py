"""Shared schema fragments."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from ..models import AccountStatus, UserRole


class UserSummary(BaseModel):
    """Lightweight projection of a user's trust-relevant details."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    username: str
    name: str
    role: UserRole
    credibility_score: float
    reputation_score: float
    account_status: AccountStatus


class Message(BaseModel):
    message: str
