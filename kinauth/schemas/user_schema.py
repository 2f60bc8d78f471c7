from datetime import date
from typing import Any, Optional
from pydantic import BaseModel, field_validator


class UserOut(BaseModel):
    """Public view of a user row. The password hash is never part of it."""
    id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[date] = None
    avatar_url: Optional[str] = None
    country_code: Optional[str] = None

    model_config = {
        "from_attributes": True
    }

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)
