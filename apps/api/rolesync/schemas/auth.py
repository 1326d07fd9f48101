"""Authentication schemas."""

from pydantic import BaseModel, Field


class AuthContext(BaseModel):
    """Verified caller identity plus the role claim issued to it, if any."""

    subject_id: str = Field(min_length=1)
    role: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
