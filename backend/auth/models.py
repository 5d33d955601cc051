from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class LoginRequest(BaseModel):
    # Le client envoie "emailOrUsername"
    model_config = ConfigDict(populate_by_name=True)

    email_or_username: str = Field(alias="emailOrUsername", min_length=1)
    password: str = Field(min_length=1)


class AuthResponse:
    def __init__(
        self,
        token: str,
        user: Dict[str, Any],
        message: Optional[str] = None,
    ):
        self.token = token
        self.user = user
        self.message = message or "Connexion réussie"

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "token": self.token, "user": self.user}
