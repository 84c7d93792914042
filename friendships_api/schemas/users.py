from pydantic import BaseModel, EmailStr
from typing import Optional

class RegisterIn(BaseModel):
    username: str
    email: EmailStr
    password: str
    display_name: Optional[str] = None

class TokenOut(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    refresh_token: str | None = None

class UserOut(BaseModel):
    id: int
    username: str
    email: EmailStr
    display_name: Optional[str] = None

    class Config:
        from_attributes = True

class RefreshIn(BaseModel):
    refresh_token: str
