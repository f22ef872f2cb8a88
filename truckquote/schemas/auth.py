from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional


class RegisterIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: Optional[str] = None
    company: Optional[str] = None


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
