from pydantic import BaseModel, ConfigDict, EmailStr, constr
from typing import Optional


class UserCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=120)
    email: EmailStr
    password: constr(min_length=6, max_length=128)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    email: EmailStr


class AuthData(BaseModel):
    token: str
    user: UserOut


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    data: AuthData
