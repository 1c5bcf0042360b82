from pydantic import BaseModel
from .UserResponse import UserResponse


class TokenResponse(BaseModel):
    token: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
