from typing import Optional
from pydantic import BaseModel, EmailStr


class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
