from typing import Optional
from pydantic import BaseModel


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
