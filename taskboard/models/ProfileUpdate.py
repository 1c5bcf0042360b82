from typing import Optional
from pydantic import BaseModel


class ProfileUpdate(BaseModel):
    """Only these two fields can be changed; email/password in the body are ignored."""
    name: Optional[str] = None
    bio: Optional[str] = None
