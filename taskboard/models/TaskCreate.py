from typing import Optional
from pydantic import BaseModel


class TaskCreate(BaseModel):
    # title is checked by the controller so a missing one is a 400, not a 422
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
