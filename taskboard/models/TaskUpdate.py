from typing import Any, Optional
from pydantic import BaseModel


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    # any JSON value: anything outside the three statuses is dropped by the controller
    status: Optional[Any] = None
