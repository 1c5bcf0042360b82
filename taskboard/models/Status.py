from typing import Literal, get_args

Status = Literal["pending", "in-progress", "completed"]
STATUSES = get_args(Status)
DEFAULT_STATUS = "pending"


def is_valid_status(value) -> bool:
    return value in STATUSES
