from .Status import Status, STATUSES, DEFAULT_STATUS, is_valid_status
from .TaskCreate import TaskCreate
from .TaskUpdate import TaskUpdate
from .TaskResponse import TaskResponse
from .UserCreate import UserCreate
from .UserLogin import UserLogin
from .ProfileUpdate import ProfileUpdate
from .UserResponse import UserResponse
from .TokenResponse import TokenResponse, MessageResponse
