import logging
from contextlib import asynccontextmanager
from typing import Optional

import redis
from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskboard import auth, config, tasks, users
from taskboard.errors import AppError, AuthenticationError, StorageError
from taskboard.logging_setup import setup_logging
from taskboard.models import (
    MessageResponse,
    ProfileUpdate,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from taskboard.storage import TaskStore, UserStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL)
    if config.JWT_SECRET == config.DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET not set, using the development secret")
    logger.info("taskboard starting, redis=%s:%s", config.REDIS_HOST, config.REDIS_PORT)
    yield
    r.close()


app = FastAPI(title="taskboard", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.CORS_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

r = redis.Redis(host=config.REDIS_HOST, port=config.REDIS_PORT, db=config.REDIS_DB,
                decode_responses=True)
bearer = HTTPBearer(auto_error=False)


def get_task_store() -> TaskStore:
    return TaskStore(r)


def get_user_store() -> UserStore:
    return UserStore(r)


def current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    store: UserStore = Depends(get_user_store),
) -> str:
    if credentials is None:
        raise AuthenticationError("Not authorized, no token")
    return auth.authenticate(store, credentials.credentials)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    detail = exc.detail
    if isinstance(exc, StorageError):
        detail = "Server error"
    return JSONResponse(status_code=exc.status_code, content={"detail": detail})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # schema failures answer 400 like every other validation error
    detail = "; ".join(
        ".".join(str(part) for part in err["loc"]) + ": " + err["msg"] for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"detail": detail or "Invalid request"})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Server error"})


@app.get("/")
async def root():
    return {"message": "API is running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.post("/api/auth/register", status_code=201, response_model=TokenResponse)
def register(body: UserCreate, store: UserStore = Depends(get_user_store)):
    user, token = auth.register(store, body.name, body.email, body.password)
    return TokenResponse(token=token, user=UserResponse.from_doc(user))


@app.post("/api/auth/login", response_model=TokenResponse)
def login(body: UserLogin, store: UserStore = Depends(get_user_store)):
    user, token = auth.login(store, body.email, body.password)
    return TokenResponse(token=token, user=UserResponse.from_doc(user))


@app.get("/api/users/me", response_model=UserResponse)
def get_me(user_id: str = Depends(current_user_id),
           store: UserStore = Depends(get_user_store)):
    return UserResponse.from_doc(users.get_profile(store, user_id))


@app.put("/api/users/me", response_model=UserResponse)
def update_me(body: ProfileUpdate, user_id: str = Depends(current_user_id),
              store: UserStore = Depends(get_user_store)):
    user = users.update_profile(store, user_id, body.model_dump(exclude_unset=True))
    return UserResponse.from_doc(user)


@app.get("/api/tasks", response_model=list[TaskResponse])
def list_tasks(status: Optional[str] = Query(default=None),
               search: Optional[str] = Query(default=None),
               user_id: str = Depends(current_user_id),
               store: TaskStore = Depends(get_task_store)):
    found = tasks.list_tasks(store, user_id, status=status, search=search)
    return [TaskResponse.from_doc(doc) for doc in found]


@app.post("/api/tasks", status_code=201, response_model=TaskResponse)
def create_task(body: TaskCreate, user_id: str = Depends(current_user_id),
                store: TaskStore = Depends(get_task_store)):
    task = tasks.create_task(store, user_id, body.title, body.description, body.status)
    return TaskResponse.from_doc(task)


@app.put("/api/tasks/{task_id}", response_model=TaskResponse)
def update_task(task_id: str, updates: TaskUpdate,
                user_id: str = Depends(current_user_id),
                store: TaskStore = Depends(get_task_store)):
    task = tasks.update_task(store, user_id, task_id, updates.model_dump(exclude_unset=True))
    return TaskResponse.from_doc(task)


@app.delete("/api/tasks/{task_id}", response_model=MessageResponse)
def delete_task(task_id: str, user_id: str = Depends(current_user_id),
                store: TaskStore = Depends(get_task_store)):
    tasks.delete_task(store, user_id, task_id)
    return MessageResponse(message="Task removed")
