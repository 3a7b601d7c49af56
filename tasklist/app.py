import logging
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator

import uvicorn
from fastapi import Depends, FastAPI, Path, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from .config import get_cors_origins, get_database_url, get_host, get_log_level, get_port
from .errors import PersistenceError, TaskError, TaskNotFoundError, TaskValidationError
from .logging_setup import setup_logging
from .models import TITLE_MAX_LENGTH, Base, ErrorResponse, InputTask, MessageResponse, OutputTask, UpdateTask
from .store import TaskStore

logger = logging.getLogger(__name__)

DATABASE_URL = get_database_url()

connect_args = {"check_same_thread": False} if make_url(DATABASE_URL).get_backend_name() == "sqlite" else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PERSISTENCE_MESSAGES = {
    "list": "Erro ao buscar tarefas",
    "insert": "Erro ao adicionar tarefa",
    "update": "Erro ao atualizar tarefa",
    "delete": "Erro ao excluir tarefa",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Base.metadata.create_all(bind=engine)
    logger.info("Task service ready, database %s", make_url(DATABASE_URL).render_as_string(hide_password=True))
    yield
    engine.dispose()


app = FastAPI(
    title="tasklist",
    lifespan=lifespan,
    responses={code: {"model": ErrorResponse} for code in (400, 404, 500)},
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
    allow_headers=["*"],
    allow_credentials=True,
)


def get_store() -> TaskStore:
    return TaskStore(SessionLocal)


# Largest value a 64-bit INTEGER primary key can hold.
MAX_TASK_ID = 2**63 - 1

TaskId = Annotated[int, Path(gt=0, le=MAX_TASK_ID)]


@app.exception_handler(TaskError)
async def handle_task_error(request: Request, exc: TaskError) -> JSONResponse:
    message = exc.message
    if isinstance(exc, PersistenceError):
        logger.error(
            "%s %s failed during %s (task_id=%s)",
            request.method,
            request.url.path,
            exc.operation,
            exc.task_id,
            exc_info=exc,
        )
        message = PERSISTENCE_MESSAGES.get(exc.operation, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0]["msg"] if errors else "invalid request"
    return JSONResponse(status_code=400, content={"error": f"Requisição inválida: {detail}"})


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s %s failed unexpectedly", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Erro interno do servidor"})


def clean_title(title: str | None) -> str:
    if title is None or not title.strip():
        raise TaskValidationError("O título é obrigatório")
    title = title.strip()
    if len(title) > TITLE_MAX_LENGTH:
        raise TaskValidationError(f"O título deve ter no máximo {TITLE_MAX_LENGTH} caracteres")
    return title


@app.get("/api/tasks", status_code=200)
def list_tasks(store: TaskStore = Depends(get_store)) -> list[OutputTask]:
    return store.list_all()


@app.post("/api/tasks", status_code=201)
def create_task(task: InputTask, store: TaskStore = Depends(get_store)) -> OutputTask:
    title = clean_title(task.title)
    new_task = store.insert(title)
    logger.info("Created task %s", new_task.id)
    return new_task


@app.put("/api/tasks/{task_id}", status_code=200)
def update_task(task_id: TaskId, task: UpdateTask, store: TaskStore = Depends(get_store)) -> OutputTask:
    title = clean_title(task.title) if task.title is not None else None
    updated = store.update(task_id, title=title, completed=task.completed)
    if updated is None:
        raise TaskNotFoundError(task_id)
    logger.info("Updated task %s", task_id)
    return updated


@app.delete("/api/tasks/{task_id}", status_code=200)
def delete_task(task_id: TaskId, store: TaskStore = Depends(get_store)) -> MessageResponse:
    removed = store.delete(task_id)
    if removed is None:
        raise TaskNotFoundError(task_id)
    logger.info("Deleted task %s", task_id)
    return MessageResponse(message=f"Tarefa {task_id} excluída com sucesso")


def run() -> None:
    setup_logging(get_log_level())
    uvicorn.run(app, host=get_host(), port=get_port())


if __name__ == "__main__":
    run()
