import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .errors import PersistenceError
from .models import OutputTask, TaskDB

logger = logging.getLogger(__name__)


class TaskStore:
    # update() and delete() return None when no row matches the id.
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, operation: str, task_id: int | None = None) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            raise PersistenceError(operation, task_id) from exc
        finally:
            db.close()

    def list_all(self) -> list[OutputTask]:
        with self._session("list") as db:
            tasks = db.query(TaskDB).order_by(TaskDB.id).all()
            return [OutputTask(**task.to_dict()) for task in tasks]

    def insert(self, title: str) -> OutputTask:
        with self._session("insert") as db:
            new_task = TaskDB(title=title, completed=False)
            db.add(new_task)
            db.commit()
            db.refresh(new_task)
            logger.debug("Inserted %r", new_task)
            return OutputTask(**new_task.to_dict())

    def update(self, task_id: int, title: str | None = None, completed: bool | None = None) -> OutputTask | None:
        with self._session("update", task_id) as db:
            task = db.query(TaskDB).filter(TaskDB.id == task_id).first()
            if not task:
                return None
            if title is not None:
                task.title = title
            if completed is not None:
                task.completed = completed
            db.commit()
            db.refresh(task)
            logger.debug("Updated %r", task)
            return OutputTask(**task.to_dict())

    def delete(self, task_id: int) -> OutputTask | None:
        with self._session("delete", task_id) as db:
            task = db.query(TaskDB).filter(TaskDB.id == task_id).first()
            if not task:
                return None
            removed = OutputTask(**task.to_dict())
            db.delete(task)
            db.commit()
            logger.debug("Deleted %r", removed)
            return removed
