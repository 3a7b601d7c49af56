import logging
from dataclasses import dataclass

from .client import TaskClient
from .models import OutputTask

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Viewing:
    pass


@dataclass(frozen=True)
class Editing:
    task_id: int
    buffer: str


EditState = Viewing | Editing

VIEWING = Viewing()


class TaskBoard:
    def __init__(self, client: TaskClient) -> None:
        self.client = client
        self.tasks: list[OutputTask] = []
        self.edit: EditState = VIEWING
        self.new_title = ""

    @property
    def editing_id(self) -> int | None:
        return self.edit.task_id if isinstance(self.edit, Editing) else None

    def is_editing(self, task_id: int) -> bool:
        return self.editing_id == task_id

    def get(self, task_id: int) -> OutputTask | None:
        return next((task for task in self.tasks if task.id == task_id), None)

    def load(self) -> list[OutputTask]:
        self.tasks = self.client.list_tasks()
        return self.tasks

    def add_task(self, title: str | None = None) -> OutputTask | None:
        title = (self.new_title if title is None else title).strip()
        if not title:
            return None
        task = self.client.create_task(title)
        self.tasks = [*self.tasks, task]
        self.new_title = ""
        return task

    def delete_task(self, task_id: int) -> None:
        self.client.delete_task(task_id)
        self.tasks = [task for task in self.tasks if task.id != task_id]
        if self.is_editing(task_id):
            self.edit = VIEWING

    def toggle_completed(self, task_id: int) -> OutputTask:
        task = self.get(task_id)
        if task is None:
            raise KeyError(task_id)
        updated = self.client.update_task(task_id, completed=not task.completed)
        self._replace(updated)
        return updated

    def start_edit(self, task_id: int) -> None:
        task = self.get(task_id)
        if task is None:
            raise KeyError(task_id)
        # Replacing the slot drops any other unsaved edit.
        self.edit = Editing(task_id=task.id, buffer=task.title)

    def set_edit_text(self, text: str) -> None:
        if isinstance(self.edit, Editing):
            self.edit = Editing(task_id=self.edit.task_id, buffer=text)

    def save_edit(self) -> OutputTask | None:
        if not isinstance(self.edit, Editing):
            return None
        edit = self.edit
        if not edit.buffer.strip():
            self.edit = VIEWING
            return None
        updated = self.client.update_task(edit.task_id, title=edit.buffer)
        self._replace(updated)
        self.edit = VIEWING
        logger.debug("Saved edit of task %s", edit.task_id)
        return updated

    def cancel_edit(self) -> None:
        self.edit = VIEWING

    def _replace(self, updated: OutputTask) -> None:
        self.tasks = [updated if task.id == updated.id else task for task in self.tasks]
