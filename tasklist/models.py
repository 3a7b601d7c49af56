from typing import Annotated

from pydantic import BaseModel, Field
from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

TITLE_MAX_LENGTH = 255

Base = declarative_base()


# ---------- Database Models ----------
class TaskDB(Base):
    __tablename__ = "tasks"
    # Keep ids monotonic on SQLite too, deleted ids are never handed out again.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"Task(id: {self.id}, title: '{self.title}', completed: {self.completed})"

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "completed": self.completed}


# ---------- Data Models ----------
class InputTask(BaseModel):
    # Title is optional here so that a missing title is reported as a 400 by the handler.
    title: str | None = None


class UpdateTask(BaseModel):
    title: str | None = None
    completed: bool | None = None


class OutputTask(BaseModel):
    id: Annotated[int, Field(gt=0)]
    title: str
    completed: bool = False


class ErrorResponse(BaseModel):
    error: str


class MessageResponse(BaseModel):
    message: str
