class TaskError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TaskValidationError(TaskError):
    status_code = 400


class TaskNotFoundError(TaskError):
    status_code = 404

    def __init__(self, task_id: int, message: str = "Tarefa não encontrada") -> None:
        super().__init__(message)
        self.task_id = task_id


class PersistenceError(TaskError):
    status_code = 500

    def __init__(self, operation: str, task_id: int | None = None, message: str = "Erro no banco de dados") -> None:
        super().__init__(message)
        self.operation = operation
        self.task_id = task_id
