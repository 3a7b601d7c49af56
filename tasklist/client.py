import logging
from typing import Any

import httpx

from .models import OutputTask

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001/api"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return response.text


class TaskApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class TaskClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, http: httpx.Client | None = None, timeout: float = 10.0) -> None:
        self._http = http if http is not None else httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, json: dict | None = None) -> Any:
        try:
            response = self._http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TaskApiError(f"Falha de comunicação com o servidor: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning("%s %s returned %s: %s", method, path, response.status_code, message)
            raise TaskApiError(message, response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise TaskApiError("Resposta inválida do servidor", response.status_code) from exc

    def list_tasks(self) -> list[OutputTask]:
        return [OutputTask(**task) for task in self._request("GET", "/tasks")]

    def create_task(self, title: str) -> OutputTask:
        return OutputTask(**self._request("POST", "/tasks", json={"title": title}))

    def update_task(self, task_id: int, title: str | None = None, completed: bool | None = None) -> OutputTask:
        body: dict[str, Any] = {}
        if title is not None:
            body["title"] = title
        if completed is not None:
            body["completed"] = completed
        return OutputTask(**self._request("PUT", f"/tasks/{task_id}", json=body))

    def delete_task(self, task_id: int) -> str:
        return self._request("DELETE", f"/tasks/{task_id}")["message"]
