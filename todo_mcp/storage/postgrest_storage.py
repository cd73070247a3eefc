"""
PostgREST (Supabase REST) implementation of the storage interface.

Each operation is one request against /rest/v1/<table>, filtered server-side
and keyed by id. Rows use snake_case columns and are translated to Task.
"""
import logging
from typing import Optional, List, Dict, Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from todo_mcp.exceptions import DatabaseError
from todo_mcp.models import Task, TaskCreate, TaskUpdate, TaskFilter, utc_now
from .interface import StorageInterface

logger = logging.getLogger(__name__)

# PostgREST: singular response requested but zero rows matched.
NO_ROWS_CODE = "PGRST116"
# Postgres: value could not be parsed for the column type (e.g. a malformed uuid).
INVALID_TEXT_CODE = "22P02"

SINGLE_OBJECT = "application/vnd.pgrst.object+json"


def _quote(value: str) -> str:
    """Double-quote a value for use inside a PostgREST filter expression."""
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"') + '"'


def _like_pattern(query: str) -> str:
    """Escape LIKE metacharacters and wrap the query for substring matching."""
    escaped = query.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f"%{escaped}%"


class PostgRESTStorage(StorageInterface):
    """Remote relational task storage over a thin HTTP client."""

    backend_name = "postgrest"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "todos",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None
    ):
        """
        Initialize remote storage.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co
            api_key: Key sent as both apikey and bearer token
            table: Table holding the task rows
            timeout: Per-request timeout in seconds
            client: Pre-built client (tests pass one with a mock transport)
        """
        if not base_url or not api_key:
            raise ValueError("PostgREST storage requires both a base URL and an API key")
        self.table = table
        self._client = client or httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            },
            timeout=timeout,
        )

    def _request(
        self,
        operation: str,
        method: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        try:
            return self._client.request(
                method,
                f"/{self.table}",
                params=params,
                json=body,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error(f"Remote store {operation} failed: {type(e).__name__}")
            raise DatabaseError(f"Remote store unreachable during {operation}", operation=operation, original_error=e)

    @staticmethod
    def _error_code(response: httpx.Response) -> Optional[str]:
        try:
            payload = response.json()
        except ValueError:
            return None
        return payload.get("code") if isinstance(payload, dict) else None

    def _check(self, operation: str, response: httpx.Response) -> None:
        if response.is_success:
            return
        code = self._error_code(response)
        logger.error(f"Remote store {operation} returned {response.status_code} (code={code})")
        raise DatabaseError(
            f"Remote store {operation} failed with status {response.status_code}",
            operation=operation,
            context={"status_code": response.status_code, "code": code}
        )

    def _single(self, operation: str, response: httpx.Response) -> Optional[Task]:
        """Decode a single-object response; the no-row sentinel becomes None."""
        if not response.is_success and self._error_code(response) in (NO_ROWS_CODE, INVALID_TEXT_CODE):
            return None
        self._check(operation, response)
        return self._to_task(operation, self._json(operation, response))

    def _many(self, operation: str, response: httpx.Response) -> List[Task]:
        self._check(operation, response)
        rows = self._json(operation, response)
        if not isinstance(rows, list):
            raise DatabaseError(f"Remote store {operation} returned a non-array body", operation=operation)
        return [self._to_task(operation, row) for row in rows]

    @staticmethod
    def _json(operation: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise DatabaseError(f"Remote store {operation} returned invalid JSON", operation=operation, original_error=e)

    @staticmethod
    def _to_task(operation: str, row: Any) -> Task:
        try:
            return Task.from_row(row)
        except (KeyError, TypeError, PydanticValidationError) as e:
            raise DatabaseError(f"Remote store {operation} returned a malformed row", operation=operation, original_error=e)

    def create(self, data: TaskCreate) -> Task:
        body = {
            "title": data.title,
            "description": data.description,
            "priority": data.priority,
            "due_date": data.due_date,
            "tags": list(data.tags),
        }
        response = self._request(
            "create", "POST", body=body,
            headers={"Prefer": "return=representation", "Accept": SINGLE_OBJECT}
        )
        task = self._single("create", response)
        if task is None:
            raise DatabaseError("Remote store create returned no row", operation="create")
        return task

    def get(self, task_id: str) -> Optional[Task]:
        response = self._request(
            "get", "GET",
            params={"select": "*", "id": f"eq.{task_id}"},
            headers={"Accept": SINGLE_OBJECT}
        )
        return self._single("get", response)

    def list(self, task_filter: Optional[TaskFilter] = None) -> List[Task]:
        params = {"select": "*", "order": "created_at.desc"}
        if task_filter is not None:
            if task_filter.completed is not None:
                params["completed"] = f"eq.{str(task_filter.completed).lower()}"
            if task_filter.priority is not None:
                params["priority"] = f"eq.{task_filter.priority}"
            if task_filter.tag is not None:
                params["tags"] = "cs.{" + _quote(task_filter.tag) + "}"
        return self._many("list", self._request("list", "GET", params=params))

    def update(self, task_id: str, changes: TaskUpdate) -> Optional[Task]:
        body = changes.changes()
        body["updated_at"] = utc_now()
        response = self._request(
            "update", "PATCH",
            params={"id": f"eq.{task_id}"},
            body=body,
            headers={"Prefer": "return=representation", "Accept": SINGLE_OBJECT}
        )
        return self._single("update", response)

    def delete(self, task_id: str) -> bool:
        response = self._request(
            "delete", "DELETE",
            params={"id": f"eq.{task_id}"},
            headers={"Prefer": "return=representation"}
        )
        if not response.is_success and self._error_code(response) == INVALID_TEXT_CODE:
            return False
        return len(self._many("delete", response)) > 0

    def search(self, query: str) -> List[Task]:
        pattern = _quote(_like_pattern(query))
        params = {
            "select": "*",
            "or": f"(title.ilike.{pattern},description.ilike.{pattern})",
            "order": "created_at.desc",
        }
        return self._many("search", self._request("search", "GET", params=params))

    def ping(self) -> None:
        response = self._request("ping", "GET", params={"select": "id", "limit": "1"})
        self._check("ping", response)

    def close(self) -> None:
        self._client.close()
