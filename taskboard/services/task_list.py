# taskboard/services/task_list.py
"""
Task list with server-side filtering and a two-step delete.

The displayed rows are always whatever the backend last returned for the
current filters. Nothing is removed locally: a confirmed delete is followed
by a re-fetch.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx
from pydantic import ValidationError

from taskboard.core.notifications import NotificationKind, Notifier
from taskboard.schemas.task import Priority, SortOrder, Task, TaskListEnvelope
from taskboard.services.api_client import ApiClient

logger = logging.getLogger(__name__)

COLLECTION_PATH = "/tasks"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class ConfirmingDelete:
    task_id: str


DeleteState = Union[Idle, ConfirmingDelete]


class TaskListView:
    def __init__(self, api: ApiClient, notifier: Notifier) -> None:
        self.api = api
        self.notifier = notifier
        self.tasks: list[Task] = []
        self.priority: Optional[Priority] = None
        self.order: SortOrder = SortOrder.ASC
        self.delete_state: DeleteState = Idle()
        # sequence numbers of the last issued / last applied fetch
        self._issued = 0
        self._applied = 0

    # ── fetching ─────────────────────────────────────────────────────────────
    def query_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.priority is not None:
            params["priority"] = self.priority.query_value
        params["order"] = self.order.value
        return params

    async def refresh(self) -> bool:
        """Fetch the collection for the current filters.

        Returns True when the displayed rows were replaced. A response that
        arrives after a newer fetch has already been applied is dropped.
        """
        self._issued += 1
        seq = self._issued
        try:
            res = await self.api.get(COLLECTION_PATH, params=self.query_params())
            rows = TaskListEnvelope.model_validate(res.json()).data
        except (httpx.HTTPError, ValueError, ValidationError):
            logger.exception("Error fetching task data")
            self.notifier.notify(NotificationKind.ERROR, "Could not load tasks")
            return False

        if seq < self._applied:
            logger.debug("dropping stale task list response seq=%s applied=%s", seq, self._applied)
            return False
        self._applied = seq
        self.tasks = rows
        return True

    async def open(self, priority: Any = None, order: Any = None) -> bool:
        """Mount the list: take the filters as given and fetch once.

        Every mount starts with the delete modal closed.
        """
        self.priority = Priority.parse(priority)
        self.order = SortOrder.parse(order)
        self.delete_state = Idle()
        return await self.refresh()

    # ── row actions ──────────────────────────────────────────────────────────
    @staticmethod
    def edit_path(task_id: str) -> str:
        return f"/create/{task_id}"

    def find(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    @property
    def pending_delete(self) -> Optional[str]:
        state = self.delete_state
        return state.task_id if isinstance(state, ConfirmingDelete) else None

    @property
    def modal_open(self) -> bool:
        return isinstance(self.delete_state, ConfirmingDelete)

    def request_delete(self, task_id: str) -> None:
        # a second request replaces the first target, it is not queued
        self.delete_state = ConfirmingDelete(str(task_id))

    def cancel_delete(self) -> None:
        self.delete_state = Idle()

    async def confirm_delete(self) -> bool:
        state = self.delete_state
        if not isinstance(state, ConfirmingDelete):
            return False
        try:
            await self.api.delete(f"{COLLECTION_PATH}/{state.task_id}")
        except httpx.HTTPError:
            logger.exception("Error while deleting task %s", state.task_id)
            self.notifier.notify(NotificationKind.ERROR, "Error while deleting task")
            return False

        self.notifier.notify(NotificationKind.SUCCESS, "Deleted successfully")
        self.delete_state = Idle()
        await self.refresh()
        return True
