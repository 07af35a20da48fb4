# taskboard/services/task_form.py
"""
Create/edit form for a single task.

The form keeps its own copy of the fields until submit; the backend is only
contacted to load an existing record (edit mode) and to save.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import httpx
from pydantic import ValidationError

from taskboard.core.notifications import NotificationKind, Notifier
from taskboard.schemas.task import Priority, TaskEnvelope
from taskboard.services.api_client import ApiClient, FilePart, FormPayload

logger = logging.getLogger(__name__)

LIST_PATH = "/"
TEXT_FIELDS = ("heading", "description", "date", "time", "priority")
REQUIRED_MESSAGES = {
    "heading": "Heading is required",
    "description": "Description is required",
    "date": "Date is required",
    "time": "Time is required",
    "priority": "Priority is required",
    "image": "Image is required",
}


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


@dataclass(frozen=True)
class NewFile:
    """An image picked by the user, not yet uploaded."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class ExistingUrl:
    """The image already stored on the backend for this task."""

    url: str


ImageSlot = Union[NewFile, ExistingUrl, None]


@dataclass
class TaskFields:
    heading: str = ""
    description: str = ""
    date: str = ""
    time: str = ""
    priority: str = Priority.LOW.value
    image: ImageSlot = None

    @property
    def image_url(self) -> str:
        return self.image.url if isinstance(self.image, ExistingUrl) else ""


class TaskForm:
    def __init__(
        self,
        api: ApiClient,
        notifier: Notifier,
        *,
        mode: FormMode = FormMode.CREATE,
        task_id: Optional[str] = None,
    ) -> None:
        mode = FormMode(mode)
        if mode is FormMode.EDIT and not task_id:
            raise ValueError("edit mode needs a task_id")
        self.api = api
        self.notifier = notifier
        self.mode = mode
        self.task_id = task_id
        self.fields = TaskFields()
        self.errors: dict[str, str] = {}
        self.loading = mode is FormMode.EDIT

    @property
    def is_edit(self) -> bool:
        return self.mode is FormMode.EDIT

    @property
    def action_label(self) -> str:
        return "updating" if self.is_edit else "creating"

    def _item_path(self) -> str:
        return f"/tasks/{self.task_id}"

    async def load(self) -> bool:
        """Fetch the record being edited and fill every field from it."""
        if not self.is_edit:
            self.loading = False
            return False
        try:
            res = await self.api.get(self._item_path())
            task = TaskEnvelope.model_validate(res.json()).data
        except (httpx.HTTPError, ValueError, ValidationError):
            logger.exception("Error fetching task %s", self.task_id)
            self.notifier.notify(NotificationKind.ERROR, "Error fetching task")
            return False
        finally:
            self.loading = False

        self.fields = TaskFields(
            heading=task.heading,
            description=task.description,
            date=task.date,
            time=task.time,
            priority=task.priority,
            image=ExistingUrl(task.image) if task.image else None,
        )
        self.errors = {}
        return True

    def _clear_error(self, name: str) -> None:
        self.errors.pop(name, None)

    def change(self, name: str, value: Optional[str]) -> None:
        if name not in TEXT_FIELDS:
            raise KeyError(f"unknown field: {name}")
        setattr(self.fields, name, value or "")
        self._clear_error(name)

    def select_image(self, upload: Optional[NewFile]) -> None:
        # a fresh upload always replaces the stored image
        self.fields.image = upload
        self._clear_error("image")

    def keep_existing_image(self, url: Optional[str]) -> None:
        """Re-attach the stored image URL carried over from a rendered edit form."""
        if self.is_edit and url and self.fields.image is None:
            self.fields.image = ExistingUrl(url)

    def clear_image(self) -> None:
        if isinstance(self.fields.image, ExistingUrl):
            self.fields.image = None

    def validate(self) -> dict[str, str]:
        errors = {
            name: REQUIRED_MESSAGES[name]
            for name in TEXT_FIELDS
            if not getattr(self.fields, name)
        }
        image = self.fields.image
        has_stored_image = self.is_edit and isinstance(image, ExistingUrl)
        if not isinstance(image, NewFile) and not has_stored_image:
            errors["image"] = REQUIRED_MESSAGES["image"]
        return errors

    def build_payload(self) -> FormPayload:
        form = FormPayload()
        for name in TEXT_FIELDS:
            form.add(name, getattr(self.fields, name))
        image = self.fields.image
        if isinstance(image, NewFile):
            form.attach("image", FilePart(image.filename, image.content, image.content_type))
        return form

    def reset(self) -> None:
        self.fields = TaskFields()
        self.errors = {}

    async def submit(self) -> Optional[str]:
        """Validate and save. Returns the path to navigate to on success."""
        errors = self.validate()
        if errors:
            self.errors = errors
            return None

        payload = self.build_payload()
        # any 2xx is a save; the adapter raises for everything else
        try:
            if self.is_edit:
                await self.api.put_form(self._item_path(), payload)
            else:
                await self.api.post_form("/tasks", payload)
        except httpx.HTTPError as e:
            logger.exception("Error %s task", self.action_label)
            self.notifier.notify(NotificationKind.ERROR, f"Error {self.action_label} task: {_reason(e)}")
            return None

        self.reset()
        self.notifier.notify(NotificationKind.SUCCESS, "Task updated" if self.is_edit else "Task created")
        return LIST_PATH


def _reason(e: httpx.HTTPError) -> str:
    if isinstance(e, httpx.HTTPStatusError):
        return e.response.reason_phrase or str(e.response.status_code)
    return e.__class__.__name__
