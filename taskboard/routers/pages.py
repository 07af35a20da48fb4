# taskboard/routers/pages.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from taskboard.core.notifications import ToastQueue
from taskboard.schemas.task import Priority, SortOrder
from taskboard.services.api_client import ApiClient
from taskboard.services.task_form import FormMode, NewFile, TaskForm
from taskboard.services.task_list import TaskListView


router = APIRouter(tags=["pages"])

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


# ──────────────────────────────────────────────────────────────────────────────
# dependencies (objects live on app.state, see taskboard/main.py)
# ──────────────────────────────────────────────────────────────────────────────
def get_api(request: Request) -> ApiClient:
    return request.app.state.api


def get_notifier(request: Request) -> ToastQueue:
    return request.app.state.notifier


def get_task_list(request: Request) -> TaskListView:
    return request.app.state.task_list


# ──────────────────────────────────────────────────────────────────────────────
# list page
# ──────────────────────────────────────────────────────────────────────────────
def _render_list(request: Request, view: TaskListView, notifier: ToastQueue) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "list.html",
        {
            "view": view,
            "tasks": view.tasks,
            "pending": view.find(view.pending_delete) if view.pending_delete else None,
            "priorities": list(Priority),
            "orders": list(SortOrder),
            "toasts": notifier.drain(),
        },
    )


@router.get("/", response_class=HTMLResponse)
async def task_list_page(
    request: Request,
    priority: Optional[str] = None,
    order: Optional[str] = None,
    view: TaskListView = Depends(get_task_list),
    notifier: ToastQueue = Depends(get_notifier),
):
    try:
        await view.open(priority=priority, order=order)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid priority or order filter")
    return _render_list(request, view, notifier)


@router.post("/tasks/{task_id}/delete", response_class=HTMLResponse)
async def request_delete(
    task_id: str,
    request: Request,
    view: TaskListView = Depends(get_task_list),
    notifier: ToastQueue = Depends(get_notifier),
):
    view.request_delete(task_id)
    return _render_list(request, view, notifier)


@router.post("/delete/confirm", response_class=HTMLResponse)
async def confirm_delete(
    request: Request,
    view: TaskListView = Depends(get_task_list),
    notifier: ToastQueue = Depends(get_notifier),
):
    await view.confirm_delete()
    return _render_list(request, view, notifier)


@router.post("/delete/cancel", response_class=HTMLResponse)
async def cancel_delete(
    request: Request,
    view: TaskListView = Depends(get_task_list),
    notifier: ToastQueue = Depends(get_notifier),
):
    view.cancel_delete()
    return _render_list(request, view, notifier)


# ──────────────────────────────────────────────────────────────────────────────
# create / edit form
# ──────────────────────────────────────────────────────────────────────────────
def _render_form(request: Request, form: TaskForm, notifier: ToastQueue) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "form.html",
        {
            "form": form,
            "fields": form.fields,
            "errors": form.errors,
            "priorities": list(Priority),
            "toasts": notifier.drain(),
        },
    )


async def _read_upload(image: Optional[UploadFile]) -> Optional[NewFile]:
    # browsers post an empty part when no file was picked
    if image is None or not image.filename:
        return None
    content = await image.read()
    return NewFile(
        filename=image.filename,
        content=content,
        content_type=image.content_type or "application/octet-stream",
    )


async def _handle_form_post(
    request: Request,
    form: TaskForm,
    notifier: ToastQueue,
    *,
    heading: str,
    description: str,
    date: str,
    time: str,
    priority: str,
    image: Optional[UploadFile],
    image_url: str,
    action: str,
):
    for name, value in (
        ("heading", heading),
        ("description", description),
        ("date", date),
        ("time", time),
        ("priority", priority),
    ):
        form.change(name, value)
    form.keep_existing_image(image_url)
    upload = await _read_upload(image)
    if upload is not None:
        form.select_image(upload)

    if action == "clear_image":
        form.clear_image()
        return _render_form(request, form, notifier)

    target = await form.submit()
    if target is None:
        return _render_form(request, form, notifier)
    return RedirectResponse(url=target, status_code=303)


@router.get("/create", response_class=HTMLResponse)
async def create_page(
    request: Request,
    api: ApiClient = Depends(get_api),
    notifier: ToastQueue = Depends(get_notifier),
):
    return _render_form(request, TaskForm(api, notifier), notifier)


@router.post("/create")
async def create_submit(
    request: Request,
    heading: str = Form(""),
    description: str = Form(""),
    date: str = Form(""),
    time: str = Form(""),
    priority: str = Form(""),
    image: Optional[UploadFile] = File(None),
    action: str = Form("save"),
    api: ApiClient = Depends(get_api),
    notifier: ToastQueue = Depends(get_notifier),
):
    form = TaskForm(api, notifier, mode=FormMode.CREATE)
    return await _handle_form_post(
        request, form, notifier,
        heading=heading, description=description, date=date, time=time,
        priority=priority, image=image, image_url="", action=action,
    )


@router.get("/create/{task_id}", response_class=HTMLResponse)
async def edit_page(
    task_id: str,
    request: Request,
    api: ApiClient = Depends(get_api),
    notifier: ToastQueue = Depends(get_notifier),
):
    form = TaskForm(api, notifier, mode=FormMode.EDIT, task_id=task_id)
    await form.load()
    return _render_form(request, form, notifier)


@router.post("/create/{task_id}")
async def edit_submit(
    task_id: str,
    request: Request,
    heading: str = Form(""),
    description: str = Form(""),
    date: str = Form(""),
    time: str = Form(""),
    priority: str = Form(""),
    image: Optional[UploadFile] = File(None),
    image_url: str = Form(""),
    action: str = Form("save"),
    api: ApiClient = Depends(get_api),
    notifier: ToastQueue = Depends(get_notifier),
):
    form = TaskForm(api, notifier, mode=FormMode.EDIT, task_id=task_id)
    form.loading = False
    return await _handle_form_post(
        request, form, notifier,
        heading=heading, description=description, date=date, time=time,
        priority=priority, image=image, image_url=image_url, action=action,
    )
