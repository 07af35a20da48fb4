# taskboard/main.py
from dotenv import load_dotenv

# .env has to be loaded before settings are built
load_dotenv()

import logging  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402

from fastapi import FastAPI  # noqa: E402

from taskboard.core.config import settings  # noqa: E402
from taskboard.core.logging_config import setup_logging  # noqa: E402
from taskboard.core.notifications import ToastQueue  # noqa: E402
from taskboard.routers import health, pages  # noqa: E402
from taskboard.services.api_client import ApiClient  # noqa: E402
from taskboard.services.task_list import TaskListView  # noqa: E402

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("task backend: %s (env=%s)", settings.api_base_url, settings.app_env)
    yield
    await app.state.api.aclose()


app = FastAPI(
    title=settings.app_title,
    version=settings.app_version,
    lifespan=lifespan,
)

# one user, one list view: the list component and toast queue live for the
# whole process, forms are built per request
app.state.api = ApiClient(settings.api_base_url)
app.state.notifier = ToastQueue()
app.state.task_list = TaskListView(app.state.api, app.state.notifier)

app.include_router(health.router)
app.include_router(pages.router)
