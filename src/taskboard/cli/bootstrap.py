# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the task source and TaskStore into AppState.
"""

from __future__ import annotations

import logging
import random

from ..config import get_settings
from ..core.ports import TaskSource
from ..core.state import AppState
from ..tasks.loader import source_from_location
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.export_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, task_source: TaskSource | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if task_source is None:
        task_source = source_from_location(settings.tasks_source, timeout=settings.load_timeout_seconds)

    seed = getattr(settings, "seed", None)
    store = TaskStore(
        seed_count=settings.seed_count,
        seed_random=random.Random(seed) if seed is not None else None,
    )
    logger.debug("State created (source=%s, seed_count=%s)", settings.tasks_source, settings.seed_count)

    return AppState(settings=settings, task_store=store, task_source=task_source)


async def load_initial_tasks(state: AppState) -> None:
    await state.task_store.load(state.task_source)
    store = state.task_store
    if store.error:
        logger.warning("Starting with an empty task list: %s", store.error)
    else:
        logger.info("Loaded %d tasks.", len(store.tasks))
