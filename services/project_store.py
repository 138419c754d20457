"""
Project Store - in-memory project list synchronized with a backing store
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

import requests

from config.config import get_config
from config.settings import MESSAGES
from models.notification_buffer import NotificationBuffer, notification_buffer
from models.project import Project, PROJECT_FIELDS, utc_timestamp
from services.store_backends import StoreBackend
from utils.async_base import (
    AsyncServiceInterface,
    AsyncError,
    ServiceResult,
    NotFoundError,
    StoreError,
)
from utils.async_utils import run_in_executor

logger = logging.getLogger(__name__)

# Failures a backend may raise for an unreachable or inconsistent store
BACKEND_ERRORS = (requests.RequestException, OSError, ValueError, KeyError)


class ProjectStore(AsyncServiceInterface):
    """Owns the project list; every mutation persists, reloads and notifies listeners"""

    def __init__(
        self,
        backend: StoreBackend,
        notifications: Optional[NotificationBuffer] = None,
        ready_timeout: Optional[float] = None,
    ):
        super().__init__("ProjectStore")
        self.backend = backend
        self.ready_timeout = (
            get_config().store.ready_timeout if ready_timeout is None else ready_timeout
        )
        self.notifications = notifications or notification_buffer
        self._projects: List[Project] = []
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._change_listeners: List[Callable[[List[Project]], None]] = []

    # ========== READINESS ==========

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the backend has been opened; returns False on timeout"""
        return self._ready.wait(timeout)

    async def wait_until_ready_async(self, timeout: Optional[float] = None) -> bool:
        return await run_in_executor(self._ready.wait, timeout)

    async def initialize(self) -> ServiceResult[List[Project]]:
        """Open the backend, signal readiness and perform the initial load"""
        return await self.load()

    async def _open(self) -> ServiceResult[Dict[str, Any]]:
        async with self.operation_context("open"):
            try:
                info = await run_in_executor(self.backend.open)
            except BACKEND_ERRORS as e:
                self.logger.error(f"Could not open {self.backend.name} store: {e}")
                return ServiceResult.error_result(
                    StoreError(
                        f"Store unavailable: {e}",
                        operation="open",
                        error_code="STORE_UNAVAILABLE",
                    )
                )

            self._ready.set()
            self.logger.info(f"Store ready: {info}")
            return ServiceResult.success_result(info)

    async def _ensure_ready(self) -> bool:
        """Retry opening a store that failed to open, then wait up to ready_timeout"""
        if self.is_ready:
            return True
        open_result = await self._open()
        if open_result.is_success:
            return True
        return await self.wait_until_ready_async(self.ready_timeout)

    # ========== CHANGE LISTENERS ==========

    def add_change_listener(self, callback: Callable[[List[Project]], None]):
        """Add a callback to be called after the list changes through a mutation"""
        if callback not in self._change_listeners:
            self._change_listeners.append(callback)

    def remove_change_listener(self, callback: Callable[[List[Project]], None]):
        if callback in self._change_listeners:
            self._change_listeners.remove(callback)

    def _notify_changed(self):
        snapshot = self.projects
        for callback in self._change_listeners:
            try:
                callback(snapshot)
            except Exception:
                # Log error but keep notifying the remaining listeners
                self.logger.exception("Error in project change listener")

    # ========== QUERIES ==========

    @property
    def projects(self) -> List[Project]:
        """Snapshot of the current list"""
        with self._lock:
            return list(self._projects)

    def find(self, project_id: str) -> Optional[Project]:
        with self._lock:
            return next((p for p in self._projects if p.id == project_id), None)

    def filter_by_category(self, category: str) -> List[Project]:
        with self._lock:
            return [p for p in self._projects if p.category == category]

    def count(self) -> int:
        with self._lock:
            return len(self._projects)

    async def health_check(self) -> ServiceResult[Dict[str, Any]]:
        """Check store health"""
        return ServiceResult.success_result(
            {
                "status": "healthy" if self.is_ready else "not_ready",
                "backend": self.backend.name,
                "projects": self.count(),
            }
        )

    # ========== OPERATIONS ==========

    def _backend_error(self, error: Exception, operation: str) -> AsyncError:
        """Map a backend exception onto the service error types"""
        if isinstance(error, KeyError):
            return NotFoundError(f"Project not found: {error.args[0]}", str(error.args[0]))
        if (
            isinstance(error, requests.HTTPError)
            and error.response is not None
            and error.response.status_code == 404
        ):
            return NotFoundError(f"Project not found during {operation}")
        return StoreError(f"Failed to {operation} project(s): {error}", operation=operation)

    async def load(self) -> ServiceResult[List[Project]]:
        """Replace the in-memory list with the backend's contents"""
        if not self.is_ready:
            open_result = await self._open()
            if open_result.is_error:
                self.notifications.push(MESSAGES["load_error"], level="error")
                return ServiceResult.error_result(open_result.error)

        async with self.operation_context("load"):
            try:
                projects = await run_in_executor(self.backend.list_projects)
            except BACKEND_ERRORS as e:
                self.logger.error(f"Error loading projects: {e}")
                self.notifications.push(MESSAGES["load_error"], level="error")
                return ServiceResult.error_result(self._backend_error(e, "load"))

        with self._lock:
            self._projects = list(projects)

        self.logger.info(f"Loaded {len(projects)} projects")
        return ServiceResult.success_result(
            list(projects), message=f"Loaded {len(projects)} projects"
        )

    async def save(
        self, data: Dict[str, Any], project_id: Optional[str] = None
    ) -> ServiceResult[Optional[Project]]:
        """Update the project with project_id, or create a new one when it is None

        A store that is not ready gets one more open attempt and then up to
        ready_timeout to become ready before the save is refused.
        """
        if not await self._ensure_ready():
            self.notifications.push(MESSAGES["save_error"], level="error")
            return ServiceResult.error_result(
                StoreError("Store is not ready", operation="save", error_code="STORE_NOT_READY")
            )

        fields = {name: data.get(name) for name in PROJECT_FIELDS}
        timestamp = utc_timestamp()

        async with self.operation_context("save"):
            try:
                if project_id:
                    await run_in_executor(
                        self.backend.update_project,
                        project_id,
                        {**fields, "updatedAt": timestamp},
                    )
                    saved_id = project_id
                else:
                    saved_id = await run_in_executor(
                        self.backend.add_project,
                        {**fields, "createdAt": timestamp, "updatedAt": timestamp},
                    )
            except BACKEND_ERRORS as e:
                self.logger.error(f"Error saving project: {e}")
                self.notifications.push(MESSAGES["save_error"], level="error")
                return ServiceResult.error_result(self._backend_error(e, "save"))

        await self.load()
        self._notify_changed()

        return ServiceResult.success_result(
            self.find(saved_id),
            message="Project updated" if project_id else "Project created",
            metadata={"id": saved_id, "created": not project_id},
        )

    async def remove(self, project_id: str) -> ServiceResult[str]:
        """Delete a project by id; the caller is responsible for confirmation"""
        if not await self._ensure_ready():
            self.notifications.push(MESSAGES["delete_error"], level="error")
            return ServiceResult.error_result(
                StoreError(
                    "Store is not ready", operation="delete", error_code="STORE_NOT_READY"
                )
            )

        async with self.operation_context("remove"):
            try:
                await run_in_executor(self.backend.delete_project, project_id)
            except BACKEND_ERRORS as e:
                self.logger.error(f"Error deleting project {project_id}: {e}")
                self.notifications.push(MESSAGES["delete_error"], level="error")
                return ServiceResult.error_result(self._backend_error(e, "delete"))

        await self.load()
        self._notify_changed()

        return ServiceResult.success_result(project_id, message="Project deleted")

