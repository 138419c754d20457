"""
Form Controller - the add/edit project dialog
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from config.settings import FORM_TITLES, MESSAGES
from models.notification_buffer import NotificationBuffer, notification_buffer
from models.project import Project, ProjectCategory
from services.project_store import ProjectStore
from utils.async_base import NotFoundError, ServiceResult, ValidationError

logger = logging.getLogger(__name__)

# Dialog input names for each project field
FORM_FIELDS = {
    "id": "projectId",
    "title": "projectTitle",
    "category": "projectCategory",
    "description": "projectDescription",
    "image": "projectImage",
    "link": "projectLink",
}

REQUIRED_FIELDS = ("title", "category", "description", "image")


def blank_values() -> Dict[str, str]:
    return {input_name: "" for input_name in FORM_FIELDS.values()}


class FormMode(Enum):
    """Dialog states"""

    CLOSED = "closed"
    CREATE = "open-for-create"
    EDIT = "open-for-edit"


@dataclass
class ProjectForm:
    """Dialog contents as presented to the user"""

    mode: FormMode
    title: str = ""
    values: Dict[str, str] = field(default_factory=blank_values)

    @property
    def is_open(self) -> bool:
        return self.mode is not FormMode.CLOSED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "title": self.title,
            "values": dict(self.values),
            "categories": [
                {"value": category.value, "label": category.label}
                for category in ProjectCategory
            ],
        }


def project_to_values(project: Project) -> Dict[str, str]:
    """Fill the dialog inputs from a project"""
    return {
        FORM_FIELDS["id"]: project.id,
        FORM_FIELDS["title"]: project.title,
        FORM_FIELDS["category"]: project.category,
        FORM_FIELDS["description"]: project.description,
        FORM_FIELDS["image"]: project.image,
        FORM_FIELDS["link"]: project.link or "",
    }


def values_to_project_data(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Read the dialog inputs into store fields; the title is upper-cased"""
    data = {
        name: str(values.get(input_name) or "")
        for name, input_name in FORM_FIELDS.items()
        if name != "id"
    }

    missing = [name for name in REQUIRED_FIELDS if not data[name]]
    if missing:
        raise ValidationError(
            f"Missing required field(s): {', '.join(missing)}", field=missing[0]
        )

    data["title"] = data["title"].upper()
    data["link"] = data["link"] or None
    return data


class FormController:
    """Opens, closes and submits the project dialog"""

    def __init__(
        self,
        store: ProjectStore,
        notifications: Optional[NotificationBuffer] = None,
    ):
        self.store = store
        self.notifications = notifications or notification_buffer
        self.form = ProjectForm(FormMode.CLOSED)

    @property
    def mode(self) -> FormMode:
        return self.form.mode

    def open(self, project_id: Optional[str] = None) -> ProjectForm:
        """Open blank for a new project, or pre-filled from an existing one"""
        if not project_id:
            self.form = ProjectForm(FormMode.CREATE, FORM_TITLES["create"])
            return self.form

        project = self.store.find(project_id)
        if project is None:
            raise NotFoundError(f"Project not found: {project_id}", project_id)

        self.form = ProjectForm(
            FormMode.EDIT, FORM_TITLES["edit"], project_to_values(project)
        )
        return self.form

    def close(self) -> ProjectForm:
        self.form = ProjectForm(FormMode.CLOSED)
        return self.form

    async def submit(self, values: Mapping[str, Any]) -> ServiceResult[Optional[Project]]:
        """Save the dialog contents; the dialog only closes when the save succeeded"""
        project_id = str(values.get(FORM_FIELDS["id"]) or "").strip() or None

        try:
            data = values_to_project_data(values)
        except ValidationError as e:
            logger.warning(f"Rejected project form: {e.message}")
            return ServiceResult.error_result(e)

        result = await self.store.save(data, project_id)
        if result.is_error:
            logger.error(f"Error submitting form: {result.error.message}")
            return result

        self.close()
        message = MESSAGES["project_updated"] if project_id else MESSAGES["project_added"]
        self.notifications.push(message)
        return result

    async def delete(self, project_id: str, confirmed: bool) -> ServiceResult[str]:
        """Delete a project once the user has confirmed it"""
        if not confirmed:
            return ServiceResult.error_result(
                ValidationError("Deletion not confirmed", field="confirmed")
            )

        result = await self.store.remove(project_id)
        if result.is_error:
            logger.error(f"Error deleting project: {result.error.message}")
            return result

        self.notifications.push(MESSAGES["project_deleted"])
        return result
