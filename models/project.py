"""
Data models for the Portfolio Panel
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from config.settings import CATEGORY_LABELS


class ProjectCategory(Enum):
    """Known project categories"""

    WEB = "web"
    MOBILE = "mobile"
    BRANDING = "branding"
    UI_UX = "ui-ux"
    EXPERIMENTAL = "experimental"
    THREE_D = "3d"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self.value]


# Editable fields of a project record
PROJECT_FIELDS = ("title", "category", "description", "image", "link")


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-01T12:00:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Project:
    """Represents a portfolio project entry"""

    id: str
    title: str
    category: str
    description: str
    image: str
    link: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def category_label(self) -> Optional[str]:
        """Display label for the category, None for categories outside the known set"""
        return CATEGORY_LABELS.get(self.category)

    @property
    def has_link(self) -> bool:
        return bool(self.link)

    @property
    def is_experimental(self) -> bool:
        return self.category == ProjectCategory.EXPERIMENTAL.value

    def to_record(self) -> Dict[str, Any]:
        """Store document for this project (the id lives outside the document)"""
        return {
            "title": self.title,
            "category": self.category,
            "description": self.description,
            "image": self.image,
            "link": self.link,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def to_dict(self) -> Dict[str, Any]:
        """JSON representation including the id"""
        return {"id": self.id, **self.to_record()}

    @classmethod
    def from_record(cls, project_id: str, data: Dict[str, Any]) -> "Project":
        """Build a project from a store document"""
        return cls(
            id=str(project_id),
            title=data.get("title", ""),
            category=data.get("category", ""),
            description=data.get("description", ""),
            image=data.get("image", ""),
            link=data.get("link") or None,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        """Build a project from its JSON representation"""
        return cls.from_record(data["id"], data)

    def __str__(self) -> str:
        return f"{self.title} [{self.category}]"


__all__ = ["Project", "ProjectCategory", "PROJECT_FIELDS", "utc_timestamp"]
