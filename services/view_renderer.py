"""
View Renderer - derives the paginated, filtered section views from the project list
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config.config import SiteConfig
from config.settings import (
    CATEGORY_TILES,
    EMPTY_STATE_MESSAGES,
    EXPERIMENTAL_CATEGORY,
    NEW_BADGE_TEXT,
)
from models.project import Project
from services.pagination_service import (
    Pagination,
    PaginationTracker,
    build_pagination,
    paginate,
)
from services.project_store import ProjectStore
from utils.async_base import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectCard:
    """One rendered project card"""

    project: Project
    show_new_badge: bool = False
    badge_text: str = NEW_BADGE_TEXT


@dataclass
class SectionView:
    """Cards and pagination controls of one section"""

    name: str
    container_id: str
    pagination_id: str
    cards: List[ProjectCard] = field(default_factory=list)
    empty_message: Optional[str] = None
    pagination: Optional[Pagination] = None
    total_items: int = 0

    @property
    def is_empty(self) -> bool:
        return self.empty_message is not None


@dataclass(frozen=True)
class CategoryTile:
    name: str
    image: str


@dataclass(frozen=True)
class ScrollTarget:
    """Where the page should scroll after a section re-render"""

    element_id: str
    offset: int
    behavior: str = "smooth"

    def to_dict(self) -> Dict:
        return {
            "element_id": self.element_id,
            "offset": self.offset,
            "behavior": self.behavior,
        }


class ViewRenderer:
    """Builds section views from the store and the pagination tracker"""

    def __init__(
        self,
        store: ProjectStore,
        tracker: PaginationTracker,
        site_config: SiteConfig,
    ):
        self.store = store
        self.tracker = tracker
        self.site_config = site_config

        self.store.add_change_listener(self._on_projects_changed)

    def _on_projects_changed(self, projects: List[Project]):
        """Keep every section's page inside its new page range"""
        for section in self.tracker.sections:
            self.tracker.clamp(section, len(self._source_for(section, projects)))

    def _source_for(self, section: str, projects: List[Project]) -> List[Project]:
        if section == "experimental":
            return [p for p in projects if p.category == EXPERIMENTAL_CATEGORY]
        return projects

    def source_for(self, section: str) -> List[Project]:
        """Full (unpaginated) sequence a section draws from"""
        return self._source_for(section, self.store.projects)

    def render_section(self, section: str) -> SectionView:
        """View of one paginated section at its current page"""
        if section not in self.site_config.sections:
            raise ValidationError(f"Unknown section: {section}", field="section")

        targets = self.site_config.sections[section]
        source = self.source_for(section)

        view = SectionView(
            name=section,
            container_id=targets["container"],
            pagination_id=targets["pagination"],
            total_items=len(source),
        )

        if not source:
            view.empty_message = EMPTY_STATE_MESSAGES[section]
            return view

        state = self.tracker.clamp(section, len(source))
        show_badge = section == "latest"
        view.cards = [
            ProjectCard(project, show_new_badge=show_badge)
            for project in paginate(source, state)
        ]
        view.pagination = build_pagination(
            section, len(source), state.current_page, state.items_per_page
        )
        return view

    def render_categories(self) -> List[CategoryTile]:
        """The fixed category tiles, independent of project data"""
        return [CategoryTile(tile["name"], tile["image"]) for tile in CATEGORY_TILES]

    def render_all(self) -> Dict[str, SectionView]:
        """Views of every paginated section"""
        return {section: self.render_section(section) for section in self.tracker.sections}

    def select_page(self, section: str, page: int):
        """Change one section's page; returns its new view and the scroll target"""
        self.tracker.select_page(section, page)
        view = self.render_section(section)
        logger.debug(f"Section {section} now on page {self.tracker.get_state(section).current_page}")
        return view, ScrollTarget(section, self.site_config.scroll_offset)
