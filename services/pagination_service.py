"""
Service for per-section pagination state and page-number windows
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from utils.async_base import ValidationError

T = TypeVar("T")

PAGINATED_SECTIONS = ("latest", "all", "experimental")

# Page numbers shown around the current page
WINDOW_RADIUS = 2
WINDOW_SIZE = 5


@dataclass
class PaginationState:
    """Current page of one section"""

    items_per_page: int
    current_page: int = 1

    def offset(self) -> int:
        return (self.current_page - 1) * self.items_per_page


@dataclass(frozen=True)
class PageItem:
    """One entry of the page-number strip: a page button or an ellipsis"""

    kind: str
    page: Optional[int] = None
    active: bool = False

    @property
    def is_ellipsis(self) -> bool:
        return self.kind == "ellipsis"


@dataclass(frozen=True)
class PageControl:
    """Previous/Next button"""

    page: int
    disabled: bool


@dataclass(frozen=True)
class Pagination:
    """Everything needed to draw a section's pagination controls"""

    section: str
    current_page: int
    total_pages: int
    previous: PageControl
    next: PageControl
    items: List[PageItem] = field(default_factory=list)

    @property
    def page_numbers(self) -> List[int]:
        return [item.page for item in self.items if not item.is_ellipsis]


def total_pages_for(total_items: int, items_per_page: int) -> int:
    return math.ceil(total_items / items_per_page)


def page_window(current_page: int, total_pages: int) -> range:
    """Visible page numbers around current_page, widened near either end"""
    start_page = max(1, current_page - WINDOW_RADIUS)
    end_page = min(total_pages, current_page + WINDOW_RADIUS)

    if current_page <= WINDOW_RADIUS + 1:
        end_page = min(WINDOW_SIZE, total_pages)
    if current_page >= total_pages - WINDOW_RADIUS:
        start_page = max(1, total_pages - (WINDOW_SIZE - 1))

    return range(start_page, end_page + 1)


def build_pagination(
    section: str, total_items: int, current_page: int, items_per_page: int
) -> Optional[Pagination]:
    """Pagination controls for a section, or None when everything fits on one page"""
    total_pages = total_pages_for(total_items, items_per_page)
    if total_pages <= 1:
        return None

    window = page_window(current_page, total_pages)
    items: List[PageItem] = []

    # First page
    if window.start > 1:
        items.append(PageItem("page", 1))
        if window.start > 2:
            items.append(PageItem("ellipsis"))

    items.extend(PageItem("page", page, page == current_page) for page in window)

    # Last page
    last_shown = window.stop - 1
    if last_shown < total_pages:
        if last_shown < total_pages - 1:
            items.append(PageItem("ellipsis"))
        items.append(PageItem("page", total_pages))

    return Pagination(
        section=section,
        current_page=current_page,
        total_pages=total_pages,
        previous=PageControl(current_page - 1, disabled=current_page == 1),
        next=PageControl(current_page + 1, disabled=current_page == total_pages),
        items=items,
    )


def paginate(items: Sequence[T], state: PaginationState) -> List[T]:
    """Slice of items for the state's current page"""
    start = state.offset()
    return list(items[start : start + state.items_per_page])


class PaginationTracker:
    """Independent page state for each paginated section"""

    def __init__(self, items_per_page: int, sections: Iterable[str] = PAGINATED_SECTIONS):
        self.items_per_page = items_per_page
        self._states: Dict[str, PaginationState] = {
            section: PaginationState(items_per_page) for section in sections
        }

    @property
    def sections(self) -> List[str]:
        return list(self._states)

    def has_section(self, section: str) -> bool:
        return section in self._states

    def get_state(self, section: str) -> PaginationState:
        if section not in self._states:
            raise ValidationError(f"Unknown section: {section}", field="section")
        return self._states[section]

    def select_page(self, section: str, page: int) -> PaginationState:
        """Set the current page of one section, leaving the others untouched"""
        state = self.get_state(section)
        if page < 1:
            raise ValidationError(f"Page must be 1 or greater, got {page}", field="page")
        state.current_page = page
        return state

    def clamp(self, section: str, total_items: int) -> PaginationState:
        """Pull the current page back inside [1, total_pages] after the list shrank"""
        state = self.get_state(section)
        last_page = max(1, total_pages_for(total_items, state.items_per_page))
        if state.current_page > last_page:
            state.current_page = last_page
        return state

    def reset(self):
        """Back to page 1 everywhere"""
        for state in self._states.values():
            state.current_page = 1

    def snapshot(self) -> Dict[str, int]:
        return {section: state.current_page for section, state in self._states.items()}
