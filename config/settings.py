"""
Static content settings for the Portfolio Panel
"""

import contextlib
import json
from pathlib import Path

# Category keys and their display labels
CATEGORY_LABELS = {
    "web": "Web Design",
    "mobile": "Mobile Apps",
    "branding": "Branding",
    "ui-ux": "UI/UX",
    "experimental": "Experimental",
    "3d": "3D & Animation",
}

EXPERIMENTAL_CATEGORY = "experimental"

# Fixed tiles of the categories section
CATEGORY_TILES = [
    {
        "name": "Web Design",
        "image": "https://images.unsplash.com/photo-1547658719-da2b51169166?w=800&q=80",
    },
    {
        "name": "Mobile Apps",
        "image": "https://images.unsplash.com/photo-1512941937669-90a1b58e7e9c?w=800&q=80",
    },
    {
        "name": "Branding",
        "image": "https://images.unsplash.com/photo-1626785774625-ddcddc3445e9?w=800&q=80",
    },
    {
        "name": "UI/UX",
        "image": "https://images.unsplash.com/photo-1561070791-2526d30994b5?w=800&q=80",
    },
    {
        "name": "Experimental",
        "image": "https://images.unsplash.com/photo-1633356122544-f134324a6cee?w=800&q=80",
    },
    {
        "name": "3D & Animation",
        "image": "https://images.unsplash.com/photo-1634017839464-5c339ebe3cb4?w=800&q=80",
    },
]

# Empty-state text per section
EMPTY_STATE_MESSAGES = {
    "latest": 'No projects yet. Click "Add Project" to create one!',
    "all": 'No projects yet. Click "Add Project" to create one!',
    "experimental": "No experimental projects yet.",
}

NEW_BADGE_TEXT = "New Added"

# Dialog titles
FORM_TITLES = {
    "create": "Add New Project",
    "edit": "Edit Project",
}

# User-facing notification text
MESSAGES = {
    "load_error": "Error loading projects from database",
    "save_error": "Error saving project to database",
    "delete_error": "Error deleting project from database",
    "project_added": "Project added successfully!",
    "project_updated": "Project updated successfully!",
    "project_deleted": "Project deleted successfully!",
    "delete_confirm": "Are you sure you want to delete this project?",
}

# Theme colors, exported as CSS variables
COLORS = {
    "background": "#0d0d0d",
    "surface": "#161616",
    "text": "#f5f5f5",
    "muted": "#9a9a9a",
    "accent": "#0ac94d",
    "notification_bg": "rgb(10, 201, 77)",
    "notification_text": "white",
    "danger": "#e74c3c",
    "badge_bg": "#ff3d57",
}


def _apply_user_settings():
    """Apply user settings overrides from user_settings.json"""
    user_settings_file = Path(__file__).parent / "user_settings.json"

    if not user_settings_file.exists():
        return

    with contextlib.suppress(json.JSONDecodeError, FileNotFoundError, KeyError):
        with open(user_settings_file, "r", encoding="utf-8") as f:
            user_settings = json.load(f)

        current_globals = globals()

        for key, value in user_settings.items():
            if key.startswith("COLORS."):
                color_key = key.split(".", 1)[1]
                if color_key in current_globals["COLORS"]:
                    current_globals["COLORS"][color_key] = value
            elif key.startswith("MESSAGES."):
                message_key = key.split(".", 1)[1]
                if message_key in current_globals["MESSAGES"]:
                    current_globals["MESSAGES"][message_key] = value


# Apply user settings overrides
_apply_user_settings()
