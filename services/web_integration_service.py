"""
Web Integration Module for the Portfolio Panel
Serves the portfolio page, its section fragments and the admin JSON API
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
import time

from flask import Flask, render_template, request, jsonify, Response

from config.settings import COLORS, MESSAGES
from services.view_renderer import SectionView
from utils.async_base import AsyncError, NotFoundError, ValidationError, StoreError


logger = logging.getLogger(__name__)

# Suppress Flask's default info level logging
log = logging.getLogger("werkzeug")
log.setLevel(logging.ERROR)

service_dir = os.path.dirname(os.path.abspath(__file__))
root_dir = os.path.dirname(service_dir)

template_dir = os.path.join(root_dir, "templates")
static_dir = os.path.join(root_dir, "static")


def error_status(error: AsyncError) -> int:
    """HTTP status for a service error"""
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, StoreError):
        return 503
    return 500


class WebIntegration:
    """Web interface for the portfolio site"""

    def __init__(self, site):
        """Initialize web integration with reference to the portfolio site"""
        self.site = site
        self.app = None

    def _generate_dynamic_css(self) -> str:
        """Generate CSS with the theme colors from config/settings.py"""
        color_vars = []
        for key, value in COLORS.items():
            css_var_name = key.replace("_", "-")
            color_vars.append(f"    --{css_var_name}: {value};")

        css_template_path = Path(static_dir) / "css" / "style.css"
        if css_template_path.exists():
            with open(css_template_path, "r", encoding="utf-8") as f:
                base_css = f.read()
        else:
            base_css = ":root {\n}\n"

        dynamic_root = ":root {\n    /* Colors from settings.py */\n"
        dynamic_root += "\n".join(color_vars) + "\n}"

        # Replace the :root section of the base stylesheet
        root_section_start = base_css.find(":root {")
        root_section_end = base_css.find("}", root_section_start)
        if root_section_start != -1 and root_section_end != -1:
            return (
                base_css[:root_section_start]
                + dynamic_root
                + base_css[root_section_end + 1 :]
            )
        return dynamic_root + "\n\n" + base_css

    def setup_flask_app(self):
        """Set up Flask application with routes"""
        self.app = Flask(
            __name__, template_folder=template_dir, static_folder=static_dir
        )
        self.app.secret_key = self.site.config.server.secret_key

        # Set up routes
        self._setup_routes()

        return self.app

    # ========== RESPONSE HELPERS ==========

    def _section_payload(self, view: SectionView) -> Dict[str, Any]:
        """Rendered fragments of one section"""
        return {
            "section": view.name,
            "container_id": view.container_id,
            "html": render_template("_section_cards.html", view=view),
            "pagination_id": view.pagination_id,
            "pagination_html": render_template(
                "_pagination.html", pagination=view.pagination
            ),
            "total_items": view.total_items,
        }

    def _all_sections_payload(self) -> Dict[str, Dict[str, Any]]:
        return {
            name: self._section_payload(view)
            for name, view in self.site.renderer.render_all().items()
        }

    def _drain_notifications(self) -> List[Dict[str, Any]]:
        return [n.to_dict() for n in self.site.notifications.drain()]

    def _error_response(self, error: AsyncError, **extra):
        body = {
            "success": False,
            "message": error.message,
            "error": error.to_dict(),
            "notifications": self._drain_notifications(),
        }
        body.update(extra)
        return jsonify(body), error_status(error)

    @staticmethod
    def _request_values() -> Dict[str, Any]:
        """Form inputs posted as JSON or as a regular form"""
        data = request.get_json(silent=True)
        if isinstance(data, dict):
            return data
        return request.form.to_dict()

    @staticmethod
    def _json_body() -> Dict[str, Any]:
        """JSON object body; anything else reads as empty"""
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def _setup_routes(self):
        """Set up all Flask routes"""

        @self.app.route("/")
        async def index():
            """Portfolio page; pagination starts over on every page load"""
            if not self.site.store.is_ready:
                # Retry a store that was unavailable at startup
                await self.site.store.load()
            self.site.tracker.reset()

            return render_template(
                "index.html",
                site=self.site.config.site,
                sections=self.site.renderer.render_all(),
                categories=self.site.renderer.render_categories(),
                form=self.site.form_controller.close().to_dict(),
                notifications=self._drain_notifications(),
                delete_confirm=MESSAGES["delete_confirm"],
            )

        @self.app.route("/health")
        async def health():
            result = await self.site.store.health_check()
            return jsonify({**result.data, "timestamp": time.time()})

        @self.app.route("/dynamic-style.css")
        def dynamic_css():
            """Serve dynamically generated CSS based on settings.py"""
            try:
                css_content = self._generate_dynamic_css()
            except OSError as e:
                logger.error(f"Error generating dynamic CSS: {e}")
                # Return empty CSS on error to prevent breaking the page
                return Response("/* Error generating dynamic CSS */", mimetype="text/css")

            response = Response(css_content, mimetype="text/css")
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
            return response

        @self.app.route("/api/projects")
        def api_projects():
            """API endpoint to list all projects"""
            projects = self.site.store.projects
            return jsonify(
                {
                    "success": True,
                    "projects": [project.to_dict() for project in projects],
                    "count": len(projects),
                }
            )

        @self.app.route("/api/sections")
        def api_sections():
            """API endpoint to re-render every section"""
            return jsonify({"success": True, "sections": self._all_sections_payload()})

        @self.app.route("/api/reload", methods=["POST"])
        async def api_reload():
            """API endpoint to reload projects from the backing store"""
            result = await self.site.store.load()
            if result.is_error:
                return self._error_response(
                    result.error, sections=self._all_sections_payload()
                )
            return jsonify(
                {
                    "success": True,
                    "message": result.message,
                    "sections": self._all_sections_payload(),
                    "notifications": self._drain_notifications(),
                }
            )

        @self.app.route("/api/form")
        @self.app.route("/api/form/<project_id>")
        def api_open_form(project_id: Optional[str] = None):
            """API endpoint to open the dialog, blank or for an existing project"""
            try:
                form = self.site.form_controller.open(project_id)
            except NotFoundError as e:
                logger.warning(f"Cannot edit missing project {project_id}")
                return self._error_response(e)
            return jsonify({"success": True, "form": form.to_dict()})

        @self.app.route("/api/form/close", methods=["POST"])
        def api_close_form():
            form = self.site.form_controller.close()
            return jsonify({"success": True, "form": form.to_dict()})

        @self.app.route("/api/form/submit", methods=["POST"])
        async def api_submit_form():
            """API endpoint for the dialog's submit button"""
            controller = self.site.form_controller
            result = await controller.submit(self._request_values())

            if result.is_error:
                # The dialog stays open so the user can retry
                return self._error_response(
                    result.error, form_open=True, form=controller.form.to_dict()
                )

            return jsonify(
                {
                    "success": True,
                    "message": result.message,
                    "project": result.data.to_dict() if result.data else None,
                    "form_open": False,
                    "sections": self._all_sections_payload(),
                    "notifications": self._drain_notifications(),
                }
            )

        @self.app.route("/api/projects/<project_id>", methods=["DELETE"])
        async def api_delete_project(project_id):
            """API endpoint to delete a project; requires {"confirmed": true}"""
            data = self._json_body()
            result = await self.site.form_controller.delete(
                project_id, bool(data.get("confirmed"))
            )

            if result.is_error:
                return self._error_response(result.error)

            return jsonify(
                {
                    "success": True,
                    "message": result.message,
                    "sections": self._all_sections_payload(),
                    "notifications": self._drain_notifications(),
                }
            )

        @self.app.route("/api/pagination", methods=["POST"])
        def api_pagination():
            """API endpoint for a page button; re-renders only that section"""
            data = self._json_body()
            section = data.get("section")

            try:
                page = int(data.get("page"))
            except (TypeError, ValueError):
                return self._error_response(
                    ValidationError("Page must be an integer", field="page")
                )

            try:
                view, scroll = self.site.renderer.select_page(section, page)
            except ValidationError as e:
                return self._error_response(e)

            return jsonify(
                {
                    "success": True,
                    **self._section_payload(view),
                    "current_page": self.site.tracker.get_state(section).current_page,
                    "scroll": scroll.to_dict(),
                }
            )

        @self.app.route("/api/notifications")
        def api_notifications():
            """API endpoint to collect pending notifications"""
            return jsonify(
                {"success": True, "notifications": self._drain_notifications()}
            )

    def run(self, host="0.0.0.0", port=5000, debug=False):
        """Run the web server in the current thread"""
        if self.app is None:
            self.setup_flask_app()

        logger.info(f"Serving portfolio on {self.get_web_url(host, port)}")
        self.app.run(host=host, port=port, debug=debug, use_reloader=False)

    @staticmethod
    def get_web_url(host: str, port: int) -> str:
        """Get the web interface URL"""
        display_host = "localhost" if host in ("0.0.0.0", "") else host
        return f"http://{display_host}:{port}"
