"""
Tests for the web integration - page rendering and the admin JSON API.
Tests focus on responses rather than internal implementation details.
"""

import os
import sys
import pytest

# Add parent directory to path
parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

from config.settings import MESSAGES
from services.web_integration_service import WebIntegration, error_status
from utils.async_base import AsyncError, NotFoundError, StoreError, ValidationError
from utils.async_utils import run_sync


def form_values(**overrides):
    values = {
        "projectId": "",
        "projectTitle": "demo",
        "projectCategory": "web",
        "projectDescription": "A demo project",
        "projectImage": "https://example.com/demo.png",
        "projectLink": "",
    }
    values.update(overrides)
    return values


def notification_messages(data):
    return [n["message"] for n in data["notifications"]]


class TestErrorStatus:
    def test_mapping(self):
        assert error_status(ValidationError("bad")) == 400
        assert error_status(NotFoundError("gone")) == 404
        assert error_status(StoreError("down")) == 503
        assert error_status(AsyncError("other")) == 500


class TestPage:
    """Test the portfolio page and its assets"""

    def test_index_empty(self, client):
        response = client.get("/")

        assert response.status_code == 200
        html = response.get_data(as_text=True)
        assert "No projects yet." in html
        assert "No experimental projects yet." in html
        assert 'id="latestProjects"' in html
        assert "Add New Project" not in html
        # Every category tile is shown
        assert "3D &amp; Animation" in html

    def test_index_with_projects(self, client, site, seed_projects):
        seeded = seed_projects(7)
        client.post("/api/reload")

        html = client.get("/").get_data(as_text=True)

        assert seeded[0].title in html
        assert "New Added" in html
        assert 'class="pagination"' in html

    def test_index_resets_pagination(self, client, site, seed_projects):
        seed_projects(7)
        client.post("/api/reload")
        client.post("/api/pagination", json={"section": "all", "page": 2})

        client.get("/")

        assert site.tracker.snapshot()["all"] == 1

    def test_index_recovers_store_unavailable_at_startup(self, site, local_backend, seed_projects):
        local_backend.storage_path.write_text("[]")
        startup = run_sync(site.initialize())
        assert startup.is_error
        assert site.store.is_ready is False

        # Storage becomes readable again after startup
        local_backend.storage_path.unlink()
        seeded = seed_projects(2)
        site.app.config["TESTING"] = True
        with site.app.test_client() as client:
            response = client.get("/")

        assert response.status_code == 200
        assert site.store.is_ready
        html = response.get_data(as_text=True)
        assert seeded[0].title in html
        assert seeded[1].title in html

    def test_dynamic_css(self, client):
        response = client.get("/dynamic-style.css")

        assert response.status_code == 200
        assert response.mimetype == "text/css"
        css = response.get_data(as_text=True)
        assert "Colors from settings.py" in css
        assert "--notification-bg" in css
        assert ".pagination" in css

    def test_health(self, client):
        data = client.get("/health").get_json()

        assert data["status"] == "healthy"
        assert data["backend"] == "local"
        assert "timestamp" in data


class TestProjectApi:
    """Test listing and reloading projects"""

    def test_list_projects(self, client, seed_projects):
        seed_projects(2)
        client.post("/api/reload")

        data = client.get("/api/projects").get_json()

        assert data["count"] == 2
        assert data["projects"][0]["title"] == "P02"

    def test_sections(self, client):
        data = client.get("/api/sections").get_json()

        assert set(data["sections"]) == {"latest", "all", "experimental"}
        assert data["sections"]["all"]["container_id"] == "allProjects"
        assert data["sections"]["all"]["pagination_html"].strip() == ""

    def test_reload_failure(self, client, local_backend):
        local_backend.storage_path.write_text("{broken")

        response = client.post("/api/reload")

        assert response.status_code == 503
        data = response.get_json()
        assert data["success"] is False
        assert notification_messages(data) == [MESSAGES["load_error"]]


class TestFormApi:
    """Test the dialog endpoints"""

    def test_open_blank(self, client):
        data = client.get("/api/form").get_json()

        assert data["form"]["mode"] == "open-for-create"
        assert data["form"]["title"] == "Add New Project"

    def test_open_for_edit(self, client, seed_projects):
        project = seed_projects(1)[0]
        client.post("/api/reload")

        data = client.get(f"/api/form/{project.id}").get_json()

        assert data["form"]["mode"] == "open-for-edit"
        assert data["form"]["values"]["projectId"] == project.id

    def test_open_unknown_project(self, client):
        response = client.get("/api/form/missing")

        assert response.status_code == 404
        assert response.get_json()["error"]["error_code"] == "NOT_FOUND"

    def test_close(self, client, site):
        client.get("/api/form")
        data = client.post("/api/form/close").get_json()

        assert data["form"]["mode"] == "closed"
        assert site.form_controller.form.is_open is False

    def test_submit_creates_project(self, client, site):
        client.get("/api/form")

        response = client.post("/api/form/submit", json=form_values())

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["form_open"] is False
        assert data["project"]["title"] == "DEMO"
        assert "DEMO" in data["sections"]["latest"]["html"]
        assert notification_messages(data) == [MESSAGES["project_added"]]
        assert site.store.count() == 1

    def test_submit_as_form_post(self, client, site):
        response = client.post("/api/form/submit", data=form_values(projectTitle="posted"))

        assert response.status_code == 200
        assert site.store.projects[0].title == "POSTED"

    def test_submit_missing_field(self, client, site):
        client.get("/api/form")

        response = client.post("/api/form/submit", json=form_values(projectImage=""))

        assert response.status_code == 400
        data = response.get_json()
        assert data["form_open"] is True
        assert data["form"]["mode"] == "open-for-create"
        assert site.store.count() == 0

    def test_submit_edit(self, client, site, seed_projects):
        project = seed_projects(1)[0]
        client.post("/api/reload")

        data = client.post(
            "/api/form/submit",
            json=form_values(projectId=project.id, projectTitle="edited"),
        ).get_json()

        assert notification_messages(data) == [MESSAGES["project_updated"]]
        assert site.store.find(project.id).title == "EDITED"


class TestDeleteApi:
    """Test deleting projects"""

    def test_delete_requires_confirmation(self, client, site, seed_projects):
        project = seed_projects(1)[0]
        client.post("/api/reload")

        response = client.delete(f"/api/projects/{project.id}", json={})

        assert response.status_code == 400
        assert site.store.count() == 1

    def test_confirmed_delete(self, client, site, seed_projects):
        seeded = seed_projects(2)
        client.post("/api/reload")

        response = client.delete(
            f"/api/projects/{seeded[0].id}", json={"confirmed": True}
        )

        assert response.status_code == 200
        data = response.get_json()
        assert notification_messages(data) == [MESSAGES["project_deleted"]]
        assert seeded[0].id not in data["sections"]["all"]["html"]
        assert [p.id for p in site.store.projects] == [seeded[1].id]

    def test_delete_with_list_body(self, client, site, seed_projects):
        project = seed_projects(1)[0]
        client.post("/api/reload")

        response = client.delete(
            f"/api/projects/{project.id}", json=[{"confirmed": True}]
        )

        assert response.status_code == 400
        assert response.get_json()["success"] is False
        assert site.store.count() == 1

    def test_delete_missing(self, client):
        response = client.delete("/api/projects/missing", json={"confirmed": True})

        assert response.status_code == 404
        assert notification_messages(response.get_json()) == [MESSAGES["delete_error"]]


class TestPaginationApi:
    """Test the page buttons"""

    def test_select_page(self, client, seed_projects):
        seeded = seed_projects(13)
        client.post("/api/reload")

        response = client.post("/api/pagination", json={"section": "all", "page": 3})

        assert response.status_code == 200
        data = response.get_json()
        assert data["current_page"] == 3
        assert data["container_id"] == "allProjects"
        assert seeded[12].id in data["html"]
        assert seeded[0].id not in data["html"]
        assert data["scroll"] == {"element_id": "all", "offset": -100, "behavior": "smooth"}

    @pytest.mark.parametrize(
        "payload",
        [
            {"section": "all", "page": "two"},
            {"section": "all", "page": 0},
            {"section": "archive", "page": 1},
            {"page": 1},
            [1, 2],
            [{"section": "all", "page": 1}],
        ],
    )
    def test_invalid_requests(self, client, payload):
        response = client.post("/api/pagination", json=payload)

        assert response.status_code == 400
        assert response.get_json()["error"]["error_code"] == "VALIDATION_ERROR"


def test_notifications_endpoint(client, site):
    site.notifications.push("hello")

    first = client.get("/api/notifications").get_json()
    second = client.get("/api/notifications").get_json()

    assert notification_messages(first) == ["hello"]
    assert second["notifications"] == []


def test_get_web_url():
    assert WebIntegration.get_web_url("0.0.0.0", 5000) == "http://localhost:5000"
    assert WebIntegration.get_web_url("127.0.0.1", 8080) == "http://127.0.0.1:8080"


def test_web_integration_has_no_running_flag(site):
    assert not hasattr(site.web, "is_running")
