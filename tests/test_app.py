import json
from pathlib import Path

import httpx
import pytest
from streamlit.testing.v1 import AppTest

from conftest import Recorder, make_employee
from turnover_predictor.api import ApiClient

APP = str(Path(__file__).parents[1] / "app.py")


@pytest.fixture
def recorder(monkeypatch):
    recorder = Recorder()
    monkeypatch.setattr(ApiClient, "transport", httpx.MockTransport(recorder))
    return recorder


@pytest.fixture
def at():
    return AppTest.from_file(APP, default_timeout=30)


def empty_dashboard(recorder):
    recorder.routes.update({
        "GET /api/employees/stats": (200, {}),
        "GET /api/employees/top-risk": (200, []),
        "GET /api/employees/department-risks": (200, []),
    })


def test_unauthenticated_user_sees_login(at, recorder):
    at.run()
    assert not at.exception
    assert at.subheader[0].value == "Sign in"
    assert recorder.requests == []


def test_protected_page_redirects_to_login(at, recorder):
    at.query_params["page"] = "employees"
    at.run()
    assert at.subheader[0].value == "Sign in"
    assert recorder.requests == []


def test_login_lands_on_empty_dashboard(at, recorder):
    recorder.routes["POST /api/auth/login"] = (200, {"access_token": "tok-abc"})
    empty_dashboard(recorder)
    at.run()
    at.text_input(key="login_username").input("ann")
    at.text_input(key="login_password").input("secret")
    at.button(key="login_submit").click().run()

    assert not at.exception
    assert at.session_state["token"] == "tok-abc"
    assert at.header[0].value == "Dashboard Overview"
    assert [m.value for m in at.metric] == ["0", "0", "0.0%", "0"]
    assert any("No risk distribution data available" in i.value for i in at.info)


def test_login_failure_shows_error(at, recorder):
    recorder.routes["POST /api/auth/login"] = (401, {"detail": "nope"})
    at.run()
    at.text_input(key="login_username").input("ann")
    at.text_input(key="login_password").input("wrong")
    at.button(key="login_submit").click().run()

    assert at.error[0].value == "Login failed"
    assert "token" not in at.session_state
    assert at.subheader[0].value == "Sign in"


def test_dashboard_fetch_failure_shows_error(at, recorder):
    empty_dashboard(recorder)
    recorder.routes["GET /api/employees/stats"] = (500, None)
    at.session_state["token"] = "tok"
    at.run()
    assert at.error[0].value == "Failed to fetch dashboard data"
    assert len(at.metric) == 0


def test_logout_returns_to_login(at, recorder):
    empty_dashboard(recorder)
    at.session_state["token"] = "tok"
    at.run()
    at.button(key="nav_logout").click().run()
    assert "token" not in at.session_state
    assert at.subheader[0].value == "Sign in"


@pytest.fixture
def employees_page(at, recorder):
    recorder.routes["GET /api/employees"] = (200, [
        make_employee("abc123", "Alice Smith", "Engineering", risk_level="High Risk"),
        make_employee("e2", "Bob Jones", "Sales"),
        make_employee("e3", "Carol White", "Finance", risk_level="Medium Risk"),
    ])
    at.session_state["token"] = "tok"
    at.query_params["page"] = "employees"
    at.run()
    return at


def delete_keys(at):
    return [b.key for b in at.button if b.key and b.key.startswith("delete_")]


def test_employees_page_lists_rows(employees_page, recorder):
    assert not employees_page.exception
    assert delete_keys(employees_page) == ["delete_abc123", "delete_e2", "delete_e3"]
    assert recorder.requests[0].headers["Authorization"] == "Bearer tok"


def test_delete_confirm_removes_row_without_refetch(employees_page, recorder):
    at = employees_page
    at.button(key="delete_abc123").click().run()
    assert at.warning[0].value == "Are you sure you want to delete Alice Smith?"

    recorder.routes["DELETE /api/employees/abc123"] = (204, None)
    at.button(key="confirm_delete").click().run()

    assert delete_keys(at) == ["delete_e2", "delete_e3"]
    assert ("DELETE", "/api/employees/abc123") in recorder.calls()
    assert recorder.calls().count(("GET", "/api/employees")) == 1


def test_delete_cancel_keeps_row(employees_page, recorder):
    at = employees_page
    at.button(key="delete_e2").click().run()
    at.button(key="cancel_delete").click().run()
    assert delete_keys(at) == ["delete_abc123", "delete_e2", "delete_e3"]
    assert len(at.warning) == 0
    assert ("DELETE", "/api/employees/e2") not in recorder.calls()


def sent_json(recorder, method, path):
    request = next(r for r in recorder.requests if (r.method, r.url.path) == (method, path))
    return json.loads(request.content)


def click_save(at):
    next(b for b in at.button if b.label == "Save").click().run()


def test_edit_saves_and_reloads_roster(employees_page, recorder):
    at = employees_page
    recorder.routes["PUT /api/employees/e2"] = (200, {"_id": "e2"})
    at.button(key="edit_e2").click().run()
    assert at.text_input(key="form_e2_dept").value == "Sales"

    at.text_input(key="form_e2_dept").set_value("Ops")
    click_save(at)

    assert not at.exception
    body = sent_json(recorder, "PUT", "/api/employees/e2")
    assert body["department"] == "Ops"
    assert body["name"] == "Bob Jones"
    # full reload: cache dropped and the roster fetched again, form closed
    assert recorder.calls().count(("GET", "/api/employees")) == 2
    assert "form_e2_dept" not in [t.key for t in at.text_input]
    assert at.session_state["token"] == "tok"


def test_add_creates_and_reloads_roster(employees_page, recorder):
    at = employees_page
    recorder.routes["POST /api/employees"] = (201, {"_id": "n1"})
    at.button(key="add_employee").click().run()
    at.text_input(key="form___new___first").set_value("Ann")
    at.text_input(key="form___new___last").set_value("Lee")
    click_save(at)

    assert not at.exception
    body = sent_json(recorder, "POST", "/api/employees")
    assert body["name"] == "Ann Lee"
    assert body["risk_level"] == "Medium Risk"
    assert "_id" not in body
    assert recorder.calls().count(("GET", "/api/employees")) == 2


def test_save_failure_keeps_form_open(employees_page, recorder):
    at = employees_page
    recorder.routes["PUT /api/employees/e2"] = (500, None)
    at.button(key="edit_e2").click().run()
    click_save(at)

    assert at.error[0].value == "Failed to update employee"
    assert at.text_input(key="form_e2_dept").value == "Sales"
    assert recorder.calls().count(("GET", "/api/employees")) == 1


def test_export_offers_download(employees_page, recorder):
    at = employees_page
    recorder.routes["GET /export"] = lambda request: httpx.Response(
        200, content=b"%PDF-1.4", headers={"content-type": "application/pdf"})
    at.button(key="export_pdf").click().run()

    assert not at.exception
    assert at.session_state["export_file"].filename == "employees.pdf"
    assert len(at.get("download_button")) == 1
    assert recorder.requests[-1].url.params["format"] == "pdf"


def test_export_failure_shows_error(employees_page, recorder):
    at = employees_page
    recorder.routes["GET /export-with-recommendations"] = (500, None)
    at.button(key="export_rec_excel").click().run()

    assert at.error[0].value == "Export with recommendations failed"
    assert len(at.get("download_button")) == 0


def test_search_filters_rows(employees_page):
    at = employees_page
    at.text_input(key="emp_search").input("sales").run()
    assert delete_keys(at) == ["delete_e2"]


def test_upload_page_renders(at, recorder):
    at.session_state["token"] = "tok"
    at.query_params["page"] = "upload"
    at.run()
    assert at.header[0].value == "Upload Employee Data"
    assert not at.exception
    assert at.subheader[0].value == "Instructions"
