import os
import sys

import pytest

# This block adds the project's root directory to Python's search path.
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import app as app_module

USER_HEADERS = {"X-User-Id": "user_42"}

FORM_DATA = {
    "contactInfo": {"email": "a@b.com"},
    "summary": "",
    "skills": "",
    "experience": [{
        "title": "Engineer",
        "organization": "Acme",
        "startDate": "Jan 2020",
        "endDate": "Mar 2022",
        "current": False,
        "description": "Built the thing",
    }],
    "education": [],
    "projects": [],
}


@pytest.fixture
def client(tmp_path):
    app_module.app.config.update(
        TESTING=True,
        STORAGE_DIR=str(tmp_path / "resumes"),
        OUTPUT_BASE_DIR=str(tmp_path / "exports"),
    )
    with app_module.app.test_client() as client:
        yield client


def test_preview_returns_markdown(client):
    response = client.post('/api/resume/preview', json=dict(FORM_DATA, displayName="Jane Doe"))

    assert response.status_code == 200
    markdown = response.get_json()["markdown"]
    assert '## <div align="center">Jane Doe</div>' in markdown
    assert "### Engineer @ Acme" in markdown
    assert "## Skills" not in markdown


def test_preview_formats_month_inputs(client):
    entry = {"title": "Dev", "startDate": "2021-04", "endDate": "2023-01", "current": True}
    response = client.post('/api/resume/preview', json={"experience": [entry]})

    markdown = response.get_json()["markdown"]
    assert "<em>Apr 2021 - Present</em>" in markdown
    assert "2023" not in markdown


def test_preview_rejects_malformed_form_data(client):
    response = client.post('/api/resume/preview', json={"experience": "not a list"})
    assert response.status_code == 400
    assert "Invalid resume data" in response.get_json()["error"]


def test_parse_returns_form_data(client):
    markdown = client.post('/api/resume/preview', json=FORM_DATA).get_json()["markdown"]

    response = client.post('/api/resume/parse', json={"markdown": markdown})

    assert response.status_code == 200
    data = response.get_json()
    assert data["contactInfo"] == {"email": "a@b.com"}
    assert data["experience"] == FORM_DATA["experience"]


def test_parse_never_fails(client):
    for body in ({}, {"markdown": None}, {"markdown": "<div align=\"right\"><em>"}, ["not", "an", "object"]):
        response = client.post('/api/resume/parse', json=body)
        assert response.status_code == 200
        assert response.get_json()["experience"] == []


def test_user_routes_require_identity(client):
    assert client.get('/api/resume').status_code == 401
    assert client.post('/api/resume', json={"content": "x"}).status_code == 401
    assert client.get('/api/check-user-data').status_code == 401
    assert client.delete('/api/clear-data').status_code == 401
    assert client.post('/api/generate-pdf', json={}).status_code == 401


def test_load_missing_resume(client):
    response = client.get('/api/resume', headers=USER_HEADERS)
    assert response.status_code == 404


def test_save_form_data_then_load(client):
    saved = client.post('/api/resume', json={"formData": FORM_DATA}, headers=USER_HEADERS)
    assert saved.status_code == 200
    assert "### Engineer @ Acme" in saved.get_json()["content"]

    loaded = client.get('/api/resume', headers=USER_HEADERS).get_json()
    assert loaded["userId"] == "user_42"
    assert loaded["content"] == saved.get_json()["content"]
    assert loaded["formData"]["experience"][0]["organization"] == "Acme"
    assert loaded["updatedAt"]


@pytest.mark.parametrize("title", ["", "   "])
def test_untitled_entries_are_rejected(client, title):
    entry = dict(FORM_DATA["experience"][0], title=title)
    form_data = dict(FORM_DATA, projects=[entry])

    preview = client.post('/api/resume/preview', json=form_data)
    assert preview.status_code == 400
    assert "title is required" in preview.get_json()["error"]

    saved = client.post('/api/resume', json={"formData": form_data}, headers=USER_HEADERS)
    assert saved.status_code == 400
    assert client.get('/api/check-user-data', headers=USER_HEADERS).get_json() == {"hasResume": False}


def test_user_ids_differing_in_punctuation_are_isolated(client):
    client.post('/api/resume', json={"content": "## Skills\n\nRust"}, headers={"X-User-Id": "alice.smith"})

    other = {"X-User-Id": "alicesmith"}
    assert client.get('/api/check-user-data', headers=other).get_json() == {"hasResume": False}
    assert client.get('/api/resume', headers=other).status_code == 404



def test_save_raw_markdown(client):
    response = client.post('/api/resume', json={"content": "## Skills\n\nRust"}, headers=USER_HEADERS)
    assert response.status_code == 200

    loaded = client.get('/api/resume', headers=USER_HEADERS).get_json()
    assert loaded["formData"]["skills"] == "Rust"


def test_save_without_content(client):
    response = client.post('/api/resume', json={}, headers=USER_HEADERS)
    assert response.status_code == 400


def test_check_and_clear_user_data(client):
    assert client.get('/api/check-user-data', headers=USER_HEADERS).get_json() == {"hasResume": False}

    client.post('/api/resume', json={"content": "## Skills\n\nRust"}, headers=USER_HEADERS)
    assert client.get('/api/check-user-data', headers=USER_HEADERS).get_json() == {"hasResume": True}

    cleared = client.delete('/api/clear-data', headers=USER_HEADERS)
    assert cleared.status_code == 200
    assert cleared.get_json()["message"] == "All data cleared successfully"
    assert client.get('/api/check-user-data', headers=USER_HEADERS).get_json() == {"hasResume": False}


def _fake_generate_pdf(calls):
    def fake(markdown_content, output_dir, pdf_config, filename="resume"):
        calls.append(markdown_content)
        os.makedirs(output_dir, exist_ok=True)
        pdf_path = os.path.join(output_dir, f"{filename}.pdf")
        with open(pdf_path, "wb") as f:
            f.write(b"%PDF-1.4 fake")
        return pdf_path
    return fake


def test_generate_pdf_from_submitted_content(client, monkeypatch):
    calls = []
    monkeypatch.setattr(app_module, "generate_pdf", _fake_generate_pdf(calls))

    response = client.post(
        '/api/generate-pdf',
        json={"content": "## Skills\n\nRust", "filename": "jane"},
        headers=USER_HEADERS,
    )

    assert response.status_code == 200
    assert response.mimetype == "application/pdf"
    assert response.data.startswith(b"%PDF")
    assert "jane.pdf" in response.headers["Content-Disposition"]
    assert calls == ["## Skills\n\nRust"]
    response.close()


def test_generate_pdf_falls_back_to_stored_resume(client, monkeypatch):
    calls = []
    monkeypatch.setattr(app_module, "generate_pdf", _fake_generate_pdf(calls))
    client.post('/api/resume', json={"content": "## Skills\n\nGo"}, headers=USER_HEADERS)

    response = client.post('/api/generate-pdf', json={}, headers=USER_HEADERS)

    assert response.status_code == 200
    assert calls == ["## Skills\n\nGo"]
    response.close()


def test_generate_pdf_without_anything_to_render(client, monkeypatch):
    calls = []
    monkeypatch.setattr(app_module, "generate_pdf", _fake_generate_pdf(calls))

    response = client.post('/api/generate-pdf', json={}, headers=USER_HEADERS)

    assert response.status_code == 400
    assert calls == []


def test_generate_pdf_reports_render_failures(client, monkeypatch):
    def failing(*args, **kwargs):
        raise ValueError("❌ Error creating PDF: no fonts")
    monkeypatch.setattr(app_module, "generate_pdf", failing)

    response = client.post('/api/generate-pdf', json={"content": "## Skills\n\nGo"}, headers=USER_HEADERS)

    assert response.status_code == 500
    assert "no fonts" in response.get_json()["error"]


def test_generate_pdf_reports_rejected_identity_as_unauthorized(client, monkeypatch):
    def rejecting(user_id, storage_dir):
        raise ValueError("Unauthorized")
    calls = []
    monkeypatch.setattr(app_module, "get_resume", rejecting)
    monkeypatch.setattr(app_module, "generate_pdf", _fake_generate_pdf(calls))

    response = client.post('/api/generate-pdf', json={}, headers=USER_HEADERS)

    assert response.status_code == 401
    assert response.get_json() == {"error": "Unauthorized"}
    assert calls == []
