import os
from flask import Flask, request, jsonify, send_file
from dotenv import load_dotenv
from pydantic import ValidationError

# --- IMPORTS FROM OUR FILES ---
from models import StructuredResume
from config import CONFIG, ENTRY_SECTIONS
from utils import ensure_directory_exists, user_storage_key, format_display_date

# Import services
from services.markdown_transcoder import form_data_to_markdown, markdown_to_form_data
from services.resume_store import save_resume, get_resume, has_resume, clear_resume
from services.pdf_generator import generate_pdf


# --- APPLICATION SETUP ---
load_dotenv()
app = Flask(__name__)
app.secret_key = os.getenv("FLASK_SECRET_KEY") or os.urandom(24)
app.config["STORAGE_DIR"] = os.getenv("RESUME_STORAGE_DIR", CONFIG["storage_dir"])
app.config["OUTPUT_BASE_DIR"] = os.getenv("RESUME_OUTPUT_DIR", CONFIG["output_base_dir"])


def _current_user_id():
    """The caller's identity, as forwarded by the auth layer in front of the app."""
    return (request.headers.get(CONFIG["user_id_header"]) or "").strip()


def _json_payload():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _display_name(payload):
    name = payload.get("displayName")
    return name.strip() if isinstance(name, str) and name.strip() else None


def _validate_form_data(data):
    """
    Validates form data; month input values ("2022-03") become display dates.
    Every entry needs a title, it is the heading the entry is stored under.
    """
    resume = StructuredResume.model_validate(data)
    for section in ENTRY_SECTIONS:
        for entry in getattr(resume, section):
            if not entry.title.strip():
                raise ValueError(f"Invalid resume data: title is required for every {section} entry")
            entry.start_date = format_display_date(entry.start_date)
            entry.end_date = "" if entry.current else format_display_date(entry.end_date)
    return resume


def _error(message, status):
    return jsonify({"error": message}), status


def _unauthorized():
    return _error("Unauthorized", 401)


# --- API ROUTES ---
@app.route('/api/resume/preview', methods=['POST'])
def preview_resume():
    """Builds the Markdown projection of the submitted form data."""
    payload = _json_payload()
    try:
        resume = _validate_form_data(payload)
    except ValidationError as e:
        return _error(f"Invalid resume data: {e.error_count()} error(s)", 400)
    except ValueError as e:
        return _error(str(e), 400)

    return jsonify({"markdown": form_data_to_markdown(resume, _display_name(payload))})


@app.route('/api/resume/parse', methods=['POST'])
def parse_resume():
    """Parses Markdown back into form data. Always succeeds."""
    payload = _json_payload()
    return jsonify(markdown_to_form_data(payload.get("markdown")).to_form_data())


@app.route('/api/resume', methods=['GET'])
def load_resume():
    """Returns the stored resume along with its parsed form data."""
    user_id = _current_user_id()
    if not user_id:
        return _unauthorized()

    try:
        saved = get_resume(user_id, app.config["STORAGE_DIR"])
    except ValueError as e:
        return _error(str(e), 401)

    if saved is None:
        return _error("Resume not found", 404)

    response = saved.to_response()
    response["formData"] = markdown_to_form_data(saved.content).to_form_data()
    return jsonify(response)


@app.route('/api/resume', methods=['POST'])
def store_resume():
    """Saves either raw Markdown content or form data (encoded to Markdown first)."""
    user_id = _current_user_id()
    if not user_id:
        return _unauthorized()

    payload = _json_payload()
    content = payload.get("content")

    if content is None and "formData" in payload:
        try:
            resume = _validate_form_data(payload["formData"])
        except ValidationError as e:
            return _error(f"Invalid resume data: {e.error_count()} error(s)", 400)
        except ValueError as e:
            return _error(str(e), 400)
        content = form_data_to_markdown(resume, _display_name(payload))

    if not isinstance(content, str):
        return _error("No content provided", 400)

    try:
        saved = save_resume(user_id, content, app.config["STORAGE_DIR"])
    except ValueError as e:
        return _error(str(e), 500)

    return jsonify(saved.to_response())


@app.route('/api/check-user-data', methods=['GET'])
def check_user_data():
    user_id = _current_user_id()
    if not user_id:
        return _unauthorized()
    try:
        return jsonify({"hasResume": has_resume(user_id, app.config["STORAGE_DIR"])})
    except ValueError as e:
        return _error(str(e), 401)


@app.route('/api/clear-data', methods=['DELETE'])
def clear_data():
    """Removes everything stored for the current user."""
    user_id = _current_user_id()
    if not user_id:
        return _unauthorized()
    try:
        clear_resume(user_id, app.config["STORAGE_DIR"])
    except ValueError as e:
        return _error(str(e), 401)
    except OSError as e:
        print(f"❌ Error clearing user data: {e}")
        return _error("Failed to clear data", 500)
    return jsonify({"message": "All data cleared successfully"})


@app.route('/api/generate-pdf', methods=['POST'])
def generate_pdf_route():
    """Renders the submitted Markdown (or the stored resume) and returns it as a PDF download."""
    user_id = _current_user_id()
    if not user_id:
        return _unauthorized()

    payload = _json_payload()
    content = payload.get("content")
    filename = payload.get("filename") or "resume"

    if not content:
        try:
            saved = get_resume(user_id, app.config["STORAGE_DIR"])
        except ValueError as e:
            return _error(str(e), 401)
        content = saved.content if saved else ""
    if not isinstance(content, str) or not content.strip():
        return _error("No content provided", 400)

    output_dir = os.path.join(app.config["OUTPUT_BASE_DIR"], user_storage_key(user_id))
    try:
        pdf_path = generate_pdf(content, output_dir, CONFIG["pdf_config"], filename=filename)
    except ValueError as e:
        return _error(str(e), 500)

    return send_file(
        os.path.abspath(pdf_path),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=os.path.basename(pdf_path),
    )


# --- MAIN EXECUTION ---
if __name__ == '__main__':
    # Ensure required directories exist
    ensure_directory_exists(app.config["STORAGE_DIR"])
    ensure_directory_exists(app.config["OUTPUT_BASE_DIR"])

    app.run(debug=True)
