# Configuration constants

import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

CONFIG = {
    "storage_dir": "./data/resumes",
    "output_base_dir": "./data/exports",
    "default_display_name": "Your Name",
    "user_id_header": "X-User-Id",
    "pdf_config": {
        "template_path": os.path.join(BASE_DIR, "templates", "resume_template.html"),
        "css_path": os.path.join(BASE_DIR, "templates", "resume_styles.css"),
        "markdown_extensions": ["extra", "sane_lists"],
    },
}

# --------------------------------------------------------------------------
# Resume Markdown Layout
# --------------------------------------------------------------------------

SECTION_TITLES = {
    "summary": "Professional Summary",
    "skills": "Skills",
    "experience": "Work Experience",
    "education": "Education",
    "projects": "Projects",
}

ENTRY_SECTIONS = ["experience", "education", "projects"]

# Icons prefixing each contact field in the header, in display order.
# Escapes keep the exact code points stable across editors and encodings.
CONTACT_ICONS = {
    "email": "\U0001F4E7",     # e-mail
    "mobile": "\U0001F4F1",    # mobile phone
    "linkedin": "\U0001F4BC",  # briefcase
    "twitter": "\U0001F426",   # bird
}

CONTACT_LINK_LABELS = {
    "linkedin": "LinkedIn",
    "twitter": "Twitter",
}

PRESENT_LABEL = "Present"

MONTH_ABBREVIATIONS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
