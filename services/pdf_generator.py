"""
PDF generation service - renders the stored resume Markdown to HTML and prints it to PDF
"""

import os

import markdown
from jinja2 import Environment, FileSystemLoader

# Local imports
from utils import ensure_directory_exists, sanitize_for_path


def generate_pdf(markdown_content: str, output_dir: str, pdf_config: dict, filename: str = "resume") -> str:
    """
    Renders the resume Markdown and writes it as a PDF into output_dir.
    Returns the path of the generated PDF.
    """
    print("\n=== Generating PDF ===")

    if not markdown_content or not markdown_content.strip():
        raise ValueError("No content provided")

    ensure_directory_exists(output_dir)
    html_content = render_resume_html(markdown_content, pdf_config)

    # Save rendered HTML for debugging
    html_output_path = os.path.join(output_dir, "rendered_resume.html")
    with open(html_output_path, "w", encoding="utf-8") as f:
        f.write(html_content)

    safe_name = sanitize_for_path(filename, max_len=80) or "resume"
    pdf_output_path = os.path.join(output_dir, f"{safe_name}.pdf")
    _write_pdf(html_content, pdf_output_path, pdf_config)

    print(f"📄 PDF generated successfully: {pdf_output_path}")
    return pdf_output_path


def render_resume_html(markdown_content: str, pdf_config: dict) -> str:
    """
    Converts the resume Markdown to an HTML body and wraps it in the page template.
    """
    body = markdown.markdown(
        markdown_content,
        extensions=pdf_config.get("markdown_extensions", ["extra", "sane_lists"]),
    )

    template_dir = os.path.dirname(pdf_config["template_path"])
    template_name = os.path.basename(pdf_config["template_path"])

    env = Environment(loader=FileSystemLoader(template_dir))
    template = env.get_template(template_name)
    return template.render(body=body, pdf_config=pdf_config)


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _write_pdf(html_content: str, pdf_output_path: str, pdf_config: dict) -> None:
    try:
        # WeasyPrint pulls in native Pango/Cairo libraries on import
        from weasyprint import HTML as WeasyHTML, CSS as WeasyCSS

        template_dir = os.path.dirname(pdf_config["template_path"])
        html_doc = WeasyHTML(string=html_content, base_url=template_dir)
        css_doc = WeasyCSS(filename=pdf_config["css_path"])

        html_doc.write_pdf(pdf_output_path, stylesheets=[css_doc])

    except Exception as e:
        error_msg = f"❌ Error creating PDF: {str(e)}"
        print(error_msg)
        raise ValueError(error_msg) from e
