"""
Markdown transcoder - keeps the resume form and its Markdown projection in sync.

The encoder turns a StructuredResume into the Markdown document that is stored
and previewed. The decoder reads such a document (or a hand-edited one) back
into a StructuredResume. Decoding is total: any string, including an empty one
or None, yields a fully shaped resume, with unmatched pieces left at their
defaults.

Accepted document shape:

    ## <div align="center">Name</div>
    <div align="center"> icon field | icon field | ... </div>
    ## Section Title
    ### Title @ Organization
    <div align="right"><em>Start - End</em></div>
    * bullet
"""

import re
from typing import Dict, List, Optional, Tuple

# Local imports
from models import ContactInfo, Entry, StructuredResume
from config import (
    CONFIG,
    SECTION_TITLES,
    ENTRY_SECTIONS,
    CONTACT_ICONS,
    CONTACT_LINK_LABELS,
    PRESENT_LABEL,
    MONTH_ABBREVIATIONS,
)


DATE_SEPARATOR = " - "
BULLET_MARKERS = "*•-"

# ============================================================================
# GRAMMAR
# ============================================================================

_H2_LINE = re.compile(r"^##[ \t]+(.*)$")
_H3_LINE = re.compile(r"^###[ \t]+(.*)$")
_BULLET_LINE = re.compile(r"^[" + re.escape(BULLET_MARKERS) + r"][ \t]+(.*)$")
_RESIDUAL_BULLET = re.compile(r"^[" + re.escape(BULLET_MARKERS) + r"][ \t]+", re.M)
_TITLE_SEPARATOR = re.compile(r"\s+@\s+")

# Tags never span a "<", so every scan below stops at the next tag.
_CONTACT_HEADING = re.compile(r"^##[ \t]*(<div\b[^<>]*>)([^<]+)</div>", re.M)
_DIV_BLOCK = re.compile(r"(<div\b[^<>]*>)([^<]*)</div>")
_CENTERED = re.compile(r"\balign\s*=\s*[\"']?center\b|text-align\s*:\s*center\b")

# Everything between the opening div and the <em>, without leaving the div.
_INSIDE_DIV = r"(?:(?!</div>)[\s\S])*?"
_DATE_PATTERNS = [
    re.compile(r"<div\b[^>]*\balign\s*=\s*[\"']?right\b[^>]*>" + _INSIDE_DIV + r"<em>([^<]+)</em>", re.I),
    re.compile(r"<div\b[^>]*\bstyle\s*=\s*[\"'][^\"']*text-align\s*:\s*right[^>]*>" + _INSIDE_DIV + r"<em>([^<]+)</em>", re.I),
]
_EMPHASIS = re.compile(r"<em>([^<]+)</em>")
_MONTH_YEAR = re.compile(r"^(?:" + "|".join(MONTH_ABBREVIATIONS) + r")\s+\d{4}", re.I)

_LINK_PATTERNS = {
    "linkedin": re.compile(r"\[LinkedIn\]\(([^)]+)\)"),
    "twitter": re.compile(r"\[(?:Twitter|X)[^\]]*\]\(([^)]+)\)"),
}


def _icon_variants(icon: str) -> List[str]:
    """
    The icon itself plus the form it takes when its UTF-8 bytes were read as
    cp1252, which is how some saved documents carry it.
    """
    mangled = icon.encode("utf-8").decode("cp1252", errors="ignore")
    return [icon, mangled] if mangled != icon else [icon]


_ICON_VARIANTS = {field: _icon_variants(icon) for field, icon in CONTACT_ICONS.items()}


# ============================================================================
# ENCODER
# ============================================================================

def form_data_to_markdown(resume: StructuredResume, display_name: Optional[str] = None) -> str:
    """
    Builds the full Markdown document for a resume.
    Sections with no content are left out entirely.
    """
    summary = (resume.summary or "").strip()
    skills = (resume.skills or "").strip()

    parts = [
        contact_to_markdown(resume.contact_info, display_name),
        summary and f"## {SECTION_TITLES['summary']}\n\n{summary}",
        skills and f"## {SECTION_TITLES['skills']}\n\n{skills}",
    ]
    for section in ENTRY_SECTIONS:
        parts.append(entries_to_markdown(getattr(resume, section), SECTION_TITLES[section]))

    return "\n\n".join(part for part in parts if part)


def contact_to_markdown(contact_info: ContactInfo, display_name: Optional[str] = None) -> str:
    """Centered name heading followed by the icon-tagged contact line."""
    fields = []
    if contact_info.email:
        fields.append(f"{CONTACT_ICONS['email']} {contact_info.email}")
    if contact_info.mobile:
        fields.append(f"{CONTACT_ICONS['mobile']} {contact_info.mobile}")
    for key in ("linkedin", "twitter"):
        url = getattr(contact_info, key)
        if url:
            fields.append(f"{CONTACT_ICONS[key]} [{CONTACT_LINK_LABELS[key]}]({url})")

    if not fields:
        return ""

    name = display_name or CONFIG["default_display_name"]
    return (
        f'## <div align="center">{name}</div>\n\n'
        f'<div align="center">\n\n{" | ".join(fields)}\n\n</div>'
    )


def entries_to_markdown(entries: List[Entry], title: str) -> str:
    """Renders one repeatable section, or an empty string when there are no entries."""
    if not entries:
        return ""

    body = "\n\n".join(_entry_to_markdown(entry) for entry in entries)
    return f"## {title}\n\n{body}"


def _entry_to_markdown(entry: Entry) -> str:
    heading = f"### {entry.title}"
    if entry.organization:
        heading += f" @ {entry.organization}"
    lines = [heading]

    date_range = format_date_range(entry)
    if date_range.strip():
        lines.append(f'<div align="right" style="text-align: right;"><em>{date_range}</em></div>')

    bullets = [f"* {line.strip()}" for line in (entry.description or "").splitlines() if line.strip()]
    if bullets:
        lines.append("")
        lines.extend(bullets)

    return "\n".join(lines)


def format_date_range(entry: Entry) -> str:
    if entry.current:
        return f"{entry.start_date}{DATE_SEPARATOR}{PRESENT_LABEL}"
    if entry.end_date:
        return f"{entry.start_date}{DATE_SEPARATOR}{entry.end_date}"
    return entry.start_date


# ============================================================================
# DECODER
# ============================================================================

def markdown_to_form_data(markdown: Optional[str]) -> StructuredResume:
    """
    Parses a resume Markdown document back into a StructuredResume.
    Never raises: anything it does not recognise is skipped.
    """
    resume = StructuredResume()
    if not isinstance(markdown, str) or not markdown.strip():
        return resume

    markdown = markdown.replace("\r\n", "\n")
    resume.contact_info = _parse_contact(markdown)

    for title, body in _split_blocks(markdown.split("\n"), _H2_LINE, keep_preamble=False):
        if "<div" in title:
            # Contact header, handled above
            continue
        content = "\n".join(body).strip()
        if title == SECTION_TITLES["summary"]:
            resume.summary = content
        elif title == SECTION_TITLES["skills"]:
            resume.skills = content
        else:
            for section in ENTRY_SECTIONS:
                if title == SECTION_TITLES[section]:
                    setattr(resume, section, parse_entries(content))

    return resume


def _split_blocks(lines: List[str], heading: re.Pattern, keep_preamble: bool) -> List[Tuple[str, List[str]]]:
    """
    Groups lines under the heading lines matched by `heading`.
    Returns (heading text, body lines) pairs in document order. Lines before the
    first heading form a block only when keep_preamble is set and they are not
    blank; the block's title is then its first line.
    """
    blocks = []
    title, body = None, []
    preamble = []

    for line in lines:
        match = heading.match(line)
        if match:
            if title is not None:
                blocks.append((title, body))
            title, body = match.group(1).strip(), []
        elif title is None:
            preamble.append(line)
        else:
            body.append(line)
    if title is not None:
        blocks.append((title, body))

    if keep_preamble:
        text = [line for line in preamble if line.strip()]
        if text:
            blocks.insert(0, (text[0].strip(), text[1:]))
    return blocks


def _find_contact_line(markdown: str) -> Optional[str]:
    """Text of the first centered div after the centered name heading."""
    for heading in _CONTACT_HEADING.finditer(markdown):
        if not _CENTERED.search(heading.group(1)):
            continue
        for block in _DIV_BLOCK.finditer(markdown, heading.end()):
            if _CENTERED.search(block.group(1)):
                return block.group(2)
        return None
    return None


def _parse_contact(markdown: str) -> ContactInfo:
    line = _find_contact_line(markdown)
    if line is None:
        return ContactInfo()

    found: Dict[str, str] = {}
    for part in (p.strip() for p in line.split("|")):
        if not part:
            continue
        field, icon = _classify_contact_part(part)
        if field in ("email", "mobile"):
            found[field] = part.replace(icon, "", 1).strip()
        elif field in _LINK_PATTERNS:
            link = _LINK_PATTERNS[field].search(part)
            if link:
                found[field] = link.group(1).strip()

    return ContactInfo(**found)


def _classify_contact_part(part: str) -> Tuple[Optional[str], str]:
    for field in ("email", "mobile"):
        for icon in _ICON_VARIANTS[field]:
            if icon in part:
                return field, icon
    for icon in _ICON_VARIANTS["linkedin"]:
        if icon in part and "LinkedIn" in part:
            return "linkedin", icon
    for icon in _ICON_VARIANTS["twitter"]:
        if icon in part and ("Twitter" in part or "X" in part):
            return "twitter", icon
    return None, ""


def parse_entries(content: str) -> List[Entry]:
    """Parses the body of Work Experience, Education or Projects into entries."""
    entries = []
    for title_line, body in _split_blocks(content.split("\n"), _H3_LINE, keep_preamble=True):
        if not title_line:
            continue

        title, organization = _split_title(title_line)
        block = "\n".join([title_line] + body)
        start_date, end_date, current = _parse_date_range(block)

        entries.append(Entry(
            title=title,
            organization=organization,
            start_date=start_date,
            end_date=end_date,
            current=current,
            description=_parse_description(body, block),
        ))
    return entries


def _split_title(line: str) -> Tuple[str, str]:
    """'Title @ Organization' -> (title, organization), splitting at the first ' @ '."""
    parts = _TITLE_SEPARATOR.split(line.strip(), maxsplit=1)
    if len(parts) == 2:
        return parts[0].strip(), parts[1].strip()
    return parts[0].strip(), ""


def _find_date_text(block: str) -> Optional[str]:
    for pattern in _DATE_PATTERNS:
        match = pattern.search(block)
        if match:
            return match.group(1)
    for match in _EMPHASIS.finditer(block):
        text = match.group(1).strip()
        if _MONTH_YEAR.match(text):
            return text
    return None


def _parse_date_range(block: str) -> Tuple[str, str, bool]:
    """Returns (start_date, end_date, current)."""
    text = _find_date_text(block)
    if text is None:
        return "", "", False

    if DATE_SEPARATOR not in text:
        return text.strip(), "", False

    pieces = [piece.strip() for piece in text.split(DATE_SEPARATOR)]
    start_date, end_part = pieces[0], pieces[1]
    if end_part == PRESENT_LABEL:
        return start_date, "", True
    return start_date, end_part, False


def _parse_description(body: List[str], block: str) -> str:
    bullets = []
    for line in body:
        match = _BULLET_LINE.match(line)
        if match and match.group(1).strip():
            bullets.append(match.group(1).strip())
    if bullets:
        return "\n".join(bullets)

    # No bullet list, fall back to whatever follows the date block
    closing = block.find("</div>")
    if closing == -1:
        return ""
    return _RESIDUAL_BULLET.sub("", block[closing + len("</div>"):].strip()).strip()
