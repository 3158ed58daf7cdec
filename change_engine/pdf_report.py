from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from reportlab.lib.units import cm
from datetime import datetime, timezone
import os

# Built-in Helvetica only carries WinAnsi (cp1252) glyphs
ASCII_FALLBACKS = str.maketrans({"→": "->", "←": "<-", "≤": "<=", "≥": ">="})

def safe_text(x) -> str:
    text = str(x or "").replace("\n", " ").strip().translate(ASCII_FALLBACKS)
    return text.encode("cp1252", "replace").decode("cp1252")

def write_pdf_report(output_path: str, record: dict) -> str:
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    c = canvas.Canvas(output_path, pagesize=A4)
    width, height = A4

    y = height - 2 * cm

    def next_line(step: float = 0.55):
        nonlocal y
        y -= step * cm
        if y < 3 * cm:
            c.showPage()
            y = height - 2 * cm
            c.setFont("Helvetica", 11)

    def heading(text: str):
        nonlocal y
        y -= 0.3 * cm
        c.setFont("Helvetica-Bold", 12)
        c.drawString(2 * cm, y, text)
        next_line(0.8)
        c.setFont("Helvetica", 11)

    # Header
    c.setFont("Helvetica-Bold", 18)
    c.drawString(2 * cm, y, "ChangeGate — Change Record")
    y -= 1.0 * cm

    c.setFont("Helvetica", 10)
    generated = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    c.drawString(2 * cm, y, f"Generated: {generated}")
    y -= 1.2 * cm

    heading("Classification")
    lines = [
        f"Title: {safe_text(record.get('title')) or 'Untitled change'}",
        f"Record ID: {safe_text(record.get('record_id')) or '—'}",
        f"Timestamp (UTC): {safe_text(record.get('timestamp_utc')) or '—'}",
        f"Engine Version: {safe_text(record.get('engine_version')) or '—'}",
        f"Policy Version: {safe_text(record.get('policy_version')) or '—'}",
        f"Category: {safe_text(record.get('category'))}",
    ]
    for line in lines:
        c.drawString(2 * cm, y, line)
        next_line(0.6)

    note = safe_text(record.get("category_note"))
    for chunk in split_text(note, 95):
        c.drawString(2 * cm, y, chunk)
        next_line()

    # Risk assessment (Normal changes only)
    if record.get("tier"):
        heading("Risk Assessment")
        c.drawString(2 * cm, y, f"Composite Score: {record.get('composite_score')} / 5")
        next_line(0.6)
        c.drawString(2 * cm, y, f"Risk Tier: {safe_text(record.get('tier'))} ({safe_text(record.get('authority'))})")
        next_line(0.6)

        for label, score in (record.get("scores") or {}).items():
            c.drawString(2 * cm, y, f"- {safe_text(label)}: {score}")
            next_line()

        exp = record.get("explanation") or {}
        highest = exp.get("highest_dimensions") or []
        if highest:
            c.setFont("Helvetica-Bold", 11)
            c.drawString(2 * cm, y, "Highest-risk dimensions")
            next_line(0.6)
            c.setFont("Helvetica", 11)
            for item in highest:
                c.drawString(2 * cm, y, f"- {safe_text(item.get('label'))}: {item.get('score')}")
                next_line()

    heading("Approval Path")
    steps = record.get("approval_path") or []
    if steps:
        for i, step in enumerate(steps, start=1):
            for chunk in split_text(f"{i}. {safe_text(step)}", 95):
                c.drawString(2 * cm, y, chunk)
                next_line()
    else:
        c.drawString(2 * cm, y, "No approval steps defined for this change.")
        next_line()

    c.showPage()
    c.save()
    return output_path

def split_text(text: str, max_len: int):
    words = text.split()
    if not words:
        return []
    lines = []
    line = ""
    for w in words:
        if len(line) + len(w) + 1 <= max_len:
            line = (line + " " + w).strip()
        else:
            lines.append(line)
            line = w
    if line:
        lines.append(line)
    return lines
