"""PDF expiry report using ReportLab."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from .datemath import format_display_date
from .expiry import expiry_status, sort_by_expiry

# Unicode-capable fonts, so product names in any script render
_FONT_SEARCH_PATHS = [
    # DejaVu (Debian/Ubuntu, Fedora)
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu-sans-fonts/DejaVuSans.ttf",
    # Noto Sans
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    # macOS
    "/Library/Fonts/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
]

_FALLBACK_FONT = "Helvetica"


def _find_unicode_font(font_path: str = "") -> str | None:
    """Return the configured font if it exists, else the first one found."""
    if font_path and Path(font_path).expanduser().exists():
        return str(Path(font_path).expanduser())
    for path in _FONT_SEARCH_PATHS:
        if Path(path).exists():
            return path
    return None


def _register_font(font_path: str = "") -> str:
    """Register a TTF font with ReportLab and return its name."""
    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    path = _find_unicode_font(font_path)
    if path is None:
        return _FALLBACK_FONT
    font_name = "OrganizerFont"
    pdfmetrics.registerFont(TTFont(font_name, path))
    return font_name


def report_rows(records: list[dict], today: date) -> list[list[str]]:
    """Table rows for the report, soonest expiry first, header included."""
    rows = [["Product", "Brand", "Category", "Opened", "PAO", "Expires", "Status"]]
    for record in sort_by_expiry(records):
        status = expiry_status(record, today=today)
        category = record.get("mainCategory") or ""
        if record.get("subCategory") and record.get("subCategory") != category:
            category = f"{category} / {record['subCategory']}"
        pao = record.get("paoMonths")
        rows.append([
            record.get("productName") or "",
            record.get("brandName") or "",
            category,
            format_display_date(record.get("openingDate")),
            f"{pao}m" if pao else "—",
            format_display_date(status.effective),
            status.relative or "—",
        ])
    return rows


def generate_report(
    records: list[dict],
    output_path: str | Path,
    *,
    today: date | None = None,
    font_path: str = "",
) -> Path:
    """Generate a PDF listing every product by effective expiry.

    Args:
        records: The product records to include.
        output_path: Where to save the PDF file.
        today: Reference date for countdowns. Defaults to the current date.
        font_path: Optional TTF font to use instead of the search list.

    Returns:
        Path to the generated PDF file.

    Raises:
        ImportError: If reportlab is not installed.
    """
    try:
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import A4, landscape
        from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
        from reportlab.lib.units import mm
        from reportlab.platypus import (
            Paragraph,
            SimpleDocTemplate,
            Spacer,
            Table,
            TableStyle,
        )
    except ImportError:
        raise ImportError(
            "reportlab is required: pip install reportlab"
        )

    if today is None:
        today = date.today()

    font_name = _register_font(font_path)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=landscape(A4),
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "Title_Report",
        parent=styles["Title"],
        fontName=font_name,
        fontSize=18,
        leading=24,
    )
    subtitle_style = ParagraphStyle(
        "Subtitle_Report",
        parent=styles["Normal"],
        fontName=font_name,
        fontSize=10,
        leading=14,
        textColor=colors.grey,
    )

    elements: list = []
    elements.append(Paragraph("Skincare & Makeup Organizer", title_style))
    elements.append(
        Paragraph(
            f"Expiry report for {format_display_date(today)} "
            f"— {len(records)} product(s)",
            subtitle_style,
        )
    )
    elements.append(Spacer(1, 6 * mm))

    rows = report_rows(records, today)
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#E2557A")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, -1), font_name),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#FFF1F4")]),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("LEFTPADDING", (0, 0), (-1, -1), 4),
        ("RIGHTPADDING", (0, 0), (-1, -1), 4),
    ]
    # Expired rows in red
    for i, row in enumerate(rows[1:], 1):
        if row[-1].endswith("past"):
            style.append(("TEXTCOLOR", (-1, i), (-1, i), colors.HexColor("#C0392B")))

    col_widths = [70 * mm, 45 * mm, 38 * mm, 25 * mm, 15 * mm, 25 * mm, 52 * mm]
    table = Table(rows, colWidths=col_widths, repeatRows=1)
    table.setStyle(TableStyle(style))
    elements.append(table)

    doc.build(elements)
    return output_path
