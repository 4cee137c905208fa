import io
from datetime import date
from typing import Callable
from xml.sax.saxutils import escape

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from sekolah.core.dates import format_id_date
from sekolah.services.report_service import Report, ReportSection

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MEDIA_TYPE = "application/pdf"

_MAX_COLUMN_WIDTH = 50
_THIN = Side(style="thin", color="DCDCDC")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)


def _cell_text(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, date):
        return format_id_date(value)
    return str(value)


def _header_lines(report: Report) -> list[str]:
    return [
        f"Periode: {report.period}",
        f"Tanggal: {format_id_date(report.generated_on)}",
    ]


# ==============================
# XLSX
# ==============================

def _write_section(ws, section: ReportSection, start_row: int) -> int:
    ws.cell(row=start_row, column=1, value=section.title.upper()).font = Font(bold=True, size=12)
    row = start_row + 1

    header_fill = PatternFill(
        start_color=section.header_color,
        end_color=section.header_color,
        fill_type="solid",
    )
    for col, column in enumerate(section.columns, 1):
        cell = ws.cell(row=row, column=col, value=column.header)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = _BORDER
    row += 1

    if not section.rows and section.empty_message:
        ws.cell(row=row, column=1, value=section.empty_message).font = Font(italic=True)
        return row + 2

    for values in section.rows:
        for col, (column, value) in enumerate(zip(section.columns, values), 1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.alignment = Alignment(horizontal=column.align)
            cell.border = _BORDER
            if isinstance(value, date):
                cell.number_format = "DD/MM/YYYY"
        row += 1
    return row + 1


def _fit_columns(ws) -> None:
    widths: dict[int, int] = {}
    for row in ws.iter_rows(min_row=5):
        for cell in row:
            if cell.value is None:
                continue
            length = len(_cell_text(cell.value))
            widths[cell.column] = max(widths.get(cell.column, 0), length)
    for column, width in widths.items():
        ws.column_dimensions[get_column_letter(column)].width = min(width + 2, _MAX_COLUMN_WIDTH)


def render_xlsx(report: Report) -> bytes:
    workbook = Workbook()
    workbook.remove(workbook.active)

    sheets: dict[str, list[ReportSection]] = {}
    for section in report.sections:
        sheets.setdefault(section.sheet, []).append(section)

    for sheet_name, sections in sheets.items():
        ws = workbook.create_sheet(title=sheet_name[:31])
        ws["A1"] = report.title
        ws["A1"].font = Font(bold=True, size=14)
        for offset, line in enumerate(_header_lines(report), 2):
            ws.cell(row=offset, column=1, value=line).font = Font(italic=True, size=10)

        row = 5
        for section in sections:
            row = _write_section(ws, section, row)
        _fit_columns(ws)

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


# ==============================
# PDF
# ==============================

class _NumberedCanvas(canvas.Canvas):
    """Defers page output until the total page count is known."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_page_number(total)
            super().showPage()
        super().save()

    def _draw_page_number(self, total: int) -> None:
        width, _height = self._pagesize
        self.setFont("Helvetica", 9)
        self.drawRightString(width - 15 * mm, 10 * mm, f"Halaman {self._pageNumber} dari {total}")


_ALIGN = {"left": "LEFT", "center": "CENTER", "right": "RIGHT"}


def _pdf_table(section: ReportSection, cell_style: ParagraphStyle) -> Table:
    data = [[column.header for column in section.columns]]
    for values in section.rows:
        row = []
        for column, value in zip(section.columns, values):
            text = _cell_text(value)
            # Left-aligned columns hold free text; wrap them instead of overflowing.
            row.append(Paragraph(escape(text), cell_style) if column.align == "left" else text)
        data.append(row)

    table = Table(data, repeatRows=1)
    style = TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(f"#{section.header_color}")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 9),
        ("ALIGN", (0, 0), (-1, 0), "CENTER"),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 1), (-1, -1), 8),
        ("TEXTCOLOR", (0, 1), (-1, -1), colors.HexColor("#282828")),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#DCDCDC")),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F5F5")]),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ])
    for index, column in enumerate(section.columns):
        style.add("ALIGN", (index, 1), (index, -1), _ALIGN.get(column.align, "LEFT"))
    table.setStyle(style)
    return table


def render_pdf(report: Report) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=18 * mm,
        title=report.title,
    )

    styles = getSampleStyleSheet()
    cell_style = ParagraphStyle("ReportCell", parent=styles["Normal"], fontSize=8, leading=10, alignment=TA_LEFT)
    empty_style = ParagraphStyle("ReportEmpty", parent=styles["Normal"], fontSize=10, textColor=colors.grey)

    elements = [Paragraph(escape(report.title), styles["Title"])]
    for line in _header_lines(report):
        elements.append(Paragraph(escape(line), styles["Normal"]))
    elements.append(Spacer(1, 6 * mm))

    for section in report.sections:
        elements.append(Paragraph(escape(section.title), styles["Heading2"]))
        if section.rows:
            elements.append(_pdf_table(section, cell_style))
        else:
            elements.append(Paragraph(escape(section.empty_message or "-"), empty_style))
        elements.append(Spacer(1, 6 * mm))

    doc.build(elements, canvasmaker=_NumberedCanvas)
    return buffer.getvalue()


RENDERERS: dict[str, tuple[Callable[[Report], bytes], str]] = {
    "pdf": (render_pdf, PDF_MEDIA_TYPE),
    "xlsx": (render_xlsx, XLSX_MEDIA_TYPE),
}


def render_report(report: Report, fmt: str) -> tuple[bytes, str, str]:
    """Returns (content, media type, download filename)."""
    try:
        renderer, media_type = RENDERERS[fmt]
    except KeyError:
        raise ValueError(f"Unsupported export format: {fmt}") from None
    return renderer(report), media_type, report.filename(fmt)


__all__ = ["RENDERERS", "render_pdf", "render_report", "render_xlsx"]
