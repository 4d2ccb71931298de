"""
Spreadsheet export helpers for the list endpoints.
"""
from io import BytesIO
from typing import Any, Iterable, NamedTuple

import openpyxl
from openpyxl.utils import get_column_letter
from fastapi.responses import StreamingResponse

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class ExportColumn(NamedTuple):
    header: str
    key: str
    width: int = 20


def build_workbook(sheet_title: str, columns: list[ExportColumn], rows: Iterable[dict[str, Any]]) -> bytes:
    """
    Render rows into a single-sheet .xlsx document.

    Each row is a dict keyed by `ExportColumn.key`; missing keys produce
    empty cells.
    """
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.title = sheet_title
    sheet.append([column.header for column in columns])
    for index, column in enumerate(columns, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = column.width
    for row in rows:
        sheet.append([row.get(column.key) for column in columns])

    buffer = BytesIO()
    workbook.save(buffer)
    workbook.close()
    return buffer.getvalue()


def xlsx_response(filename: str, content: bytes) -> StreamingResponse:
    response = StreamingResponse(iter([content]), media_type=XLSX_MEDIA_TYPE)
    response.headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response
