"""CSV Import — positional rows from an uploaded bulk-import file.

Invariants:
    - The filename is checked for a .csv suffix before any byte is read
    - Blank lines are skipped; every other row has exactly `columns` fields
    - Any malformed row aborts the whole read: no partial result is returned
    - Errors name the 1-based line number of the offending row
"""

import csv
import io

from starlette.datastructures import UploadFile

from gui.core.errors import MalformedDataError, UnsupportedFileError

CSV_SUFFIX = ".csv"


def check_csv_filename(upload) -> None:
    """Reject anything that is not an uploaded file named *.csv."""
    if not isinstance(upload, UploadFile):
        raise MalformedDataError("missing upload file")
    if not (upload.filename or "").endswith(CSV_SUFFIX):
        raise UnsupportedFileError(upload.filename or "")


def parse_rows(text: str, columns: int) -> list[list[str]]:
    """Parse CSV text into rows of exactly `columns` stripped fields."""
    reader = csv.reader(io.StringIO(text))
    rows: list[list[str]] = []
    try:
        for row in reader:
            if not row or all(not cell.strip() for cell in row):
                continue
            if len(row) != columns:
                raise MalformedDataError(
                    f"row {reader.line_num}: expected {columns} column(s), "
                    f"got {len(row)}",
                )
            rows.append([cell.strip() for cell in row])
    except csv.Error as e:
        raise MalformedDataError(f"row {reader.line_num}: {e}")
    return rows


async def read_csv_rows(upload, columns: int) -> list[list[str]]:
    """Validate the upload, then parse all of its rows."""
    check_csv_filename(upload)
    raw = await upload.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise MalformedDataError("upload is not valid UTF-8")
    return parse_rows(text, columns)
