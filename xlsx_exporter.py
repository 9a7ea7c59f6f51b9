"""
Writes scraped product records to an XLSX file
"""

import logging
import os
from collections.abc import Mapping

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from scraper_errors import ExportError

logger = logging.getLogger(__name__)


def flatten_record(record):
    """
    Flatten one record into a single level of fields

    Nested mappings (e.g. a characteristics table) are replaced by their own
    keys. A nested key never overrides a top-level field, and if two nested
    mappings share a key the first one wins.

    Args:
        record (dict): Extracted record or {url, error} placeholder

    Returns:
        dict: The flat row
    """
    top_level = {key for key, value in record.items() if not isinstance(value, Mapping)}

    row = {}
    for key, value in record.items():
        if not isinstance(value, Mapping):
            row[key] = value
            continue
        for sub_key, sub_value in value.items():
            if sub_key in top_level or sub_key in row:
                logger.debug(f"Skipping '{sub_key}' from '{key}': column already set")
                continue
            row[sub_key] = sub_value
    return row


def collect_columns(rows):
    """All keys across rows, in the order they first appear"""
    columns = {}
    for row in rows:
        for key in row:
            columns.setdefault(key, None)
    return list(columns)


def clean_cell(value):
    """Make a value safe to store in a spreadsheet cell"""
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        value = ",".join("" if item is None else str(item) for item in value)
    elif not isinstance(value, (str, int, float, bool)):
        value = str(value)
    if isinstance(value, str):
        value = ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def save_to_xlsx(records, file_path, sheet_name="Products"):
    """
    Save product records to an XLSX file

    Args:
        records (list): Records in the order they should appear
        file_path (str): Output .xlsx path; missing directories are created
        sheet_name (str): Name of the single worksheet

    Returns:
        str: Path to the saved file, or None if there was nothing to save

    Raises:
        ExportError: If the file cannot be written
    """
    if not records:
        logger.info("No data to write")
        return None

    rows = [flatten_record(record) for record in records]
    columns = collect_columns(rows)
    cleaned = [{key: clean_cell(row.get(key)) for key in columns} for row in rows]
    dataframe = pd.DataFrame(cleaned, columns=columns)

    directory = os.path.dirname(file_path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        dataframe.to_excel(file_path, sheet_name=sheet_name, index=False)
    except (OSError, ValueError) as e:
        raise ExportError(f"Could not write {file_path}: {e}") from e

    logger.info(f"XLSX file saved to {file_path}")
    logger.info(f"Saved {len(rows)} row(s) with {len(columns)} columns")
    return file_path
