import csv
import io
import json
import logging

import yaml

from .errors import EncodingError, InvalidFormat
from .utils import read_file, write_file

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ('json', 'yaml')


def parse_output_format(s: str) -> str:
    fmt = s.strip().lower()
    if fmt not in OUTPUT_FORMATS:
        raise InvalidFormat(f"Invalid output format: {s}")
    return fmt


def csv_to_records(text: str, delimiter: str = ',', header: bool = True) -> list:
    """Parse CSV text into a list of dicts (or lists when there is no header row)."""
    reader = csv.reader(io.StringIO(text, newline=''), delimiter=delimiter, strict=True)
    rows = []
    width = None
    try:
        for row in reader:
            if not row:
                continue
            if width is None:
                width = len(row)
            elif len(row) != width:
                what = "header" if header else "first record"
                raise EncodingError(
                    f"record on line {reader.line_num} has {len(row)} fields, {what} has {width}")
            rows.append(row)
    except csv.Error as e:
        raise EncodingError(f"malformed CSV at line {reader.line_num}: {e}") from e
    if not header:
        return rows
    if not rows:
        return []
    headers, body = rows[0], rows[1:]
    return [dict(zip(headers, row)) for row in body]


def dump_records(records: list, fmt: str) -> str:
    if parse_output_format(fmt) == 'yaml':
        return yaml.safe_dump(records, allow_unicode=True, sort_keys=False)
    return json.dumps(records, indent=2, ensure_ascii=False)


def process_csv(input_path: str, output_path: str, fmt: str = 'json',
                delimiter: str = ',', header: bool = True) -> int:
    raw = read_file(input_path)
    try:
        text = raw.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise EncodingError(f"{input_path} is not valid UTF-8: {e}") from e
    records = csv_to_records(text, delimiter=delimiter, header=header)
    write_file(output_path, dump_records(records, fmt).encode('utf-8'))
    logger.info("converted %d records from %s to %s (%s)", len(records), input_path, output_path, fmt)
    return len(records)
