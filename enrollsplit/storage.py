"""
Flat-file storage for enrollment data.

Reads the master enrollment CSV into EnrollmentRecord objects and writes one
CSV partition per insurance company.
"""

import csv
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .errors import IOFailureError, MalformedRecordError
from .logger import StructuredLogger, default_logger
from .normalize import derive_file_name
from .record import COLUMNS, EnrollmentRecord, output_sort_key, parse_record

# Output files always use LF, whatever the host convention.
RECORD_SEPARATOR = "\n"


def _resolve_logger(logger: Optional[StructuredLogger]) -> StructuredLogger:
    return logger if logger is not None else default_logger()


def read_enrollment_file(
    path: Union[str, Path],
    logger: Optional[StructuredLogger] = None,
    delimiter: str = ",",
    encoding: str = "utf-8-sig",
    skip_malformed: bool = False,
) -> List[EnrollmentRecord]:
    """
    Parse the master enrollment file.

    Args:
        path: Input CSV with a header naming user_id, name, version, insurance_company
        logger: Logger receiving progress, warnings and metrics
        delimiter: Field delimiter of the input
        encoding: Text encoding of the input
        skip_malformed: Log and skip bad rows instead of aborting

    Returns:
        Records in file order

    Raises:
        IOFailureError: The file cannot be opened or decoded
        MalformedRecordError: The header lacks a required column, or a row is bad
            and skip_malformed is False
    """
    log = _resolve_logger(logger)
    path = Path(path)
    records: List[EnrollmentRecord] = []

    try:
        with path.open("r", newline="", encoding=encoding) as f:
            reader = csv.DictReader(f, delimiter=delimiter)
            if reader.fieldnames is None:
                log.warning("Input file is empty", path=str(path))
                return records
            reader.fieldnames = [name.strip() for name in reader.fieldnames]
            missing = [column for column in COLUMNS if column not in reader.fieldnames]
            if missing:
                raise MalformedRecordError(
                    f"header is missing column(s): {', '.join(missing)}",
                    line_number=1,
                    field=missing[0],
                )

            rows = iter(reader)
            while True:
                try:
                    row = next(rows)
                except StopIteration:
                    break
                except csv.Error as e:
                    row = e
                log.record_row_read()
                try:
                    if isinstance(row, csv.Error):
                        raise MalformedRecordError(f"unreadable CSV row: {row}", line_number=reader.line_num)
                    record = parse_record(row, line_number=reader.line_num)
                except MalformedRecordError as e:
                    if not skip_malformed:
                        log.error("Malformed enrollment row", path=str(path), error=str(e))
                        raise
                    log.record_skipped(type(e).__name__)
                    log.warning("Skipping malformed enrollment row", path=str(path), error=str(e))
                    continue
                log.record_parsed()
                records.append(record)
    except csv.Error as e:
        raise MalformedRecordError(f"unreadable CSV: {e}") from e
    except FileNotFoundError as e:
        log.error(f"Input file {path} not found")
        raise IOFailureError(f"Input file not found: {path}", path=path) from e
    except (OSError, UnicodeDecodeError) as e:
        log.error("Failed to read input file", path=str(path), error=str(e))
        raise IOFailureError(f"Failed to read input file {path}: {e}", path=path) from e

    log.info(f"Parsed {len(records)} records", path=str(path))
    return records


def write_partition(
    company: str,
    records: Sequence[EnrollmentRecord],
    output_dir: Union[str, Path],
    logger: Optional[StructuredLogger] = None,
) -> Optional[Path]:
    """
    Write one insurance company's winners, sorted, to its own CSV file.

    Args:
        company: Insurance company name; determines the file name
        records: Winning records of that company
        output_dir: Existing, writable directory
        logger: Logger receiving progress and metrics

    Returns:
        Path of the written file, or None when there was nothing to write

    Raises:
        IOFailureError: The file cannot be created or written, or the company
            name would place it outside output_dir
    """
    log = _resolve_logger(logger)
    if not records:
        log.warning("No records to write", company=company)
        return None

    file_path = Path(output_dir) / derive_file_name(company)
    # Path separators in the company name must not move the file out of output_dir.
    if file_path.parent != Path(output_dir):
        log.record_file_failure("UnsafeFileName")
        log.error("Company name does not map to a file inside the output directory", company=company, path=str(file_path))
        raise IOFailureError(f"Refusing to write {file_path} outside {output_dir}", path=file_path)

    ordered = sorted(records, key=output_sort_key)
    log.info(f"--------- Writing file for: {company} ---------")

    try:
        with file_path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, lineterminator=RECORD_SEPARATOR)
            writer.writerow(COLUMNS)
            for record in ordered:
                writer.writerow(record.as_row())
                log.debug(repr(record))
    except OSError as e:
        log.record_file_failure(type(e).__name__)
        log.error("Error while writing the CSV output", company=company, path=str(file_path), error=str(e))
        raise IOFailureError(f"Failed to write {file_path}: {e}", path=file_path) from e

    log.record_file_written(len(ordered))
    log.info(f"Finished writing file: {file_path.name}", records=len(ordered))
    return file_path


def write_partitions(
    partitions: Mapping[str, Sequence[EnrollmentRecord]],
    output_dir: Union[str, Path],
    logger: Optional[StructuredLogger] = None,
) -> Dict[str, Any]:
    """
    Write every company partition, continuing past failed companies.

    Companies are written in sorted name order so repeated runs behave the same.

    Returns:
        {"written": [Path, ...], "skipped": [company, ...], "failed": {company: message}}
    """
    log = _resolve_logger(logger)
    written: List[Path] = []
    skipped: List[str] = []
    failed: Dict[str, str] = {}
    file_owners: Dict[str, str] = {}

    for company in sorted(partitions):
        file_name = derive_file_name(company)
        owner = file_owners.setdefault(file_name, company)
        if owner != company:
            log.warning(
                "File name collision, later company overwrites earlier output",
                file_name=file_name,
                first_company=owner,
                company=company,
            )

        try:
            path = write_partition(company, partitions[company], output_dir, logger=log)
        except IOFailureError as e:
            failed[company] = str(e)
            continue
        if path is None:
            skipped.append(company)
        else:
            written.append(path)

    return {"written": written, "skipped": skipped, "failed": failed}
