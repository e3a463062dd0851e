from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config import Settings
from .logger import StructuredLogger, default_logger
from .selection import select_partitions
from .storage import read_enrollment_file, write_partitions


def split_enrollments(
    input_path: Union[str, Path],
    output_dir: Union[str, Path],
    logger: Optional[StructuredLogger] = None,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Run the full split: parse, keep each user's winning revision per company,
    then write one sorted CSV per company into output_dir.

    Args:
        input_path: Master enrollment CSV
        output_dir: Existing directory that receives the partition files
        logger: Logger for progress and metrics
        settings: Reader options; defaults to Settings()

    Returns:
        Summary with record/company counts and the writer outcome

    Raises:
        IOFailureError: The input cannot be read
        MalformedRecordError: A row is malformed and settings.skip_malformed is off
    """
    log = logger if logger is not None else default_logger()
    settings = settings or Settings()

    log.info(f"Parsing file: {input_path}")
    records = read_enrollment_file(
        input_path,
        logger=log,
        delimiter=settings.input_delimiter,
        encoding=settings.input_encoding,
        skip_malformed=settings.skip_malformed,
    )
    if not records:
        log.info("No records to write")

    partitions = select_partitions(records, logger=log)
    log.record_companies(len(partitions))
    outcome = write_partitions(partitions, output_dir, logger=log)

    return {
        "records": len(records),
        "companies": len(partitions),
        "winners": sum(len(winners) for winners in partitions.values()),
        **outcome,
    }
