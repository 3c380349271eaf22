# profile_xref/core/logging_utils.py
"""
Logging for the x-ref auditor: console logging setup plus the JSONL run log,
one record per mapping decision, snapshot failure and finding.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger (DEBUG when verbose, else INFO)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT
    )


def append_runlog(log_file: str | Path, event: str, data: Dict[str, Any]) -> None:
    """
    Append one event record to the run log.

    Args:
        log_file: JSONL file; parent directories are created as needed
        event: Record type ("mapping", "snapshot_failed", "finding", "summary")
        data: Event payload, merged into the record
    """
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    record = {"timestamp": datetime.now().isoformat(), "event": event, **data}
    with log_file.open('a', encoding='utf-8') as f:
        f.write(json.dumps(record, ensure_ascii=False) + '\n')


def read_runlog(log_file: str | Path, event: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Read run log records back, optionally only those of one event type.

    Malformed lines are skipped; a missing file reads as empty.
    """
    log_file = Path(log_file)
    if not log_file.exists():
        return []

    records = []
    with log_file.open('r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                continue
            if event is None or record.get("event") == event:
                records.append(record)
    return records
