# File: contact_scout/storage.py
"""contact_scout.storage: чтение реестра доменов и запись итогового набора данных (CSV)."""

from __future__ import annotations

import csv
import os
import tempfile
from pathlib import Path
from typing import List, Sequence, Union

from contact_scout.logger import logger
from contact_scout.records import CompanyRecord, merged_headers


class PersistenceError(RuntimeError):
    """Reading or writing a dataset failed; the run cannot continue."""


def read_roster(path: Union[str, Path]) -> List[CompanyRecord]:
    """Читает CSV-реестр; строки без `domain` пропускаются."""
    p = Path(path)
    records: List[CompanyRecord] = []
    skipped = 0
    try:
        with p.open(newline="", encoding="utf-8-sig") as fh:
            reader = csv.DictReader(fh)
            if reader.fieldnames is None or "domain" not in reader.fieldnames:
                raise PersistenceError(f"{p}: required column 'domain' is missing")
            for row in reader:
                if not (row.get("domain") or "").strip():
                    skipped += 1
                    continue
                records.append(CompanyRecord.from_row(row))
    except (OSError, csv.Error, UnicodeDecodeError) as exc:
        raise PersistenceError(f"Cannot read {p}: {exc}") from exc
    if skipped:
        logger.warning("Skipped %d roster row(s) without domain in %s", skipped, p)
    logger.debug("Loaded %d record(s) from %s", len(records), p)
    return records


def write_dataset(path: Union[str, Path], records: Sequence[CompanyRecord]) -> Path:
    """
    Сохраняет записи в CSV с объединённым набором колонок.

    Файл пишется во временный рядом и затем атомарно подменяется,
    поэтому при ошибке прежний файл остаётся нетронутым.
    """
    p = Path(path)
    headers = merged_headers(records)
    tmp_name = None
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", suffix=".tmp", dir=str(p.parent))
        with os.fdopen(fd, "w", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(fh, fieldnames=headers, extrasaction="ignore")
            writer.writeheader()
            for record in records:
                writer.writerow(record.to_row())
        os.replace(tmp_name, p)
    except (OSError, csv.Error) as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise PersistenceError(f"Cannot write {p}: {exc}") from exc
    logger.info("Dataset with %d row(s) written to %s", len(records), p)
    return p


__all__ = ["PersistenceError", "read_roster", "write_dataset"]
