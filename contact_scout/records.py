# File: contact_scout/records.py
"""contact_scout.records: модель записи о компании и слияние наборов данных."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

MULTI_VALUE_SEPARATOR = "|"

#: fields the reconciliation step is allowed to fill
MERGEABLE_FIELDS: Tuple[str, ...] = ("physical_addresses", "phone_numbers", "social_media_links")

#: roster columns, in output order
BASE_FIELDS: Tuple[str, ...] = (
    "domain",
    "company_commercial_name",
    "company_legal_name",
    "company_all_available_names",
)

_LIST_FIELDS: Tuple[str, ...] = ("company_all_available_names", *MERGEABLE_FIELDS)


def split_multi(value: Optional[str]) -> List[str]:
    """Split a pipe-separated cell into trimmed, non-empty values."""
    if not value:
        return []
    return [part.strip() for part in value.split(MULTI_VALUE_SEPARATOR) if part.strip()]


def join_multi(values: Iterable[str]) -> str:
    return MULTI_VALUE_SEPARATOR.join(values)


@dataclass(slots=True)
class CompanyRecord:
    """Одна строка выходного набора данных, ключ: домен без учёта регистра."""

    domain: str
    company_commercial_name: Optional[str] = None
    company_legal_name: Optional[str] = None
    company_all_available_names: List[str] = field(default_factory=list)
    physical_addresses: List[str] = field(default_factory=list)
    social_media_links: List[str] = field(default_factory=list)
    phone_numbers: List[str] = field(default_factory=list)
    #: columns not modelled above, kept verbatim
    extra: Dict[str, str] = field(default_factory=dict)
    #: column names of the source row, if the record was read from a file
    columns: Tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return self.domain.strip().lower()

    @classmethod
    def from_row(cls, row: Mapping[str, Optional[str]]) -> CompanyRecord:
        domain = (row.get("domain") or "").strip()
        if not domain:
            raise ValueError("row has no domain")
        known = set(BASE_FIELDS) | set(MERGEABLE_FIELDS)
        return cls(
            domain=domain,
            company_commercial_name=(row.get("company_commercial_name") or "").strip() or None,
            company_legal_name=(row.get("company_legal_name") or "").strip() or None,
            company_all_available_names=split_multi(row.get("company_all_available_names")),
            physical_addresses=split_multi(row.get("physical_addresses")),
            social_media_links=split_multi(row.get("social_media_links")),
            phone_numbers=split_multi(row.get("phone_numbers")),
            extra={k: (v or "") for k, v in row.items() if k and k not in known},
            columns=tuple(k for k in row if k),
        )

    def to_row(self) -> Dict[str, str]:
        row: Dict[str, str] = dict(self.extra)
        row["domain"] = self.domain
        row["company_commercial_name"] = self.company_commercial_name or ""
        row["company_legal_name"] = self.company_legal_name or ""
        for name in _LIST_FIELDS:
            row[name] = join_multi(getattr(self, name))
        return row

    def keys(self) -> List[str]:
        """Column names this record carries: source columns, fields that are set, extras."""
        present = ["domain", *(c for c in self.columns if c != "domain")]
        if self.company_commercial_name is not None:
            present.append("company_commercial_name")
        if self.company_legal_name is not None:
            present.append("company_legal_name")
        present.extend(name for name in _LIST_FIELDS if getattr(self, name))
        present.extend(self.extra)
        return present


def merge(existing: Sequence[CompanyRecord], updates: Sequence[CompanyRecord]) -> List[CompanyRecord]:
    """
    Fill empty mergeable fields of *existing* rows from *updates*.

    Rows are matched by lower-cased domain. A non-empty existing value is
    never overwritten and updates for unknown domains are dropped, so the
    result never has more rows than *existing*.
    """
    by_domain: Dict[str, CompanyRecord] = {}
    for record in existing:
        by_domain[record.key] = record

    for update in updates:
        target = by_domain.get(update.key)
        if target is None:
            continue
        for name in MERGEABLE_FIELDS:
            if not getattr(target, name):
                setattr(target, name, list(getattr(update, name)))
    return list(by_domain.values())


def merged_headers(records: Iterable[CompanyRecord]) -> List[str]:
    """Union of all keys seen across *records* plus the mergeable fields, in stable order."""
    base_seen: set[str] = set()
    extras: List[str] = []
    for record in records:
        for name in record.keys():
            if name in BASE_FIELDS:
                base_seen.add(name)
            elif name not in MERGEABLE_FIELDS and name not in extras:
                extras.append(name)
    return [*(name for name in BASE_FIELDS if name in base_seen), *MERGEABLE_FIELDS, *extras]


__all__ = [
    "BASE_FIELDS",
    "CompanyRecord",
    "MERGEABLE_FIELDS",
    "MULTI_VALUE_SEPARATOR",
    "join_multi",
    "merge",
    "merged_headers",
    "split_multi",
]
