# File: contact_scout/aggregator.py
"""contact_scout.aggregator: счётчики прогона и итоговый отчёт."""

from __future__ import annotations

import asyncio
import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional

OutcomeStatus = Literal["ok", "unreachable", "failed", "timeout"]


@dataclass(slots=True)
class DomainOutcome:
    """Результат обработки одного домена из реестра."""

    domain: str
    url: str
    status: OutcomeStatus
    pages: int = 0
    phones: int = 0
    addresses: int = 0
    social_links: int = 0
    error: Optional[str] = None
    duration: float = 0.0


@dataclass(slots=True)
class AnalystCounters:
    """
    Статистика прогона. Меняется только оркестратором через :meth:`fold`,
    читается после завершения всех доменов.
    """

    websites: int = 0
    reachable: int = 0
    unreachable: int = 0
    failed: int = 0
    phones: int = 0
    addresses: int = 0
    social_links: int = 0
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    async def fold(self, outcome: DomainOutcome) -> None:
        """Add one domain's numbers; updates are serialized by a lock."""
        async with self._lock:
            self.websites += 1
            if outcome.status == "unreachable":
                self.unreachable += 1
                return
            self.reachable += 1
            if outcome.status != "ok":
                self.failed += 1
            self.phones += outcome.phones
            self.addresses += outcome.addresses
            self.social_links += outcome.social_links

    def snapshot(self) -> Dict[str, int]:
        return {
            "websites": self.websites,
            "reachable": self.reachable,
            "unreachable": self.unreachable,
            "failed": self.failed,
            "phones": self.phones,
            "addresses": self.addresses,
            "social_links": self.social_links,
        }

    def summary(self) -> str:
        return (
            f"Websites: {self.websites} (reachable {self.reachable}, unreachable {self.unreachable}, "
            f"failed {self.failed}); phones: {self.phones}; addresses: {self.addresses}; "
            f"social links: {self.social_links}"
        )


@dataclass(slots=True)
class RunReport:
    """Итог прогона: счётчики и результаты по доменам."""

    counters: Dict[str, int] = field(default_factory=dict)
    domains: List[DomainOutcome] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {"counters": self.counters, "domains": [asdict(d) for d in self.domains]}

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление отчёта."""
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_results(counters: AnalystCounters, outcomes: List[DomainOutcome]) -> RunReport:
    """Собирает счётчики и результаты по доменам в RunReport (сортировка по домену)."""
    return RunReport(
        counters=counters.snapshot(),
        domains=sorted(outcomes, key=lambda o: o.domain.lower()),
    )


__all__ = ["AnalystCounters", "DomainOutcome", "OutcomeStatus", "RunReport", "aggregate_results"]
