# File: contact_scout/orchestrator.py
"""
contact_scout.orchestrator: параллельная обработка реестра доменов.

Каждый домен обрабатывается в собственной вкладке (отдельный контекст
браузера); одновременно работает не более ``concurrency`` доменов. Ошибка
одного домена логируется и не затрагивает остальные.
"""
from __future__ import annotations

import asyncio
import signal
import time
from typing import Any, List, Optional, Sequence, Set

from aiohttp import ClientSession

from contact_scout.aggregator import AnalystCounters, DomainOutcome, RunReport, aggregate_results
from contact_scout.crawler.fetcher import is_reachable, new_session
from contact_scout.crawler.frontier import DomainCrawler
from contact_scout.crawler.routes import RouteClassifier, build_classifier
from contact_scout.crawler.urls import CrawlOrigin, ensure_scheme
from contact_scout.extract.addresses import AddressExtractor
from contact_scout.extract.phones import PhoneExtractor
from contact_scout.extract.social import SocialLinkExtractor
from contact_scout.logger import get_logger
from contact_scout.records import CompanyRecord

__all__ = ["DomainOrchestrator", "install_signal_handlers"]


class DomainOrchestrator:
    """Запускает обход каждого домена реестра с ограниченным параллелизмом."""

    def __init__(self, config, browser: Any, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.browser = browser
        self.classifier: RouteClassifier = build_classifier(config)
        self.counters = AnalystCounters()
        self.outcomes: List[DomainOutcome] = []
        #: one enriched record per successfully crawled domain
        self.updates: List[CompanyRecord] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.logger = get_logger("orchestrator")
        self._session = session
        self._surfaces: Set[Any] = set()
        self._shutdown_done = False
        #: drain scheduled by a signal handler; awaited by the CLI before exit
        self.drain_task: Optional[asyncio.Task] = None

    async def run_all(self, roster: Sequence[CompanyRecord]) -> AnalystCounters:
        """Process every roster entry; returns the folded counters."""
        start = time.monotonic()
        self.logger.info("Старт прогона: %d домен(ов), параллельность %d", len(roster), self.config.concurrency)
        queue: asyncio.Queue[CompanyRecord] = asyncio.Queue()
        for record in roster:
            queue.put_nowait(record)

        own_session = self._session is None
        session = self._session or new_session(self.config)
        try:
            workers = [
                asyncio.create_task(self._worker(queue, session))
                for _ in range(min(self.config.concurrency, max(1, len(roster))))
            ]
            try:
                await queue.join()
            finally:
                for w in workers:
                    w.cancel()
                await asyncio.gather(*workers, return_exceptions=True)
        finally:
            if own_session:
                await session.close()

        duration = time.monotonic() - start
        self.logger.info("Прогон завершён за %.2f с. %s", duration, self.counters.summary())
        return self.counters

    def report(self) -> RunReport:
        return aggregate_results(self.counters, self.outcomes)

    async def _worker(self, queue: asyncio.Queue[CompanyRecord], session: ClientSession) -> None:
        while True:
            record = await queue.get()
            try:
                self.in_flight += 1
                self.max_in_flight = max(self.max_in_flight, self.in_flight)
                outcome = await self.process(record, session)
                self.outcomes.append(outcome)
                await self.counters.fold(outcome)
            finally:
                self.in_flight -= 1
                queue.task_done()

    async def process(self, record: CompanyRecord, session: ClientSession) -> DomainOutcome:
        """Reachability → isolated surface → addresses + traversal, never raising."""
        url = ensure_scheme(record.domain, self.config.default_scheme)
        started = time.monotonic()

        if not await is_reachable(session, url):
            self.logger.warning("Домен недоступен, пропускаем: %s", url)
            return DomainOutcome(domain=record.domain, url=url, status="unreachable")

        try:
            if self.config.domain_timeout:
                outcome = await asyncio.wait_for(
                    self._crawl_domain(record, url), timeout=self.config.domain_timeout
                )
            else:
                outcome = await self._crawl_domain(record, url)
        except asyncio.TimeoutError:
            self.logger.error("Домен %s не обработан за %s с", url, self.config.domain_timeout)
            outcome = DomainOutcome(
                domain=record.domain, url=url, status="timeout",
                error=f"timed out after {self.config.domain_timeout}s",
            )
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self.logger.exception("Ошибка при обработке %s: %s", url, exc)
            outcome = DomainOutcome(domain=record.domain, url=url, status="failed", error=str(exc))
        outcome.duration = time.monotonic() - started
        return outcome

    async def _crawl_domain(self, record: CompanyRecord, url: str) -> DomainOutcome:
        origin = CrawlOrigin.from_url(url)
        surface = await self.browser.open_surface()
        self._surfaces.add(surface)
        try:
            await surface.block_resource_types(self.config.blocked_resource_types)

            social = SocialLinkExtractor(
                self.config.social_domains,
                frame_loader=self._load_frame if self.config.scan_frames else None,
            )
            crawler = DomainCrawler.from_config(self.config, surface, self.classifier, PhoneExtractor(), social)
            # fresh visited set per domain run
            data = await crawler.crawl(origin, origin.url, visited=set())
            if crawler.start_page is not None:
                data.add_addresses(
                    await AddressExtractor(self.config.contact_keywords).collect(
                        surface, origin.url, origin, start_page=crawler.start_page
                    )
                )
        finally:
            self._surfaces.discard(surface)
            await self.browser.release(surface)

        self.updates.append(
            CompanyRecord(
                domain=record.domain,
                physical_addresses=sorted(data.physical_addresses),
                phone_numbers=sorted(data.phone_numbers),
                social_media_links=sorted(data.social_media_links),
            )
        )
        self.logger.info(
            "%s: %d стр., телефонов %d, адресов %d, соцсетей %d",
            record.domain, len(crawler.fetched), len(data.phone_numbers),
            len(data.physical_addresses), len(data.social_media_links),
        )
        return DomainOutcome(
            domain=record.domain,
            url=url,
            status="ok",
            pages=len(crawler.fetched),
            phones=len(data.phone_numbers),
            addresses=len(data.physical_addresses),
            social_links=len(data.social_media_links),
        )

    async def _load_frame(self, src: str) -> str:
        surface = await self.browser.open_surface()
        self._surfaces.add(surface)
        try:
            await surface.block_resource_types(self.config.blocked_resource_types)
            await surface.navigate(src)
            return await surface.content()
        finally:
            self._surfaces.discard(surface)
            await self.browser.release(surface)

    async def shutdown(self) -> None:
        """Drain: close every open surface and the browser. Idempotent."""
        if self._shutdown_done:
            return
        self._shutdown_done = True
        self.logger.info("Остановка: закрываем %d вкладок", len(self._surfaces))
        for surface in list(self._surfaces):
            try:
                await self.browser.release(surface)
            except Exception as exc:
                self.logger.debug("Surface close failed: %s", exc)
        self._surfaces.clear()
        await self.browser.shutdown()

    def request_shutdown(self) -> asyncio.Task:
        """Schedule :meth:`shutdown` once; later calls return the same task."""
        if self.drain_task is None:
            self.drain_task = asyncio.get_running_loop().create_task(self.shutdown())
        return self.drain_task


def install_signal_handlers(
    loop: asyncio.AbstractEventLoop, orchestrator: DomainOrchestrator, task: asyncio.Task
) -> None:
    """SIGINT/SIGTERM cancel *task* and drain the orchestrator."""

    def _on_signal(signame: str) -> None:
        if orchestrator.drain_task is not None:
            orchestrator.logger.warning("Получен сигнал %s, остановка уже идёт", signame)
            return
        orchestrator.logger.warning("Получен сигнал %s, завершаем работу", signame)
        task.cancel()
        orchestrator.request_shutdown()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _on_signal, sig.name)
        except (NotImplementedError, RuntimeError):
            # add_signal_handler is not available on Windows event loops
            pass
