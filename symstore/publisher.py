"""Publishing of deduplicated symbol store entries to one backend."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Mapping

from loguru import logger

from symstore.exceptions import SymstoreError
from symstore.objects.types import ObjectIdentity
from symstore.storage import SymbolBackend

Status = Literal["published", "skipped", "failed"]


@dataclass(frozen=True)
class PublishOutcome:
    key: str
    destination: str
    path: Path
    status: Status
    reason: str | None = None


@dataclass
class PublishReport:
    dry_run: bool = False
    published: list[PublishOutcome] = field(default_factory=list)
    skipped: list[PublishOutcome] = field(default_factory=list)
    failed: list[PublishOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.published) + len(self.skipped) + len(self.failed)

    def add(self, outcome: PublishOutcome) -> None:
        getattr(self, outcome.status).append(outcome)


class Publisher:
    """Push entries to ``backend``, skipping keys the backend already has.

    The existence check and the write for one entry always run together in
    the same worker. Entries never depend on each other, so ``workers > 1``
    fans them out over a bounded thread pool sharing the backend client.
    """

    def __init__(self, backend: SymbolBackend, *, dry_run: bool = False, workers: int = 1) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.backend = backend
        self.dry_run = dry_run
        self.workers = workers

    def _publish_one(self, key: str, identity: ObjectIdentity) -> PublishOutcome:
        destination = self.backend.destination(key)
        try:
            if self.backend.supports_exists and self.backend.exists(key):
                logger.info(f"Skipping {identity.path} -> {destination}: skipped, already exists")
                return PublishOutcome(key, destination, identity.path, "skipped", "already exists")

            logger.info(f"uploading '{identity.path}' to {self.backend.name} with key '{key}' ({destination})")
            if not self.dry_run:
                destination = self.backend.put_file(key, identity)
        except (SymstoreError, OSError) as exc:
            reason = exc.message if isinstance(exc, SymstoreError) else str(exc)
            logger.error(f"Failed to publish {identity.path} to {destination}: {reason}")
            return PublishOutcome(key, destination, identity.path, "failed", reason)

        return PublishOutcome(key, destination, identity.path, "published")

    def publish(self, entries: Mapping[str, ObjectIdentity]) -> PublishReport:
        report = PublishReport(dry_run=self.dry_run)
        if not entries:
            logger.info("Nothing to publish")
            return report
        if self.dry_run:
            logger.info("Dry run: existence checks only, nothing will be written")

        if self.workers == 1:
            for key, identity in entries.items():
                report.add(self._publish_one(key, identity))
        else:
            executor = ThreadPoolExecutor(max_workers=self.workers)
            try:
                futures = [
                    executor.submit(self._publish_one, key, identity)
                    for key, identity in entries.items()
                ]
                for future in as_completed(futures):
                    report.add(future.result())
            except BaseException:
                # entries not yet started are dropped, in-flight writes finish
                executor.shutdown(wait=False, cancel_futures=True)
                raise
            executor.shutdown()

        logger.info(
            f"{len(report.published)} published, "
            f"{len(report.skipped)} skipped, {len(report.failed)} failed"
        )
        return report


__all__ = ["Publisher", "PublishOutcome", "PublishReport"]
