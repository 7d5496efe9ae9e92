"""
Registry sweep for upforgrabs.

Walks every record, classifies the repository it points at, and hands
archived or missing ones to the DeprecationPublisher. Running out of
API budget stops the sweep and marks it inconclusive; work done up to
that point stands.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..domain.deprecation import DeprecationOutcome, Failed
from ..domain.health import (
    DEPRECATION_REASONS,
    HealthResult,
    Moved,
    RateLimited,
    Error,
    SkippedNoIdentifier,
)
from ..domain.record import Record, RecordParseError
from ..exit_codes import RateLimitExhausted
from .deprecation_service import DeprecationPublisher
from .health_service import RepositoryHealthClassifier
from .locator import locate

logger = logging.getLogger(__name__)


@dataclass
class SweepEntry:
    """What happened to one record during a sweep."""
    path: str
    classification: Optional[HealthResult] = None
    outcome: Optional[DeprecationOutcome] = None
    error: Optional[str] = None
    halted: bool = False  # the rate budget ran out while handling this record

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'path': self.path,
            'classification': self.classification.to_dict() if self.classification else None,
            'outcome': self.outcome.to_dict() if self.outcome else None,
            'error': self.error,
            'halted': self.halted or None,
        }
        return {k: v for k, v in result.items() if v is not None}


@dataclass
class SweepReport:
    """
    Aggregate of a sweep run.

    `inconclusive` is set when the rate budget ran out; the entries then
    cover only the records reached before that.
    """
    entries: List[SweepEntry] = field(default_factory=list)
    inconclusive: bool = False
    elapsed_seconds: float = 0.0

    def add(self, entry: SweepEntry) -> None:
        self.entries.append(entry)

    @property
    def processed(self) -> int:
        return len(self.entries)

    @property
    def errors(self) -> List[SweepEntry]:
        return [e for e in self.entries if not e.ok]

    @property
    def successes(self) -> List[SweepEntry]:
        return [e for e in self.entries if e.ok]

    @property
    def deprecations(self) -> List[SweepEntry]:
        return [e for e in self.entries if e.outcome is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'summary',
            'processed': self.processed,
            'errors': len(self.errors),
            'deprecations': len(self.deprecations),
            'inconclusive': self.inconclusive,
            'elapsed_seconds': round(self.elapsed_seconds, 3),
        }


class RegistrySweeper:
    """
    Reconciles registry records against GitHub.

    Example:
        sweeper = RegistrySweeper(classifier, publisher, "owner/registry")
        report = sweeper.sweep(records)
        print(f"{report.processed} files processed - {len(report.errors)} errors found")
    """

    def __init__(
        self,
        classifier: RepositoryHealthClassifier,
        publisher: DeprecationPublisher,
        repository: str,
    ):
        """
        Initialize RegistrySweeper.

        Args:
            classifier: Health classifier for referenced repositories
            publisher: Opens deprecation pull requests
            repository: The registry repository deprecations are proposed to
        """
        self.classifier = classifier
        self.publisher = publisher
        self.repository = repository

    def sweep(
        self,
        records: Iterable[Record],
        parse_errors: Iterable[RecordParseError] = (),
    ) -> SweepReport:
        """
        Sweep all records.

        Args:
            records: Loaded records, processed in order
            parse_errors: Files that failed to load, reported as input errors

        Returns:
            SweepReport with one entry per record reached
        """
        start = time.monotonic()
        report = SweepReport()

        for parse_error in parse_errors:
            report.add(SweepEntry(path=parse_error.path, error=parse_error.message))

        for record in records:
            entry = self._sweep_record(record)
            report.add(entry)

            if entry.halted:
                logger.warning("This script is currently rate-limited by the GitHub API")
                logger.warning("Marking as inconclusive to indicate that no further work will be done here")
                report.inconclusive = True
                break

        report.elapsed_seconds = time.monotonic() - start
        return report

    def _sweep_record(self, record: Record) -> SweepEntry:
        path = record.relative_path

        missing = record.missing_fields()
        if missing:
            return SweepEntry(path=path, error=f"Missing required field(s): {', '.join(missing)}")

        identifier = locate(record)
        if identifier is None:
            # hosted elsewhere
            return SweepEntry(path=path, classification=SkippedNoIdentifier())

        classification = self.classifier.classify(identifier)
        entry = SweepEntry(path=path, classification=classification)
        if isinstance(classification, RateLimited):
            entry.halted = True
            return entry

        reason = DEPRECATION_REASONS.get(type(classification))
        if reason is not None:
            try:
                entry.outcome = self.publisher.publish(self.repository, path, reason)
            except RateLimitExhausted:
                entry.halted = True
                return entry
            if isinstance(entry.outcome, Failed):
                entry.error = f"Unable to create pull request to remove project {path} - {entry.outcome.message}"
        elif isinstance(classification, Moved):
            entry.error = f"Repository {identifier} now lives at {classification.canonical} and should be updated"
        elif isinstance(classification, Error):
            entry.error = f"Unknown exception for file: {classification.message}"

        return entry
