"""Public API facade for the online classifier.

Assembles a classifier from settings, restores its last saved state and
drives it over a stream of examples.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Iterator, Mapping, Sequence

import logging

from .classifier import PocketPerceptronClassifier
from .config import PocketPerceptronSettings
from .ema import ClassBalance
from .linear_model import Example
from .logging_utils import configure_logging
from .models import ExampleModel
from .sources import DocumentStore, examples_from_documents


@dataclass
class TrainingSummary:
    """Outcome of one pass over an example stream."""

    processed: int
    mistakes: int
    precision: float
    recall: float
    auc: float
    error_ema: float


@dataclass
class ClassifierRuntime:
    """Classifier plus the settings it was built from."""

    classifier: PocketPerceptronClassifier
    settings: PocketPerceptronSettings
    logger: logging.Logger

    def train_stream(self, examples: Iterable[Example], log_every: int = 0) -> TrainingSummary:
        """Train on ``examples`` in the order given."""

        classifier = self.classifier
        processed = 0
        mistakes = 0
        for example in examples:
            if not classifier.train(example):
                mistakes += 1
            processed += 1
            if log_every and processed % log_every == 0:
                self.logger.info(
                    "training_progress",
                    extra={
                        "processed": processed,
                        "error_ema": classifier.error_ema(),
                        "auc": classifier.auc(),
                    },
                )
        summary = TrainingSummary(
            processed=processed,
            mistakes=mistakes,
            precision=classifier.precision(),
            recall=classifier.recall(),
            auc=classifier.auc(),
            error_ema=classifier.error_ema(),
        )
        self.logger.info("training_finished", extra=summary.__dict__)
        return summary

    def train_records(self, records: Iterable[Mapping[str, Any]], log_every: int = 0) -> TrainingSummary:
        """Validate raw records and train on them in order.

        Raises pydantic's ``ValidationError`` on the first invalid record;
        records before it have already been trained on.
        """

        return self.train_stream(_validated(records), log_every=log_every)

    def train_from_store(
        self,
        store: DocumentStore,
        tag_ids: Sequence[int],
        positive_tag: int,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        limit: int = 0,
        log_every: int = 0,
    ) -> TrainingSummary:
        """Train on the documents ``store`` returns, oldest first."""

        documents = store.find_documents(tag_ids, from_date=from_date, to_date=to_date, limit=limit)
        self.logger.info(
            "training_from_store",
            extra={"tag_ids": list(tag_ids), "positive_tag": positive_tag},
        )
        return self.train_stream(examples_from_documents(documents, positive_tag), log_every=log_every)

    def save(self) -> None:
        """Persist to the configured state prefix, if any."""

        if self.settings.state_prefix:
            self.classifier.save(self.settings.state_prefix)


def build_classifier(
    settings: PocketPerceptronSettings | None = None,
    balance: ClassBalance | None = None,
    logger: logging.Logger | None = None,
    configure_logs: bool = True,
) -> ClassifierRuntime:
    """Create a classifier from settings and restore any saved state."""

    settings = settings or PocketPerceptronSettings()
    if configure_logs:
        configure_logging(settings.logging)
    logger = logger or logging.getLogger(__name__)

    classifier = PocketPerceptronClassifier(settings.classifier, balance=balance)
    if settings.state_prefix:
        record = classifier.restore(settings.state_prefix)
        logger.info(
            "classifier_restored" if record else "classifier_initialized",
            extra={"state_prefix": settings.state_prefix},
        )
    return ClassifierRuntime(classifier=classifier, settings=settings, logger=logger)


def _validated(records: Iterable[Mapping[str, Any]]) -> Iterator[Example]:
    for record in records:
        yield ExampleModel.model_validate(record).to_example()
