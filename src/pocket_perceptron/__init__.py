"""Online pocket-perceptron classifier with adaptive threshold and EMA statistics."""

from .api import ClassifierRuntime, TrainingSummary, build_classifier
from .auc import AucEstimator
from .classifier import PocketPerceptronClassifier
from .config import ClassifierConfig, LoggingConfig, PocketPerceptronSettings
from .ema import ClassBalance, EmaState, smoothing_factor
from .errors import (
    CheckpointFormatError,
    PersistenceError,
    PocketPerceptronError,
    ThresholdManagedError,
    UnsupportedOperationError,
)
from .linear_model import Example, SparseLinearModel
from .logging_utils import JsonFormatter, configure_logging
from .models import ExampleModel
from .persistence import CheckpointRecord, read_checkpoint, read_weights, write_weights
from .sources import DocumentStore, InMemoryDocumentStore, TaggedDocument, examples_from_documents
from .statistics import ConfusionCounts, PocketCounters, PocketRun, format_confusion_matrix
from .threshold import ThresholdController, update_threshold

__all__ = [
    "AucEstimator",
    "CheckpointFormatError",
    "CheckpointRecord",
    "ClassBalance",
    "ClassifierConfig",
    "ClassifierRuntime",
    "ConfusionCounts",
    "DocumentStore",
    "EmaState",
    "Example",
    "ExampleModel",
    "InMemoryDocumentStore",
    "JsonFormatter",
    "LoggingConfig",
    "PersistenceError",
    "PocketCounters",
    "PocketPerceptronClassifier",
    "PocketPerceptronError",
    "PocketPerceptronSettings",
    "PocketRun",
    "SparseLinearModel",
    "TaggedDocument",
    "ThresholdController",
    "ThresholdManagedError",
    "TrainingSummary",
    "UnsupportedOperationError",
    "build_classifier",
    "configure_logging",
    "examples_from_documents",
    "format_confusion_matrix",
    "read_checkpoint",
    "read_weights",
    "smoothing_factor",
    "update_threshold",
    "write_weights",
]
