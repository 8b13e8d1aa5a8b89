"""
Base classes for vision analysis.

Video and photo assessments (badminton smash speed, body proportions,
push-up rep counting) all go through the same interface:

    media upload -> validate -> extract raw metrics -> summarize

Metric extraction is the inference step. No model ships with this service,
so extraction is delegated to an injected metrics provider; without one,
analyzers raise VisionAnalysisUnavailable. Summarizing (technique labels,
derived scores) is deterministic and lives here.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

MB = 1024 * 1024


class MediaKind(str, Enum):
    VIDEO = "video"
    IMAGE = "image"


class InvalidMediaError(ValueError):
    """Upload rejected before analysis (wrong type or too large)."""


class VisionAnalysisUnavailable(RuntimeError):
    """No inference backend is configured for this analysis type."""


@dataclass(frozen=True)
class MediaUpload:
    """Metadata of an uploaded file. Content is read by the metrics provider."""
    filename: str
    content_type: str
    size_bytes: int
    content: Optional[bytes] = field(default=None, repr=False)


@dataclass(frozen=True)
class VisionAnalysisResult:
    """
    Structured result of one analysis.

    primary_metric is what gets stored as the assessment result (smash speed,
    body metrics score, rep count). details holds per-measurement labels.
    """
    analysis_type: str
    primary_metric: float
    primary_unit: str
    secondary_metrics: Dict[str, float]
    technique: str
    details: Dict[str, str] = field(default_factory=dict)
    recommendations: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analysis_type": self.analysis_type,
            "primary_metric": self.primary_metric,
            "primary_unit": self.primary_unit,
            "secondary_metrics": dict(self.secondary_metrics),
            "technique": self.technique,
            "details": dict(self.details),
            "recommendations": list(self.recommendations),
        }


# (media, context) -> raw metrics
MetricsProvider = Callable[[MediaUpload, Dict[str, Any]], Dict[str, float]]


class VisionAnalyzer(ABC):
    """
    Base class for all vision analyses.

    Subclasses declare what media they accept and how raw metrics are
    summarized. The metrics provider is the seam where a real model plugs in.
    """

    def __init__(self, metrics_provider: Optional[MetricsProvider] = None):
        self._metrics_provider = metrics_provider

    @property
    @abstractmethod
    def analysis_type(self) -> str:
        """Unique identifier, e.g. 'badminton_smash'."""
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        pass

    @property
    @abstractmethod
    def accepted_media(self) -> MediaKind:
        pass

    @property
    @abstractmethod
    def max_upload_bytes(self) -> int:
        pass

    @property
    def is_available(self) -> bool:
        return self._metrics_provider is not None

    def validate_media(self, media: MediaUpload) -> None:
        """Raises InvalidMediaError for the wrong media type or an oversized file."""
        expected = self.accepted_media.value
        if not (media.content_type or "").startswith(f"{expected}/"):
            raise InvalidMediaError(f"Please select {'a video' if expected == 'video' else 'an image'} file")
        if media.size_bytes > self.max_upload_bytes:
            raise InvalidMediaError(
                f"File size must be less than {self.max_upload_bytes // MB}MB"
            )

    def validate_context(self, context: Dict[str, Any]) -> None:
        """Raises ValueError when inputs the summary needs are missing."""
        pass

    def extract_metrics(self, media: MediaUpload, context: Dict[str, Any]) -> Dict[str, float]:
        """Run inference. Raises VisionAnalysisUnavailable without a provider."""
        if self._metrics_provider is None:
            raise VisionAnalysisUnavailable(
                f"No inference backend configured for {self.analysis_type}"
            )
        return self._metrics_provider(media, context)

    @abstractmethod
    def summarize(self, metrics: Dict[str, float], context: Dict[str, Any]) -> VisionAnalysisResult:
        """Turn raw metrics into the stored result."""
        pass

    def analyze(self, media: MediaUpload, **context: Any) -> VisionAnalysisResult:
        self.validate_media(media)
        # before inference, so bad input is a 422 even with no backend
        self.validate_context(context)
        metrics = self.extract_metrics(media, context)
        result = self.summarize(metrics, context)
        logger.info(
            f"Vision analysis complete: {self.analysis_type} -> {result.primary_metric} {result.primary_unit}"
        )
        return result
