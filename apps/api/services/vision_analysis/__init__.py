"""
Vision Analysis Module

Interface for the camera and upload based assessments:
- Badminton smash speed (video)
- Body proportions and posture (photo)
- Push-up rep counting (video)

No inference model ships with the service. Analyzers validate uploads and
summarize metrics; the metrics themselves come from a pluggable backend
configured through VisionAnalyzerRegistry.configure().
"""

from .base import (
    InvalidMediaError,
    MediaKind,
    MediaUpload,
    VisionAnalysisResult,
    VisionAnalysisUnavailable,
    VisionAnalyzer,
)
from .registry import VisionAnalyzerRegistry
from .analyzers import (
    BodyMetricsAnalyzer,
    PushUpCountAnalyzer,
    SmashSpeedAnalyzer,
    body_metrics_score,
    classify_form_technique,
    classify_smash_technique,
    proportion_status,
)

__all__ = [
    'InvalidMediaError',
    'MediaKind',
    'MediaUpload',
    'VisionAnalysisResult',
    'VisionAnalysisUnavailable',
    'VisionAnalyzer',
    'VisionAnalyzerRegistry',
    'BodyMetricsAnalyzer',
    'PushUpCountAnalyzer',
    'SmashSpeedAnalyzer',
    'body_metrics_score',
    'classify_form_technique',
    'classify_smash_technique',
    'proportion_status',
]
