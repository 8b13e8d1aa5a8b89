"""
Vision Analyzer Registry

Central registry for vision analyzers, keyed by analysis type.
"""

from typing import Dict, List, Optional, Type
import logging

from .base import MetricsProvider, VisionAnalyzer

logger = logging.getLogger(__name__)


class VisionAnalyzerRegistry:
    """
    Registry for all vision analyzers.

    Usage:
        # Register an analyzer (instantiated without a backend)
        @VisionAnalyzerRegistry.register
        class SmashSpeedAnalyzer(VisionAnalyzer):
            ...

        # Plug in an inference backend
        VisionAnalyzerRegistry.configure('badminton_smash', provider)

        analyzer = VisionAnalyzerRegistry.get_analyzer('badminton_smash')
    """

    _analyzers: Dict[str, VisionAnalyzer] = {}

    @classmethod
    def register(cls, analyzer_class: Type[VisionAnalyzer]) -> Type[VisionAnalyzer]:
        instance = analyzer_class()
        analysis_type = instance.analysis_type

        if analysis_type in cls._analyzers:
            logger.warning(f"Overwriting existing vision analyzer: {analysis_type}")

        cls._analyzers[analysis_type] = instance
        logger.info(f"Registered vision analyzer: {analysis_type} ({instance.display_name})")

        return analyzer_class

    @classmethod
    def configure(cls, analysis_type: str, provider: Optional[MetricsProvider]) -> VisionAnalyzer:
        """Replace the registered analyzer with one backed by provider."""
        current = cls._analyzers.get(analysis_type)
        if current is None:
            raise KeyError(f"Unknown analysis type: {analysis_type}")
        analyzer = type(current)(provider)
        cls._analyzers[analysis_type] = analyzer
        logger.info(
            f"Vision analyzer {analysis_type} "
            f"{'configured with inference backend' if provider else 'reset to unavailable'}"
        )
        return analyzer

    @classmethod
    def get_analyzer(cls, analysis_type: str) -> Optional[VisionAnalyzer]:
        return cls._analyzers.get(analysis_type)

    @classmethod
    def list_analysis_types(cls) -> List[Dict[str, object]]:
        """Analyzer info for display."""
        return [
            {
                'analysis_type': a.analysis_type,
                'display_name': a.display_name,
                'accepted_media': a.accepted_media.value,
                'max_upload_bytes': a.max_upload_bytes,
                'available': a.is_available,
            }
            for a in cls._analyzers.values()
        ]
