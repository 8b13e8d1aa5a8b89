"""
Vision analyzers for the video and photo assessments.

Each analyzer summarizes raw metrics from its inference backend with fixed
rules (technique thresholds, proportion checks, derived scores).
"""
import math
from typing import Any, Dict, Tuple

from .base import MB, MediaKind, VisionAnalysisResult, VisionAnalyzer
from .registry import VisionAnalyzerRegistry

SMASH_RECOMMENDATIONS: Tuple[Tuple[str, float, str], ...] = (
    # (metric, below this value, advice)
    ("power_generation", 85, "Focus on wrist snap for extra speed"),
    ("follow_through", 80, "Maintain better body rotation"),
    ("accuracy", 85, "Improve timing of jump"),
)

# Segment length as a fraction of standing height
IDEAL_BODY_PROPORTIONS: Dict[str, float] = {
    "head_height": 0.13,
    "shoulder_breadth": 0.23,
    "chest_width": 0.18,
    "waist_width": 0.15,
    "hip_width": 0.19,
    "arm_length": 0.44,
    "upper_leg_length": 0.24,
    "lower_leg_length": 0.26,
}

# Flat proportions score until proportions are measured against a population
BASE_PROPORTIONS_SCORE = 80

PUSH_UP_WINDOW_SECONDS = 30


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _require_metric(metrics: Dict[str, float], name: str) -> float:
    if name not in metrics:
        raise ValueError(f"Metrics provider did not return '{name}'")
    return float(metrics[name])


def classify_smash_technique(speed_kmh: float) -> str:
    if speed_kmh > 160:
        return "Excellent"
    if speed_kmh > 130:
        return "Good"
    return "Needs Improvement"


def classify_form_technique(form_score: float) -> str:
    if form_score > 80:
        return "Excellent"
    if form_score > 60:
        return "Good"
    return "Needs Improvement"


def body_metrics_score(body_symmetry: float, posture_score: float) -> int:
    """Weighted 40% symmetry, 30% posture, 30% proportions."""
    return _round_half_up(
        body_symmetry * 0.4 + posture_score * 0.3 + BASE_PROPORTIONS_SCORE * 0.3
    )


def proportion_status(measurement: float, ideal: float) -> str:
    """How close a measured segment is to its ideal length."""
    if ideal <= 0:
        return "Needs Attention"
    ratio = measurement / ideal
    if 0.95 <= ratio <= 1.05:
        return "Excellent"
    if 0.90 <= ratio <= 1.10:
        return "Good"
    if 0.85 <= ratio <= 1.15:
        return "Average"
    return "Needs Attention"


@VisionAnalyzerRegistry.register
class SmashSpeedAnalyzer(VisionAnalyzer):
    """Badminton smash: shuttle speed and stroke quality from a 3-5s clip."""

    analysis_type = "badminton_smash"
    display_name = "Badminton Smash Analysis"
    accepted_media = MediaKind.VIDEO
    max_upload_bytes = 50 * MB

    def summarize(self, metrics: Dict[str, float], context: Dict[str, Any]) -> VisionAnalysisResult:
        speed = _require_metric(metrics, "smash_speed_kmh")
        secondary = {
            name: float(metrics[name])
            for name in ("accuracy", "power_generation", "follow_through")
            if name in metrics
        }
        advice = tuple(
            text for name, threshold, text in SMASH_RECOMMENDATIONS
            if name in secondary and secondary[name] < threshold
        )
        return VisionAnalysisResult(
            analysis_type=self.analysis_type,
            primary_metric=speed,
            primary_unit="km/h",
            secondary_metrics=secondary,
            technique=classify_smash_technique(speed),
            recommendations=advice,
        )


@VisionAnalyzerRegistry.register
class BodyMetricsAnalyzer(VisionAnalyzer):
    """Body proportions, symmetry and posture from a full-body photo."""

    analysis_type = "body_metrics"
    display_name = "Body Metrics Analysis"
    accepted_media = MediaKind.IMAGE
    max_upload_bytes = 10 * MB

    def validate_context(self, context: Dict[str, Any]) -> None:
        height_cm = context.get("height_cm")
        if height_cm is None or float(height_cm) <= 0:
            raise ValueError("height_cm is required for body metrics analysis")

    def summarize(self, metrics: Dict[str, float], context: Dict[str, Any]) -> VisionAnalysisResult:
        self.validate_context(context)
        height_cm = float(context["height_cm"])

        symmetry = _require_metric(metrics, "body_symmetry")
        posture = _require_metric(metrics, "posture_score")
        overall = _round_half_up((symmetry + posture) / 2)

        details = {
            name: proportion_status(float(metrics[name]), height_cm * ratio)
            for name, ratio in IDEAL_BODY_PROPORTIONS.items()
            if name in metrics
        }
        secondary = {name: float(value) for name, value in metrics.items()}
        secondary["overall"] = float(overall)

        if overall >= 90:
            technique = "Excellent"
        elif overall >= 80:
            technique = "Good"
        else:
            technique = "Needs Improvement"

        return VisionAnalysisResult(
            analysis_type=self.analysis_type,
            primary_metric=float(body_metrics_score(symmetry, posture)),
            primary_unit="points",
            secondary_metrics=secondary,
            technique=technique,
            details=details,
        )


@VisionAnalyzerRegistry.register
class PushUpCountAnalyzer(VisionAnalyzer):
    """Push-up reps and form over a fixed camera window."""

    analysis_type = "push_up_count"
    display_name = "Push-up Counter"
    accepted_media = MediaKind.VIDEO
    max_upload_bytes = 50 * MB

    def summarize(self, metrics: Dict[str, float], context: Dict[str, Any]) -> VisionAnalysisResult:
        reps = _require_metric(metrics, "rep_count")
        form = _require_metric(metrics, "form_score")
        return VisionAnalysisResult(
            analysis_type=self.analysis_type,
            primary_metric=float(int(reps)),
            primary_unit="reps",
            secondary_metrics={
                "form_score": float(_round_half_up(form)),
                "duration_s": float(context.get("duration_s", PUSH_UP_WINDOW_SECONDS)),
            },
            technique=classify_form_technique(form),
        )
