"""
Category payloads and their shape validators.

The inference provider answers with loosely typed JSON. Each category
has a required shape; anything that does not match is rejected with a
PayloadValidationError instead of being defaulted. Validated payloads
round-trip through ``to_wire`` so stored records keep the provider shape.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from tradesense.domain.trading.entities import AnalysisCategory, SignalDirection
from tradesense.domain.trading.errors import PayloadValidationError


def _require_mapping(category: AnalysisCategory, raw: Any) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise PayloadValidationError(category.value, "response is not an object")
    return raw


def _require_number(
    category: AnalysisCategory,
    raw: Mapping[str, Any],
    key: str,
    lower: Optional[float] = None,
    upper: Optional[float] = None,
) -> float:
    value = raw.get(key)
    # bool is an int subclass; a true/false score is a malformed response
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadValidationError(category.value, f"'{key}' must be a number")
    if lower is not None and value < lower:
        raise PayloadValidationError(category.value, f"'{key}' below {lower}")
    if upper is not None and value > upper:
        raise PayloadValidationError(category.value, f"'{key}' above {upper}")
    return float(value)


def _require_strings(
    category: AnalysisCategory, raw: Mapping[str, Any], key: str
) -> list[str]:
    value = raw.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise PayloadValidationError(
            category.value, f"'{key}' must be a list of strings"
        )
    return list(value)


@dataclass(frozen=True)
class SentimentPayload:
    """Market sentiment score in [-1, 1] with the sources it was built from."""

    score: float
    sources: list[str]

    @classmethod
    def from_wire(cls, raw: Any) -> "SentimentPayload":
        category = AnalysisCategory.SENTIMENT
        data = _require_mapping(category, raw)
        return cls(
            score=_require_number(category, data, "score", -1.0, 1.0),
            sources=_require_strings(category, data, "sources"),
        )

    def to_wire(self) -> dict[str, Any]:
        return {"score": self.score, "sources": list(self.sources)}


@dataclass(frozen=True)
class PredictionPayload:
    """Predicted price move with model confidence in [0, 1]."""

    current_price: float
    predicted_price: float
    percentage_change: float
    confidence: float

    @classmethod
    def from_wire(cls, raw: Any) -> "PredictionPayload":
        category = AnalysisCategory.PREDICTION
        data = _require_mapping(category, raw)
        return cls(
            current_price=_require_number(category, data, "currentPrice"),
            predicted_price=_require_number(category, data, "predictedPrice"),
            percentage_change=_require_number(category, data, "percentageChange"),
            confidence=_require_number(category, data, "confidence", 0.0, 1.0),
        )

    def to_wire(self) -> dict[str, Any]:
        return {
            "currentPrice": self.current_price,
            "predictedPrice": self.predicted_price,
            "percentageChange": self.percentage_change,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class SignalPayload:
    """Trading signal. ``analysis`` is free text, present only on request."""

    direction: SignalDirection
    strength: float
    reasons: list[str]
    analysis: Optional[str] = None

    @classmethod
    def from_wire(cls, raw: Any) -> "SignalPayload":
        category = AnalysisCategory.SIGNAL
        data = _require_mapping(category, raw)

        signal = data.get("signal")
        try:
            direction = SignalDirection(signal)
        except ValueError:
            raise PayloadValidationError(
                category.value, f"'signal' must be BUY, SELL or HOLD, got {signal!r}"
            ) from None

        reasons: list[str] = []
        if data.get("reasons") is not None:
            reasons = _require_strings(category, data, "reasons")

        analysis = data.get("analysis")
        if analysis is not None and not isinstance(analysis, str):
            raise PayloadValidationError(category.value, "'analysis' must be text")

        return cls(
            direction=direction,
            strength=_require_number(category, data, "strength", 0.0, 1.0),
            reasons=reasons,
            analysis=analysis or None,
        )

    def to_wire(self) -> dict[str, Any]:
        return {
            "signal": self.direction.value,
            "strength": self.strength,
            "reasons": list(self.reasons),
            "analysis": self.analysis,
        }

    def without_analysis(self) -> "SignalPayload":
        return SignalPayload(
            direction=self.direction,
            strength=self.strength,
            reasons=list(self.reasons),
        )


Payload = Union[SentimentPayload, PredictionPayload, SignalPayload]

_PAYLOAD_TYPES = {
    AnalysisCategory.SENTIMENT: SentimentPayload,
    AnalysisCategory.PREDICTION: PredictionPayload,
    AnalysisCategory.SIGNAL: SignalPayload,
}


def validate_payload(category: AnalysisCategory, raw: Any) -> Payload:
    """Parse a raw provider (or stored) payload into its category type.

    Raises:
        PayloadValidationError: If a required field is missing or mistyped.
    """
    return _PAYLOAD_TYPES[category].from_wire(raw)
