"""Core domain logic for the runwatch notification system.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .models import (
    EmbedField,
    EmbedSpec,
    GameInfo,
    MessageHandle,
    RunDecision,
    RunDecisionKind,
    RunObservation,
    StreamDecision,
    StreamDecisionKind,
    StreamObservation,
    SweepResult,
    TrackedRunner,
    TrackedStreamer,
)

__all__ = [
    "EmbedField",
    "EmbedSpec",
    "GameInfo",
    "MessageHandle",
    "RunDecision",
    "RunDecisionKind",
    "RunObservation",
    "StreamDecision",
    "StreamDecisionKind",
    "StreamObservation",
    "SweepResult",
    "TrackedRunner",
    "TrackedStreamer",
]
