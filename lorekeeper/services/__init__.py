"""
业务服务层
"""

from .drift_detector import DriftDetector, drift_detector
from .outcome_propagator import OutcomePropagator, outcome_propagator
from .drift_service import DriftService, drift_service
from .continuity_service import ContinuityService, continuity_service
from .event_service import EventService, event_service
from .entity_service import EntityService, entity_service

__all__ = [
    "DriftDetector",
    "drift_detector",
    "OutcomePropagator",
    "outcome_propagator",
    "DriftService",
    "drift_service",
    "ContinuityService",
    "continuity_service",
    "EventService",
    "event_service",
    "EntityService",
    "entity_service",
]
