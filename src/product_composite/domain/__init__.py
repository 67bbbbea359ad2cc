"""Domain layer: entities exchanged with downstreams and the change events built from writes."""
from product_composite.domain.entities import Entity, Product, Recommendation, Review, ValueObject
from product_composite.domain.events import ChangeEvent, CreateEvent, DeleteEvent, EventType, build_event

__all__ = [
    "ChangeEvent",
    "CreateEvent",
    "DeleteEvent",
    "Entity",
    "EventType",
    "Product",
    "Recommendation",
    "Review",
    "ValueObject",
    "build_event",
]
