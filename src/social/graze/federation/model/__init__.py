"""
Federation Entities

This package defines structured federation records on top of a small reflective
property schema.

Key Modules:
- properties.py: Entity base class, property declarations, defaults and validation
- person.py: Person and Profile, the identity records produced by discovery
- message.py: StatusMessage, Photo and Location message entities

Entity types declare their properties once at class-definition time:

    class Location(Entity):
        properties = (prop("address"), prop("lat"), prop("lng"))

Declaration errors (InvalidName, InvalidType) are raised when the class is
defined, not when it is first used.
"""

from social.graze.federation.model.properties import (
    Default,
    Entity,
    InvalidName,
    InvalidType,
    PropertiesError,
    PropertyDefinition,
    ValidationError,
    entity,
    prop,
)

__all__ = [
    "Default",
    "Entity",
    "InvalidName",
    "InvalidType",
    "PropertiesError",
    "PropertyDefinition",
    "ValidationError",
    "entity",
    "prop",
]
