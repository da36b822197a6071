"""Declarative property schema for federation entities.

Entity types declare their properties once, at class-definition time, and get
default filling, nesting-awareness and introspection for free. Nested entity
references may be given as classes or as class names; names are resolved
lazily through the entity registry so that self-referential and mutually
nested entity graphs can be declared in any order.
"""

from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
    Type,
)


class PropertiesError(Exception):
    """Base class for property schema errors."""


class InvalidName(PropertiesError):
    """A property was declared with a non-string or reserved name."""


class InvalidType(PropertiesError):
    """An entity property was declared with a type that is not an entity."""


class ValidationError(PropertiesError):
    """An entity instance failed validation.

    The offending properties are listed in ``errors``.
    """

    def __init__(self, entity: str, errors: Sequence[str]) -> None:
        self.entity = entity
        self.errors = list(errors)
        super().__init__(f"{entity} is invalid: {', '.join(self.errors)}")


@dataclass(frozen=True)
class Default:
    """Default value of a property: a static value or a zero-argument producer."""

    value: Any = None
    producer: Optional[Callable[[], Any]] = None

    @classmethod
    def static(cls, value: Any) -> "Default":
        return cls(value=value)

    @classmethod
    def lazy(cls, producer: Callable[[], Any]) -> "Default":
        return cls(producer=producer)

    @classmethod
    def of(cls, default: Any) -> Optional["Default"]:
        if default is None or isinstance(default, Default):
            return default
        if callable(default):
            return cls.lazy(default)
        return cls.static(default)

    def resolve(self) -> Any:
        # Producers run on every call so mutable defaults are never shared.
        if self.producer is not None:
            return self.producer()
        return self.value


@dataclass(frozen=True)
class PropertyDefinition:
    """A single declared property of an entity type."""

    name: str
    type: Any = str
    default: Optional[Default] = None
    entity: bool = False
    module: Optional[str] = field(default=None, compare=False, repr=False)

    @property
    def many(self) -> bool:
        return isinstance(self.type, list)

    @property
    def element_type(self) -> Any:
        return self.type[0] if self.many else self.type


@dataclass(frozen=True)
class Declaration:
    """Pending declaration listed in an entity's ``properties`` attribute."""

    name: Any
    type: Any = str
    default: Any = None
    entity: bool = False


def prop(name: Any, type: Any = str, default: Any = None) -> Declaration:
    """Declare a scalar property in an entity's ``properties`` list."""
    return Declaration(name=name, type=type, default=default)


def entity(name: Any, type: Any, default: Any = None) -> Declaration:
    """Declare a nested entity (or a one-element list of one) in ``properties``."""
    return Declaration(name=name, type=type, default=default, entity=True)


_registry: Dict[str, Type["Entity"]] = {}
_by_name: Dict[str, Dict[str, Type["Entity"]]] = {}


def register_entity(entity_class: Type["Entity"]) -> None:
    path = f"{entity_class.__module__}.{entity_class.__qualname__}"
    _registry[path] = entity_class
    _by_name.setdefault(entity_class.__name__, {})[path] = entity_class


def lookup_entity(name: str, module: Optional[str] = None) -> Type["Entity"]:
    """Resolve an entity class from its dotted path or class name.

    A bare class name is looked up in ``module`` first and otherwise must
    name exactly one registered entity.

    Raises:
        InvalidType: If the name is unknown or ambiguous
    """
    if name in _registry:
        return _registry[name]
    if module is not None and f"{module}.{name}" in _registry:
        return _registry[f"{module}.{name}"]
    candidates = _by_name.get(name, {})
    if len(candidates) == 1:
        return next(iter(candidates.values()))
    if len(candidates) > 1:
        raise InvalidType(
            f"Ambiguous entity type {name}: {', '.join(sorted(candidates))}"
        )
    raise InvalidType(f"Unknown entity type: {name}")


def _is_entity_reference(value: Any) -> bool:
    if isinstance(value, str):
        return len(value) > 0
    return isinstance(value, type) and issubclass(value, Entity)


class Entity:
    """Base class of every structured federation record.

    Subclasses list their declarations in ``properties`` using :func:`prop`
    and :func:`entity`, or call :meth:`declare_property` and
    :meth:`declare_entity` directly. Instances are immutable mappings from
    property name to value, built by merging supplied values over the type's
    default values.
    """

    properties: ClassVar[Sequence[Declaration]] = ()
    required: ClassVar[Tuple[str, ...]] = ()

    _props: ClassVar[List[PropertyDefinition]] = []

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._props = list(cls._props)
        for declaration in cls.__dict__.get("properties", ()):
            if declaration.entity:
                cls.declare_entity(
                    declaration.name, declaration.type, declaration.default
                )
            else:
                cls.declare_property(
                    declaration.name, declaration.type, declaration.default
                )
        register_entity(cls)

    @classmethod
    def declare_property(
        cls, name: Any, type: Any = str, default: Any = None
    ) -> PropertyDefinition:
        """Register a property on this entity type.

        Raises:
            InvalidName: If ``name`` is not a non-empty string or is reserved
        """
        return cls._define(name, type, default, entity=False)

    @classmethod
    def declare_entity(
        cls, name: Any, type: Any, default: Any = None
    ) -> PropertyDefinition:
        """Register a nested entity property on this entity type.

        ``type`` is an entity class, the name of one, or a list holding exactly
        one of those for an array of entities.

        Raises:
            InvalidName: If ``name`` is not a non-empty string or is reserved
            InvalidType: If ``type`` does not reference an entity type
        """
        if isinstance(type, list):
            if len(type) != 1 or not _is_entity_reference(type[0]):
                raise InvalidType(
                    f"Type of {name!r} must be a list of exactly one entity type"
                )
        elif not _is_entity_reference(type):
            raise InvalidType(f"Type of {name!r} must be an entity type")
        return cls._define(name, type, default, entity=True)

    @classmethod
    def _define(
        cls, name: Any, type: Any, default: Any, entity: bool
    ) -> PropertyDefinition:
        if not isinstance(name, str) or len(name) == 0:
            raise InvalidName(f"Invalid property name: {name!r}")
        if name.startswith("_") or hasattr(Entity, name):
            raise InvalidName(f"Reserved property name: {name!r}")
        definition = PropertyDefinition(
            name=name,
            type=list(type) if isinstance(type, list) else type,
            default=Default.of(default),
            entity=entity,
            module=cls.__module__,
        )
        cls._props = [p for p in cls._props if p.name != name] + [definition]
        return definition

    @classmethod
    def class_props(cls) -> List[PropertyDefinition]:
        return list(cls._props)

    @classmethod
    def class_prop_names(cls) -> List[str]:
        return [p.name for p in cls._props]

    @classmethod
    def nested_class_props(cls) -> List[PropertyDefinition]:
        """Own properties plus those of every nested entity type, recursively.

        Each entity type contributes its properties once, so cyclic entity
        graphs terminate.
        """
        result: List[PropertyDefinition] = []
        seen: Set[type] = set()
        pending: List[Type[Entity]] = [cls]
        while pending:
            current = pending.pop(0)
            if current in seen:
                continue
            seen.add(current)
            result.extend(current._props)
            for definition in current._props:
                if definition.entity:
                    pending.append(current.entity_type(definition.name))
        return result

    @classmethod
    def entity_type(cls, name: str) -> Type["Entity"]:
        """Resolve the entity class of the nested entity property ``name``."""
        definition = cls._definition(name)
        if definition is None or not definition.entity:
            raise InvalidType(f"{cls.__name__}.{name} is not an entity property")
        reference = definition.element_type
        if isinstance(reference, str):
            return lookup_entity(reference, definition.module)
        return reference

    @classmethod
    def default_values(cls) -> Dict[str, Any]:
        return {p.name: p.default.resolve() for p in cls._props if p.default is not None}

    @classmethod
    def _definition(cls, name: str) -> Optional[PropertyDefinition]:
        return next((p for p in cls._props if p.name == name), None)

    def __init__(
        self, data: Optional[Mapping[str, Any]] = None, /, **kwargs: Any
    ) -> None:
        supplied = dict(data or {})
        supplied.update(kwargs)
        values = self.default_values()
        for definition in self._props:
            value = supplied.get(definition.name)
            if value is not None:
                values[definition.name] = self._convert(definition, value)
        object.__setattr__(self, "_values", values)

    def _convert(self, definition: PropertyDefinition, value: Any) -> Any:
        if not definition.entity:
            return value
        entity_class = self.entity_type(definition.name)
        if definition.many:
            return [self._convert_one(entity_class, item) for item in value]
        return self._convert_one(entity_class, value)

    @staticmethod
    def _convert_one(entity_class: Type["Entity"], value: Any) -> Any:
        if isinstance(value, Mapping):
            return entity_class(value)
        return value

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if self._definition(name) is None:
            raise AttributeError(f"{type(self).__name__} has no property {name!r}")
        return self._values.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"{type(self).__name__}({fields})"

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def to_dict(self) -> Dict[str, Any]:
        def dump(value: Any) -> Any:
            if isinstance(value, Entity):
                return value.to_dict()
            if isinstance(value, list):
                return [dump(item) for item in value]
            return value

        return {name: dump(value) for name, value in self._values.items()}

    def validate(self, required: Optional[Iterable[str]] = None) -> "Entity":
        """Check required scalar properties and scalar types, recursing into nested entities.

        Args:
            required: Property names that must be present and non-empty.
                Defaults to the type's ``required`` attribute.

        Returns:
            The entity itself

        Raises:
            ValidationError: Listing every offending property
        """
        errors = self._errors(self.required if required is None else tuple(required))
        if errors:
            raise ValidationError(type(self).__name__, errors)
        return self

    def _errors(self, required: Iterable[str]) -> List[str]:
        errors: List[str] = []
        for name in required:
            value = self._values.get(name)
            if value is None or value == "":
                errors.append(f"{name} is missing")

        for definition in self._props:
            value = self._values.get(definition.name)
            if value is None:
                continue
            if definition.entity:
                nested = value if definition.many else [value]
                for index, item in enumerate(nested):
                    if not isinstance(item, Entity):
                        errors.append(f"{definition.name} is not an entity")
                        continue
                    prefix = (
                        f"{definition.name}[{index}]"
                        if definition.many
                        else definition.name
                    )
                    errors.extend(
                        f"{prefix}.{error}" for error in item._errors(item.required)
                    )
            elif isinstance(definition.type, type) and not isinstance(
                value, definition.type
            ):
                errors.append(
                    f"{definition.name} must be {definition.type.__name__}"
                )
        return errors
