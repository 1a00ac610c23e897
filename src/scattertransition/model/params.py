"""
Transition Parameter Schema
===========================
Declarative description of the parameters of a transition type.

Why is this file needed?
------------------------
1. UI independence: A UI layer reads the schema (describe()) to decide which
   controls to render. The engine never depends on a rendering technology.
2. Resolution: The same schema turns loose user input into validated values
   (defaults, clamping, rounding, enum lookup, derived values).

Predicates (should_show) and derivations (derive) receive the dict of the scope
the parameter lives in: the top-level parameters, or the contents of its group.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import StrEnum
import logging
import math
from typing import Any, Callable, Mapping, Optional

logger = logging.getLogger(__name__)


class ParamKind(StrEnum):
    NUMBER = "number"
    BOOL = "bool"
    ENUM = "enum"
    GROUP = "group"
    DERIVED = "derived"


@dataclass(kw_only=True)
class Param(ABC):
    """
    Abstract base class for a single parameter entry.
    """
    should_show: Optional[Callable[[Mapping[str, Any]], bool]] = None

    @property
    @abstractmethod
    def kind(self) -> ParamKind:
        pass

    @abstractmethod
    def resolve(self, value: Any) -> Any:
        """
        Turn a raw value (None if absent) into a valid value for this parameter.
        """
        pass

    def is_visible(self, scope: Mapping[str, Any]) -> bool:
        if self.should_show is None:
            return True
        return bool(self.should_show(scope))

    def describe(self) -> dict[str, Any]:
        return {"kind": str(self.kind)}


@dataclass(kw_only=True)
class NumberParam(Param):
    domain: tuple[float, float]
    default: float
    round: bool = False

    @property
    def kind(self) -> ParamKind:
        return ParamKind.NUMBER

    def resolve(self, value: Any) -> float:
        if value is None:
            value = self.default
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"Expected a number, got {value!r}.")
        if math.isnan(value):
            raise ValueError("Numeric parameters must not be NaN.")
        lo, hi = self.domain
        clamped = min(max(float(value), lo), hi)
        if clamped != value:
            logger.debug(f"Clamped {value} to {clamped} (domain {self.domain})")
        if self.round:
            return int(round(clamped))
        return clamped

    def describe(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "domain": list(self.domain),
            "default": self.default,
            "round": self.round,
        }


@dataclass(kw_only=True)
class BoolParam(Param):
    default: bool

    @property
    def kind(self) -> ParamKind:
        return ParamKind.BOOL

    def resolve(self, value: Any) -> bool:
        if value is None:
            return self.default
        return bool(value)

    def describe(self) -> dict[str, Any]:
        return {"kind": str(self.kind), "default": self.default}


@dataclass(kw_only=True)
class EnumParam(Param):
    """
    A choice between labelled variants. The default is an index into variants.
    Besides a label, resolve() accepts any non-string value as-is (e.g. a custom
    easing function).
    """
    variants: list[tuple[str, Any]]
    default: int = 0

    @property
    def kind(self) -> ParamKind:
        return ParamKind.ENUM

    @property
    def labels(self) -> list[str]:
        return [label for label, _ in self.variants]

    def resolve(self, value: Any) -> Any:
        if value is None:
            return self.variants[self.default][1]
        if isinstance(value, str):
            for label, variant in self.variants:
                if label == value:
                    return variant
            raise ValueError(f"Unknown variant '{value}'. Expected one of {self.labels}.")
        return value

    def describe(self) -> dict[str, Any]:
        return {"kind": str(self.kind), "variants": self.labels, "default": self.default}


@dataclass(kw_only=True)
class DerivedParam(Param):
    """A value computed from the other entries of the same scope unless given explicitly."""
    derive: Callable[[Mapping[str, Any]], Any]

    @property
    def kind(self) -> ParamKind:
        return ParamKind.DERIVED

    def resolve(self, value: Any) -> Any:
        # Derivation needs the whole scope, see resolve_params()
        return value

    def is_visible(self, scope: Mapping[str, Any]) -> bool:
        return False


@dataclass(kw_only=True)
class GroupParam(Param):
    contents: dict[str, Param] = field(default_factory=dict)
    nullable: bool = False

    @property
    def kind(self) -> ParamKind:
        return ParamKind.GROUP

    def resolve(self, value: Any) -> Optional[dict[str, Any]]:
        if value is None or value is False:
            if self.nullable:
                return None
            value = {}
        if value is True:
            value = {}
        if not isinstance(value, Mapping):
            value = _as_mapping(value)
        return resolve_params(self.contents, value)

    def describe(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "nullable": self.nullable,
            "contents": describe_schema(self.contents),
        }


Schema = dict[str, Param]


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if hasattr(value, "__dataclass_fields__"):
        return {name: getattr(value, name) for name in value.__dataclass_fields__}
    raise TypeError(f"Expected a mapping for a parameter group, got {value!r}.")


def resolve_params(schema: Schema, values: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
    """
    Resolves raw parameter values against a schema.

    Args:
        schema: Parameter name -> Param.
        values: Raw values. Missing entries take their defaults; entries unknown to the
                schema are passed through untouched.

    Returns:
        A new dict with every schema entry resolved.
    """
    values = dict(values or {})
    resolved: dict[str, Any] = dict(values)
    derived: list[str] = []
    for name, param in schema.items():
        if isinstance(param, DerivedParam):
            derived.append(name)
            continue
        resolved[name] = param.resolve(values.get(name))
    for name in derived:
        explicit = values.get(name)
        resolved[name] = explicit if explicit is not None else schema[name].derive(resolved)
    return resolved


def describe_schema(schema: Schema) -> dict[str, dict[str, Any]]:
    """Plain-data description of a schema, e.g. for building UI controls."""
    return {name: param.describe() for name, param in schema.items()}


def visible_params(schema: Schema, params: Mapping[str, Any]) -> list[str]:
    """Names of the parameters a UI should currently show for the given (resolved) values."""
    return [name for name, param in schema.items() if param.is_visible(params)]
