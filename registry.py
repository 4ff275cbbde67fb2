"""
registry.py — Function and constant tables per calculation type.

The tables are read-only mappings built once at import time. Parser and
evaluator both look names up here; nothing mutates them at runtime.

  basic       — operators only, no functions, no constants
  scientific  — sqrt log ln sin cos tan asin acos atan abs exp floor ceil min max,
                constants pi and e
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from contracts import Associativity, CalculationType, ConstantInfo, FunctionInfo

# Binding powers, low → high
ADDITIVE_BP = 10
MULTIPLICATIVE_BP = 20
UNARY_BP = 30
POWER_BP = 40
ATOM_BP = 100

# symbol → (binding power, associativity)
OPERATORS: Mapping[str, tuple[int, Associativity]] = MappingProxyType({
    "+": (ADDITIVE_BP, Associativity.LEFT),
    "-": (ADDITIVE_BP, Associativity.LEFT),
    "*": (MULTIPLICATIVE_BP, Associativity.LEFT),
    "/": (MULTIPLICATIVE_BP, Associativity.LEFT),
    "%": (MULTIPLICATIVE_BP, Associativity.LEFT),
    "^": (POWER_BP, Associativity.RIGHT),
})
# Domain failure reasons shared with the evaluator
DIVISION_BY_ZERO = "division by zero"
MODULO_BY_ZERO = "modulo by zero"
SQRT_OF_NEGATIVE = "square root of negative number"
LOG_OF_NON_POSITIVE = "logarithm of non-positive number"
INVERSE_TRIG_RANGE = "inverse trigonometric input out of range"
COMPLEX_RESULT = "complex result"
NUMERIC_OVERFLOW = "numeric overflow"


@dataclass(frozen=True)
class FunctionSpec:
    name: str
    arity: int
    impl: Callable[..., float]
    description: str
    domain: Optional[Callable[..., Optional[str]]] = None
    angle: Optional[str] = None   # "input": argument is an angle, "output": result is an angle

    def info(self) -> FunctionInfo:
        return FunctionInfo(name=self.name, arity=self.arity, description=self.description)


def _non_negative(x: float) -> Optional[str]:
    return SQRT_OF_NEGATIVE if x < 0 else None


def _positive(x: float) -> Optional[str]:
    return LOG_OF_NON_POSITIVE if x <= 0 else None


def _unit_interval(x: float) -> Optional[str]:
    return INVERSE_TRIG_RANGE if not -1.0 <= x <= 1.0 else None


def _build(*specs: FunctionSpec) -> Mapping[str, FunctionSpec]:
    return MappingProxyType({spec.name: spec for spec in specs})


_SCIENTIFIC = (
    FunctionSpec("sqrt", 1, math.sqrt, "square root", domain=_non_negative),
    FunctionSpec("log", 1, math.log10, "base-10 logarithm", domain=_positive),
    FunctionSpec("ln", 1, math.log, "natural logarithm", domain=_positive),
    FunctionSpec("sin", 1, math.sin, "sine", angle="input"),
    FunctionSpec("cos", 1, math.cos, "cosine", angle="input"),
    FunctionSpec("tan", 1, math.tan, "tangent", angle="input"),
    FunctionSpec("asin", 1, math.asin, "inverse sine", domain=_unit_interval, angle="output"),
    FunctionSpec("acos", 1, math.acos, "inverse cosine", domain=_unit_interval, angle="output"),
    FunctionSpec("atan", 1, math.atan, "inverse tangent", angle="output"),
    FunctionSpec("abs", 1, abs, "absolute value"),
    FunctionSpec("exp", 1, math.exp, "e raised to the argument"),
    FunctionSpec("floor", 1, lambda x: float(math.floor(x)), "round down"),
    FunctionSpec("ceil", 1, lambda x: float(math.ceil(x)), "round up"),
    FunctionSpec("min", 2, min, "smaller of two values"),
    FunctionSpec("max", 2, max, "larger of two values"),
)

_FUNCTIONS: Mapping[CalculationType, Mapping[str, FunctionSpec]] = MappingProxyType({
    CalculationType.BASIC: _build(),
    CalculationType.SCIENTIFIC: _build(*_SCIENTIFIC),
})

_CONSTANTS: Mapping[CalculationType, Mapping[str, float]] = MappingProxyType({
    CalculationType.BASIC: MappingProxyType({}),
    CalculationType.SCIENTIFIC: MappingProxyType({"pi": math.pi, "e": math.e}),
})


def functions_for(calc_type: CalculationType) -> Mapping[str, FunctionSpec]:
    return _FUNCTIONS[CalculationType(calc_type)]


def constants_for(calc_type: CalculationType) -> Mapping[str, float]:
    return _CONSTANTS[CalculationType(calc_type)]


def lookup_function(name: str) -> FunctionSpec:
    """Any registered function regardless of mode; the parser already enforced the mode."""
    return _FUNCTIONS[CalculationType.SCIENTIFIC][name]


def list_functions(calc_type: CalculationType) -> list[FunctionInfo]:
    return [spec.info() for spec in functions_for(calc_type).values()]


def list_constants(calc_type: CalculationType) -> list[ConstantInfo]:
    return [ConstantInfo(name=name, value=value) for name, value in constants_for(calc_type).items()]
