"""
Numeric literal types for the CALF lexer.

Number literals are converted while lexing into a type chosen by the
caller: plain Python numbers, exact decimals and fractions, or fixed-width
numpy scalars. Fixed-width targets are range checked so that an oversized
literal becomes a lexer error instead of a silent wrap-around or ``inf``.
"""

import math
from decimal import Decimal
from fractions import Fraction
from typing import Any, Callable, Dict, Union

import numpy as np


NumberConverter = Callable[[str], Any]
NumberTypeSpec = Union[str, type, np.dtype, NumberConverter]


# Names accepted wherever a number type can be given as text (CLI, config)
NUMBER_TYPES: Dict[str, Any] = {
    "int": int,
    "float": float,
    "decimal": Decimal,
    "fraction": Fraction,
    "int8": np.int8,
    "int16": np.int16,
    "int32": np.int32,
    "int64": np.int64,
    "uint8": np.uint8,
    "uint16": np.uint16,
    "uint32": np.uint32,
    "uint64": np.uint64,
    "float16": np.float16,
    "float32": np.float32,
    "float64": np.float64,
}


def _parse_int(text: str) -> int:
    return int(text, 10)


def _parse_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise OverflowError(f"{text} does not fit in a float")
    return value


def _numpy_converter(dtype: np.dtype) -> NumberConverter:
    """Build a range-checked converter for a numpy integer or float dtype."""
    if dtype.kind in "iu":
        info = np.iinfo(dtype)

        def convert(text: str):
            value = int(text, 10)
            if value < info.min or value > info.max:
                raise OverflowError(
                    f"{text} is out of range for {dtype.name} [{info.min}, {info.max}]"
                )
            return dtype.type(value)

        return convert

    if dtype.kind == "f":
        finfo = np.finfo(dtype)

        def convert(text: str):
            value = float(text)
            if not math.isfinite(value) or abs(value) > float(finfo.max):
                raise OverflowError(f"{text} does not fit in {dtype.name}")
            return dtype.type(value)

        return convert

    raise TypeError(f"Unsupported numpy number type: {dtype.name}")


def resolve_number_type(spec: NumberTypeSpec) -> NumberConverter:
    """
    Turn a number type specification into a ``str -> value`` converter.

    Args:
        spec: A registered name, a Python numeric type, a numpy scalar type
            or dtype, or any callable accepting the literal text

    Returns:
        Converter raising ValueError (or another ArithmeticError) on
        malformed text and OverflowError when the value does not fit

    Raises:
        TypeError: If the specification cannot be used as a number type
    """
    if isinstance(spec, str):
        if spec not in NUMBER_TYPES:
            raise TypeError(
                f"Unknown number type {spec!r}; expected one of {', '.join(NUMBER_TYPES)}"
            )
        spec = NUMBER_TYPES[spec]

    if spec is int:
        return _parse_int
    if spec is float:
        return _parse_float
    if spec is Decimal or spec is Fraction:
        return spec

    if isinstance(spec, np.dtype):
        return _numpy_converter(spec)
    if isinstance(spec, type) and issubclass(spec, np.generic):
        return _numpy_converter(np.dtype(spec))

    if callable(spec):
        return spec

    raise TypeError(f"Cannot use {spec!r} as a number type")
