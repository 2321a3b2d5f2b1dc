"""
Complex numbers with a Cartesian and a polar view.

A Complex holds at least one of:
- Coordinate: (real, imaginary)
- Polar:      (length, angle in radians)

The missing view is computed the first time it is asked for and cached.
Values never change after that, so a cached view is never recomputed.

Each operation picks the representation that is cheapest for it:
- add / subtract / conjugate / squared / squared_magnitude -> Cartesian
- divide / power / root / inverse                          -> polar
- multiply -> polar if both operands already hold a polar view, else Cartesian
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Optional, Union

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi


def _fmt(value: float) -> str:
    """Format like '#.##': at most two decimals, no trailing zeros."""
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _div(a: float, b: float) -> float:
    """IEEE division: x/0 is inf, 0/0 is nan."""
    try:
        return a / b
    except ZeroDivisionError:
        return math.nan if a == 0 or math.isnan(a) else math.copysign(math.inf, a)


def _pow(base: float, p: float) -> float:
    """base ** p for base >= 0, saturating to inf instead of raising."""
    try:
        return base ** p
    except (ZeroDivisionError, OverflowError):
        return math.inf


@dataclass(frozen=True)
class Coordinate:
    real: float
    imaginary: float

    @classmethod
    def from_polar(cls, polar: "Polar") -> "Coordinate":
        return cls(
            polar.length * math.cos(polar.angle),
            polar.length * math.sin(polar.angle),
        )

    def __str__(self) -> str:
        imaginary = _fmt(self.imaginary)
        sign = "" if imaginary.startswith("-") else "+"
        return f"({_fmt(self.real)}{sign}{imaginary}i)"


@dataclass(frozen=True)
class Polar:
    length: float
    angle: float

    def __post_init__(self):
        if self.length < 0:
            raise ValueError(f"Polar length must be >= 0, got {self.length!r}")
        # un-normalized angles show up in chained products; keep them as given
        if abs(self.angle) > TWO_PI:
            logger.warning("Angle too large: %r. Polar angle should be within 2*pi.", self.angle)

    @classmethod
    def from_coordinate(cls, coordinate: Coordinate) -> "Polar":
        return cls(
            math.hypot(coordinate.real, coordinate.imaginary),
            math.atan2(coordinate.imaginary, coordinate.real),
        )

    def __str__(self) -> str:
        return f"({_fmt(self.length)}*E({_fmt(math.degrees(self.angle))}°))"


Number = Union["Complex", complex, float, int]


class Complex:
    """
    Immutable complex number with lazily converted Cartesian/polar views.

    Build one with:
        Complex(coordinate=Coordinate(a, b))
        Complex(polar=Polar(r, theta))
        Complex.from_pair(a, b)
        Complex.from_polar_parts(r, theta)
        Complex.from_real(x)
    """

    __slots__ = ("_coordinate", "_polar")

    def __init__(self, coordinate: Optional[Coordinate] = None, polar: Optional[Polar] = None):
        if coordinate is None and polar is None:
            raise ValueError("Complex needs a coordinate or a polar form.")
        self._coordinate = coordinate
        self._polar = polar

    # ---------- construction ----------
    @classmethod
    def from_pair(cls, real: float, imaginary: float) -> "Complex":
        return cls(coordinate=Coordinate(float(real), float(imaginary)))

    @classmethod
    def from_polar_parts(cls, length: float, angle: float) -> "Complex":
        return cls(polar=Polar(float(length), float(angle)))

    @classmethod
    def from_real(cls, r: float) -> "Complex":
        """Real number on the real axis; both views are known up front."""
        r = float(r)
        return cls(
            coordinate=Coordinate(r, 0.0),
            polar=Polar(abs(r), 0.0 if r >= 0 else -math.pi),
        )

    @classmethod
    def coerce(cls, value: Number) -> "Complex":
        """Accept a Complex, a builtin complex, or a real number."""
        if isinstance(value, Complex):
            return value
        if isinstance(value, numbers.Real):
            return cls.from_real(value)
        if isinstance(value, numbers.Complex):
            return cls.from_pair(value.real, value.imag)
        raise TypeError(f"Cannot convert {type(value).__name__} to Complex")

    # ---------- views ----------
    def has_coordinate(self) -> bool:
        return self._coordinate is not None

    def has_polar(self) -> bool:
        return self._polar is not None

    def coordinate(self) -> Coordinate:
        """Cartesian view (converts polar -> Cartesian once)."""
        if self._coordinate is None:
            self._coordinate = Coordinate.from_polar(self._polar)
        return self._coordinate

    def polar(self) -> Polar:
        """Polar view (converts Cartesian -> polar once)."""
        if self._polar is None:
            self._polar = Polar.from_coordinate(self._coordinate)
        return self._polar

    @property
    def real(self) -> float:
        return self.coordinate().real

    @property
    def imaginary(self) -> float:
        return self.coordinate().imaginary

    def magnitude(self) -> float:
        """
        Distance from the origin. Needs the polar view.

        For threshold checks prefer squared_magnitude(), which skips both
        the square root and the polar conversion.
        """
        return self.polar().length

    def squared_magnitude(self) -> float:
        c = self.coordinate()
        return c.real * c.real + c.imaginary * c.imaginary

    # ---------- arithmetic ----------
    def conjugate(self) -> "Complex":
        c = self.coordinate()
        return Complex(coordinate=Coordinate(c.real, -c.imaginary))

    def add(self, z: Number) -> "Complex":
        c1 = self.coordinate()
        c2 = Complex.coerce(z).coordinate()
        return Complex(coordinate=Coordinate(c1.real + c2.real, c1.imaginary + c2.imaginary))

    def subtract(self, z: Number) -> "Complex":
        c1 = self.coordinate()
        c2 = Complex.coerce(z).coordinate()
        return Complex(coordinate=Coordinate(c1.real - c2.real, c1.imaginary - c2.imaginary))

    def multiply(self, z: Number) -> "Complex":
        z = Complex.coerce(z)
        if self.has_polar() and z.has_polar():
            p1 = self.polar()
            p2 = z.polar()
            return Complex(polar=Polar(p1.length * p2.length, (p1.angle + p2.angle) % TWO_PI))

        c1 = self.coordinate()
        c2 = z.coordinate()
        # (a+bi)(c+di) = (ac - bd) + (ad + bc)i
        return Complex(
            coordinate=Coordinate(
                c1.real * c2.real - c1.imaginary * c2.imaginary,
                c1.real * c2.imaginary + c1.imaginary * c2.real,
            )
        )

    def divide(self, z: Number) -> "Complex":
        p1 = self.polar()
        p2 = Complex.coerce(z).polar()
        return Complex(polar=Polar(_div(p1.length, p2.length), (p1.angle - p2.angle) % TWO_PI))

    def power(self, p: float) -> "Complex":
        pol = self.polar()
        return Complex(polar=Polar(_pow(pol.length, p), (pol.angle * p) % TWO_PI))

    def squared(self) -> "Complex":
        """z^2 in Cartesian form, without touching the polar view."""
        c = self.coordinate()
        return Complex(
            coordinate=Coordinate(
                c.real * c.real - c.imaginary * c.imaginary,
                2 * c.real * c.imaginary,
            )
        )

    def root(self, r: float) -> "Complex":
        return self.power(1 / r)

    def inverse(self) -> "Complex":
        return self.power(-1)

    def inverse_of_order(self, order: float) -> "Complex":
        return self.power(-order)

    # ---------- python protocol ----------
    def __add__(self, other):
        return self.add(other)

    def __radd__(self, other):
        return Complex.coerce(other).add(self)

    def __sub__(self, other):
        return self.subtract(other)

    def __rsub__(self, other):
        return Complex.coerce(other).subtract(self)

    def __mul__(self, other):
        return self.multiply(other)

    def __rmul__(self, other):
        return Complex.coerce(other).multiply(self)

    def __truediv__(self, other):
        return self.divide(other)

    def __rtruediv__(self, other):
        return Complex.coerce(other).divide(self)

    def __pow__(self, p):
        return self.power(p)

    def __abs__(self):
        return self.magnitude()

    def __complex__(self):
        c = self.coordinate()
        return complex(c.real, c.imaginary)

    def __str__(self) -> str:
        if self._coordinate is not None:
            return str(self._coordinate)
        return str(self._polar)

    def __repr__(self) -> str:
        return f"Complex(coordinate={self._coordinate!r}, polar={self._polar!r})"
