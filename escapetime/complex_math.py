"""
Immutable complex value type used by the reference evaluator.

The per-pixel hot path in compute.py works on plain floats inside
Numba kernels; this module is the readable version of the same
arithmetic and must perform the operations in the same order so both
give identical results.
"""

from collections import namedtuple


class Complex(namedtuple('Complex', ['re', 'im'])):
    """A complex number as a (re, im) pair of floats."""

    __slots__ = ()

    def __add__(self, other):
        return add(self, other)

    def __mul__(self, other):
        return multiply(self, other)

    def squared_magnitude(self):
        return squared_magnitude(self)

    def abs_components(self):
        """Component-wise absolute value, (|re|, |im|)."""
        return Complex(abs(self.re), abs(self.im))

    def to_complex(self):
        return complex(self.re, self.im)

    @classmethod
    def from_complex(cls, z):
        return cls(float(z.real), float(z.imag))


ZERO = Complex(0.0, 0.0)


def add(a, b):
    """Return a + b."""
    return Complex(a.re + b.re, a.im + b.im)


def multiply(a, b):
    """Return a * b."""
    return Complex(a.re * b.re - a.im * b.im, a.re * b.im + a.im * b.re)


def squared_magnitude(a):
    """Return |a|^2 without taking a square root."""
    return a.re * a.re + a.im * a.im
