import logging
from dataclasses import dataclass
from typing import Tuple

from Crypto.Random import random as strong_random

from errors import InvalidThreshold, SecretOutOfRange
from field import PrimeField

logger = logging.getLogger(__name__)


@dataclass(frozen=True, repr=False)
class Polynomial:
    coefficients: Tuple[int, ...]
    """Coefficients ``[a_0, a_1, ..., a_{t-1}]`` over Z_p, ``a_0`` is the secret."""
    prime: int
    """The field order p."""

    @classmethod
    def generate(cls, secret: int, threshold: int, prime: int, rng=None) -> "Polynomial":
        """Random polynomial of degree ``threshold - 1`` with ``secret`` as constant term.

        ``rng`` is any object with a ``randrange(stop)`` method; it defaults to
        pycryptodome's ``Crypto.Random.random``. Parameters are checked before
        anything is drawn from it.
        """
        if threshold < 1:
            raise InvalidThreshold(f"Threshold must be at least 1, got {threshold}.")
        if not 0 <= secret < prime:
            raise SecretOutOfRange(f"Secret must lie in [0, {prime - 1}].")
        rng = strong_random if rng is None else rng

        field = PrimeField(prime)
        coeffs = [secret] + [field.random_element(rng) for _ in range(threshold - 1)]
        logger.debug("Generated polynomial of degree %d over a %d-bit field",
                     threshold - 1, prime.bit_length())
        return cls(tuple(coeffs), prime)

    @property
    def threshold(self) -> int:
        return len(self.coefficients)

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1

    def evaluate(self, x: int) -> int:
        """Evaluate at x modulo p using Horner's method."""
        result = 0
        for coefficient in reversed(self.coefficients):
            result = (result * x + coefficient) % self.prime
        return result

    def __call__(self, x: int) -> int:
        return self.evaluate(x)

    def __repr__(self):
        # Coefficients stay out of reprs and tracebacks.
        return f"Polynomial(degree={self.degree}, prime={self.prime})"
