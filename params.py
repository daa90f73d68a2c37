from dataclasses import dataclass, asdict
from typing import Optional, Tuple

from sympy import isprime
from Crypto.Util.number import getPrime

from errors import InvalidCount, InvalidGenerator, InvalidPrime, InvalidThreshold

# ====================================================
# === Global Parameters ==============================
# ====================================================

DEFAULT_PRIME = 2**127 - 1      # Mersenne prime, large enough for 16-byte secrets
LEGACY_PRIME = 2147483647       # 2^31 - 1
DEFAULT_THRESHOLD = 3
DEFAULT_SHARES = 5


def random_prime(bits: int) -> int:
    return getPrime(bits)


def find_commitment_group(prime: int) -> Tuple[int, int]:
    """Smallest prime modulus P = k*p + 1 and a generator of its order-p subgroup.

    Commitments live in that subgroup, so exponents are reduced modulo p like
    the shares themselves and ``g^f(x)`` can be checked against the
    commitments of the coefficients.
    """
    k = 1
    while True:
        modulus = k * prime + 1
        if isprime(modulus):
            break
        k += 1
    h = 2
    while True:
        generator = pow(h, k, modulus)
        if generator != 1:
            return modulus, generator
        h += 1


@dataclass(frozen=True)
class SharingSetup:
    prime: int
    """Order of the share field Z_p. Secrets must be smaller."""
    threshold: int
    """Minimum number of shares needed to reconstruct."""
    share_count: int
    """Number of shares handed out."""
    generator: Optional[int] = None
    """Generator of the order-p subgroup used for Feldman commitments."""
    modulus: Optional[int] = None
    """Prime modulus of the commitment group, a multiple of p plus one."""

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        p = self.prime
        if not isinstance(p, int) or not isprime(p):
            raise InvalidPrime(f"{p} is not prime.")
        if self.threshold < 1:
            raise InvalidThreshold(f"Threshold must be at least 1, got {self.threshold}.")
        if self.share_count < self.threshold:
            raise InvalidCount("Threshold cannot be greater than the number of shares "
                               f"({self.threshold} > {self.share_count}).")
        if self.share_count > p - 1:
            raise InvalidCount(f"A field of order {p} holds at most {p - 1} distinct shares.")

        g, P = self.generator, self.modulus
        if g is None and P is None:
            return
        if g is None or P is None:
            raise InvalidGenerator("Generator and group modulus must be given together.")
        if not isprime(P):
            raise InvalidGenerator(f"Group modulus {P} is not prime.")
        if (P - 1) % p != 0:
            raise InvalidGenerator(f"Field order {p} does not divide {P} - 1.")
        if not 2 <= g <= P - 1:
            raise InvalidGenerator(f"Generator must lie in [2, {P - 1}].")
        if pow(g, p, P) != 1:
            raise InvalidGenerator(f"Generator {g} does not have order {p} modulo {P}.")

    @property
    def has_commitment_group(self) -> bool:
        return self.generator is not None

    def generate_sharing_setup(self) -> "SharingSetup":
        """Copy of this setup with a Feldman commitment group filled in."""
        if self.has_commitment_group:
            return self
        modulus, generator = find_commitment_group(self.prime)
        return SharingSetup(self.prime, self.threshold, self.share_count, generator, modulus)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, record: dict) -> "SharingSetup":
        return cls(
            prime=int(record["prime"]),
            threshold=int(record["threshold"]),
            share_count=int(record["share_count"]),
            generator=None if record.get("generator") is None else int(record["generator"]),
            modulus=None if record.get("modulus") is None else int(record["modulus"]),
        )
