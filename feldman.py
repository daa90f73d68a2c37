"""Feldman verifiable secret sharing.

A dealer publishes C_i = g^{a_i} mod P for every coefficient of the sharing
polynomial. A participant holding (x, y) checks

    g^y == C_0 * C_1^x * C_2^{x^2} * ... * C_{t-1}^{x^{t-1}}   (mod P)

using public values only. g generates the subgroup of Z_P^* whose order is the
share field prime p, so exponents agree with share arithmetic modulo p.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Optional, Tuple

from errors import InvalidGenerator, ValidationError
from field import PrimeField
from params import SharingSetup
from polynomial import Polynomial
from shamir import Share, ShamirSecretSharing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitmentSet:
    values: Tuple[int, ...]
    """C_i = g^{a_i} mod P, indexed like the polynomial coefficients."""
    generator: int
    """The generator g the commitments were computed with."""
    modulus: int
    """The commitment group modulus P."""
    order: int
    """The share field prime p, which is also the order of g."""

    @property
    def threshold(self) -> int:
        return len(self.values)

    def __len__(self):
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def __getitem__(self, index):
        return self.values[index]

    def to_list(self) -> List[int]:
        return list(self.values)


def commit(polynomial: Polynomial, generator: int, prime: int) -> CommitmentSet:
    """Commitments to every coefficient of ``polynomial`` in the group modulo ``prime``."""
    if not 2 <= generator <= prime - 1:
        raise InvalidGenerator(f"Generator must lie in [2, {prime - 1}].")
    group = PrimeField(prime)
    if group.pow(generator, polynomial.prime) != 1:
        raise InvalidGenerator(f"Generator {generator} does not have order {polynomial.prime} modulo {prime}.")

    values = tuple(group.pow(generator, a) for a in polynomial.coefficients)
    logger.debug("Computed %d commitments", len(values))
    return CommitmentSet(values, generator, prime, polynomial.prime)


def verify(share: Tuple[int, int], commitments: CommitmentSet, generator: int, prime: int,
           threshold: Optional[int] = None) -> bool:
    """Check one share against the dealer's commitments.

    Returns False when the share does not lie on the committed polynomial.
    Raises ValidationError when the inputs cannot be checked at all.
    """
    x, y = share
    if commitments.generator != generator or commitments.modulus != prime:
        raise ValidationError("Commitments were produced under a different generator or modulus.")
    if len(commitments) == 0:
        raise ValidationError("Commitment set is empty.")
    if threshold is not None and len(commitments) != threshold:
        raise ValidationError(f"Expected {threshold} commitments, got {len(commitments)}.")
    group = PrimeField(prime)
    exponents = PrimeField(commitments.order)
    q = exponents.prime
    if not 1 <= x <= q - 1:
        raise ValidationError(f"Share x-coordinate must lie in [1, {q - 1}], got {x}.")
    for c in commitments:
        if not 1 <= c <= prime - 1 or group.pow(c, q) != 1:
            raise ValidationError("Commitment value outside the order-p subgroup.")

    lhs = group.pow(generator, y % q)
    rhs = 1
    x_pow = 1
    for c in commitments:
        rhs = group.mul(rhs, group.pow(c, x_pow))
        x_pow = exponents.mul(x_pow, x)
    valid = lhs == rhs
    if not valid:
        logger.debug("Share at x = %d does not match the commitments", x)
    return valid


class FeldmanResponse(NamedTuple):
    shares: List[Share]
    commitments: CommitmentSet


class FeldmanVSS:
    """Shamir sharing plus commitments; the two compose, neither extends the other."""

    def __init__(self, setup: SharingSetup):
        self.setup = setup.generate_sharing_setup()
        self.shamir = ShamirSecretSharing(self.setup)

    @property
    def generator(self) -> int:
        return self.setup.generator

    @property
    def modulus(self) -> int:
        return self.setup.modulus

    def generate_shares(self, secret: int, rng=None) -> FeldmanResponse:
        shares, poly = self.shamir.split(secret, rng)
        commitments = commit(poly, self.setup.generator, self.setup.modulus)
        return FeldmanResponse(shares, commitments)

    def validate_share(self, share: Tuple[int, int], commitments: CommitmentSet) -> bool:
        return verify(share, commitments, self.setup.generator, self.setup.modulus,
                      self.setup.threshold)

    def validate_shares(self, shares: Iterable[Tuple[int, int]], commitments: CommitmentSet) -> List[bool]:
        return [self.validate_share(share, commitments) for share in shares]

    def reconstruct(self, shares: Iterable[Tuple[int, int]]) -> int:
        return self.shamir.reconstruct(shares)
