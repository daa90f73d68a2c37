import logging
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from errors import (
    DuplicateShare,
    InsufficientShares,
    InvalidCount,
    InvalidThreshold,
    NotInvertibleError,
)
from field import PrimeField
from params import SharingSetup
from polynomial import Polynomial

logger = logging.getLogger(__name__)


class Share(NamedTuple):
    x: int
    y: int


class SplitResult(NamedTuple):
    shares: List[Share]
    polynomial: Polynomial


def split(secret: int, threshold: int, n: int, prime: int, rng=None) -> SplitResult:
    """Generate n shares with threshold t over the prime field p.

    Shares are taken at x = 1..n; x = 0 would hand out the secret itself.
    The polynomial is returned so that commitments can be derived from it,
    callers should drop it once they have.
    """
    if threshold < 1:
        raise InvalidThreshold(f"Threshold must be at least 1, got {threshold}.")
    if n < threshold:
        raise InvalidCount(f"Threshold cannot be greater than the number of shares ({threshold} > {n}).")
    if n >= prime:
        raise InvalidCount(f"A field of order {prime} holds at most {prime - 1} distinct shares.")

    poly = Polynomial.generate(secret, threshold, prime, rng)
    shares = [Share(x, poly.evaluate(x)) for x in range(1, n + 1)]
    logger.debug("Split secret into %d shares with threshold %d", n, threshold)
    return SplitResult(shares, poly)


def lagrange_interpolate(x: int, x_s: Sequence[int], y_s: Sequence[int], prime: int) -> int:
    """Lagrange interpolation at point x. x_s and y_s are lists of x,y pairs."""
    field = PrimeField(prime)
    total = 0
    k = len(x_s)
    for i in range(k):
        xi, yi = x_s[i], y_s[i]
        num, den = 1, 1
        for j in range(k):
            if i == j:
                continue
            xj = x_s[j]
            num = field.mul(num, field.sub(x, xj))
            den = field.mul(den, field.sub(xi, xj))
        total = field.add(total, yi * num * field.inverse(den))
    return total


def reconstruct(shares: Iterable[Tuple[int, int]], prime: int, threshold: Optional[int] = None) -> int:
    """Recover the secret (polynomial at x=0) from at least ``threshold`` shares.

    All supplied shares take part in the interpolation. When they all lie on
    the same polynomial the result does not depend on how many are given.
    """
    points = [Share(int(x), int(y)) for x, y in shares]
    needed = 1 if threshold is None else threshold
    if len(points) < needed:
        raise InsufficientShares(f"Need {needed} shares, got {len(points)}.")

    seen = set()
    for share in points:
        key = share.x % prime
        if key in seen:
            raise DuplicateShare(f"More than one share at x = {share.x}.")
        seen.add(key)

    x_s, y_s = zip(*points)
    try:
        secret = lagrange_interpolate(0, x_s, y_s, prime)
    except NotInvertibleError as exc:
        raise DuplicateShare("Share x-coordinates are not distinct in the field.") from exc
    logger.debug("Reconstructed secret from shares at x = %s", list(x_s))
    return secret


class ShamirSecretSharing:
    """Shamir's scheme bound to one validated parameter set."""

    def __init__(self, setup: SharingSetup):
        self.setup = setup

    @property
    def threshold(self) -> int:
        return self.setup.threshold

    @property
    def prime(self) -> int:
        return self.setup.prime

    def split(self, secret: int, rng=None) -> SplitResult:
        return split(secret, self.setup.threshold, self.setup.share_count, self.setup.prime, rng)

    def generate_shares(self, secret: int, rng=None) -> List[Share]:
        return self.split(secret, rng).shares

    def reconstruct(self, shares: Iterable[Tuple[int, int]]) -> int:
        return reconstruct(shares, self.setup.prime, self.setup.threshold)
