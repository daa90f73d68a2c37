from errors import InvalidPrime, NotInvertibleError


def modinv(a: int, p: int) -> int:
    """Modular inverse using Extended Euclidean Algorithm."""
    lm, hm = 1, 0
    low, high = a % p, p
    while low > 1:
        r = high // low
        nm, new = hm - lm * r, high - low * r
        lm, low, hm, high = nm, new, lm, low
    # low ends at 1 exactly when gcd(a, p) == 1
    if low != 1:
        raise NotInvertibleError(a, p)
    return lm % p


class PrimeField:
    """Arithmetic over Z_p. Every result is normalized to [0, p - 1]."""

    def __init__(self, prime: int):
        if prime < 2:
            raise InvalidPrime(f"Modulus {prime} is not a valid field order.")
        self.prime = prime

    def add(self, a: int, b: int) -> int:
        return (a + b) % self.prime

    def sub(self, a: int, b: int) -> int:
        return (a - b) % self.prime

    def mul(self, a: int, b: int) -> int:
        return (a * b) % self.prime

    def pow(self, base: int, exponent: int) -> int:
        if exponent < 0:
            raise ValueError("Exponent must be nonnegative")
        return pow(base, exponent, self.prime)

    def inverse(self, a: int) -> int:
        return modinv(a, self.prime)

    def random_element(self, rng) -> int:
        """Uniform element of [0, p - 1] drawn from ``rng.randrange``."""
        return rng.randrange(self.prime)

    def __repr__(self):
        return f"PrimeField({self.prime})"
