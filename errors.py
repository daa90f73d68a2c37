class SecretSharingError(Exception):
    """Root of every error raised by the sharing engine."""


# === Configuration ===

class ConfigError(SecretSharingError, ValueError):
    def __init__(self, message):
        self.message = f"Invalid sharing parameters. {message}"
        super().__init__(self.message)


class InvalidThreshold(ConfigError):
    pass


class InvalidCount(ConfigError):
    pass


class SecretOutOfRange(ConfigError):
    pass


class InvalidPrime(ConfigError):
    pass


class InvalidGenerator(ConfigError):
    pass


# === Field arithmetic ===

class NotInvertibleError(ArithmeticError):
    def __init__(self, value, prime):
        self.value = value
        self.prime = prime
        self.message = f"No inverse for {value} modulo {prime}."
        super().__init__(self.message)


# === Reconstruction ===

class ReconstructionError(SecretSharingError):
    def __init__(self, message):
        self.message = f"Secret reconstruction failed. {message}"
        super().__init__(self.message)


class InsufficientShares(ReconstructionError):
    pass


class DuplicateShare(ReconstructionError):
    pass


# === Verification ===

class ValidationError(SecretSharingError, ValueError):
    def __init__(self, message):
        self.message = f"Malformed verification input. {message}"
        super().__init__(self.message)
