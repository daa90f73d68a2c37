import argparse
import json
import logging
import sys

from errors import ConfigError, SecretSharingError
from feldman import CommitmentSet, FeldmanVSS
from params import DEFAULT_PRIME, DEFAULT_SHARES, DEFAULT_THRESHOLD, LEGACY_PRIME, SharingSetup, random_prime
from shamir import Share, ShamirSecretSharing

# === Bundle helpers ===

def bundle_to_dict(setup, shares, commitments=None):
    return {
        "parameters": setup.to_dict(),
        "shares": [[share.x, share.y] for share in shares],
        "commitments": None if commitments is None else commitments.to_list(),
    }


def bundle_from_dict(record):
    setup = SharingSetup.from_dict(record["parameters"])
    shares = [Share(int(x), int(y)) for x, y in record["shares"]]
    commitments = None
    if record.get("commitments") is not None:
        commitments = CommitmentSet(
            tuple(int(c) for c in record["commitments"]),
            setup.generator,
            setup.modulus,
            setup.prime,
        )
    return setup, shares, commitments


def load_bundle(path):
    try:
        with open(path, "r") as f:
            return bundle_from_dict(json.load(f))
    except ConfigError:
        raise
    except OSError as exc:
        raise BundleError(f"Cannot read {path}: {exc.strerror}.") from exc
    except (ValueError, KeyError, TypeError) as exc:
        raise BundleError(f"{path} is not a valid share bundle ({exc!r}).") from exc


# === Commands ===

def make_setup(args, feldman=True):
    prime = random_prime(args.prime_bits) if args.prime_bits else args.prime
    setup = SharingSetup(prime, args.threshold, args.num_shares)
    return setup.generate_sharing_setup() if feldman else setup


def run_demo(args):
    setup = make_setup(args)
    secret = args.secret

    print("---------------- Shamir Secret Sharing ----------------")
    print(f"Secret: {secret}")
    shamir = ShamirSecretSharing(setup)
    shares = shamir.generate_shares(secret)
    print(f"Generated shares with n={setup.share_count} t={setup.threshold}:")
    for share in shares:
        print(f"  {tuple(share)}")
    recovered = shamir.reconstruct(shares[:setup.threshold])
    print(f"Reconstructed secret from {setup.threshold} shares: {recovered}\n")

    print("--------------------- Feldman VSS ---------------------")
    print(f"Commitment group: modulus={setup.modulus}, generator={setup.generator}")
    vss = FeldmanVSS(setup)
    response = vss.generate_shares(secret)
    print("Validating all shares:")
    for share in response.shares:
        print(f"  {tuple(share)} validity is {vss.validate_share(share, response.commitments)}")
    tampered = Share(response.shares[0].x, (response.shares[0].y + 1) % setup.prime)
    print(f"  tampered {tuple(tampered)} validity is {vss.validate_share(tampered, response.commitments)}")
    print(f"Recovered secret: {vss.reconstruct(response.shares)}")
    return 0


def run_split(args):
    setup = make_setup(args, feldman=not args.no_feldman)
    if setup.has_commitment_group:
        shares, commitments = FeldmanVSS(setup).generate_shares(args.secret)
    else:
        shares, commitments = ShamirSecretSharing(setup).generate_shares(args.secret), None

    text = json.dumps(bundle_to_dict(setup, shares, commitments), indent=2)
    if args.output:
        with open(args.output, "w") as f:
            f.write(text + "\n")
        print(f"Wrote {len(shares)} shares to {args.output}")
    else:
        print(text)
    return 0


def run_verify(args):
    setup, shares, commitments = load_bundle(args.bundle)
    if commitments is None:
        raise ConfigError("Bundle carries no commitments to verify against.")
    vss = FeldmanVSS(setup)
    all_valid = True
    for share in shares:
        valid = vss.validate_share(share, commitments)
        all_valid = all_valid and valid
        print(f"Share {share.x}: {'valid' if valid else 'INVALID'}")
    return 0 if all_valid else 1


def run_reconstruct(args):
    setup, shares, _ = load_bundle(args.bundle)
    if args.use:
        shares = [share for share in shares if share.x in args.use]
    secret = ShamirSecretSharing(setup).reconstruct(shares)
    print(secret)
    return 0


# === Argument parsing ===

def x_coordinates(text):
    try:
        return {int(x) for x in text.split(",")}
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma separated integers, got {text!r}")


def prime_bits(text):
    try:
        bits = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
    if bits < 2:
        raise argparse.ArgumentTypeError("a prime needs at least 2 bits")
    return bits


def add_scheme_arguments(parser):
    parser.add_argument("-n", "--num-shares", type=int, default=DEFAULT_SHARES, help=f"Number of shares to generate, must be >= threshold (default: {DEFAULT_SHARES})")
    parser.add_argument("-t", "--threshold", type=int, default=DEFAULT_THRESHOLD, help=f"Threshold for secret reconstruction, must be <= shares (default: {DEFAULT_THRESHOLD})")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--prime", type=int, default=DEFAULT_PRIME, help="Prime order of the share field (default: 2^127 - 1)")
    group.add_argument("--legacy-prime", dest="prime", action="store_const", const=LEGACY_PRIME, default=DEFAULT_PRIME, help="Use the 31-bit prime 2^31 - 1, for secrets below 2147483647")
    group.add_argument("--prime-bits", type=prime_bits, help="Generate a random prime of this many bits instead")


def build_parser():
    parser = argparse.ArgumentParser(description="Shamir secret sharing with Feldman verification")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log protocol steps to stderr")
    sub = parser.add_subparsers(dest="command")

    demo = sub.add_parser("demo", help="Split, verify and reconstruct a sample secret")
    add_scheme_arguments(demo)
    demo.add_argument("--secret", type=int, default=786, help="Secret to share (default: 786)")
    demo.set_defaults(func=run_demo)

    split = sub.add_parser("split", help="Split a secret and print a JSON bundle")
    add_scheme_arguments(split)
    split.add_argument("--secret", type=int, required=True, help="Secret to share")
    split.add_argument("--no-feldman", action="store_true", help="Plain Shamir shares without commitments")
    split.add_argument("-o", "--output", help="Write the bundle to this file instead of stdout")
    split.set_defaults(func=run_split)

    verify = sub.add_parser("verify", help="Check every share of a bundle against its commitments")
    verify.add_argument("bundle", help="JSON bundle written by 'split'")
    verify.set_defaults(func=run_verify)

    reconstruct = sub.add_parser("reconstruct", help="Recover the secret from a bundle")
    reconstruct.add_argument("bundle", help="JSON bundle written by 'split'")
    reconstruct.add_argument("--use", type=x_coordinates, help="Comma separated x-coordinates of the shares to use, e.g. 1,3,5")
    reconstruct.set_defaults(func=run_reconstruct)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args((["-v"] if args.verbose else []) + ["demo"])
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        return args.func(args)
    except ConfigError as exc:
        parser.error(exc.message)
    except SecretSharingError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


class BundleError(SecretSharingError):
    def __init__(self, message):
        self.message = f"Unusable bundle. {message}"
        super().__init__(self.message)


if __name__ == "__main__":
    sys.exit(main())
