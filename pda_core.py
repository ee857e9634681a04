import hashlib
from typing import NamedTuple

from solders.pubkey import Pubkey

# --- FIXED CONSTANTS (changing any of these changes every derived address) ---
PUBKEY_LENGTH = 32
MAX_SEED_LENGTH = 32
MAX_SEEDS = 16
MAX_BUMP = 255
PDA_MARKER = b"ProgramDerivedAddress"


# --- ERRORS ---
class DerivationError(Exception):
    """Base class for every failure the deriver reports."""


class SeedTooLongError(DerivationError):
    def __init__(self, index, length):
        super().__init__(f"Seed {index} is {length} bytes, max is {MAX_SEED_LENGTH}")
        self.index = index
        self.length = length


class TooManySeedsError(DerivationError):
    def __init__(self, count):
        super().__init__(f"Got {count} seeds, max is {MAX_SEEDS}")
        self.count = count


class ExhaustedError(DerivationError):
    def __init__(self, max_bump=MAX_BUMP):
        super().__init__(f"No off-curve address found for any bump in [0, {max_bump}]")
        self.max_bump = max_bump


class OnCurveError(DerivationError):
    def __init__(self, bump):
        super().__init__(f"Bump {bump} hashes to a valid curve point")
        self.bump = bump


class InvalidAddressError(DerivationError, ValueError):
    pass


class DerivationResult(NamedTuple):
    address: bytes
    bump: int


# --- VALIDATION ---
def as_address(program_id):
    # Accepts raw bytes or a solders Pubkey
    if isinstance(program_id, (str, int)):
        raise TypeError(f"Address must be bytes or a Pubkey, got {type(program_id).__name__}")
    raw = bytes(program_id)
    if len(raw) != PUBKEY_LENGTH:
        raise InvalidAddressError(f"Address must be {PUBKEY_LENGTH} bytes, got {len(raw)}")
    return raw


def validate_seeds(seeds):
    """
    Checks count and length limits and returns the seeds as a list of bytes.
    Text must be encoded by the caller, see seed_codec.seed_from_value.
    """
    seeds = list(seeds)
    if len(seeds) > MAX_SEEDS:
        raise TooManySeedsError(len(seeds))

    checked = []
    for index, seed in enumerate(seeds):
        # bytes(n) on an int would silently yield n zero bytes
        if isinstance(seed, (str, int)):
            raise TypeError(f"Seed {index} is {type(seed).__name__}, encode it to bytes first")
        raw = bytes(seed)
        if len(raw) > MAX_SEED_LENGTH:
            raise SeedTooLongError(index, len(raw))
        checked.append(raw)
    return checked


def check_bump(bump):
    if not 0 <= bump <= MAX_BUMP:
        raise ValueError(f"Bump must be in [0, {MAX_BUMP}], got {bump}")


# --- DERIVATION ---
def is_on_curve(candidate):
    """True if the 32 bytes decompress to a valid Ed25519 point."""
    return Pubkey.from_bytes(bytes(candidate)).is_on_curve()


def program_address_preimage(seeds, bump, program_id):
    check_bump(bump)
    preimage = b"".join(validate_seeds(seeds))
    return preimage + bytes([bump]) + as_address(program_id) + PDA_MARKER


def _hash_candidate(joined_seeds, bump, program_raw):
    hasher = hashlib.sha256()
    hasher.update(joined_seeds)
    hasher.update(bytes([bump]))
    hasher.update(program_raw)
    hasher.update(PDA_MARKER)
    return hasher.digest()


def create_program_address(seeds, bump, program_id):
    """
    Single step of the bump search. Returns the 32 byte address for this exact
    bump or raises OnCurveError if the hash lands on the curve.
    """
    check_bump(bump)
    joined = b"".join(validate_seeds(seeds))
    candidate = _hash_candidate(joined, bump, as_address(program_id))
    if is_on_curve(candidate):
        raise OnCurveError(bump)
    return candidate


def search_bumps(joined_seeds, program_raw, high, low=0):
    """
    Scans bumps from high down to low (both inclusive) over already validated
    inputs. Returns the first off-curve DerivationResult or None.
    """
    for bump in range(high, low - 1, -1):
        candidate = _hash_candidate(joined_seeds, bump, program_raw)
        if not is_on_curve(candidate):
            return DerivationResult(candidate, bump)
    return None


def find_program_address(seeds, program_id, max_bump=MAX_BUMP):
    """
    Bump-seed rejection search: tries every bump from max_bump down to 0 and
    returns the first (highest) one whose hash is off-curve.

    Pass max_bump below 255 to get the highest valid bump under a ceiling.
    """
    check_bump(max_bump)
    joined = b"".join(validate_seeds(seeds))
    result = search_bumps(joined, as_address(program_id), max_bump)
    if result is None:
        raise ExhaustedError(max_bump)
    return result


def derive(base_identifier, seeds):
    """
    Derives the program address for base_identifier and seeds.

    Returns DerivationResult(address, bump) with the highest bump whose hash
    is off-curve. Raises SeedTooLongError, TooManySeedsError or ExhaustedError.
    """
    return find_program_address(seeds, base_identifier)
