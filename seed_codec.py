import base58

from pda_core import PUBKEY_LENGTH, InvalidAddressError

# Little-endian widths for numeric seeds, matching how on-chain programs
# serialize u8/u16/u32/u64 values with to_le_bytes()
INT_WIDTHS = {'u8': 1, 'u16': 2, 'u32': 4, 'u64': 8}


def decode_address(text):
    """Base58 address -> 32 raw bytes."""
    try:
        raw = base58.b58decode(text.strip())
    except ValueError as e:
        raise InvalidAddressError(f"Invalid base58 address '{text}': {e}") from e
    if len(raw) != PUBKEY_LENGTH:
        raise InvalidAddressError(f"Address '{text}' decodes to {len(raw)} bytes, expected {PUBKEY_LENGTH}")
    return raw


def encode_address(raw):
    raw = bytes(raw)
    if len(raw) != PUBKEY_LENGTH:
        raise InvalidAddressError(f"Address must be {PUBKEY_LENGTH} bytes, got {len(raw)}")
    return base58.b58encode(raw).decode('ascii')


def seed_from_value(value):
    if isinstance(value, str):
        return value.encode('utf-8')
    if isinstance(value, int):
        raise TypeError(f"Cannot use {type(value).__name__} {value!r} as a seed, use a u8..u64 encoding")
    # bytes, bytearray, memoryview and solders Pubkey all support bytes()
    return bytes(value)


def _int_seed(kind, number_text):
    width = INT_WIDTHS[kind]
    try:
        text = number_text.strip()
        # Base 10 unless explicitly prefixed, so "007" stays 7
        base = 0 if text.lower().lstrip('+-')[:2] in ('0x', '0o', '0b') else 10
        number = int(text, base)
    except ValueError as e:
        raise ValueError(f"Invalid {kind} seed value '{number_text}'") from e
    try:
        return number.to_bytes(width, 'little')
    except OverflowError as e:
        raise ValueError(f"{number} does not fit in {kind}") from e


def parse_seed_arg(text):
    """
    Parses a command line seed.

    Formats:
      str:<text>       UTF-8 bytes (also used when there is no known prefix)
      pubkey:<base58>  32 raw address bytes
      hex:<hex>        raw bytes
      u8:/u16:/u32:/u64:<int>  little-endian integer
    """
    kind, sep, value = text.partition(':')
    if not sep:
        return seed_from_value(text)

    if kind == 'str':
        return seed_from_value(value)
    if kind == 'pubkey':
        return decode_address(value)
    if kind == 'hex':
        try:
            return bytes.fromhex(value)
        except ValueError as e:
            raise ValueError(f"Invalid hex seed '{value}'") from e
    if kind in INT_WIDTHS:
        return _int_seed(kind, value)

    # Unknown prefix, e.g. "a:b" is just text
    return seed_from_value(text)
