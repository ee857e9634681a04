import unittest

from solders.pubkey import Pubkey

from pda_core import InvalidAddressError
from seed_codec import decode_address, encode_address, parse_seed_arg, seed_from_value

VAULT_B58 = "BQuvWWJmjhS2X4jc6G9T2meEHdyzY6RsooTHLMABKeah"


class TestAddressCodec(unittest.TestCase):
    def test_system_program_is_all_zeros(self):
        self.assertEqual(decode_address("11111111111111111111111111111111"), bytes(32))
        self.assertEqual(encode_address(bytes(32)), "11111111111111111111111111111111")

    def test_matches_solders(self):
        raw = decode_address(VAULT_B58)
        self.assertEqual(raw, bytes(Pubkey.from_string(VAULT_B58)))
        self.assertEqual(encode_address(raw), VAULT_B58)

    def test_surrounding_whitespace_ignored(self):
        self.assertEqual(decode_address(f"  {VAULT_B58}\n"), decode_address(VAULT_B58))

    def test_invalid_character(self):
        with self.assertRaises(InvalidAddressError):
            decode_address("0OIl" + VAULT_B58[4:])

    def test_wrong_length(self):
        with self.assertRaises(InvalidAddressError):
            decode_address("1111")
        with self.assertRaises(InvalidAddressError):
            encode_address(b"\x01" * 31)


class TestSeedParsing(unittest.TestCase):
    def test_plain_text(self):
        self.assertEqual(parse_seed_arg("solwarrior"), b"solwarrior")
        self.assertEqual(parse_seed_arg("str:solwarrior"), b"solwarrior")
        self.assertEqual(parse_seed_arg("str:a:b"), b"a:b")

    def test_unknown_prefix_is_text(self):
        self.assertEqual(parse_seed_arg("vault:1"), b"vault:1")

    def test_utf8(self):
        self.assertEqual(parse_seed_arg("str:café"), "café".encode("utf-8"))

    def test_pubkey(self):
        self.assertEqual(parse_seed_arg(f"pubkey:{VAULT_B58}"), bytes(Pubkey.from_string(VAULT_B58)))
        with self.assertRaises(InvalidAddressError):
            parse_seed_arg("pubkey:abc")

    def test_hex(self):
        self.assertEqual(parse_seed_arg("hex:00ff10"), b"\x00\xff\x10")
        with self.assertRaises(ValueError):
            parse_seed_arg("hex:zz")

    def test_integers_little_endian(self):
        self.assertEqual(parse_seed_arg("u8:7"), b"\x07")
        self.assertEqual(parse_seed_arg("u16:258"), b"\x02\x01")
        self.assertEqual(parse_seed_arg("u32:1"), b"\x01\x00\x00\x00")
        self.assertEqual(parse_seed_arg("u64:0x10"), b"\x10" + bytes(7))

    def test_integers_with_leading_zeros(self):
        self.assertEqual(parse_seed_arg("u16:007"), b"\x07\x00")
        self.assertEqual(parse_seed_arg("u8:00"), b"\x00")
        self.assertEqual(parse_seed_arg("u8:0b101"), b"\x05")
        self.assertEqual(parse_seed_arg("u16:0o10"), b"\x08\x00")

    def test_integer_overflow(self):
        with self.assertRaises(ValueError):
            parse_seed_arg("u8:256")
        with self.assertRaises(ValueError):
            parse_seed_arg("u16:-1")
        with self.assertRaises(ValueError):
            parse_seed_arg("u32:ten")


class TestSeedFromValue(unittest.TestCase):
    def test_values(self):
        self.assertEqual(seed_from_value("solwarrior"), b"solwarrior")
        self.assertEqual(seed_from_value(bytearray(b"ab")), b"ab")
        pubkey = Pubkey.from_string(VAULT_B58)
        self.assertEqual(seed_from_value(pubkey), decode_address(VAULT_B58))

    def test_integers_rejected(self):
        for bad in (4, 0, False):
            with self.assertRaises(TypeError):
                seed_from_value(bad)


if __name__ == '__main__':
    unittest.main()
