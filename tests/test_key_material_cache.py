import unittest
from unittest.mock import Mock

from merchant_locator.entities import DecodeError, DecodeErrorType, KeyMaterial
from merchant_locator.services.key_material import KeyMaterialCache
from merchant_locator.services.key_material.cache import cache_key


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestKeyMaterialCache(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.cache = KeyMaterialCache(ttl=60, max_entries=2, clock=self.clock)
        self.decode = Mock(side_effect=lambda raw, password: KeyMaterial(raw.decode()))

    def test_hit_within_ttl(self):
        first = self.cache.get_or_decode(b"key-a", "pw", self.decode)
        self.clock.now += 59
        second = self.cache.get_or_decode(b"key-a", "pw", self.decode)

        self.assertIs(first, second)
        self.decode.assert_called_once_with(b"key-a", "pw")

    def test_expired_entry_is_decoded_again(self):
        self.cache.get_or_decode(b"key-a", "pw", self.decode)
        self.clock.now += 61
        self.cache.get_or_decode(b"key-a", "pw", self.decode)

        self.assertEqual(self.decode.call_count, 2)

    def test_changed_content_or_password_misses(self):
        self.cache.get_or_decode(b"key-a", "pw", self.decode)
        self.cache.get_or_decode(b"key-b", "pw", self.decode)
        self.cache.get_or_decode(b"key-a", "other", self.decode)

        self.assertEqual(self.decode.call_count, 3)

    def test_least_recently_used_is_evicted(self):
        self.cache.get_or_decode(b"key-a", "", self.decode)
        self.cache.get_or_decode(b"key-b", "", self.decode)
        self.cache.get_or_decode(b"key-a", "", self.decode)
        self.cache.get_or_decode(b"key-c", "", self.decode)

        self.assertEqual(len(self.cache), 2)
        self.cache.get_or_decode(b"key-a", "", self.decode)
        self.assertEqual(self.decode.call_count, 3)

        self.cache.get_or_decode(b"key-b", "", self.decode)
        self.assertEqual(self.decode.call_count, 4)

    def test_failures_are_not_cached(self):
        failing = Mock(side_effect=DecodeError(DecodeErrorType.CONTAINER_PARSE_FAILED))

        with self.assertRaises(DecodeError):
            self.cache.get_or_decode(b"broken", "pw", failing)
        with self.assertRaises(DecodeError):
            self.cache.get_or_decode(b"broken", "pw", failing)

        self.assertEqual(failing.call_count, 2)
        self.assertEqual(len(self.cache), 0)

    def test_clear(self):
        self.cache.get_or_decode(b"key-a", "pw", self.decode)
        self.cache.clear()

        self.assertEqual(len(self.cache), 0)

    def test_key_does_not_contain_inputs(self):
        key = cache_key(b"key-a", "hunter2")

        self.assertEqual(len(key), 64)
        self.assertNotIn("hunter2", key)
        self.assertNotEqual(key, cache_key(b"key-a", ""))

    def test_ttl_must_be_positive(self):
        with self.assertRaises(ValueError):
            KeyMaterialCache(ttl=0)


if __name__ == '__main__':
    unittest.main()
