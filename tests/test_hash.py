"""
Tests for the hash provider and BIP-340 tagged hashes.
"""

import dataclasses
import hashlib
import hmac

import pytest

from koblitz.hash import (
    DEFAULT_PROVIDER,
    TAG_CHALLENGE,
    HashProvider,
    get_provider,
    hmac_sha256,
    random_bytes,
    set_provider,
    sha256,
    tagged_hash,
)


class TestDefaultProvider:

    def test_sha256(self):
        assert sha256(b"abc") == hashlib.sha256(b"abc").digest()

    def test_hmac_over_parts(self):
        key = b"k" * 32
        expected = hmac.new(key, b"ab" + b"cd", hashlib.sha256).digest()
        assert hmac_sha256(key, b"ab", b"cd") == expected

    def test_random_bytes(self):
        assert len(random_bytes()) == 32
        assert len(random_bytes(7)) == 7
        assert random_bytes() != random_bytes()

    def test_tagged_hash(self):
        tag = hashlib.sha256(TAG_CHALLENGE.encode()).digest()
        expected = hashlib.sha256(tag + tag + b"x" + b"yz").digest()
        assert tagged_hash(TAG_CHALLENGE, b"x", b"yz") == expected

    def test_tags_are_independent(self):
        assert tagged_hash("a", b"m") != tagged_hash("b", b"m")


class TestProviderSwap:

    def test_installed_provider_is_used(self, restore_provider):
        provider = HashProvider(sha256=lambda data: b"\x11" * 32)
        set_provider(provider)
        assert get_provider() is provider
        assert sha256(b"anything") == b"\x11" * 32

    def test_tag_cache_cleared_on_swap(self, restore_provider):
        tagged_hash(TAG_CHALLENGE, b"warm")
        seen = []

        def counting(data):
            seen.append(data)
            return hashlib.sha256(data).digest()

        set_provider(HashProvider(sha256=counting))
        tagged_hash(TAG_CHALLENGE, b"m")
        tagged_hash(TAG_CHALLENGE, b"m")
        # tag digest once, then one outer hash per call
        assert seen[0] == TAG_CHALLENGE.encode()
        assert len(seen) == 3

    def test_restored_default(self):
        assert get_provider() is DEFAULT_PROVIDER

    def test_provider_is_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_PROVIDER.sha256 = None
