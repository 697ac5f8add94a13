"""
Hash, HMAC and randomness provider, plus BIP-340 tagged hashes.

All SHA-256 / HMAC-SHA-256 / random-byte calls in the engine go through
the active :class:`HashProvider`.  The default provider is backed by
``hashlib``, ``hmac`` and ``secrets``; a different one (a hardware RNG, a
deterministic RNG in tests) is installed once with :func:`set_provider`
rather than being chosen per call.

Tagged hashes follow BIP-340:

    H_tag(x) = SHA-256( SHA-256(tag) ‖ SHA-256(tag) ‖ x )

so outputs for different protocol roles (aux, nonce, challenge) are
independent even when fed identical data.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Dict

logger = logging.getLogger("koblitz.hash")


# ── domain tags ─────────────────────────────────────────────────────────
TAG_AUX       = "BIP0340/aux"
TAG_NONCE     = "BIP0340/nonce"
TAG_CHALLENGE = "BIP0340/challenge"


# ── provider ────────────────────────────────────────────────────────────
def _sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def _hmac_sha256(key: bytes, *parts: bytes) -> bytes:
    mac = hmac.new(key, digestmod=hashlib.sha256)
    for part in parts:
        mac.update(part)
    return mac.digest()


@dataclass(frozen=True)
class HashProvider:
    """
    The three external primitives the engine depends on.

    Args:
        sha256:       FIPS 180-4 SHA-256, ``bytes -> 32 bytes``
        hmac_sha256:  RFC 2104 HMAC-SHA-256 over the concatenated parts
        random_bytes: cryptographically secure ``n -> n bytes``
    """

    sha256: Callable[[bytes], bytes] = _sha256
    hmac_sha256: Callable[..., bytes] = _hmac_sha256
    random_bytes: Callable[[int], bytes] = secrets.token_bytes


DEFAULT_PROVIDER = HashProvider()

_provider = DEFAULT_PROVIDER
_tag_prefixes: Dict[str, bytes] = {}


def get_provider() -> HashProvider:
    return _provider


def set_provider(provider: HashProvider) -> None:
    """Install *provider* for every later hash / HMAC / RNG call."""
    global _provider
    _provider = provider
    _tag_prefixes.clear()
    logger.debug("hash provider replaced with %r", provider)


# ── thin wrappers ───────────────────────────────────────────────────────
def sha256(data: bytes) -> bytes:
    return _provider.sha256(data)


def hmac_sha256(key: bytes, *parts: bytes) -> bytes:
    return _provider.hmac_sha256(key, *parts)


def random_bytes(n: int = 32) -> bytes:
    return _provider.random_bytes(n)


# ── tagged hashes ───────────────────────────────────────────────────────
def _tag_prefix(tag: str) -> bytes:
    """``SHA-256(tag) ‖ SHA-256(tag)``, cached per tag."""
    prefix = _tag_prefixes.get(tag)
    if prefix is None:
        tag_hash = sha256(tag.encode("utf-8"))
        prefix = tag_hash + tag_hash
        _tag_prefixes[tag] = prefix
    return prefix


def tagged_hash(tag: str, *messages: bytes) -> bytes:
    """BIP-340 tagged hash over the concatenation of *messages*."""
    return sha256(_tag_prefix(tag) + b"".join(messages))
