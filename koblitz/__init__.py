"""
koblitz: pure-Python secp256k1.

- **ECDSA** with RFC 6979 deterministic nonces, low-s canonical form,
  strict DER and public-key recovery
- **BIP-340 Schnorr** signatures with x-only keys
- **ECDH** shared secrets

The arithmetic core uses Jacobian coordinates, GLV endomorphism
splitting and windowed-NAF multiplication with a per-point precompute
table (the generator uses width 8).

Timing behaviour is only *roughly* uniform per window; this package is
not a constant-time implementation.

Quick start
-----------
::

    import hashlib
    import koblitz

    priv = koblitz.random_private_key()
    pub = koblitz.get_public_key(priv, compressed=True)

    msg_hash = hashlib.sha256(b"hello").digest()
    sig = koblitz.sign(msg_hash, priv)
    assert koblitz.verify(sig, msg_hash, pub)

    x_only = koblitz.schnorr_get_public_key(priv)
    ssig = koblitz.schnorr_sign(b"hello", priv)
    assert koblitz.schnorr_verify(ssig, b"hello", x_only)
"""

import logging

__version__ = "0.1.0"

logging.getLogger("koblitz").addHandler(logging.NullHandler())

# ── core types ──────────────────────────────────────────────────────────
from .curve import FIELD_PRIME, ORDER, BETA, GX, GY
from .point import Point, JacobianPoint, G
from .precompute import PrecomputeCache, PRECOMPUTES

# ── arithmetic ──────────────────────────────────────────────────────────
from .field import mod, invert, invert_batch, sqrt_mod
from .endomorphism import split_scalar_endo

# ── keys & ECDH ─────────────────────────────────────────────────────────
from .scalar import normalize_private_key
from .keys import (
    get_public_key,
    get_shared_secret,
    normalize_public_key,
    is_valid_private_key,
    random_private_key,
    hash_to_private_key,
    precompute,
)

# ── ECDSA ───────────────────────────────────────────────────────────────
from .signing import (
    Signature,
    sign,
    verify,
    recover_public_key,
    point_from_signature,
)

# ── Schnorr ─────────────────────────────────────────────────────────────
from .schnorr import (
    SchnorrSignature,
    schnorr_sign,
    schnorr_verify,
    schnorr_get_public_key,
)

# ── configuration & providers ───────────────────────────────────────────
from .config import EngineConfig, get_config, set_config
from .hash import HashProvider, get_provider, set_provider, tagged_hash

# ── errors ──────────────────────────────────────────────────────────────
from .errors import (
    KoblitzError,
    DomainError,
    InvalidPoint,
    InvalidScalar,
    InvalidSignatureEncoding,
    InvalidSignatureValue,
    ExhaustedNonceSpace,
    InvalidNonce,
    UnsupportedKeyType,
    EndomorphismError,
    SelfVerificationError,
)

__all__ = [
    # version
    "__version__",
    # core
    "FIELD_PRIME", "ORDER", "BETA", "GX", "GY",
    "Point", "JacobianPoint", "G", "PrecomputeCache", "PRECOMPUTES",
    # arithmetic
    "mod", "invert", "invert_batch", "sqrt_mod", "split_scalar_endo",
    # keys
    "normalize_private_key", "normalize_public_key",
    "get_public_key", "get_shared_secret", "is_valid_private_key",
    "random_private_key", "hash_to_private_key", "precompute",
    # ecdsa
    "Signature", "sign", "verify", "recover_public_key",
    "point_from_signature",
    # schnorr
    "SchnorrSignature", "schnorr_sign", "schnorr_verify",
    "schnorr_get_public_key",
    # config
    "EngineConfig", "get_config", "set_config",
    "HashProvider", "get_provider", "set_provider", "tagged_hash",
    # errors
    "KoblitzError", "DomainError", "InvalidPoint", "InvalidScalar",
    "InvalidSignatureEncoding", "InvalidSignatureValue",
    "ExhaustedNonceSpace", "InvalidNonce", "UnsupportedKeyType",
    "EndomorphismError", "SelfVerificationError",
]
