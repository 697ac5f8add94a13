"""
Exception taxonomy for the koblitz engine.

Input problems (bad encodings, out-of-range values) raise subclasses of
``KoblitzError``, itself a ``ValueError``.  Conditions that can only be
reached through an arithmetic defect raise ``RuntimeError`` subclasses and
are never folded into a verification result.
"""

from __future__ import annotations


class KoblitzError(ValueError):
    """Base class for every input-driven failure raised by this package."""


class DomainError(KoblitzError):
    """Non-invertible value or non-positive modulus."""


class InvalidPoint(KoblitzError):
    """Off-curve point, out-of-range coordinates or unknown point encoding."""


class InvalidScalar(KoblitzError):
    """Private key or multiplier outside ``(0, n)``."""


class InvalidSignatureEncoding(KoblitzError):
    """Malformed DER or compact signature bytes."""


class InvalidSignatureValue(KoblitzError):
    """Signature component (or recovery id) outside its valid range."""


class ExhaustedNonceSpace(KoblitzError):
    """RFC6979 generator hit its retry cap without a usable nonce."""


class InvalidNonce(KoblitzError):
    """BIP-340 nonce derived to exactly zero."""


class UnsupportedKeyType(KoblitzError, TypeError):
    """Key or signature given in an encoding the API does not accept."""


# ── internal defects ────────────────────────────────────────────────────
class EndomorphismError(RuntimeError):
    """GLV split produced a half wider than 128 bits."""


class SelfVerificationError(RuntimeError):
    """A freshly produced Schnorr signature failed to verify."""
