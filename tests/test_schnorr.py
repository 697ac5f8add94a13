"""
Tests for BIP-340 Schnorr signatures.

Vectors 0, 1 and 5 are taken from the BIP-340 reference test vectors.
"""

import pytest

import koblitz.schnorr as schnorr
from koblitz.curve import FIELD_PRIME as P, ORDER as N
from koblitz.errors import (
    InvalidNonce,
    InvalidSignatureEncoding,
    InvalidSignatureValue,
    SelfVerificationError,
    UnsupportedKeyType,
)
from koblitz.hash import TAG_NONCE, HashProvider, set_provider
from koblitz.point import Point
from koblitz.schnorr import (
    SchnorrSignature,
    schnorr_get_public_key,
    schnorr_sign,
    schnorr_verify,
)

from conftest import MESSAGE_HASHES, PRIVATE_KEYS

VECTORS = [
    {
        "seckey": 3,
        "pubkey": "F9308A019258C31049344F85F89D5229B531C845836F99B08601F113BCE036F9",
        "aux": "00" * 32,
        "msg": "00" * 32,
        "sig": "E907831F80848D1069A5371B402410364BDF1C5F8307B0084C55F1CE2DCA8215"
               "25F66A4A85EA8B71E482A74F382D2CE5EBEEE8FDB2172F477DF4900D310536C0",
    },
    {
        "seckey": 0xB7E151628AED2A6ABF7158809CF4F3C762E7160F38B4DA56A784D9045190CFEF,
        "pubkey": "DFF1D77F2A671C5F36183726DB2341BE58FEAE1DA2DECED843240F7B502BA659",
        "aux": "00" * 31 + "01",
        "msg": "243F6A8885A308D313198A2E03707344A4093822299F31D0082EFA98EC4E6C89",
        "sig": "6896BD60EEAE296DB48A229FF71DFE071BDE413E6D43F917DC8DCF8C78DE3341"
               "8906D11AC976ABCCB20B091292BFF4EA897EFCB639EA871CFA95F6DE339E4B0A",
    },
]

# x-coordinate with no point on the curve
OFF_CURVE_PUBKEY = "EEFDEA4CDB677750A420FEE807EACF21EB9898AE79B9768766E4FAA04A2D4A34"


def _flip(data: bytes, index: int) -> bytes:
    out = bytearray(data)
    out[index] ^= 0x01
    return bytes(out)


# ==============================================================================
# reference vectors
# ==============================================================================


class TestVectors:

    @pytest.mark.parametrize("vec", VECTORS)
    def test_public_key(self, vec):
        assert schnorr_get_public_key(vec["seckey"]).hex() == vec["pubkey"].lower()

    @pytest.mark.parametrize("vec", VECTORS)
    def test_sign(self, vec):
        sig = schnorr_sign(vec["msg"], vec["seckey"], vec["aux"])
        assert sig.hex() == vec["sig"].lower()

    @pytest.mark.parametrize("vec", VECTORS)
    def test_verify(self, vec):
        assert schnorr_verify(vec["sig"], vec["msg"], vec["pubkey"])

    def test_public_key_not_on_curve(self):
        vec = VECTORS[1]
        assert schnorr_verify(vec["sig"], vec["msg"], OFF_CURVE_PUBKEY) is False


# ==============================================================================
# signing
# ==============================================================================


class TestSign:

    @pytest.mark.parametrize("d", PRIVATE_KEYS)
    def test_round_trip(self, d):
        pub = schnorr_get_public_key(d)
        for m in MESSAGE_HASHES:
            assert schnorr_verify(schnorr_sign(m, d, bytes(32)), m, pub)

    def test_x_only_key_has_even_y(self):
        for d in PRIVATE_KEYS:
            assert Point.from_bytes(schnorr_get_public_key(d)).has_even_y()

    def test_odd_and_even_keys_share_x_only_key(self):
        d = PRIVATE_KEYS[4]
        assert schnorr_get_public_key(d) == schnorr_get_public_key(N - d)

    def test_nonce_point_has_even_y(self):
        vec = VECTORS[1]
        sig = SchnorrSignature.from_hex(vec["sig"])
        px = bytes.fromhex(vec["pubkey"])
        e = schnorr._challenge(sig.to_bytes()[:32], px, bytes.fromhex(vec["msg"]))
        R = Point.BASE.multiply_and_add_unsafe(Point.from_bytes(px), sig.s, N - e)
        assert R.has_even_y() and R.x == sig.r

    def test_arbitrary_message_length(self):
        d = PRIVATE_KEYS[5]
        pub = schnorr_get_public_key(d)
        for m in (b"", b"x", bytes(100)):
            assert schnorr_verify(schnorr_sign(m, d, bytes(32)), m, pub)

    def test_random_aux_by_default(self):
        d, m = PRIVATE_KEYS[5], MESSAGE_HASHES[2]
        pub = schnorr_get_public_key(d)
        a, b = schnorr_sign(m, d), schnorr_sign(m, d)
        assert a != b
        assert schnorr_verify(a, m, pub) and schnorr_verify(b, m, pub)

    def test_default_aux_comes_from_provider(self, restore_provider):
        set_provider(HashProvider(random_bytes=lambda n: bytes(n)))
        vec = VECTORS[0]
        assert schnorr_sign(vec["msg"], vec["seckey"]).hex() == vec["sig"].lower()

    def test_bad_aux_length(self):
        with pytest.raises(UnsupportedKeyType):
            schnorr_sign(MESSAGE_HASHES[0], 1, bytes(31))

    def test_zero_nonce(self, monkeypatch):
        real = schnorr.tagged_hash

        def zero_nonce(tag, *messages):
            return bytes(32) if tag == TAG_NONCE else real(tag, *messages)

        monkeypatch.setattr(schnorr, "tagged_hash", zero_nonce)
        with pytest.raises(InvalidNonce):
            schnorr_sign(MESSAGE_HASHES[0], 1, bytes(32))

    def test_self_verification_failure(self, monkeypatch):
        monkeypatch.setattr(schnorr, "schnorr_verify", lambda *args: False)
        with pytest.raises(SelfVerificationError):
            schnorr_sign(MESSAGE_HASHES[0], 1, bytes(32))


# ==============================================================================
# verification
# ==============================================================================


class TestVerify:

    def setup_method(self):
        vec = VECTORS[1]
        self.sig = bytes.fromhex(vec["sig"])
        self.msg = bytes.fromhex(vec["msg"])
        self.pub = bytes.fromhex(vec["pubkey"])

    def test_accepts_signature_object(self):
        assert schnorr_verify(SchnorrSignature.from_bytes(self.sig), self.msg, self.pub)

    def test_accepts_sec1_public_key(self):
        full = Point.from_bytes(self.pub).to_bytes(compressed=True)
        assert schnorr_verify(self.sig, self.msg, full)

    @pytest.mark.parametrize("d", PRIVATE_KEYS)
    def test_sec1_key_of_either_parity(self, d):
        m = MESSAGE_HASHES[2]
        sig = schnorr_sign(m, d, bytes(32))
        Q = Point.from_private_key(d)
        assert schnorr_verify(sig, m, Q.to_bytes(compressed=True))
        assert schnorr_verify(sig, m, Q.to_bytes())
        assert schnorr_verify(sig, m, Q)

    def test_odd_y_sec1_key(self):
        d = next(k for k in range(1, 50) if not Point.from_private_key(k).has_even_y())
        m = MESSAGE_HASHES[1]
        sec1 = Point.from_private_key(d).to_bytes(compressed=True)
        assert sec1[0] == 0x03
        assert schnorr_verify(schnorr_sign(m, d, bytes(32)), m, sec1)

    @pytest.mark.parametrize("index", [0, 31, 32, 63])
    def test_tampered_signature(self, index):
        assert not schnorr_verify(_flip(self.sig, index), self.msg, self.pub)

    def test_tampered_message(self):
        assert not schnorr_verify(self.sig, _flip(self.msg, 5), self.pub)

    def test_other_key(self):
        other = schnorr_get_public_key(PRIVATE_KEYS[5])
        assert not schnorr_verify(self.sig, self.msg, other)

    def test_r_not_field_element(self):
        sig = P.to_bytes(32, "big") + self.sig[32:]
        assert schnorr_verify(sig, self.msg, self.pub) is False

    def test_s_not_below_order(self):
        sig = self.sig[:32] + N.to_bytes(32, "big")
        assert schnorr_verify(sig, self.msg, self.pub) is False

    @pytest.mark.parametrize("sig", [b"", b"\x01" * 63, b"\x01" * 65, "zz", None])
    def test_malformed_signature(self, sig):
        assert schnorr_verify(sig, self.msg, self.pub) is False

    def test_provider_errors_propagate(self, restore_provider):
        def broken(data):
            raise RuntimeError("hash backend unavailable")

        set_provider(HashProvider(sha256=broken))
        with pytest.raises(RuntimeError, match="unavailable"):
            schnorr_verify(self.sig, self.msg, self.pub)


class TestSignatureObject:

    def test_round_trip(self):
        raw = bytes.fromhex(VECTORS[0]["sig"])
        sig = SchnorrSignature.from_bytes(raw)
        assert sig.to_bytes() == raw
        assert sig.to_hex() == VECTORS[0]["sig"].lower()

    def test_wrong_length(self):
        with pytest.raises(InvalidSignatureEncoding):
            SchnorrSignature.from_bytes(bytes(63))

    @pytest.mark.parametrize("r, s", [(0, 1), (P, 1), (1, 0), (1, N)])
    def test_range(self, r, s):
        with pytest.raises(InvalidSignatureValue):
            SchnorrSignature(r, s)


# ==============================================================================
# libsecp256k1 cross-check
# ==============================================================================


class TestAgainstLibsecp256k1:

    @pytest.fixture(autouse=True)
    def _coincurve(self):
        self.cc = pytest.importorskip("coincurve")
        if not hasattr(self.cc.PrivateKey, "sign_schnorr"):
            pytest.skip("coincurve built without schnorr support")

    @pytest.mark.parametrize("d", PRIVATE_KEYS[2:8])
    def test_same_signature(self, d):
        key = self.cc.PrivateKey(d.to_bytes(32, "big"))
        aux = bytes(range(32))
        for m in MESSAGE_HASHES:
            assert schnorr_sign(m, d, aux) == key.sign_schnorr(m, aux)

    @pytest.mark.parametrize("d", PRIVATE_KEYS[2:8])
    def test_libsecp_signature_verifies(self, d):
        key = self.cc.PrivateKey(d.to_bytes(32, "big"))
        pub = schnorr_get_public_key(d)
        for m in MESSAGE_HASHES:
            assert schnorr_verify(key.sign_schnorr(m, bytes(32)), m, pub)
