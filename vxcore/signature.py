"""Signature checks.

BLS12-381 pairing verification of oracle attestations uses py_ecc's
``G2Basic`` scheme: 48-byte G1 public keys, 96-byte G2 signatures. Reports
produced by an auditor can be signed with Ed25519 through PyNaCl.
"""

from __future__ import annotations

import base64
import hashlib
from typing import TYPE_CHECKING

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey
from py_ecc.bls import G2Basic

if TYPE_CHECKING:
    from .report import VerificationReport


def vx_message(game_hash: bytes, client_seed: str) -> bytes:
    """The message the oracle is expected to have signed for a game."""
    return hashlib.sha256(game_hash).digest() + client_seed.encode("utf-8")


def verify_vx_signature(signature: bytes, message: bytes, public_key: bytes) -> bool:
    """Pairing check of a BLS signature over ``message``.

    Malformed keys or signatures verify as False instead of raising.
    """
    try:
        return bool(G2Basic.Verify(public_key, message, signature))
    except Exception:
        return False


def generate_keypair() -> tuple[bytes, bytes]:
    """Generate an Ed25519 keypair for signing reports.

    Returns (private_key_bytes, public_key_bytes), both 32 bytes.
    """
    sk = SigningKey.generate()
    return bytes(sk), bytes(sk.verify_key)


def sign_report(
    report: "VerificationReport", private_key: bytes, signer_id: str | None = None
) -> "VerificationReport":
    """Sign a report's hash with an Ed25519 private key.

    Modifies the report in place and returns it.
    """
    sk = SigningKey(private_key)
    signed = sk.sign(report.hash.encode("utf-8"))
    report.signature = base64.b64encode(signed.signature).decode("ascii")
    report.public_key = base64.b64encode(bytes(sk.verify_key)).decode("ascii")
    if signer_id is not None:
        report.signer_id = signer_id
    return report


def verify_report_signature(report: "VerificationReport") -> bool:
    """Verify the Ed25519 signature on a report."""
    if report.signature is None or report.public_key is None:
        return False
    try:
        sig = base64.b64decode(report.signature)
        vk = VerifyKey(base64.b64decode(report.public_key))
        vk.verify(report.hash.encode("utf-8"), sig)
        return True
    except (BadSignatureError, ValueError, TypeError):
        return False
