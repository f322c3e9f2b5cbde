"""Client for the Vx attestation oracle.

The oracle signs one message per game index for a given commitment. Its
signature is the crash seed for current-epoch games; the signed message
must equal ``sha256(game_hash) || client_seed``.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import requests

from .config import VerifierConfig
from .errors import OracleUnavailableError
from .models import VerifiedSeed, VxAttestation
from .signature import verify_vx_signature, vx_message

log = logging.getLogger(__name__)

MESSAGES_BY_INDEX_QUERY = """
    query AppsMessagesByIndex($appSlug: String!, $index: Int!, $commitment: String!) {
      appBySlug(slug: $appSlug) {
        id
        name
        vx {
          messagesByIndex(commitment: $commitment, index: $index) {
            vx_signature
            message
          }
        }
      }
    }
"""


class VxClient:
    """Fetches and verifies oracle attestations.

    Args:
        config: endpoint, app slug, commitment and public key to use
        session: anything with a ``requests.Session``-style ``post``.
            An injected session is shared by every thread that uses the
            client and must be thread-safe. When omitted, each thread
            gets its own ``requests.Session``.
    """

    def __init__(
        self,
        config: VerifierConfig | None = None,
        session: Any = None,
    ) -> None:
        self.config = config or VerifierConfig()
        self._session = session
        self._local = threading.local()
        self._public_key = bytes.fromhex(self.config.vx_pub_key)

    @property
    def session(self) -> Any:
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._local.session = requests.Session()
        return session

    def fetch_or_raise(self, index: int) -> VxAttestation:
        """Fetch the attestation for ``index``.

        Raises OracleUnavailableError on any transport, status, application
        or missing-record failure.
        """
        payload = {
            "query": MESSAGES_BY_INDEX_QUERY,
            "variables": {
                "appSlug": self.config.app_slug,
                "index": index,
                "commitment": self.config.commitment,
            },
        }
        try:
            res = self.session.post(
                self.config.oracle_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.config.oracle_timeout,
            )
        except requests.RequestException as exc:
            raise OracleUnavailableError(index, f"request failed: {exc}") from exc

        if res.status_code != 200:
            raise OracleUnavailableError(
                index, f"status code {res.status_code}, response body: {res.text}"
            )

        try:
            body = res.json()
        except ValueError as exc:
            raise OracleUnavailableError(index, "response is not JSON") from exc

        if not isinstance(body, dict):
            raise OracleUnavailableError(index, "response is not a JSON object")
        errors = body.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            detail = first.get("message") if isinstance(first, dict) else first
            raise OracleUnavailableError(index, f"Vx error: {detail}")

        record = _first_record(body)
        if record is None:
            raise OracleUnavailableError(index, "no attestation at this index")

        message = record.get("message")
        signature = record.get("vx_signature")
        if not _is_hex(message) or not _is_hex(signature):
            raise OracleUnavailableError(index, "attestation record is malformed")
        return VxAttestation(index=index, message=message.lower(), signature=signature)

    def fetch(self, index: int) -> VxAttestation | None:
        """Like ``fetch_or_raise`` but logs the failure and returns None."""
        try:
            return self.fetch_or_raise(index)
        except OracleUnavailableError as exc:
            log.error("Looks like there was a Vx lookup error. %s", exc)
            return None

    def get_vx_signature(
        self, game_index: int, client_seed: str, game_hash: bytes
    ) -> VerifiedSeed | None:
        """Fetch and check the oracle's signature for one game.

        Returns None when the oracle is unavailable. Otherwise the seed is
        the signature bytes, and ``verified`` requires both a byte-exact
        message match and a valid pairing check.
        """
        attestation = self.fetch(game_index)
        if attestation is None:
            return None

        message = vx_message(game_hash, client_seed)
        signature = attestation.signature_bytes
        verified = (
            message.hex() == attestation.message
            and verify_vx_signature(signature, message, self._public_key)
        )
        if not verified:
            log.warning("Vx attestation for game %d did not verify", game_index)
        return VerifiedSeed(signature=signature, verified=verified)


def _first_record(body: dict) -> dict | None:
    node: Any = body.get("data")
    for key in ("appBySlug", "vx", "messagesByIndex"):
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    if not isinstance(node, list) or not node or not isinstance(node[0], dict):
        return None
    return node[0]


def _is_hex(value: Any) -> bool:
    if not isinstance(value, str) or len(value) % 2:
        return False
    try:
        bytes.fromhex(value)
    except ValueError:
        return False
    return True
