"""vxcore — Verify hash-chained crash games against their published commitments."""

from .config import VerifierConfig
from .crash import crash_point
from .crypto import next_hash, terminating_hash, verify_commitment, walk_chain
from .epoch import ChainSelector, Epoch, HashingConvention, SeedSource, select_epoch
from .errors import InvalidRequestError, OracleUnavailableError, VxError
from .events import DoneEvent, Event, FailedEvent, ResultEvent, TerminatingHashEvent, is_terminal
from .models import GameResult, VerificationRequest, VerifiedSeed, VxAttestation
from .oracle import VxClient
from .report import VerificationReport
from .runner import RunHandle, Verifier
from .signature import (
    generate_keypair,
    sign_report,
    verify_report_signature,
    verify_vx_signature,
    vx_message,
)
from .stream import CancelToken, ResultStream

__version__ = "1.0.0"

__all__ = [
    "VerifierConfig",
    "ChainSelector",
    "Epoch",
    "HashingConvention",
    "SeedSource",
    "select_epoch",
    "next_hash",
    "walk_chain",
    "terminating_hash",
    "verify_commitment",
    "crash_point",
    "VerificationRequest",
    "GameResult",
    "VxAttestation",
    "VerifiedSeed",
    "Event",
    "ResultEvent",
    "DoneEvent",
    "TerminatingHashEvent",
    "FailedEvent",
    "is_terminal",
    "VxClient",
    "vx_message",
    "verify_vx_signature",
    "generate_keypair",
    "sign_report",
    "verify_report_signature",
    "CancelToken",
    "ResultStream",
    "Verifier",
    "RunHandle",
    "VerificationReport",
    "VxError",
    "InvalidRequestError",
    "OracleUnavailableError",
]
