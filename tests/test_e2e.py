"""End-to-end tests: real chain walking, real BLS attestations, fake transport.

Covers a full current-epoch run with pairing checks, a dishonest oracle,
an oracle that stops answering mid-run, and a signed audit report.
"""

from __future__ import annotations

import json

import pytest
from py_ecc.bls import G2Basic

from vxcore import (
    DoneEvent,
    FailedEvent,
    ResultEvent,
    ResultStream,
    TerminatingHashEvent,
    VerificationReport,
    VerificationRequest,
    Verifier,
    VxClient,
    crash_point,
    generate_keypair,
    sign_report,
    verify_report_signature,
    vx_message,
)

from tests.conftest import CURRENT_TOP, LEGACY_TOP, hash_at, make_config

SIGNED_INDICES = (CURRENT_TOP, CURRENT_TOP - 1)


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body
        self.text = json.dumps(body)

    def json(self):
        return self._body


class OracleSession:
    """Answers the GraphQL query from a prepared table of attestations."""

    def __init__(self, records):
        self.records = records
        self.indices = []

    def post(self, url, json=None, headers=None, timeout=None):
        index = json["variables"]["index"]
        self.indices.append(index)
        record = self.records.get(index)
        found = [record] if record is not None else []
        return FakeResponse(200, {"data": {"appBySlug": {"vx": {"messagesByIndex": found}}}})


@pytest.fixture(scope="module")
def vx_setup():
    sk = G2Basic.KeyGen(b"\x2a" * 32)
    config = make_config(vx_pub_key=G2Basic.SkToPk(sk).hex())
    records = {}
    for index in SIGNED_INDICES:
        message = vx_message(hash_at(index), config.game_salt)
        records[index] = {
            "message": message.hex(),
            "vx_signature": G2Basic.Sign(sk, message).hex(),
        }
    return config, records


def _request(game_number, iterations, verify_chain=False):
    return VerificationRequest(
        game_hash=hash_at(game_number).hex(),
        game_number=game_number,
        iterations=iterations,
        verify_chain=verify_chain,
    )


class TestHonestOracle:
    def test_full_run_verified(self, vx_setup):
        config, records = vx_setup
        session = OracleSession(records)
        stream = ResultStream(config, VxClient(config, session=session))

        events = list(stream.events(_request(CURRENT_TOP, 2, verify_chain=True)))

        results = [e.result for e in events if isinstance(e, ResultEvent)]
        assert [r.id for r in results] == list(SIGNED_INDICES)
        assert all(r.verified for r in results)
        for r in results:
            signature = bytes.fromhex(records[r.id]["vx_signature"])
            assert r.crash_point == crash_point(signature, hash_at(r.id))
        assert isinstance(events[2], DoneEvent)
        assert isinstance(events[3], TerminatingHashEvent)
        assert events[3].hash == config.commitment
        assert session.indices == list(SIGNED_INDICES)

    def test_signed_report(self, vx_setup):
        config, records = vx_setup
        stream = ResultStream(config, VxClient(config, session=OracleSession(records)))
        request = _request(CURRENT_TOP, 2, verify_chain=True)

        report = VerificationReport.collect(
            stream.events(request), request, stream.selector.select(request.game_number)
        )
        assert report.all_verified
        assert report.chain_valid is True

        priv, _ = generate_keypair()
        sign_report(report, priv, signer_id="auditor")
        restored = VerificationReport.from_dict(report.to_dict())
        assert verify_report_signature(restored)


class TestDishonestOracle:
    def test_stale_message_marks_unverified(self, vx_setup):
        config, records = vx_setup
        tampered = dict(records)
        tampered[CURRENT_TOP] = dict(records[CURRENT_TOP], message=records[CURRENT_TOP - 1]["message"])
        stream = ResultStream(config, VxClient(config, session=OracleSession(tampered)))

        events = list(stream.events(_request(CURRENT_TOP, 2)))
        flags = [(e.result.id, e.result.verified) for e in events if isinstance(e, ResultEvent)]
        assert flags == [(CURRENT_TOP, False), (CURRENT_TOP - 1, True)]
        assert isinstance(events[-1], DoneEvent)

    def test_swapped_signature_marks_unverified(self, vx_setup):
        config, records = vx_setup
        tampered = dict(records)
        tampered[CURRENT_TOP] = dict(
            records[CURRENT_TOP], vx_signature=records[CURRENT_TOP - 1]["vx_signature"]
        )
        stream = ResultStream(config, VxClient(config, session=OracleSession(tampered)))

        events = list(stream.events(_request(CURRENT_TOP, 1)))
        assert events[0].result.verified is False


class TestOracleGoesAway:
    def test_missing_record_aborts_after_streamed_results(self, vx_setup):
        config, records = vx_setup
        session = OracleSession(records)
        verifier = Verifier(config, VxClient(config, session=session))

        handle = verifier.start(_request(CURRENT_TOP, 5, verify_chain=True))
        events = list(handle.events(timeout=60))
        assert handle.wait(timeout=60)

        assert [e.result.id for e in events if isinstance(e, ResultEvent)] == list(SIGNED_INDICES)
        assert isinstance(events[-2], DoneEvent)
        assert isinstance(events[-1], FailedEvent)
        assert events[-1].index == CURRENT_TOP - 2
        assert session.indices == [CURRENT_TOP, CURRENT_TOP - 1, CURRENT_TOP - 2]


class TestLegacyChain:
    def test_walk_to_first_game_reproduces_commitment(self):
        config = make_config()
        stream = ResultStream(config, VxClient(config, session=OracleSession({})))
        events = list(stream.events(_request(LEGACY_TOP, 1000, verify_chain=True)))

        results = [e.result for e in events if isinstance(e, ResultEvent)]
        assert [r.id for r in results] == list(range(LEGACY_TOP, 0, -1))
        assert not any(r.verified for r in results)
        assert events[-1] == TerminatingHashEvent(config.prev_commitment)
