from __future__ import annotations

import asyncio

import pytest

from core.domain.dtmi import to_expanded_path, to_path
from core.domain.resolution import OutcomeKind
from core.exceptions import (
    ExpandedNotAvailableError,
    IdentityMismatchError,
    InvalidDtmiFormatError,
    MalformedModelError,
    ModelNotFoundError,
    TransportError,
)
from core.services.resolver import DtmiResolver

THERMOSTAT = "dtmi:com:example:Thermostat;1"
DEVICE = "dtmi:com:example:Device;1"


def test_resolve_returns_requested_models_only(thermostat_repo):
    fetcher = thermostat_repo.fetcher()
    models = asyncio.run(DtmiResolver(fetcher).resolve([THERMOSTAT]))

    assert list(models) == ["dtmi:com:example:thermostat;1"]
    assert models["dtmi:com:example:thermostat;1"].id == THERMOSTAT
    assert fetcher.calls == [to_path(THERMOSTAT)]


def test_resolve_fetches_each_dtmi_once(thermostat_repo):
    fetcher = thermostat_repo.fetcher()
    models = asyncio.run(
        DtmiResolver(fetcher).resolve([THERMOSTAT, DEVICE, "dtmi:com:example:thermostat;1"])
    )

    assert set(models) == {"dtmi:com:example:thermostat;1", "dtmi:com:example:device;1"}
    assert sorted(fetcher.calls) == sorted([to_path(THERMOSTAT), to_path(DEVICE)])


def test_resolve_empty_request():
    assert asyncio.run(DtmiResolver(None).resolve([])) == {}  # type: ignore[arg-type]


def test_resolve_invalid_dtmi_fails_before_fetching(thermostat_repo):
    fetcher = thermostat_repo.fetcher()
    with pytest.raises(InvalidDtmiFormatError):
        asyncio.run(DtmiResolver(fetcher).resolve([THERMOSTAT, "dtmi:bad"]))
    assert fetcher.calls == []


def test_resolve_missing_model_is_not_found(thermostat_repo):
    with pytest.raises(ModelNotFoundError) as excinfo:
        asyncio.run(DtmiResolver(thermostat_repo.fetcher()).resolve(["dtmi:com:example:Missing;1"]))
    assert excinfo.value.dtmi == "dtmi:com:example:Missing;1"
    assert excinfo.value.path == "dtmi/com/example/missing-1.json"


def test_resolve_identity_mismatch(repo, make_model):
    repo.add(make_model("dtmi:com:example:Other;1"), path=to_path(THERMOSTAT))
    with pytest.raises(IdentityMismatchError) as excinfo:
        asyncio.run(DtmiResolver(repo.fetcher()).resolve([THERMOSTAT]))
    assert excinfo.value.requested == THERMOSTAT
    assert excinfo.value.found == "dtmi:com:example:Other;1"


def test_resolve_identity_check_ignores_case(repo, make_model):
    repo.add(make_model("dtmi:com:example:THERMOSTAT;1"), path=to_path(THERMOSTAT))
    models = asyncio.run(DtmiResolver(repo.fetcher()).resolve([THERMOSTAT]))
    assert "dtmi:com:example:thermostat;1" in models


def test_resolve_malformed_payload(repo):
    repo.documents[to_path(THERMOSTAT)] = b"{ not json"
    with pytest.raises(MalformedModelError):
        asyncio.run(DtmiResolver(repo.fetcher()).resolve([THERMOSTAT]))


def test_resolve_payload_without_id(repo):
    repo.documents[to_path(THERMOSTAT)] = {"@type": "Interface"}
    with pytest.raises(MalformedModelError):
        asyncio.run(DtmiResolver(repo.fetcher()).resolve([THERMOSTAT]))


def test_transport_error_wins_over_not_found(thermostat_repo):
    thermostat_repo.fail(DEVICE)
    fetcher = thermostat_repo.fetcher()
    with pytest.raises(TransportError):
        asyncio.run(DtmiResolver(fetcher).resolve(["dtmi:com:example:Missing;1", DEVICE, THERMOSTAT]))
    # One failure does not cancel the sibling fetches.
    assert len(fetcher.calls) == 3


def test_resolve_runs_fetches_concurrently(repo, make_model):
    dtmis = [f"dtmi:com:example:Model{i};1" for i in range(5)]
    for dtmi in dtmis:
        repo.add(make_model(dtmi))
    state = {"active": 0, "peak": 0}
    inner = repo.fetcher()

    class SlowFetcher:
        async def fetch(self, path: str) -> bytes:
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
            await asyncio.sleep(0.01)
            state["active"] -= 1
            return await inner.fetch(path)

        async def aclose(self) -> None:
            return None

    models = asyncio.run(DtmiResolver(SlowFetcher()).resolve(dtmis))
    assert len(models) == 5
    assert state["peak"] == 5


def test_resolve_expanded_returns_whole_closure(repo, make_model):
    thermostat = make_model(THERMOSTAT, extends=DEVICE)
    device = make_model(DEVICE)
    repo.add_expanded(THERMOSTAT, [thermostat, device])
    fetcher = repo.fetcher()

    models = asyncio.run(DtmiResolver(fetcher).resolve([THERMOSTAT], prefer_expanded=True))

    assert set(models) == {"dtmi:com:example:thermostat;1", "dtmi:com:example:device;1"}
    assert fetcher.calls == [to_expanded_path(THERMOSTAT)]


def test_resolve_expanded_must_contain_requested_model(repo, make_model):
    repo.add_expanded(THERMOSTAT, [make_model(DEVICE)])
    with pytest.raises(IdentityMismatchError):
        asyncio.run(DtmiResolver(repo.fetcher()).resolve([THERMOSTAT], prefer_expanded=True))


def test_missing_expanded_document_signals_fallback(thermostat_repo):
    with pytest.raises(ExpandedNotAvailableError) as excinfo:
        asyncio.run(DtmiResolver(thermostat_repo.fetcher()).resolve([THERMOSTAT], prefer_expanded=True))
    assert excinfo.value.dtmis == [THERMOSTAT]


def test_attempt_expanded_direct(repo, make_model):
    repo.add_expanded(DEVICE, [make_model(DEVICE)])
    outcome = asyncio.run(DtmiResolver(repo.fetcher()).attempt_expanded([DEVICE]))
    assert outcome.kind is OutcomeKind.DIRECT
    assert set(outcome.models) == {"dtmi:com:example:device;1"}
    assert outcome.error is None


def test_attempt_expanded_fallback_required(thermostat_repo):
    outcome = asyncio.run(DtmiResolver(thermostat_repo.fetcher()).attempt_expanded([THERMOSTAT]))
    assert outcome.kind is OutcomeKind.FALLBACK_REQUIRED
    assert isinstance(outcome.error, ExpandedNotAvailableError)
    assert outcome.models == {}


def test_attempt_expanded_fatal(repo):
    repo.fail(THERMOSTAT, expanded=True)
    outcome = asyncio.run(DtmiResolver(repo.fetcher()).attempt_expanded([THERMOSTAT]))
    assert outcome.kind is OutcomeKind.FATAL
    assert isinstance(outcome.error, TransportError)


def test_outcome_raise_error_reraises_carried_error(repo):
    repo.fail(THERMOSTAT, expanded=True)
    outcome = asyncio.run(DtmiResolver(repo.fetcher()).attempt_expanded([THERMOSTAT]))
    with pytest.raises(TransportError):
        outcome.raise_error()


def test_direct_outcome_has_no_error_to_raise(repo, make_model):
    repo.add_expanded(DEVICE, [make_model(DEVICE)])
    outcome = asyncio.run(DtmiResolver(repo.fetcher()).attempt_expanded([DEVICE]))
    with pytest.raises(RuntimeError):
        outcome.raise_error()
