"""Shared fixtures: a throwaway Arweave wallet and a recording AO client."""

from __future__ import annotations

import json
from typing import Any

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from ao_mcp.connect import ResultPayload, ResultsPage, create_data_item_signer
from ao_mcp.connect.data_item import b64url_encode

PROCESS_ID = "A" * 43
MESSAGE_ID = "M" * 43


def _b64_int(value: int) -> str:
    return b64url_encode(value.to_bytes((value.bit_length() + 7) // 8, "big"))


def private_key_to_jwk(key: rsa.RSAPrivateKey) -> dict[str, str]:
    numbers = key.private_numbers()
    public = numbers.public_numbers
    return {
        "kty": "RSA",
        "n": _b64_int(public.n),
        "e": _b64_int(public.e),
        "d": _b64_int(numbers.d),
        "p": _b64_int(numbers.p),
        "q": _b64_int(numbers.q),
        "dp": _b64_int(numbers.dmp1),
        "dq": _b64_int(numbers.dmq1),
        "qi": _b64_int(numbers.iqmp),
    }


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    # Arweave wallets are RSA-4096.
    return rsa.generate_private_key(public_exponent=65537, key_size=4096)


@pytest.fixture(scope="session")
def wallet_jwk(rsa_key) -> dict[str, str]:
    return private_key_to_jwk(rsa_key)


@pytest.fixture(scope="session")
def wallet_json(wallet_jwk) -> str:
    return json.dumps(wallet_jwk)


@pytest.fixture(scope="session")
def signer(wallet_jwk):
    return create_data_item_signer(wallet_jwk)


class FakeAOClient:
    """In-memory stand-in for AOClient that records every network call."""

    def __init__(
        self,
        *,
        dryrun_response: dict[str, Any] | None = None,
        result_response: dict[str, Any] | None = None,
        results_page: dict[str, Any] | None = None,
        message_id: str = MESSAGE_ID,
        spawned_id: str = "N" * 43,
        error: Exception | None = None,
        result_error: Exception | None = None,
    ) -> None:
        self.dryrun_response = ResultPayload.model_validate(dryrun_response or {})
        self.result_response = ResultPayload.model_validate(result_response or {})
        self.results_page = ResultsPage.model_validate(results_page or {"edges": []})
        self.message_id = message_id
        self.spawned_id = spawned_id
        self.error = error
        self.result_error = result_error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _record(self, method: str, **kwargs: Any) -> None:
        self.calls.append((method, kwargs))
        if self.error is not None:
            raise self.error

    async def dryrun(self, process_id, *, tags, data=""):
        self._record("dryrun", process_id=process_id, tags=list(tags), data=data)
        return self.dryrun_response

    async def message(self, process_id, *, signer, tags, data=""):
        self._record(
            "message", process_id=process_id, signer=signer, tags=list(tags), data=data
        )
        return self.message_id

    async def result(self, process_id, message_id):
        self.calls.append(("result", {"process_id": process_id, "message_id": message_id}))
        if self.result_error is not None:
            raise self.result_error
        return self.result_response

    async def results(self, process_id, *, limit=None, from_cursor=None, sort="ASC"):
        self._record(
            "results", process_id=process_id, limit=limit, from_cursor=from_cursor, sort=sort
        )
        return self.results_page

    async def spawn(self, *, module, scheduler, signer, tags=(), data="1984"):
        self._record(
            "spawn", module=module, scheduler=scheduler, signer=signer, tags=list(tags)
        )
        return self.spawned_id
