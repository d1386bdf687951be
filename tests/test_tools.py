"""Unit tests for the AO tool executors."""

from __future__ import annotations

import threading

import pytest

from ao_mcp.config import AO_CONFIG
from ao_mcp.connect import AOClient, InvalidWalletError, NotFoundError, Tag
from ao_mcp.results import result_text
from ao_mcp.tools.eval_lua import execute_eval_lua
from ao_mcp.tools.list_results import execute_list_results
from ao_mcp.tools.query_process import execute_query_process
from ao_mcp.tools.send_message import execute_send_message
from ao_mcp.tools.spawn_process import execute_spawn_process
from conftest import MESSAGE_ID, PROCESS_ID, FakeAOClient


def _message(action: str | None, data: str | None) -> dict:
    tags = [{"name": "Action", "value": action}] if action is not None else []
    return {"Tags": tags, "Data": data}


# -- validation short-circuits ------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize("process_id", ["", "short", "A" * 42, "A" * 44, None])
@pytest.mark.parametrize(
    "executor",
    [execute_query_process, execute_send_message, execute_eval_lua, execute_list_results],
)
async def test_invalid_process_id_makes_no_network_call(executor, process_id, wallet_json):
    client = FakeAOClient()
    arguments = {"process_id": process_id, "action": "Info", "code": "return 1"}
    arguments["wallet_json"] = wallet_json

    result = await executor(client, arguments)

    assert result.isError is True
    assert "Invalid process ID" in result_text(result)
    assert client.calls == []


@pytest.mark.asyncio
async def test_invalid_process_id_message_quotes_value():
    result = await execute_query_process(FakeAOClient(), {"process_id": "short"})
    assert 'Invalid process ID "short"' in result_text(result)


@pytest.mark.asyncio
@pytest.mark.parametrize("wallet", [None, "", "not json", "[1, 2]"])
@pytest.mark.parametrize(
    "executor, extra",
    [
        (execute_send_message, {"process_id": PROCESS_ID, "action": "Ping"}),
        (execute_spawn_process, {}),
        (execute_eval_lua, {"process_id": PROCESS_ID, "code": "return 1"}),
    ],
)
async def test_bad_wallet_fails_before_network(executor, extra, wallet):
    client = FakeAOClient()
    arguments = dict(extra)
    if wallet is not None:
        arguments["wallet_json"] = wallet

    result = await executor(client, arguments)

    assert result.isError is True
    assert "wallet" in result_text(result).lower()
    assert client.calls == []


@pytest.mark.asyncio
async def test_incomplete_jwk_is_reported_as_wallet_error():
    client = FakeAOClient()
    result = await execute_send_message(
        client,
        {"process_id": PROCESS_ID, "action": "Ping", "wallet_json": '{"kty": "RSA"}'},
    )
    assert result.isError is True
    assert "wallet JWK is missing field 'n'" in result_text(result)
    assert client.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["", "   ", "\n\t", None])
async def test_eval_lua_rejects_blank_code(code, wallet_json):
    client = FakeAOClient()
    arguments = {"process_id": PROCESS_ID, "wallet_json": wallet_json}
    if code is not None:
        arguments["code"] = code

    result = await execute_eval_lua(client, arguments)

    assert result.isError is True
    assert result_text(result) == "Error: code is required. Provide Lua code to execute."
    assert client.calls == []


@pytest.mark.asyncio
async def test_caller_action_tag_is_rejected():
    client = FakeAOClient()
    result = await execute_query_process(
        client,
        {"process_id": PROCESS_ID, "tags": [{"name": "Action", "value": "Other"}]},
    )
    assert result.isError is True
    assert "tag 'Action' is reserved" in result_text(result)
    assert client.calls == []


# -- ao_query_process ---------------------------------------------------------


@pytest.mark.asyncio
async def test_query_success_pretty_prints_json():
    client = FakeAOClient(dryrun_response={"Messages": [_message("Info", '{"ok":true}')]})

    result = await execute_query_process(client, {"process_id": PROCESS_ID})

    text = result_text(result)
    assert not result.isError
    assert "Action: Info" in text
    assert '{\n  "ok": true\n}' in text

    method, call = client.calls[0]
    assert method == "dryrun"
    assert call["tags"][0] == Tag(name="Action", value="Info")
    assert call["data"] == "{}"


@pytest.mark.asyncio
async def test_query_appends_caller_tags_after_action():
    client = FakeAOClient()
    await execute_query_process(
        client,
        {
            "process_id": PROCESS_ID,
            "action": "Balance",
            "data": '{"x":1}',
            "tags": [{"name": "Target", "value": "abc"}],
        },
    )
    call = client.calls[0][1]
    assert [t.name for t in call["tags"]] == ["Action", "Target"]
    assert call["tags"][0].value == "Balance"
    assert call["data"] == '{"x":1}'


@pytest.mark.asyncio
async def test_query_error_tagged_message():
    client = FakeAOClient(dryrun_response={"Messages": [_message("Error", "boom")]})
    result = await execute_query_process(client, {"process_id": PROCESS_ID})
    assert result.isError is True
    assert "boom" in result_text(result)


@pytest.mark.asyncio
async def test_query_non_json_data_returned_raw():
    client = FakeAOClient(dryrun_response={"Messages": [_message(None, "plain text")]})
    result = await execute_query_process(client, {"process_id": PROCESS_ID})
    assert result_text(result) == "Process response (Action: unknown):\nplain text"


@pytest.mark.asyncio
async def test_query_output_then_error_then_nothing():
    output = FakeAOClient(dryrun_response={"Output": {"data": "hello"}, "Error": "ignored"})
    result = await execute_query_process(output, {"process_id": PROCESS_ID})
    assert result_text(result) == "Process output:\nhello"
    assert not result.isError

    error = FakeAOClient(dryrun_response={"Error": "no handler"})
    result = await execute_query_process(error, {"process_id": PROCESS_ID})
    assert result.isError is True
    assert result_text(result) == "Process error: no handler"

    empty = FakeAOClient(dryrun_response={})
    result = await execute_query_process(empty, {"process_id": PROCESS_ID})
    assert not result.isError
    assert result_text(result).startswith("No response from process.")


@pytest.mark.asyncio
async def test_query_network_failure_is_error_result():
    client = FakeAOClient(error=NotFoundError("process not found"))
    result = await execute_query_process(client, {"process_id": PROCESS_ID})
    assert result.isError is True
    assert result_text(result) == "Error querying process: process not found"


@pytest.mark.asyncio
async def test_query_rendering_is_repeatable():
    client = FakeAOClient(dryrun_response={"Messages": [_message("Info", '{"b":2,"a":[1]}')]})
    first = await execute_query_process(client, {"process_id": PROCESS_ID})
    second = await execute_query_process(client, {"process_id": PROCESS_ID})
    assert first.model_dump() == second.model_dump()


# -- ao_send_message ----------------------------------------------------------


@pytest.mark.asyncio
async def test_send_message_success_includes_message_id(wallet_json):
    client = FakeAOClient(result_response={"Messages": [_message("Ack", '{"n": 1}')]})

    result = await execute_send_message(
        client,
        {"process_id": PROCESS_ID, "action": "Ping", "wallet_json": wallet_json},
    )

    text = result_text(result)
    assert not result.isError
    assert f"Message ID: {MESSAGE_ID}" in text
    assert "Action: Ack" in text
    assert '"n": 1' in text
    assert [method for method, _ in client.calls] == ["message", "result"]
    message_call = client.calls[0][1]
    assert message_call["tags"][0] == Tag(name="Action", value="Ping")
    assert message_call["data"] == "{}"
    assert client.calls[1][1]["message_id"] == MESSAGE_ID


@pytest.mark.asyncio
async def test_send_message_requires_action(wallet_json):
    client = FakeAOClient()
    result = await execute_send_message(
        client, {"process_id": PROCESS_ID, "wallet_json": wallet_json}
    )
    assert result.isError is True
    assert result_text(result) == "Error: missing required field: action"
    assert client.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response, expected, is_error",
    [
        (
            {"Messages": [_message("Error", "denied")]},
            f"Message sent (ID: {MESSAGE_ID}) but process returned error:\ndenied",
            True,
        ),
        (
            {"Error": "out of gas", "Output": "x"},
            f"Message sent (ID: {MESSAGE_ID}) but process error: out of gas",
            True,
        ),
        (
            {"Output": {"data": "printed"}},
            f"Message sent successfully!\nMessage ID: {MESSAGE_ID}\nOutput:\nprinted",
            False,
        ),
        (
            {},
            f"Message sent successfully!\nMessage ID: {MESSAGE_ID}\nNo response data returned.",
            False,
        ),
    ],
)
async def test_send_message_outcomes(wallet_json, response, expected, is_error):
    client = FakeAOClient(result_response=response)
    result = await execute_send_message(
        client,
        {"process_id": PROCESS_ID, "action": "Ping", "wallet_json": wallet_json},
    )
    assert result_text(result) == expected
    assert result.isError is is_error


@pytest.mark.asyncio
async def test_send_message_result_fetch_failure_keeps_message_id(wallet_json):
    client = FakeAOClient(result_error=NotFoundError("not yet evaluated"))
    result = await execute_send_message(
        client,
        {"process_id": PROCESS_ID, "action": "Ping", "wallet_json": wallet_json},
    )
    assert result.isError is True
    assert MESSAGE_ID in result_text(result)
    assert "not yet evaluated" in result_text(result)


@pytest.mark.asyncio
async def test_send_message_rendering_is_repeatable(wallet_json):
    client = FakeAOClient(result_response={"Messages": [_message("Ack", "[1,2]")]})
    arguments = {"process_id": PROCESS_ID, "action": "Ping", "wallet_json": wallet_json}
    first = await execute_send_message(client, arguments)
    second = await execute_send_message(client, arguments)
    assert result_text(first) == result_text(second)


# -- ao_spawn_process ---------------------------------------------------------


@pytest.mark.asyncio
async def test_spawn_uses_default_module_and_scheduler(wallet_json):
    new_id = "NEWID".ljust(43, "x")
    client = FakeAOClient(spawned_id=new_id)

    result = await execute_spawn_process(client, {"wallet_json": wallet_json})

    text = result_text(result)
    assert not result.isError
    assert new_id in text
    assert AO_CONFIG.aos_module in text
    assert AO_CONFIG.scheduler in text
    assert "Name:" not in text
    assert [method for method, _ in client.calls] == ["spawn"]
    assert client.calls[0][1]["tags"] == []


@pytest.mark.asyncio
async def test_spawn_prepends_name_tag(wallet_json):
    client = FakeAOClient()
    result = await execute_spawn_process(
        client,
        {
            "wallet_json": wallet_json,
            "name": "chamber",
            "module": "mod",
            "scheduler": "sched",
            "tags": [{"name": "Cron-Interval", "value": "1-minute"}],
        },
    )
    call = client.calls[0][1]
    assert [(t.name, t.value) for t in call["tags"]] == [
        ("Name", "chamber"),
        ("Cron-Interval", "1-minute"),
    ]
    assert call["module"] == "mod"
    assert call["scheduler"] == "sched"
    assert "Name: chamber" in result_text(result)


@pytest.mark.asyncio
async def test_spawn_failure_is_error_result(wallet_json):
    client = FakeAOClient(error=InvalidWalletError("wallet key must be a 4096-bit RSA key"))
    result = await execute_spawn_process(client, {"wallet_json": wallet_json})
    assert result.isError is True
    assert result_text(result).startswith("Error spawning process:")


# -- ao_eval_lua --------------------------------------------------------------


@pytest.mark.asyncio
async def test_eval_sends_fixed_eval_tag_and_raw_code(wallet_json):
    client = FakeAOClient(result_response={"Output": {"data": "2"}})

    result = await execute_eval_lua(
        client,
        {"process_id": PROCESS_ID, "code": "return 1 + 1", "wallet_json": wallet_json},
    )

    assert result_text(result) == (
        f"Lua code executed successfully!\nMessage ID: {MESSAGE_ID}\n\nOutput:\n2"
    )
    call = client.calls[0][1]
    assert call["tags"] == [Tag(name="Action", value="Eval")]
    assert call["data"] == "return 1 + 1"


@pytest.mark.asyncio
async def test_eval_reports_output_and_first_message(wallet_json):
    client = FakeAOClient(result_response={"Messages": [_message("Reply", "pong")]})
    result = await execute_eval_lua(
        client,
        {"process_id": PROCESS_ID, "code": "Send({})", "wallet_json": wallet_json},
    )
    text = result_text(result)
    assert "Output:\n(no output)" in text
    assert "Response (Action: Reply):\npong" in text


@pytest.mark.asyncio
async def test_eval_error_field_wins_over_messages(wallet_json):
    client = FakeAOClient(
        result_response={"Error": "syntax error", "Messages": [_message("Reply", "x")]}
    )
    result = await execute_eval_lua(
        client,
        {"process_id": PROCESS_ID, "code": "retrun", "wallet_json": wallet_json},
    )
    assert result.isError is True
    assert "syntax error" in result_text(result)
    assert MESSAGE_ID in result_text(result)


@pytest.mark.asyncio
async def test_eval_error_tagged_message(wallet_json):
    client = FakeAOClient(result_response={"Messages": [_message("Error", "nope")]})
    result = await execute_eval_lua(
        client,
        {"process_id": PROCESS_ID, "code": "error('nope')", "wallet_json": wallet_json},
    )
    assert result.isError is True
    assert "nope" in result_text(result)


# -- ao_list_results ----------------------------------------------------------


@pytest.mark.asyncio
async def test_list_results_empty_is_informational():
    client = FakeAOClient()
    result = await execute_list_results(client, {"process_id": PROCESS_ID})
    assert not result.isError
    assert result_text(result) == f"No results found for process {PROCESS_ID}"
    assert client.calls[0][1]["limit"] == 10
    assert client.calls[0][1]["sort"].value == "DESC"


@pytest.mark.asyncio
async def test_list_results_truncates_long_fields():
    long_output = "x" * 201
    exact_data = "y" * 200
    client = FakeAOClient(
        results_page={
            "edges": [
                {
                    "cursor": "c1",
                    "node": {
                        "Output": {"data": long_output},
                        "Messages": [_message("Notice", exact_data), _message("Second", "z")],
                    },
                },
                {"cursor": "c2", "node": {"Error": "failed"}},
            ]
        }
    )

    result = await execute_list_results(
        client, {"process_id": PROCESS_ID, "limit": 2, "sort": "ASC", "from": "c0"}
    )

    text = result_text(result)
    assert text.startswith(f"Results for process {PROCESS_ID}:\n\n")
    assert "--- Result 1 (cursor: c1) ---" in text
    assert f"Output: {'x' * 200}...\n" in text
    assert long_output not in text
    assert f"Message Data: {exact_data}\n" in text
    assert "Message Action: Notice" in text
    assert "Second" not in text
    assert "--- Result 2 (cursor: c2) ---\nError: failed\n" in text
    assert text.index("c1") < text.index("c2")

    call = client.calls[0][1]
    assert call["limit"] == 2
    assert call["from_cursor"] == "c0"
    assert call["sort"].value == "ASC"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "arguments, message",
    [
        ({"limit": 0}, "field 'limit' must be >= 1"),
        ({"limit": "5"}, "field 'limit' must be an integer"),
        ({"sort": "newest"}, "field 'sort' must be one of: ASC, DESC"),
    ],
)
async def test_list_results_argument_errors(arguments, message):
    client = FakeAOClient()
    result = await execute_list_results(client, {"process_id": PROCESS_ID, **arguments})
    assert result.isError is True
    assert message in result_text(result)
    assert client.calls == []


# -- target ids that are not base64url ----------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize("process_id", ["!" * 43, "A" * 42 + "="])
@pytest.mark.parametrize(
    ("executor", "extra", "prefix"),
    [
        (execute_send_message, {"action": "Transfer"}, "Error sending message: "),
        (execute_eval_lua, {"code": "return 1"}, "Error executing Lua code: "),
    ],
)
async def test_undecodable_target_is_never_submitted(
    httpx_mock, wallet_json, executor, extra, prefix, process_id
):
    arguments = {"process_id": process_id, "wallet_json": wallet_json, **extra}

    async with AOClient(cu_url="http://cu.test", mu_url="http://mu.test") as client:
        result = await executor(client, arguments)

    text = result_text(result)
    assert result.isError is True
    assert text.startswith(prefix)
    assert "invalid target process id" in text
    assert httpx_mock.get_requests() == []


# -- key handling stays off the event loop ------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("module", "executor", "extra"),
    [
        ("send_message", execute_send_message, {"process_id": PROCESS_ID, "action": "Ping"}),
        ("eval_lua", execute_eval_lua, {"process_id": PROCESS_ID, "code": "return 1"}),
        ("spawn_process", execute_spawn_process, {}),
    ],
)
async def test_wallet_key_is_loaded_in_worker_thread(
    monkeypatch, wallet_json, module, executor, extra
):
    loop_thread = threading.get_ident()
    seen: list[int] = []

    def fake_signer(jwk):
        seen.append(threading.get_ident())
        return object()

    monkeypatch.setattr(f"ao_mcp.tools.{module}.create_data_item_signer", fake_signer)
    client = FakeAOClient()

    result = await executor(client, {"wallet_json": wallet_json, **extra})

    assert not result.isError
    assert len(seen) == 1
    assert seen[0] != loop_thread
