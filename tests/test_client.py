"""AsyncCallClient / CallClient end to end with a mocked issuer and fake engine."""

import asyncio

import httpx
import pytest

from conftest import issuer_http, token_handler
from rtc_call import AsyncCallClient, CallClient, CallConfig, RolePolicy, SessionStatus
from rtc_call.models.events import EngineEvent


def make_config(**overrides) -> CallConfig:
    values = {"app_identity": "test-app", "channel_name": "channel-x"}
    values.update(overrides)
    return CallConfig(**values)


class TestSetup:
    @pytest.mark.asyncio
    async def test_personalized_credential_flow(self, engine_factory):
        seen: list[httpx.Request] = []
        client = AsyncCallClient(make_config(), engine_factory, http=issuer_http(token_handler("abc", seen)))
        await client.setup()
        cred = await client.wait_for_credential()

        assert cred is not None and cred.token == "abc"
        assert client.local_uid is not None
        assert seen[0].url.params["uid"] == str(client.local_uid)
        assert client.snapshot().status == SessionStatus.IDLE
        await client.close()

    @pytest.mark.asyncio
    async def test_shared_credential_flow(self, engine_factory):
        seen: list[httpx.Request] = []
        client = AsyncCallClient(
            make_config(personalized_credential=False), engine_factory,
            http=issuer_http(token_handler("abc", seen)),
        )
        await client.setup()
        await client.wait_for_credential()
        await client.start_call()

        assert "uid" not in seen[0].url.params
        assert engine_factory.engine.called("join_channel") == [("join_channel", "abc", "channel-x", None, 0)]
        await client.close()

    @pytest.mark.asyncio
    async def test_permissions_requested_on_mobile_only(self, engine_factory):
        asked = []

        async def permissions():
            asked.append(True)
            return "granted"

        mobile = AsyncCallClient(make_config(platform="android"), engine_factory,
                                 permissions=permissions, http=issuer_http(token_handler()))
        desktop = AsyncCallClient(make_config(platform="linux"), engine_factory,
                                  permissions=permissions, http=issuer_http(token_handler()))
        await mobile.setup()
        await desktop.setup()
        assert asked == [True]
        await mobile.close()
        await desktop.close()

    @pytest.mark.asyncio
    async def test_setup_runs_once(self, engine_factory):
        client = AsyncCallClient(make_config(), engine_factory, http=issuer_http(token_handler()))
        await client.setup()
        await client.setup()
        assert len(engine_factory.engines) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_denied_permissions_do_not_block_setup(self, engine_factory, caplog):
        async def denied():
            raise PermissionError("camera denied")

        client = AsyncCallClient(make_config(platform="android"), engine_factory,
                                 permissions=denied, http=issuer_http(token_handler("abc")))
        with caplog.at_level("WARNING", logger="rtc_call.client"):
            await client.setup()

        assert "camera denied" in caplog.text
        assert len(engine_factory.engines) == 1
        assert client.local_uid is not None
        assert (await client.wait_for_credential()).token == "abc"
        assert await client.start_call()
        await client.close()

    @pytest.mark.asyncio
    async def test_clients_in_one_process_never_share_a_uid(self, engine_factory):
        clients = [
            AsyncCallClient(make_config(uid_length=2), engine_factory, http=issuer_http(token_handler()))
            for _ in range(40)
        ]
        for client in clients:
            await client.setup()
        uids = [client.local_uid for client in clients]
        assert len(set(uids)) == len(uids)
        for client in clients:
            await client.close()

    @pytest.mark.asyncio
    async def test_role_policy_applied(self, engine_factory):
        client = AsyncCallClient(make_config(role_policy=RolePolicy.ALWAYS_VIEWER), engine_factory,
                                 http=issuer_http(token_handler()))
        await client.setup()
        role = client.snapshot().role
        assert (role.is_host, role.is_viewer) == (False, True)
        assert client.render_surfaces.remote
        await client.close()


class TestCallScenarios:
    @pytest.mark.asyncio
    async def test_credential_success_scenario(self, engine_factory):
        client = AsyncCallClient(make_config(), engine_factory, http=issuer_http(token_handler("abc")))
        await client.setup()
        await client.wait_for_credential()

        assert await client.start_call()
        engine = engine_factory.engine
        assert engine.called("join_channel") == [("join_channel", "abc", "channel-x", None, client.local_uid)]

        engine.emit(EngineEvent.JOIN_CHANNEL_SUCCESS, "channel-x", client.local_uid, 12)
        engine.emit(EngineEvent.USER_JOINED, 77, 0)
        engine.emit(EngineEvent.USER_JOINED, 77, 5)
        assert client.snapshot().roster == [77]
        engine.emit(EngineEvent.USER_OFFLINE, 77, 1)
        assert client.snapshot().roster == []

        assert await client.end_call()
        assert client.snapshot().status == SessionStatus.IDLE
        await client.close()

    @pytest.mark.asyncio
    async def test_credential_failure_scenario(self, engine_factory):
        gate = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            await gate.wait()
            return httpx.Response(500, text="issuer down")

        client = AsyncCallClient(make_config(), engine_factory, http=issuer_http(handler))
        await client.setup()

        before = client.snapshot().status
        assert before == SessionStatus.AWAITING_CREDENTIAL
        assert not await client.start_call()
        assert client.snapshot().status == before

        gate.set()
        assert await client.wait_for_credential() is None

        before = client.snapshot().status
        assert not await client.start_call()
        assert client.snapshot().status == before
        assert engine_factory.engine.called("join_channel") == []
        await client.close()

    @pytest.mark.asyncio
    async def test_close_leaves_active_call(self, engine_factory):
        client = AsyncCallClient(make_config(), engine_factory, http=issuer_http(token_handler()))
        await client.setup()
        await client.wait_for_credential()
        await client.start_call()
        engine_factory.engine.emit(EngineEvent.JOIN_CHANNEL_SUCCESS, "channel-x", client.local_uid, 0)

        await client.close()
        assert engine_factory.engine.called("leave_channel")
        assert client.snapshot().status == SessionStatus.IDLE


class TestSyncClient:
    def test_blocking_round_trip(self, engine_factory):
        client = CallClient(make_config(), engine_factory, http=issuer_http(token_handler("abc")))
        client.setup()
        assert client.wait_for_credential().token == "abc"
        assert client.start_call()

        engine_factory.engine.emit(EngineEvent.JOIN_CHANNEL_SUCCESS, "channel-x", client.local_uid, 0)
        assert client.snapshot().joined
        assert client.end_call()
        assert client.snapshot().status == SessionStatus.IDLE
        client.close()
