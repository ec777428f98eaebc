"""
Socket.IO connection registry and handshake tests
"""
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from socketio.exceptions import ConnectionRefusedError as SocketConnectionRefused

from core.exceptions import AuthenticationException
from infrastructure.realtime import SocketIOConnectionRegistry
from infrastructure.realtime.connection_registry import user_room
from presentation.realtime import register_socket_handlers

from conftest import make_user


@pytest.fixture
def sio():
    server = MagicMock()
    server.enter_room = AsyncMock()
    server.emit = AsyncMock()
    return server


@pytest.fixture
def registry(sio):
    return SocketIOConnectionRegistry(sio)


class TestConnectionRegistry:
    @pytest.mark.asyncio
    async def test_register_joins_user_room(self, registry, sio):
        user_id = uuid4()
        await registry.register(user_id, "sid-1")
        await registry.register(user_id, "sid-2")

        sio.enter_room.assert_any_await("sid-1", user_room(user_id))
        assert registry.lookup(user_id) == {"sid-1", "sid-2"}
        assert registry.is_online(user_id)
        assert not registry.is_online(uuid4())

    @pytest.mark.asyncio
    async def test_unregister_forgets_socket(self, registry):
        user_id = uuid4()
        await registry.register(user_id, "sid-1")
        await registry.register(user_id, "sid-2")

        assert await registry.unregister("sid-1") == user_id
        assert registry.lookup(user_id) == {"sid-2"}

        await registry.unregister("sid-2")
        assert registry.lookup(user_id) == set()
        assert await registry.unregister("sid-2") is None

    @pytest.mark.asyncio
    async def test_send_to_user_emits_to_room(self, registry, sio):
        user_id = uuid4()
        await registry.send_to_user(user_id, "notification", {"id": "n-1"})
        sio.emit.assert_awaited_once_with("notification", {"id": "n-1"}, room=f"user:{user_id}")


class TestSocketHandlers:
    def _handlers(self, sio, registry, authenticate):
        register_socket_handlers(sio, registry, authenticate)
        return {call.args[0]: call.args[1] for call in sio.on.call_args_list}

    @pytest.mark.asyncio
    async def test_connect_with_valid_token(self, sio, registry):
        user = make_user()
        authenticate = AsyncMock(return_value=user)
        handlers = self._handlers(sio, registry, authenticate)

        await handlers["connect"]("sid-1", {}, {"token": "Bearer abc"})

        authenticate.assert_awaited_once_with("abc")
        assert registry.lookup(user.id) == {"sid-1"}
        sio.emit.assert_awaited_once_with("authenticated", {"user_id": str(user.id)}, to="sid-1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("auth", [None, {}, {"token": ""}, "abc"])
    async def test_connect_without_token_is_refused(self, sio, registry, auth):
        handlers = self._handlers(sio, registry, AsyncMock())
        with pytest.raises(SocketConnectionRefused):
            await handlers["connect"]("sid-1", {}, auth)

    @pytest.mark.asyncio
    async def test_connect_with_bad_token_is_refused(self, sio, registry):
        authenticate = AsyncMock(side_effect=AuthenticationException("Invalid or expired token"))
        handlers = self._handlers(sio, registry, authenticate)
        with pytest.raises(SocketConnectionRefused):
            await handlers["connect"]("sid-1", {}, {"token": "abc"})

    @pytest.mark.asyncio
    async def test_disconnect_unregisters(self, sio, registry):
        user = make_user()
        handlers = self._handlers(sio, registry, AsyncMock(return_value=user))
        await handlers["connect"]("sid-1", {}, {"token": "abc"})

        await handlers["disconnect"]("sid-1")
        assert registry.lookup(user.id) == set()
