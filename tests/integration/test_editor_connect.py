"""End-to-end tests: editor sessions talking to a loopback FakeEditor."""

import asyncio

import editor_connect
from editor_connect import EditorSession
from tests.helpers import FakeEditor, wait_for_event, wait_until

HANDSHAKE_REPLY = b'{"handshake": true}\n'


def open_session(editor: FakeEditor, **options: object) -> EditorSession:
    return editor_connect.create(
        {"port": editor.port, "reconnection_delay": 10, **options}
    )


class TestHandshake:
    """Tests for the handshake over a real socket."""

    def test_valid_handshake(self) -> None:
        async def scenario() -> tuple[EditorSession, FakeEditor, list]:
            async with FakeEditor(greeting=HANDSHAKE_REPLY) as editor:
                session = open_session(editor, name="integration")
                invalid: list = []
                session.on("invalid_handshake", invalid.append)

                await wait_for_event(session, "connect")
                await wait_until(lambda: session.is_handshake_complete)
                await wait_until(lambda: editor.received)
                session.close()
                await wait_for_event(session, "close")
                return session, editor, invalid

        session, editor, invalid = asyncio.run(scenario())

        assert invalid == []
        (handshake,) = editor.frames_named("editor-connect")
        assert handshake["handshake"] is True
        assert handshake["pluginId"] == session.plugin_id
        assert handshake["editorId"] == session.id

    def test_invalid_handshake_closes_socket(self) -> None:
        async def scenario() -> tuple:
            async with FakeEditor(greeting=b"{}\n") as editor:
                session = open_session(editor, reconnection=False)

                (message,) = await wait_for_event(session, "invalid_handshake")
                (caused_by_error,) = await wait_for_event(session, "close")
                return message, caused_by_error, session.is_handshake_complete

        message, caused_by_error, complete = asyncio.run(scenario())

        assert message == {}
        assert caused_by_error is False
        assert complete is False

    def test_handshake_split_across_reads(self) -> None:
        async def scenario() -> bool:
            async with FakeEditor() as editor:
                session = open_session(editor)
                await wait_for_event(session, "connect")
                await editor.wait_for_connections()

                editor.write(HANDSHAKE_REPLY[:7])
                await asyncio.sleep(0.05)
                assert session.is_handshake_complete is False

                editor.write(HANDSHAKE_REPLY[7:])
                await wait_until(lambda: session.is_handshake_complete)
                session.close()
                return session.is_handshake_complete

        assert asyncio.run(scenario()) is True


class TestMessages:
    """Tests for traffic after the handshake."""

    def test_messages_are_emitted_in_order(self) -> None:
        async def scenario() -> list:
            async with FakeEditor(greeting=HANDSHAKE_REPLY) as editor:
                session = open_session(editor)
                messages: list = []
                session.on("message", messages.append)
                await wait_until(lambda: session.is_handshake_complete)

                editor.send({"name": "one"}, {"name": "two"})
                editor.send({"name": "three"})
                await wait_until(lambda: len(messages) == 3)
                session.close()
                return messages

        assert asyncio.run(scenario()) == [
            {"name": "one"},
            {"name": "two"},
            {"name": "three"},
        ]

    def test_show_and_erase_error_reach_editor(self) -> None:
        async def scenario() -> tuple[EditorSession, FakeEditor]:
            async with FakeEditor(greeting=HANDSHAKE_REPLY) as editor:
                session = open_session(editor)
                await wait_until(lambda: session.is_handshake_complete)

                session.show_error(
                    {"file": "/src/main.scss", "line": 4, "message": "bad"}, "sass"
                )
                session.erase_error("sass")
                await wait_until(lambda: len(editor.received) == 3)
                session.close()
                return session, editor

        session, editor = asyncio.run(scenario())

        (shown,) = editor.frames_named("ShowError")
        assert shown["task"] == f"sass#{session.plugin_id}"
        assert shown["views"] == ["/src/main.scss"]
        assert shown["data"]["error"]["line"] == 4
        (erased,) = editor.frames_named("EraseError")
        assert erased["views"] == "<all>"
        assert erased["editorId"] == session.id


class TestReconnection:
    """Tests for reconnecting sessions."""

    def test_reconnect_repeats_handshake(self) -> None:
        async def scenario() -> tuple[list, list, bool]:
            async with FakeEditor(greeting=HANDSHAKE_REPLY) as editor:
                session = open_session(editor)
                attempts: list = []
                session.on("reconnect_attempt", attempts.append)
                await wait_until(lambda: session.is_handshake_complete)
                await editor.wait_for_connections()

                editor.drop_clients()
                await wait_for_event(session, "close")
                assert session.is_handshake_complete is False

                await wait_until(lambda: session.is_handshake_complete)
                await wait_until(lambda: len(editor.frames_named("editor-connect")) == 2)
                complete = session.is_handshake_complete
                session.close()
                return attempts, editor.frames_named("editor-connect"), complete

        attempts, handshakes, complete = asyncio.run(scenario())

        assert attempts == [1]
        assert complete is True
        assert handshakes[0]["editorId"] == handshakes[1]["editorId"]
