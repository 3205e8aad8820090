"""Testes para o módulo client.py (SlackWorkspace)."""

from unittest import mock

import pytest
from slack_sdk.errors import SlackApiError

from clean_slack.client import CONVERSATION_KINDS, SlackWorkspace, classify_conversation
from clean_slack.models import Channel, ChannelKind, FileRecord, Identity, Message


@pytest.fixture
def web_client():
    """Mock do AsyncWebClient."""
    return mock.AsyncMock()


@pytest.fixture
def workspace(web_client):
    return SlackWorkspace(web_client)


class TestClassifyConversation:
    """Testes para classify_conversation()."""

    def test_im(self):
        assert classify_conversation({"is_im": True}) is ChannelKind.DIRECT_MESSAGE

    def test_mpim_is_group_dm_even_if_private(self):
        """Grupos de DM também vêm com is_private=True."""
        raw = {"is_mpim": True, "is_private": True}
        assert classify_conversation(raw) is ChannelKind.GROUP_DM

    def test_private_channel(self):
        assert classify_conversation({"is_private": True}) is ChannelKind.PRIVATE_CHANNEL

    def test_public_channel_is_ignored(self):
        assert classify_conversation({"is_channel": True}) is None


class TestListMembers:
    """Testes para list_members()."""

    @pytest.mark.asyncio
    async def test_should_map_members(self, workspace, web_client):
        web_client.users_list.return_value = {
            "ok": True,
            "members": [{"id": "U1", "name": "alice"}, {"id": "U2", "name": "bob"}],
        }

        members = await workspace.list_members()

        assert members == [Identity("U1", "alice"), Identity("U2", "bob")]
        web_client.users_list.assert_awaited_once_with()


class TestListConversations:
    """Testes para list_conversations()."""

    @pytest.mark.asyncio
    async def test_should_convert_and_classify(self, workspace, web_client):
        web_client.conversations_list.return_value = {
            "ok": True,
            "channels": [
                {"id": "G1", "name": "mpdm-alice--bob-1", "is_mpim": True, "is_private": True},
                {"id": "C1", "name": "ace-team", "is_private": True},
                {"id": "D1", "is_im": True, "user": "U2"},
                {"id": "C9", "name": "geral", "is_channel": True},
            ],
            "response_metadata": {"next_cursor": "dXNlcjpVMDYxTkZUVDI="},
        }

        page = await workspace.list_conversations(CONVERSATION_KINDS, None)

        assert page.items == [
            Channel("G1", "mpdm-alice--bob-1", ChannelKind.GROUP_DM),
            Channel("C1", "ace-team", ChannelKind.PRIVATE_CHANNEL),
            Channel("D1", "", ChannelKind.DIRECT_MESSAGE, peer_user_id="U2"),
        ]
        assert page.next_cursor == "dXNlcjpVMDYxTkZUVDI="
        web_client.conversations_list.assert_awaited_once_with(
            types="private_channel,mpim,im", cursor=None
        )

    @pytest.mark.asyncio
    async def test_empty_cursor_means_last_page(self, workspace, web_client):
        web_client.conversations_list.return_value = {
            "ok": True,
            "channels": [],
            "response_metadata": {"next_cursor": ""},
        }

        page = await workspace.list_conversations(CONVERSATION_KINDS, "abc")

        assert page.next_cursor is None


class TestListHistory:
    """Testes para list_history()."""

    @pytest.mark.asyncio
    async def test_should_annotate_channel(self, workspace, web_client):
        web_client.conversations_history.return_value = {
            "ok": True,
            "messages": [
                {"ts": "1700000001.000001", "user": "U1", "text": "oi"},
                {"ts": "1700000002.000002", "subtype": "bot_message", "text": "bip"},
            ],
            "has_more": True,
            "response_metadata": {"next_cursor": "next"},
        }

        page = await workspace.list_history("G1", None)

        assert page.items == [
            Message("G1", "1700000001.000001", "U1", "oi"),
            Message("G1", "1700000002.000002", "", "bip"),
        ]
        assert page.next_cursor == "next"

    @pytest.mark.asyncio
    async def test_should_stop_without_has_more(self, workspace, web_client):
        web_client.conversations_history.return_value = {
            "ok": True,
            "messages": [],
            "has_more": False,
            "response_metadata": {"next_cursor": "stale"},
        }

        page = await workspace.list_history("G1", "x")

        assert page.next_cursor is None
        web_client.conversations_history.assert_awaited_once_with(channel="G1", cursor="x")


class TestListFiles:
    """Testes para list_files()."""

    @pytest.mark.asyncio
    async def test_first_page_returns_next_page_number(self, workspace, web_client):
        web_client.files_list.return_value = {
            "ok": True,
            "files": [{"id": "F1", "name": "a.png", "user": "U1", "created": 1600000000}],
            "paging": {"page": 1, "pages": 3},
        }

        page = await workspace.list_files("U1", None)

        assert page.items == [FileRecord("F1", "a.png", "U1", 1600000000)]
        assert page.next_cursor == "2"
        web_client.files_list.assert_awaited_once_with(user="U1", page=1)

    @pytest.mark.asyncio
    async def test_last_page_has_no_cursor(self, workspace, web_client):
        web_client.files_list.return_value = {
            "ok": True,
            "files": [],
            "paging": {"page": 3, "pages": 3},
        }

        page = await workspace.list_files("U1", "3")

        assert page.next_cursor is None
        web_client.files_list.assert_awaited_once_with(user="U1", page=3)


class TestDelete:
    """Testes para delete_message() e delete_file()."""

    @pytest.mark.asyncio
    async def test_delete_message_returns_confirmation(self, workspace, web_client):
        web_client.chat_delete.return_value = {"ok": True, "channel": "G1", "ts": "1.000001"}

        result = await workspace.delete_message("G1", "1.000001")

        assert result == ("G1", "1.000001")
        web_client.chat_delete.assert_awaited_once_with(channel="G1", ts="1.000001")

    @pytest.mark.asyncio
    async def test_delete_file(self, workspace, web_client):
        web_client.files_delete.return_value = {"ok": True}

        await workspace.delete_file("F1")

        web_client.files_delete.assert_awaited_once_with(file="F1")

    @pytest.mark.asyncio
    async def test_errors_propagate(self, workspace, web_client, rate_limit_error):
        web_client.chat_delete.side_effect = rate_limit_error()

        with pytest.raises(SlackApiError):
            await workspace.delete_message("G1", "1.000001")


def test_from_token_creates_async_client():
    workspace = SlackWorkspace.from_token("xoxp-123")
    assert workspace.client.token == "xoxp-123"
