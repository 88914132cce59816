"""Unit tests for chat assistant and conversation use cases"""

import pytest

from ragflow_bridge.application.use_cases.conversation_use_cases import ConversationUseCase
from ragflow_bridge.domain.entities.chat import ChatAssistant, Conversation
from ragflow_bridge.domain.exceptions import InvalidCompletionRequest


class TestConversationUseCase:
    """Test ConversationUseCase"""

    @pytest.fixture
    def use_case(self, mock_client, mock_assistant_repository, mock_conversation_repository, mock_dataset_repository):
        return ConversationUseCase(
            mock_client, mock_assistant_repository, mock_conversation_repository, mock_dataset_repository
        )

    @pytest.mark.asyncio
    async def test_create_assistant_links_local_dataset(
        self, use_case, mock_client, mock_dataset_repository, mock_assistant_repository, sample_dataset
    ):
        """Test the mirror links the first known dataset"""
        mock_client.create_chat.return_value = {
            "id": "chat-1", "name": "Support", "dataset_ids": ["ds-unknown", "ds-remote-1"]
        }
        mock_dataset_repository.get_by_remote_id.side_effect = (
            lambda remote_id: sample_dataset if remote_id == "ds-remote-1" else None
        )

        assistant = await use_case.create_assistant(
            "Support", dataset_ids=["ds-unknown", "ds-remote-1"], options={"description": "Helpdesk"}
        )

        assert assistant.id == 5
        assert assistant.remote_id == "chat-1"
        assert assistant.dataset_id == 1
        mock_client.create_chat.assert_awaited_once_with(
            name="Support", dataset_ids=["ds-unknown", "ds-remote-1"], description="Helpdesk"
        )
        mock_assistant_repository.upsert.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_assistant_requires_name(self, use_case, mock_client):
        with pytest.raises(ValueError, match="name is required"):
            await use_case.create_assistant("")

        mock_client.create_chat.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_assistants_mirrors_each(self, use_case, mock_client, mock_assistant_repository):
        mock_client.list_chats.return_value = [{"id": "chat-1", "name": "A"}, {"id": "chat-2", "name": "B"}]

        assistants = await use_case.list_assistants(page=2, limit=10, name="A")

        assert [assistant.remote_id for assistant in assistants] == ["chat-1", "chat-2"]
        assert mock_assistant_repository.upsert.await_count == 2
        mock_client.list_chats.assert_awaited_once_with(page=2, page_size=10, name="A")

    @pytest.mark.asyncio
    async def test_update_assistant_requires_data(self, use_case):
        with pytest.raises(ValueError, match="Update data is required"):
            await use_case.update_assistant("chat-1", {})

    @pytest.mark.asyncio
    async def test_update_assistant_refreshes_mirror(self, use_case, mock_client, mock_assistant_repository):
        mirror = ChatAssistant(id=5, remote_id="chat-1", name="Old")
        mock_assistant_repository.get_by_remote_id.return_value = mirror

        await use_case.update_assistant("chat-1", {"name": "New"})

        mock_client.update_chat.assert_awaited_once_with("chat-1", {"name": "New"})
        assert mirror.name == "New"
        mock_assistant_repository.upsert.assert_awaited_once_with(mirror)

    @pytest.mark.asyncio
    async def test_delete_assistant(self, use_case, mock_client, mock_assistant_repository):
        await use_case.delete_assistant("chat-1")

        mock_client.delete_chats.assert_awaited_once_with(["chat-1"])
        mock_assistant_repository.delete_by_remote_id.assert_awaited_once_with("chat-1")

    @pytest.mark.asyncio
    async def test_create_session(self, use_case, mock_client, mock_assistant_repository):
        mock_client.create_session.return_value = {"id": "session-1", "name": "Billing", "messages": []}
        mock_assistant_repository.get_by_remote_id.return_value = ChatAssistant(id=5, remote_id="chat-1", name="A")

        conversation = await use_case.create_session("chat-1", name="Billing")

        assert conversation.id == 7
        assert conversation.title == "Billing"
        assert conversation.chat_assistant_id == 5
        mock_client.create_session.assert_awaited_once_with("chat-1", name="Billing")

    @pytest.mark.asyncio
    async def test_get_history(self, use_case, mock_client):
        mock_client.list_sessions.return_value = [{"id": "session-1", "messages": []}]

        history = await use_case.get_history("chat-1", page=1, limit=5, session_id="session-1")

        assert history == [{"id": "session-1", "messages": []}]
        mock_client.list_sessions.assert_awaited_once_with("chat-1", page=1, page_size=5, id="session-1")

    @pytest.mark.asyncio
    async def test_send_message_requires_question(self, use_case):
        with pytest.raises(ValueError, match="Question is required"):
            await use_case.send_message("chat-1", {"session_id": "session-1"})

    @pytest.mark.asyncio
    async def test_send_message_records_exchange(self, use_case, mock_client, mock_conversation_repository):
        conversation = Conversation(id=7, remote_id="session-1", title="Billing")
        mock_conversation_repository.get_by_remote_id.return_value = conversation
        mock_client.send_message.return_value = {"answer": "Use the reset button.", "session_id": "session-1"}

        result = await use_case.send_message("chat-1", {"question": "How do I reset?", "session_id": "session-1"})

        assert result["answer"] == "Use the reset button."
        mock_client.send_message.assert_awaited_once_with("chat-1", "How do I reset?", session_id="session-1")
        assert conversation.message_count == 2
        assert conversation.messages[-1] == {"role": "assistant", "content": "Use the reset button."}
        assert conversation.last_activity_time is not None

    @pytest.mark.asyncio
    async def test_complete_chat_asks_latest_user_message(self, use_case, mock_client):
        mock_client.send_message.return_value = {"answer": "Hold the reset button"}
        messages = [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello"},
            {"role": "user", "content": "How do I reset?"},
        ]

        result = await use_case.complete_chat("chat-1", {"messages": messages, "session_id": None})

        assert result == {"answer": "Hold the reset button"}
        mock_client.send_message.assert_awaited_once_with("chat-1", "How do I reset?", session_id=None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data, message", [
        (None, "Messages array is required"),
        ({"messages": "hi"}, "Messages array is required"),
        ({"messages": [{"role": "assistant", "content": "Hello"}]}, "Messages must contain a user message"),
    ])
    async def test_complete_chat_validates_messages(self, use_case, mock_client, data, message):
        with pytest.raises(ValueError, match=message):
            await use_case.complete_chat("chat-1", data)
        mock_client.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_openai_completion_passes_options(self, use_case, mock_client):
        mock_client.openai_chat_completion.return_value = {"object": "chat.completion", "choices": []}
        messages = [{"role": "user", "content": "How do I reset?"}]

        result = await use_case.openai_completion(
            "chat-1", {"model": "model", "messages": messages, "stream": False, "temperature": 0.2}
        )

        assert result["object"] == "chat.completion"
        mock_client.openai_chat_completion.assert_awaited_once_with(
            "chat-1", "model", messages, stream=False, temperature=0.2
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data, param", [
        ({"messages": [{"role": "user", "content": "hi"}]}, "model"),
        ({"model": "model", "messages": []}, "messages"),
        ({"model": "model", "messages": ["hi"]}, "messages"),
        ({"model": "model", "messages": [{"role": "user", "content": "hi"}], "stream": True}, "stream"),
    ])
    async def test_openai_completion_rejects_invalid_request(self, use_case, mock_client, data, param):
        with pytest.raises(InvalidCompletionRequest) as exc_info:
            await use_case.openai_completion("chat-1", data)

        assert exc_info.value.param == param
        mock_client.openai_chat_completion.assert_not_awaited()
