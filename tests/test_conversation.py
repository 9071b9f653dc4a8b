from llm import Conversation


def test_messages_are_kept_in_order():
    conversation = Conversation()
    conversation.add("user", "hello")
    conversation.add("assistant", "hi there")

    messages = conversation.messages()

    assert [(m.role, m.content) for m in messages] == [
        ("user", "hello"),
        ("assistant", "hi there"),
    ]
    assert all(m.timestamp for m in messages)


def test_max_messages_drops_oldest_first():
    conversation = Conversation(max_messages=2)
    for i in range(3):
        conversation.add("user", str(i))

    assert [m.content for m in conversation.messages()] == ["1", "2"]


def test_messages_returns_copy_and_clear_empties():
    conversation = Conversation()
    conversation.add("user", "hello")

    conversation.messages().clear()
    assert len(conversation) == 1

    conversation.clear()
    assert conversation.messages() == []
