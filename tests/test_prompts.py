from tutor_agent.prompts import build_instructions, initial_message, topic_clause
from tutor_agent.topics import TopicContext

WITH_TOPIC = TopicContext(has_topic=True, topic="photosynthesis")


def test_topic_clause_has_no_separator():
    assert topic_clause(WITH_TOPIC) == "what question they have in thisphotosynthesis"


def test_generic_clause():
    assert topic_clause(TopicContext.none()) == "What would you like to learn?"


def test_instructions_share_persona_text():
    with_topic = build_instructions(WITH_TOPIC)
    without_topic = build_instructions(TopicContext.none())

    for text in (with_topic, without_topic):
        assert "Act as a helpful tutor." in text
        assert "Keep responses concise and clear." in text
        assert "First message should start with Hey" in text

    assert "photosynthesis" in with_topic
    assert "What would you like to learn?" not in with_topic
    assert "What would you like to learn?" in without_topic


def test_initial_messages():
    assert initial_message(WITH_TOPIC) == (
        "Let's explore photosynthesis. What would you like to focus on first?"
    )
    assert initial_message(TopicContext.none()) == "What subject would you like to dive into today?"


def test_topic_with_braces_is_inserted_verbatim():
    context = TopicContext(has_topic=True, topic="sets {a, b}")
    assert "sets {a, b}" in build_instructions(context)
    assert initial_message(context) == "Let's explore sets {a, b}. What would you like to focus on first?"


def test_persona_lines_keep_trailing_spaces():
    text = build_instructions(TopicContext.none())
    assert "Use natural, conversational language. \n" in text
    assert "Keep responses concise and clear. \n" in text
