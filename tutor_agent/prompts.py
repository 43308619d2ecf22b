"""Prompt text for the tutor persona and its opening line."""

from .topics import TopicContext

GENERIC_CLAUSE = "What would you like to learn?"

# The topic follows "in this" with no space in between (see DESIGN.md).
TOPIC_CLAUSE_PREFIX = "what question they have in this"

INSTRUCTIONS_TEMPLATE = """
        Act as a helpful tutor. Use natural, conversational language. 
        Focus on the student's curiosity. Ask open-ended questions.
        Keep responses concise and clear. 
        If the user asks a question, respond with a concise answer.
        First message should start with Hey, then ask about,
        {clause}
      """

TOPIC_GREETING = "Let's explore {topic}. What would you like to focus on first?"
GENERIC_GREETING = "What subject would you like to dive into today?"


def topic_clause(context: TopicContext) -> str:
    if context.has_topic:
        return TOPIC_CLAUSE_PREFIX + context.topic
    return GENERIC_CLAUSE


def build_instructions(context: TopicContext) -> str:
    """Instructions for the realtime model, branching on the topic lookup."""
    return INSTRUCTIONS_TEMPLATE.format(clause=topic_clause(context))


def initial_message(context: TopicContext) -> str:
    """The assistant's opening message seeded into the conversation."""
    if context.has_topic:
        return TOPIC_GREETING.format(topic=context.topic)
    return GENERIC_GREETING
