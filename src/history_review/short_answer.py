"""Short-answer writing practice with sentence starters and an example answer."""

SUBSTANTIAL_ATTEMPT_CHARS = 20


def get_response(store, index: int) -> str:
    return store.load_short_answer_responses().get(index, "")


def save_response(store, index: int, text: str) -> None:
    responses = store.load_short_answer_responses()
    responses[index] = text
    store.save_short_answer_responses(responses)


def next_starter(prompt, revealed: int) -> str | None:
    """The next sentence starter to reveal, or None once all are shown."""
    if revealed < len(prompt.sentence_starters):
        return prompt.sentence_starters[revealed]
    return None


def is_substantial_attempt(text: str) -> bool:
    return len(text.strip()) > SUBSTANTIAL_ATTEMPT_CHARS
