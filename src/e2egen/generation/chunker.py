"""Greedy, order-preserving partitioning of contexts into request-sized chunks."""

from e2egen.schemas.generation import CodeContext

# Rough characters-per-token ratio used to turn a token ceiling into a size budget
CHARS_PER_TOKEN = 4


def chunk_budget(max_tokens: int) -> int:
    """Half the token ceiling goes to source context; the rest is left for the reply."""
    return (max_tokens // 2) * CHARS_PER_TOKEN


def chunk_contexts(contexts: list[CodeContext], budget: int) -> list[list[CodeContext]]:
    """Split ``contexts`` into consecutive chunks whose sizes sum to at most ``budget``.

    A context larger than the budget on its own gets a chunk of its own; it
    is never split or dropped. Flattening the result gives back the input.
    """
    if budget <= 0:
        raise ValueError(f"Chunk budget must be positive, got {budget}")

    chunks: list[list[CodeContext]] = []
    current: list[CodeContext] = []
    current_size = 0
    for context in contexts:
        if current and current_size + context.size > budget:
            chunks.append(current)
            current, current_size = [], 0
        current.append(context)
        current_size += context.size
    if current:
        chunks.append(current)
    return chunks
