"""Text Cleaning — deterministic fallback cleaner and TTS sentence chunking.

Invariants:
    - clean_text_basic() output always ends with terminal punctuation (. ! ? or ।)
    - clean_text_basic() never leaves consecutive duplicate words
    - chunk_text() chunks are non-empty and never longer than max_length
    - Pure functions, no I/O

Design Decisions:
    - Basic cleaner only runs when Gemini is unavailable or rate limited;
      it fixes spacing/punctuation but never rewrites words
    - Question detection matches whole words: "show" must not count as "how"
"""

import re

QUESTION_WORDS = frozenset({
    "what", "when", "where", "who", "why", "how", "can", "could", "would",
    "will", "do", "does", "tell", "explain", "describe",
    # romanized Hindi
    "kya", "kaise", "kahan", "kab", "kaun",
})

_TERMINAL = re.compile(r"[.!?।]$")
_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")
_LETTER_DIGIT = re.compile(r"([a-zA-Z])(\d)")
_DIGIT_LETTER = re.compile(r"(\d)([a-zA-Z])")
_WHITESPACE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([.!?,:;।])")
_SPACE_AFTER_PUNCT = re.compile(r"([.!?,:;।])(?=\S)")
_SENTENCE_START = re.compile(r"(^|[.!?]\s+)([a-z])")
_SENTENCE = re.compile(r"[^.!?]+[.!?]?(?:\s+|$)")


def clean_text_basic(text: str) -> str:
    """Fix spacing, punctuation and capitalization without a language model."""
    if not text or not text.strip():
        return text

    cleaned = _LOWER_UPPER.sub(r"\1 \2", text)
    cleaned = _LETTER_DIGIT.sub(r"\1 \2", cleaned)
    cleaned = _DIGIT_LETTER.sub(r"\1 \2", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()

    if not _TERMINAL.search(cleaned):
        cleaned += "?" if _is_question(cleaned) else "."

    cleaned = _SPACE_BEFORE_PUNCT.sub(r"\1", cleaned)
    cleaned = _SPACE_AFTER_PUNCT.sub(r"\1 ", cleaned)
    # digits keep their separators: "3.5", "10,000"
    cleaned = re.sub(r"(\d[.,]) (\d)", r"\1\2", cleaned)
    cleaned = _SENTENCE_START.sub(lambda m: m.group(1) + m.group(2).upper(), cleaned)

    return _drop_repeated_words(cleaned)


def _is_question(text: str) -> bool:
    words = re.findall(r"[a-z]+", text.lower())
    return any(w in QUESTION_WORDS for w in words)


def _drop_repeated_words(text: str) -> str:
    result: list[str] = []
    for word in text.split(" "):
        if result and word.lower() == result[-1].lower():
            continue
        result.append(word)
    return " ".join(result)


def chunk_text(text: str, max_length: int = 180) -> list[str]:
    """Split text into sentence chunks short enough for the TTS endpoint."""
    chunks: list[str] = []
    for match in _SENTENCE.finditer(text or ""):
        current = match.group(0).strip()
        while current:
            if len(current) <= max_length:
                chunks.append(current)
                break
            split_at = max(
                current.rfind(",", 0, max_length),
                current.rfind(" ", 0, max_length),
            )
            if split_at <= 0:
                chunks.append(current[:max_length])
                current = current[max_length:].strip()
                continue
            chunks.append(current[:split_at + 1].strip())
            current = current[split_at + 1:].strip()
    return [c for c in chunks if c]
