"""Text Cleaning tests — fallback cleaner and TTS chunking.

Invariants:
    - Cleaned text always ends with terminal punctuation
    - Questions are detected on whole words only
    - Chunks are non-empty and never exceed max_length
"""

from app.core.text_cleaning import chunk_text, clean_text_basic


# -- clean_text_basic ---------------------------------------------------------

def test_splits_camel_case_and_marks_question():
    assert clean_text_basic("helloWorld how are you") == "Hello World how are you?"


def test_statement_gets_period_and_capital():
    assert clean_text_basic("the cat sat") == "The cat sat."


def test_show_is_not_a_question_word():
    assert clean_text_basic("show me the price") == "Show me the price."


def test_drops_consecutive_duplicate_words():
    assert clean_text_basic("the the cat sat") == "The cat sat."


def test_fixes_space_before_comma():
    assert clean_text_basic("hello , world") == "Hello, world."


def test_keeps_decimal_numbers_intact():
    assert clean_text_basic("price is 3.5 dollars") == "Price is 3.5 dollars."


def test_existing_terminal_punctuation_kept():
    assert clean_text_basic("Stop!") == "Stop!"


def test_blank_input_returned_unchanged():
    assert clean_text_basic("   ") == "   "
    assert clean_text_basic("") == ""


# -- chunk_text ---------------------------------------------------------------

def test_chunks_by_sentence():
    assert chunk_text("Hello there. How are you?") == ["Hello there.", "How are you?"]


def test_long_sentence_split_on_spaces():
    chunks = chunk_text("word " * 100, max_length=20)
    assert chunks
    assert all(0 < len(c) <= 20 for c in chunks)
    assert " ".join(chunks).split() == ["word"] * 100


def test_unbreakable_text_hard_split():
    assert chunk_text("a" * 50, max_length=20) == ["a" * 20, "a" * 20, "a" * 10]


def test_empty_text_has_no_chunks():
    assert chunk_text("") == []
