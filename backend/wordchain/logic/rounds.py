"""Round configuration and guess matching rules."""

# Number of words in the chain for rounds 1..10.
ROUND_WORD_COUNTS: tuple[int, ...] = (5, 4, 6, 4, 7, 4, 7, 4, 7, 5)
TOTAL_ROUNDS = len(ROUND_WORD_COUNTS)
DEFAULT_WORD_COUNT = 5


def words_for_round(round_number: int) -> int:
    """Return the chain length for a 1-indexed round number."""
    if round_number < 1 or round_number > TOTAL_ROUNDS:
        return DEFAULT_WORD_COUNT
    return ROUND_WORD_COUNTS[round_number - 1]


def is_correct_guess(guess: str | None, target: str | None) -> bool:
    """Case-insensitive comparison that ignores surrounding whitespace."""
    if not guess or not target:
        return False
    return guess.strip().lower() == target.strip().lower()


def next_letter_to_reveal(word: str, revealed: set[int]) -> int | None:
    """Return the lowest unrevealed letter index, never the word's final letter."""
    for index in range(len(word) - 1):
        if index not in revealed:
            return index
    return None
