import enum
from typing import List


class LetterFeedback(str, enum.Enum):
    CORRECT = 'correct'
    PRESENT = 'present'
    ABSENT = 'absent'


def evaluate_guess(guess: str, answer: str) -> List[LetterFeedback]:
    """Score every position of ``guess`` against ``answer``.

    Both words must already be normalized and of equal length. PRESENT is a
    plain membership test: a letter that appears once in the answer is
    marked PRESENT at every mismatched position it occupies in the guess.
    """
    if len(guess) != len(answer):
        raise ValueError('guess and answer must have the same length')
    feedback = []
    for position, letter in enumerate(guess):
        if letter == answer[position]:
            feedback.append(LetterFeedback.CORRECT)
        elif letter in answer:
            feedback.append(LetterFeedback.PRESENT)
        else:
            feedback.append(LetterFeedback.ABSENT)
    return feedback
