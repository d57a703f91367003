from .spin import IDENTIFIER_MAX_LENGTH, SpinLedger
from .result import QuizResult

__all__ = [
    "IDENTIFIER_MAX_LENGTH",
    "SpinLedger",
    "QuizResult",
]
