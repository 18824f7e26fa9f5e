# overlay/counter.py
from __future__ import annotations

import logging

log = logging.getLogger(__name__)

FIRST_QUESTION = 1


class QuestionCounter:
    """
    Numéro de question affiché sur l'overlay et repris dans le nom des captures.
    - set(k) accepte tout entier >= 1, le reste (0, négatifs, non-int) retombe sur reset()
    - advance() : +1 exactement, après une capture réussie
    - aucune persistance entre deux lancements
    """

    def __init__(self, start: int = FIRST_QUESTION) -> None:
        self.value = start if isinstance(start, int) and start >= FIRST_QUESTION else FIRST_QUESTION

    def reset(self) -> int:
        self.value = FIRST_QUESTION
        return self.value

    def set(self, k: object) -> int:
        if isinstance(k, bool) or not isinstance(k, int) or k < FIRST_QUESTION:
            log.debug("Counter value %r ignored, resetting", k)
            return self.reset()
        self.value = k
        return self.value

    def advance(self) -> int:
        self.value += 1
        return self.value

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"QuestionCounter({self.value})"
