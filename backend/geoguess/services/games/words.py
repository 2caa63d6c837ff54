import json
import random
import re
import unicodedata
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from geoguess.errors import InvalidModeError, WordPoolError
from . import MODES


DEFAULT_DATASET = Path(__file__).resolve().parents[2] / 'data' / 'locations.json'

_NON_LETTERS = re.compile(r'[^A-Z]')


def normalize_name(name: str) -> str:
    """Fold a place name to the uppercase A-Z form used as a target word.

    "Côte d'Ivoire" -> "COTEDIVOIRE"
    """
    folded = unicodedata.normalize('NFKD', name)
    folded = ''.join(ch for ch in folded if not unicodedata.combining(ch))
    return _NON_LETTERS.sub('', folded.upper())


class WordPool:
    """Read-only pools of countries, capital cities and their union."""

    def __init__(self, countries: Iterable[str], capitals: Iterable[str], rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()
        countries_set = frozenset(w for w in (normalize_name(n) for n in countries) if w)
        capitals_set = frozenset(w for w in (normalize_name(n) for n in capitals) if w)
        self._pools: Dict[str, Tuple[str, ...]] = {
            'countries': tuple(sorted(countries_set)),
            'cities': tuple(sorted(capitals_set)),
            'both': tuple(sorted(countries_set | capitals_set)),
        }
        self._members: Dict[str, FrozenSet[str]] = {
            mode: frozenset(words) for mode, words in self._pools.items()
        }
        empty = [mode for mode, words in self._pools.items() if not words]
        if empty:
            raise WordPoolError(f"Word pool is empty for mode(s): {', '.join(empty)}")

    @classmethod
    def from_file(cls, path=None, rng: Optional[random.Random] = None) -> 'WordPool':
        path = Path(path) if path else DEFAULT_DATASET
        try:
            with open(path, encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise WordPoolError(f'Could not load word pool from {path}: {exc}') from exc
        if not isinstance(data, dict):
            raise WordPoolError(f'Word pool file {path} must contain a JSON object')
        return cls(data.get('countries') or [], data.get('capitals') or [], rng=rng)

    def _pool(self, mode: str) -> Tuple[str, ...]:
        try:
            return self._pools[mode]
        except (KeyError, TypeError):
            raise InvalidModeError() from None

    def draw(self, mode: str) -> str:
        return self._rng.choice(self._pool(mode))

    def contains(self, mode: str, word: str) -> bool:
        self._pool(mode)
        return word in self._members[mode]

    def words(self, mode: str) -> Tuple[str, ...]:
        return self._pool(mode)

    def sizes(self) -> Dict[str, int]:
        return {mode: len(self._pools[mode]) for mode in MODES}
