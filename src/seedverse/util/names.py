"""Markov-chain name generator.

Names are built one letter at a time from second-order letter transition
frequencies learned from a list of gods, emperors and planets, real and
fictional (``seedverse/data/names.txt``). The backtick character marks the
start and end of a word.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from importlib.resources import files
from pathlib import Path

import numpy as np

from seedverse import config
from seedverse.exceptions import ResourceUnavailable
from seedverse.util.keyed_random import KeyedRandom

logger = logging.getLogger(__name__)

_BOUNDARY = "`"
_N_SYMBOLS = 27


def _index(char):
    return ord(char) - ord(_BOUNDARY)


@lru_cache(maxsize=1)
def _transition_tables():
    """
    Cumulative probability tables for the first letter and for each letter
    following a pair of letters
    """
    try:
        text = files("seedverse").joinpath(Path("data", "names.txt")).read_text()
    except OSError as err:
        raise ResourceUnavailable("Could not read the bundled name list") from err

    initials = np.zeros(_N_SYMBOLS)
    counts = np.zeros((_N_SYMBOLS, _N_SYMBOLS, _N_SYMBOLS))
    for raw in text.split(","):
        letters = re.sub("[^a-zA-Z]", "", raw).lower()
        if not letters:
            continue
        word = _BOUNDARY + letters + _BOUNDARY
        initials[_index(word[1])] += 1
        for i in range(len(word) - 2):
            counts[_index(word[i]), _index(word[i + 1]), _index(word[i + 2])] += 1

    totals = counts.sum(axis=2, keepdims=True)
    probabilities = np.divide(
        counts, totals, out=np.zeros_like(counts), where=totals > 0
    )
    return np.cumsum(initials / initials.sum()), np.cumsum(probabilities, axis=2)


def _pick(cumulative, r):
    """First symbol whose cumulative probability exceeds ``r``, else None."""
    j = int(np.searchsorted(cumulative, r, side="right"))
    return j if j < _N_SYMBOLS else None


class NameGenerator:
    """
    Generates lowercase names deterministically from a seed string, e.g. the
    name of the parent body
    """

    def __init__(self, seed):
        self.random = KeyedRandom(seed + " names")
        self.initials, self.transitions = _transition_tables()

    def name(self, seed):
        """
        Generate a name from a discriminator string.

        Candidate words shorter than a random minimum length or longer than
        ``config.MAX_NAME_LENGTH`` are thrown away and the walk restarted with
        a new key, up to ``config.MAX_NAME_ATTEMPTS`` times.
        """
        random = self.random
        min_length = random.randint(seed + " min length", *config.MIN_NAME_LENGTH)
        max_length = config.MAX_NAME_LENGTH
        for k in range(config.MAX_NAME_ATTEMPTS):
            word = self._walk(seed, k, max_length)
            if min_length <= len(word) <= max_length:
                return word
        logger.debug("Name attempts exhausted for %r", seed)
        raise ResourceUnavailable(
            f"No name between {min_length} and {max_length} letters found for "
            f"seed {seed!r} after {config.MAX_NAME_ATTEMPTS} attempts"
        )

    def _walk(self, seed, k, max_length):
        random = self.random
        first = _pick(self.initials, random.rand(f"{seed} initial {k}"))
        if first is None:
            return ""
        word = _BOUNDARY + chr(ord(_BOUNDARY) + first)
        i = 0
        while not word.endswith(_BOUNDARY):
            if len(word) > max_length + 2:
                # Too long already, the caller will reject it
                break
            cumulative = self.transitions[_index(word[i]), _index(word[i + 1])]
            nxt = _pick(cumulative, random.rand(f"{seed}{i}{k}"))
            word += _BOUNDARY if nxt is None else chr(ord(_BOUNDARY) + nxt)
            i += 1
        return word.strip(_BOUNDARY)
