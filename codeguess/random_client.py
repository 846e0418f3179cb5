"""
- HTTP call with clear fallback
Get a random permutation of 0..n-1 from random.org's sequence generator.
If anything goes wrong (no internet, timeout, bad response), we fall back
to a local secure shuffle so the game still works.
"""

import logging
from secrets import SystemRandom
from typing import List

import requests

from .types import Shuffler

logger = logging.getLogger("codeguess.random_client")

RANDOM_URL = "https://www.random.org/sequences/"
DEFAULT_TIMEOUT = 3.0

_system_random = SystemRandom()


def local_permutation(n: int) -> List[int]:
    """Secure local shuffle of 0..n-1."""
    items = list(range(n))
    _system_random.shuffle(items)
    return items


def fetch_permutation(n: int, timeout: float = DEFAULT_TIMEOUT) -> List[int]:
    if n <= 1:
        return list(range(n))

    # Parameters to send to random.org
    params = {
        "min": 0,          # smallest value in the sequence
        "max": n - 1,      # largest value in the sequence
        "col": 1,          # one number per line
        "format": "plain", # plain text response
        "rnd": "new",      # always generate a new sequence
    }

    try:
        response = requests.get(RANDOM_URL, params=params, timeout=timeout)

        # If the response was not 200 OK, this will raise an error
        response.raise_for_status()

        # The body looks like:
        #   3\n0\n2\n1\n
        values = [int(line.strip()) for line in response.text.splitlines() if line.strip()]

        # Must be exactly a permutation of 0..n-1
        if sorted(values) != list(range(n)):
            raise ValueError(f"random.org returned {values!r}, not a permutation of 0..{n - 1}.")

        return values

    except (requests.RequestException, ValueError) as exc:
        logger.warning("random.org unavailable (%s); using local shuffle", exc)
        return local_permutation(n)


def make_shuffler(use_random_org: bool = True, timeout: float = DEFAULT_TIMEOUT) -> Shuffler:
    """Pick the randomness source the rest of the game is handed."""
    if not use_random_org:
        return local_permutation

    def shuffle(n: int) -> List[int]:
        return fetch_permutation(n, timeout=timeout)

    return shuffle
