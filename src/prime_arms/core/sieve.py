"""Prime number generation.

``generate_primes`` / ``generate_n_primes`` are the bulk generators used to
feed the arm analysis. ``extend_primes`` produces ground-truth continuations of
an already known prefix for scoring predictions.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from prime_arms.core.errors import InvalidExtensionLength


def _numpy_sieve(limit: int) -> np.ndarray:
    """NumPy-based Sieve of Eratosthenes.

    Args:
        limit: Upper bound for prime generation.

    Returns:
        Array of prime numbers up to limit.
    """
    if limit < 2:
        return np.array([], dtype=np.int64)

    is_prime = np.ones(limit + 1, dtype=bool)
    is_prime[0] = False
    is_prime[1] = False

    for i in range(2, int(np.sqrt(limit)) + 1):
        if is_prime[i]:
            is_prime[i*i::i] = False

    return np.nonzero(is_prime)[0].astype(np.int64)


def generate_primes(limit: int) -> np.ndarray:
    """Generate all prime numbers up to and including limit.

    Args:
        limit: Upper bound for prime generation (inclusive).

    Returns:
        Array of prime numbers up to limit.

    Raises:
        ValueError: If limit is less than 2.
    """
    if limit < 2:
        raise ValueError(f"Limit must be >= 2, got {limit}")

    return _numpy_sieve(limit)


def generate_n_primes(n: int) -> np.ndarray:
    """Generate the first n prime numbers.

    Uses the prime number theorem to estimate upper bound, then generates
    primes up to that bound and returns the first n.

    Args:
        n: Number of primes to generate.

    Returns:
        Array of the first n prime numbers.

    Raises:
        ValueError: If n is less than 1.
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")

    if n == 1:
        return np.array([2], dtype=np.int64)

    upper_bound = max(100, int(n * (np.log(n) + np.log(np.log(n + 1)) + 2)))

    primes = generate_primes(upper_bound)
    while len(primes) < n:
        upper_bound = int(upper_bound * 1.5)
        primes = generate_primes(upper_bound)

    return primes[:n]


def extend_primes(known: Sequence[int], target_length: int) -> list[int]:
    """Extend an ascending prime prefix to target_length entries.

    The known entries are returned unchanged; each further prime is found by
    trial division of successive candidates against the primes collected so
    far, up to the candidate's square root. Nothing is shared between calls,
    so the result depends only on the arguments.

    Args:
        known: Ascending prime prefix (may be empty).
        target_length: Total number of primes wanted.

    Returns:
        New list of length target_length starting with known.

    Raises:
        InvalidExtensionLength: If target_length < len(known).
    """
    if target_length < len(known):
        raise InvalidExtensionLength(target_length, len(known))

    primes = [int(p) for p in known]
    candidate = primes[-1] + 1 if primes else 2

    while len(primes) < target_length:
        candidate_is_prime = True
        for p in primes:
            if p * p > candidate:
                break
            if candidate % p == 0:
                candidate_is_prime = False
                break
        if candidate_is_prime:
            primes.append(candidate)
        candidate += 1

    return primes
