"""Prime fields GF(p) for divisor arithmetic.

Uses galois library for all field arithmetic. A field is a galois FieldArray
subclass: 0-d arrays act as scalars and 1-d arrays as evaluation vectors.

galois.GF() looks for a primitive element by factoring p - 1, which is slow
for 256-bit moduli. Named fields pass a known generator with verify=False;
only ring arithmetic is used here, never discrete logarithms.
"""

import functools
from typing import Optional, Type

import galois

# --- Named Moduli ---

SECP256K1_PRIME = 2**256 - 2**32 - 977
"""secp256k1 base field; 3 generates its multiplicative group."""

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001
"""p = 2^64 - 2^32 + 1; 7 generates its multiplicative group."""

_KNOWN_GENERATORS = {
    SECP256K1_PRIME: 3,
    GOLDILOCKS_PRIME: 7,
}

FieldClass = Type[galois.FieldArray]


# --- Field Construction ---

@functools.lru_cache(maxsize=None)
def prime_field(p: int, primitive_element: Optional[int] = None) -> FieldClass:
    """Return the galois class for GF(p).

    Args:
        p: Prime modulus
        primitive_element: Known generator of GF(p)*; looked up for named
            moduli, otherwise galois computes one

    Returns:
        FieldArray subclass for GF(p)
    """
    if primitive_element is None:
        primitive_element = _KNOWN_GENERATORS.get(p)
    if primitive_element is None:
        return galois.GF(p)
    return galois.GF(p, primitive_element=primitive_element, verify=False)


def secp256k1_field() -> FieldClass:
    """Base field of secp256k1."""
    return prime_field(SECP256K1_PRIME)


def goldilocks_field() -> FieldClass:
    """Goldilocks prime field."""
    return prime_field(GOLDILOCKS_PRIME)
