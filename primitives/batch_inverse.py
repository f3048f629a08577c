"""Montgomery batch inversion for prime-field galois arrays.

The Montgomery trick converts N field inversions into 3N multiplications + 1
inversion. Every inversion performed by a divisor run goes through
batch_inverse(), so a run costs exactly one call to _invert().
"""

from typing import List

import galois
import numpy as np

from primitives.errors import Undefined


def _invert(value: galois.FieldArray) -> galois.FieldArray:
    """The single field inversion of a batch."""
    return value ** -1


def batch_inverse(values: galois.FieldArray) -> galois.FieldArray:
    """Montgomery batch inversion for any galois array.

    Algorithm:
    1. Prefix products: prefix[i] = a[0] * ... * a[i]
    2. Suffix products: suffix[i] = a[i] * ... * a[N-1]
    3. Single inversion: inv_total = prefix[N-1]^(-1)
    4. result[i] = prefix[i-1] * suffix[i+1] * inv_total

    Args:
        values: 1-d galois FieldArray to invert

    Returns:
        Galois FieldArray where result[i] = values[i]^(-1)

    Raises:
        Undefined: If any element is zero (the whole batch fails)
    """
    n = len(values)
    if n == 0:
        return values

    zeros = np.flatnonzero(values == 0)
    if len(zeros) > 0:
        raise Undefined(f"Cannot invert zero field element at position {int(zeros[0])}")

    field_type = type(values)
    if n == 1:
        return _invert(values[0]).reshape(1)

    prefix = np.cumprod(values)
    suffix = np.cumprod(values[::-1])[::-1]

    # Only expensive operation
    inv_total = _invert(prefix[n - 1])

    # Exclusive prefix/suffix products, padded with the multiplicative identity
    before = field_type.Ones(n)
    before[1:] = prefix[:-1]
    after = field_type.Ones(n)
    after[:-1] = suffix[1:]

    return before * after * inv_total


def batch_inverse_list(values: List[galois.FieldArray]) -> List[galois.FieldArray]:
    """Montgomery batch inversion (list interface).

    Args:
        values: List of field scalars of one galois field

    Returns:
        List where result[i] = values[i]^(-1)
    """
    if len(values) == 0:
        return []
    field_type = type(values[0])
    arr = field_type([int(v) for v in values])
    return list(batch_inverse(arr))
