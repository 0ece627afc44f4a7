"""
Plain-text vector reading and writing
"""

import io
import os
from typing import Iterable, Iterator, Optional, Union, TextIO

import numpy as np

from .exceptions import InvalidInputError, DimensionMismatchError

VectorSource = Union[str, os.PathLike, TextIO, np.ndarray, Iterable[Iterable[float]]]


def parse_vectors(text: str, input_size: int) -> np.ndarray:
    """
    Parse whitespace-separated numeric tokens into records of ``input_size``

    Records may span or share lines; only the token count matters.

    Raises:
        InvalidInputError: no tokens, or a token that is not a finite number
        DimensionMismatchError: the token count is not a multiple of input_size
    """
    tokens = text.split()
    if not tokens:
        raise InvalidInputError("Input source contains no vectors")

    values = np.empty(len(tokens), dtype=np.float64)
    for position, token in enumerate(tokens):
        try:
            values[position] = float(token)
        except ValueError:
            raise InvalidInputError(
                f"Non-numeric token {token!r} at position {position}"
            ) from None

    remainder = len(tokens) % input_size
    if remainder:
        raise DimensionMismatchError(
            input_size, remainder, record=len(tokens) // input_size
        )

    return _finalize(values.reshape(-1, input_size))


def read_vectors(source: VectorSource, input_size: int) -> np.ndarray:
    """
    Load an input set from a path, a text stream, or in-memory vectors

    Returns a read-only ``(n_samples, input_size)`` float64 array.
    """
    if isinstance(source, (str, os.PathLike)):
        try:
            with open(source, "r", encoding="utf-8") as f:
                text = f.read()
        except (IOError, OSError, UnicodeDecodeError) as e:
            raise InvalidInputError(f"Failed to read vectors from {source}: {e}")
        return parse_vectors(text, input_size)

    if isinstance(source, io.IOBase) or hasattr(source, "read"):
        try:
            text = source.read()
        except UnicodeDecodeError as e:
            raise InvalidInputError(f"Input stream is not valid text: {e}") from None
        if isinstance(text, bytes):
            raise InvalidInputError("Input stream must be opened in text mode")
        return parse_vectors(text, input_size)

    return _from_records(source, input_size)


def _from_records(records, input_size: int) -> np.ndarray:
    """Validate an in-memory sequence of vectors"""
    if isinstance(records, np.ndarray) and records.ndim == 2:
        if records.shape[1] != input_size:
            raise DimensionMismatchError(input_size, records.shape[1], record=0)
        rows = records
    else:
        rows = []
        for index, record in enumerate(records):
            try:
                row = np.atleast_1d(np.asarray(record))
            except (TypeError, ValueError) as e:
                raise InvalidInputError(f"Malformed record {index}: {e}") from None
            if row.ndim != 1 or row.shape[0] != input_size:
                raise DimensionMismatchError(input_size, row.size, record=index)
            rows.append(row)

    if len(rows) == 0:
        raise InvalidInputError("Input source contains no vectors")

    try:
        data = np.array(rows, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Input vectors must be numeric: {e}") from None

    return _finalize(data)


def _finalize(data: np.ndarray) -> np.ndarray:
    if not np.all(np.isfinite(data)):
        raise InvalidInputError("Input data contains NaN or infinite values")
    data = np.array(data, dtype=np.float64)
    data.setflags(write=False)
    return data


def format_vector(vector: Iterable[float], precision: Optional[int] = None) -> str:
    """Join components with single spaces"""
    if precision is None:
        return " ".join(repr(float(v)) for v in vector)
    return " ".join(f"{float(v):.{precision}g}" for v in vector)


def iter_lines(
    vectors: Iterable[Iterable[float]], precision: Optional[int] = None
) -> Iterator[str]:
    for vector in vectors:
        yield format_vector(vector, precision)


def write_vectors(
    vectors: Iterable[Iterable[float]],
    stream: TextIO,
    precision: Optional[int] = None,
) -> None:
    """Write one vector per line"""
    for line in iter_lines(vectors, precision):
        stream.write(line + "\n")
