from typing import Iterator, TypeVar

T = TypeVar("T")


def maybe(value: T | None) -> Iterator[T]:
    """Iterates over zero or one value, for use in generator expressions."""
    if value is not None:
        yield value


def must(value: T | None) -> T:
    assert value is not None
    return value
