from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Cell(Generic[T]):
    """A mutable slot the caller hands to a builder to receive a value.

    Examples:
        >>> code = Cell[int]()
        >>> reqflow.get("example.com").code(code).do()
        >>> code.value
        200
    """

    __slots__ = ("value",)

    def __init__(self, value: Optional[T] = None) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Cell({self.value!r})"
