from .config import STACK_DEPTH
from .errors import StackOverflow, StackUnderflow


class CallStack:
    """Bounded LIFO of subroutine return addresses."""

    def __init__(self, depth=STACK_DEPTH):
        self.depth = depth
        self._items = []

    def __len__(self):
        return len(self._items)

    @property
    def full(self):
        return len(self._items) >= self.depth

    def push(self, address):
        if self.full:
            raise StackOverflow(address)
        self._items.append(address)

    def pop(self):
        if not self._items:
            raise StackUnderflow()
        return self._items.pop()

    def peek(self):
        return self._items[-1] if self._items else None
