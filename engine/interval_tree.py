"""
Augmented AVL interval tree over integer day numbers.

Each node holds a closed interval [low, high] and a payload. Nodes are
ordered by (low, seq), where seq is the insertion sequence number, and carry
the maximum `high` of their subtree so stabbing and overlap queries can skip
whole branches. Query results come back in insertion order.
"""

from typing import Generic, Iterator, Optional, TypeVar

P = TypeVar('P')


class _Node(Generic[P]):
    __slots__ = ['low', 'high', 'seq', 'payload', 'left', 'right', 'max_high', 'height']

    def __init__(self, low: int, high: int, seq: int, payload: P):
        self.low = low
        self.high = high
        self.seq = seq
        self.payload = payload
        self.left: Optional['_Node[P]'] = None
        self.right: Optional['_Node[P]'] = None
        self.max_high = high
        self.height = 1

    @property
    def key(self) -> tuple[int, int]:
        return (self.low, self.seq)


def _height(node: Optional[_Node]) -> int:
    return node.height if node else 0


def _refresh(node: _Node):
    node.height = 1 + max(_height(node.left), _height(node.right))
    top = node.high
    if node.left and node.left.max_high > top:
        top = node.left.max_high
    if node.right and node.right.max_high > top:
        top = node.right.max_high
    node.max_high = top


def _rotate_left(x: _Node) -> _Node:
    y = x.right
    x.right = y.left
    y.left = x
    _refresh(x)
    _refresh(y)
    return y


def _rotate_right(y: _Node) -> _Node:
    x = y.left
    y.left = x.right
    x.right = y
    _refresh(y)
    _refresh(x)
    return x


def _balance(node: _Node) -> _Node:
    _refresh(node)
    skew = _height(node.left) - _height(node.right)
    if skew > 1:
        if _height(node.left.left) < _height(node.left.right):
            node.left = _rotate_left(node.left)
        return _rotate_right(node)
    if skew < -1:
        if _height(node.right.right) < _height(node.right.left):
            node.right = _rotate_right(node.right)
        return _rotate_left(node)
    return node


class IntervalTree(Generic[P]):
    """Closed integer intervals with payloads."""

    def __init__(self):
        self._root: Optional[_Node[P]] = None
        self._next_seq = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    # --- Mutation ---

    def insert(self, low: int, high: int, payload: P) -> int:
        """Add [low, high]; returns a handle usable with remove()."""
        if high < low:
            raise ValueError(f"Interval [{low}, {high}] is inverted")
        seq = self._next_seq
        self._next_seq += 1
        self._root = self._insert(self._root, _Node(low, high, seq, payload))
        self._size += 1
        return seq

    def _insert(self, node: Optional[_Node[P]], new: _Node[P]) -> _Node[P]:
        if node is None:
            return new
        if new.key < node.key:
            node.left = self._insert(node.left, new)
        else:
            node.right = self._insert(node.right, new)
        return _balance(node)

    def remove(self, low: int, handle: int) -> bool:
        """Remove the interval inserted with `handle` starting at `low`."""
        self._root, removed = self._remove(self._root, (low, handle))
        if removed:
            self._size -= 1
        return removed

    def _remove(self, node: Optional[_Node[P]], key: tuple[int, int]) -> tuple[Optional[_Node[P]], bool]:
        if node is None:
            return None, False
        if key < node.key:
            node.left, removed = self._remove(node.left, key)
        elif key > node.key:
            node.right, removed = self._remove(node.right, key)
        else:
            if node.left is None:
                return node.right, True
            if node.right is None:
                return node.left, True
            successor = node.right
            while successor.left:
                successor = successor.left
            node.right, _ = self._remove(node.right, successor.key)
            successor.left, successor.right = node.left, node.right
            return _balance(successor), True
        return _balance(node), removed

    # --- Queries ---

    def stab(self, point: int) -> list[P]:
        """Payloads of every interval containing `point`, in insertion order."""
        return self.overlapping(point, point)

    def overlapping(self, low: int, high: int) -> list[P]:
        """Payloads of every interval intersecting [low, high], in insertion order."""
        hits: list[tuple[int, P]] = []
        stack = [self._root] if self._root else []
        while stack:
            node = stack.pop()
            if node.max_high < low:
                continue
            if node.left:
                stack.append(node.left)
            if node.low <= high:
                if node.high >= low:
                    hits.append((node.seq, node.payload))
                if node.right:
                    stack.append(node.right)
        hits.sort(key=lambda hit: hit[0])
        return [payload for _, payload in hits]

    def __iter__(self) -> Iterator[tuple[int, int, P]]:
        """(low, high, payload) in (low, insertion) order."""
        def _walk(node):
            if node:
                yield from _walk(node.left)
                yield node.low, node.high, node.payload
                yield from _walk(node.right)
        return _walk(self._root)

    def verify_integrity(self):
        """Raise RuntimeError if the AVL balance or max_high augmentation is broken."""
        def _check(node) -> tuple[int, float]:
            if node is None:
                return 0, float('-inf')
            left_h, left_max = _check(node.left)
            right_h, right_max = _check(node.right)
            if abs(left_h - right_h) > 1:
                raise RuntimeError(f"AVL violation at {node.key}")
            expected = max(node.high, left_max, right_max)
            if node.max_high != expected:
                raise RuntimeError(f"max_high violation at {node.key}")
            if node.height != 1 + max(left_h, right_h):
                raise RuntimeError(f"height violation at {node.key}")
            return node.height, expected
        _check(self._root)
