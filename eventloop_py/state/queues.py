"""FIFO queue and LIFO stack primitives over immutable tuples.

Every operation returns a new tuple and leaves its input untouched, so a
queue held by one state snapshot is never changed by a later transition.
Removing from an empty container is not an error: the item slot of the
result is ``None``.
"""

from typing import Optional, Tuple, TypeVar

T = TypeVar("T")


def enqueue(items: Tuple[T, ...], item: T) -> Tuple[T, ...]:
    """Add an item to the back of the queue. Never fails."""
    return items + (item,)


def dequeue(items: Tuple[T, ...]) -> Tuple[Optional[T], Tuple[T, ...]]:
    """Remove the front item.

    Returns (item, rest). On an empty queue returns (None, items).
    """
    if not items:
        return None, items
    return items[0], items[1:]


def peek(items: Tuple[T, ...]) -> Optional[T]:
    """Front item of the queue without removing it, or None."""
    return items[0] if items else None


def push(stack: Tuple[T, ...], item: T) -> Tuple[T, ...]:
    """Push an item on top of the stack (the top is the last element)."""
    return stack + (item,)


def pop(stack: Tuple[T, ...]) -> Tuple[Optional[T], Tuple[T, ...]]:
    """Remove the top item.

    Returns (item, rest). On an empty stack returns (None, stack).
    """
    if not stack:
        return None, stack
    return stack[-1], stack[:-1]


def top(stack: Tuple[T, ...]) -> Optional[T]:
    """Top item of the stack without removing it, or None."""
    return stack[-1] if stack else None


def replace_top(stack: Tuple[T, ...], item: T) -> Tuple[T, ...]:
    """Swap the top item for a new value; pushes when the stack is empty."""
    if not stack:
        return (item,)
    return stack[:-1] + (item,)


__all__ = ["enqueue", "dequeue", "peek", "push", "pop", "top", "replace_top"]
