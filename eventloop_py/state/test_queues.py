"""Tests for queue and stack primitives."""

from eventloop_py.state import queues


class TestQueue:
    """FIFO operations."""

    def test_enqueue_appends_to_back(self):
        q = queues.enqueue((), "a")
        q = queues.enqueue(q, "b")
        assert q == ("a", "b")

    def test_enqueue_does_not_mutate(self):
        original = ("a",)
        queues.enqueue(original, "b")
        assert original == ("a",)

    def test_dequeue_front(self):
        item, rest = queues.dequeue(("a", "b", "c"))
        assert item == "a"
        assert rest == ("b", "c")

    def test_dequeue_empty(self):
        item, rest = queues.dequeue(())
        assert item is None
        assert rest == ()

    def test_peek(self):
        assert queues.peek(("a", "b")) == "a"
        assert queues.peek(()) is None


class TestStack:
    """LIFO operations. The top is the last element."""

    def test_push_pop(self):
        s = queues.push((), 1)
        s = queues.push(s, 2)
        item, rest = queues.pop(s)
        assert item == 2
        assert rest == (1,)

    def test_pop_empty(self):
        item, rest = queues.pop(())
        assert item is None
        assert rest == ()

    def test_top(self):
        assert queues.top((1, 2, 3)) == 3
        assert queues.top(()) is None

    def test_replace_top(self):
        assert queues.replace_top((1, 2), 9) == (1, 9)

    def test_replace_top_on_empty_pushes(self):
        assert queues.replace_top((), 9) == (9,)
