import anyio
import pytest

from crimson import Envelope, Mailbox


def env(value):
    return Envelope(from_="A", to="B", value=value)


def test_drain_is_fifo():
    mailbox = Mailbox("B")
    for i in range(5):
        mailbox.put(env(i))
    mailbox.mark()

    assert len(mailbox) == 5
    assert [e.value for e in mailbox.drain()] == [0, 1, 2, 3, 4]
    assert len(mailbox) == 0


def test_drain_without_mark_takes_nothing():
    mailbox = Mailbox("B")
    mailbox.put(env("x"))

    assert list(mailbox.drain()) == []
    assert len(mailbox) == 1


def test_envelopes_after_mark_wait_for_the_next_one():
    mailbox = Mailbox("B")
    mailbox.put(env("first"))
    mailbox.mark()
    mailbox.put(env("second"))

    assert [e.value for e in mailbox.drain()] == ["first"]
    assert list(mailbox.drain()) == []

    mailbox.mark()
    assert [e.value for e in mailbox.drain()] == ["second"]


def test_appends_during_drain_are_left_queued():
    mailbox = Mailbox("B")
    mailbox.put(env("first"))
    mailbox.put(env("second"))
    mailbox.mark()

    drained = []
    for e in mailbox.drain():
        drained.append(e.value)
        mailbox.put(env(f"after-{e.value}"))

    assert drained == ["first", "second"]
    mailbox.mark()
    assert [e.value for e in mailbox.drain()] == ["after-first", "after-second"]


def test_put_after_close_raises():
    mailbox = Mailbox("B")
    mailbox.close()

    assert mailbox.closed
    with pytest.raises(anyio.ClosedResourceError):
        mailbox.put(env("x"))


def test_close_is_idempotent():
    mailbox = Mailbox("B")
    mailbox.put(env("x"))
    mailbox.mark()
    mailbox.close()
    mailbox.close()

    assert list(mailbox.drain()) == []
