from typing import TYPE_CHECKING, Iterator, Optional

from camt053.models import Entry

if TYPE_CHECKING:
    from camt053.message import Message


class EntryIterator:
    """
    Flattens the entries of every statement of a Message, statement by statement
    in document order.

    ``next()`` pulls from a single pass that is kept on the instance. Each
    ``iter()`` starts a fresh pass, so the same EntryIterator can also be looped
    over more than once. Nothing is decoded until the first entry is pulled; the
    Message then decodes all statements once and every later pass reuses them.
    """

    def __init__(self, message: "Message"):
        self._message = message
        self._pass: Optional[Iterator[Entry]] = None

    def __iter__(self) -> Iterator[Entry]:
        return self._entries()

    def __next__(self) -> Entry:
        if self._pass is None:
            self._pass = self._entries()
        return next(self._pass)

    def _entries(self) -> Iterator[Entry]:
        for statement in self._message.get_statements():
            yield from statement.entries
