"""
Event Tokens - Typed form of the messages on a game's event feed.

The wire format stays a line of whitespace separated words:

    started
    moves <from> <to>
    attacks <from> <to>
    defends <from> [<to>]
    reveals <from> <to> <rank>
    wins [<winner>]

Tokens are parsed into Event objects as soon as they arrive, so the
replay code never indexes into raw strings.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .board import Owner, is_on_board
from .pieces import Rank, parse_rank


class EventKind(str, Enum):
    """Kinds of outcome the game service broadcasts."""
    STARTED = "started"
    MOVES = "moves"
    ATTACKS = "attacks"
    DEFENDS = "defends"
    REVEALS = "reveals"
    WINS = "wins"


class MalformedEventError(ValueError):
    """An event token that cannot be parsed."""

    def __init__(self, message: str, token: str, unknown_kind: bool = False):
        super().__init__(message)
        self.token = token
        self.unknown_kind = unknown_kind


@dataclass(frozen=True)
class Event:
    """
    A single parsed event.

    Which fields are set depends on the kind; see the factories.
    """
    kind: EventKind
    from_index: int | None = None
    to_index: int | None = None
    rank: Rank | None = None
    winner: Owner | None = None

    @classmethod
    def started(cls) -> Event:
        return cls(kind=EventKind.STARTED)

    @classmethod
    def moves(cls, from_index: int, to_index: int) -> Event:
        return cls(kind=EventKind.MOVES, from_index=from_index, to_index=to_index)

    @classmethod
    def attacks(cls, from_index: int, to_index: int) -> Event:
        return cls(kind=EventKind.ATTACKS, from_index=from_index, to_index=to_index)

    @classmethod
    def defends(cls, from_index: int, to_index: int | None = None) -> Event:
        return cls(kind=EventKind.DEFENDS, from_index=from_index, to_index=to_index)

    @classmethod
    def reveals(cls, from_index: int, to_index: int, rank: Rank) -> Event:
        return cls(
            kind=EventKind.REVEALS,
            from_index=from_index,
            to_index=to_index,
            rank=Rank(rank),
        )

    @classmethod
    def wins(cls, winner: Owner | None = None) -> Event:
        return cls(kind=EventKind.WINS, winner=winner)

    def to_token(self) -> str:
        """Render the event in its wire form."""
        parts = [self.kind.value]
        if self.from_index is not None:
            parts.append(str(self.from_index))
        if self.to_index is not None:
            parts.append(str(self.to_index))
        if self.rank is not None:
            parts.append(self.rank.value)
        if self.winner is not None:
            parts.append(self.winner.value)
        return " ".join(parts)


def _index(token: str, words: list[str], position: int) -> int:
    if len(words) <= position:
        raise MalformedEventError(f"missing board index in {token!r}", token)
    try:
        index = int(words[position])
    except ValueError:
        raise MalformedEventError(f"bad board index {words[position]!r} in {token!r}", token)
    if not is_on_board(index):
        raise MalformedEventError(f"board index {index} out of range in {token!r}", token)
    return index


def parse_event(token: str) -> Event:
    """Parse one line from the event feed. Raises MalformedEventError."""
    words = token.split()
    if not words:
        raise MalformedEventError("empty event token", token)

    try:
        kind = EventKind(words[0])
    except ValueError:
        raise MalformedEventError(
            f"unknown event kind {words[0]!r}", token, unknown_kind=True
        )

    if kind is EventKind.STARTED:
        return Event.started()

    if kind is EventKind.WINS:
        winner = None
        if len(words) > 1:
            try:
                winner = Owner(words[1])
            except ValueError:
                winner = None
        return Event.wins(winner)

    from_index = _index(token, words, 1)

    if kind is EventKind.DEFENDS:
        to_index = _index(token, words, 2) if len(words) > 2 else None
        return Event.defends(from_index, to_index)

    to_index = _index(token, words, 2)

    if kind is EventKind.REVEALS:
        if len(words) < 4:
            raise MalformedEventError(f"missing rank in {token!r}", token)
        try:
            rank = parse_rank(words[3])
        except ValueError:
            raise MalformedEventError(f"unknown rank {words[3]!r} in {token!r}", token)
        return Event.reveals(from_index, to_index, rank)

    if kind is EventKind.ATTACKS:
        return Event.attacks(from_index, to_index)
    return Event.moves(from_index, to_index)
