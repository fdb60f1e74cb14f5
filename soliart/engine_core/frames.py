"""
Frames - Drop-zone identity, screen rectangles and the frame registry.

A zone is a tagged reference to a pile, a foundation or the deck.
Frames arrive from the rendering layer in a single global coordinate
space and are replaced wholesale whenever its layout changes.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .cards import Suit
from .identified import IdentifiedList


class ZoneKind(Enum):
    """Kinds of drop zone."""
    PILE = "pile"
    FOUNDATION = "foundation"
    DECK = "deck"


@dataclass(frozen=True)
class ZoneId:
    """
    Identity of a pile, a foundation or the deck.

    Use the ``pile``/``foundation``/``deck`` constructors; ``key`` is the
    pile number, the foundation suit, or None for the deck.
    """
    kind: ZoneKind
    key: int | Suit | None = None

    @classmethod
    def pile(cls, pile_id: int) -> ZoneId:
        return cls(ZoneKind.PILE, pile_id)

    @classmethod
    def foundation(cls, suit: Suit) -> ZoneId:
        return cls(ZoneKind.FOUNDATION, suit)

    @classmethod
    def deck(cls) -> ZoneId:
        return cls(ZoneKind.DECK)

    @property
    def is_pile(self) -> bool:
        return self.kind == ZoneKind.PILE

    @property
    def is_foundation(self) -> bool:
        return self.kind == ZoneKind.FOUNDATION

    @property
    def is_deck(self) -> bool:
        return self.kind == ZoneKind.DECK

    @property
    def label(self) -> str:
        """Stable text form, e.g. ``pile:3``, ``foundation:hearts``, ``deck``."""
        if self.kind == ZoneKind.PILE:
            return f"pile:{self.key}"
        if self.kind == ZoneKind.FOUNDATION:
            return f"foundation:{self.key.value}"
        return "deck"

    @classmethod
    def parse(cls, label: str) -> ZoneId:
        kind, _, key = label.partition(":")
        if kind == ZoneKind.PILE.value and key:
            return cls.pile(int(key))
        if kind == ZoneKind.FOUNDATION.value and key:
            return cls.foundation(Suit(key))
        if kind == ZoneKind.DECK.value and not key:
            return cls.deck()
        raise ValueError(f"Invalid zone: {label!r}")

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0


ZERO_POINT = Point()


@dataclass(frozen=True)
class Offset:
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; ``contains`` is half-open on the far edges."""
    x: float
    y: float
    width: float
    height: float

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2

    @property
    def center(self) -> Point:
        return Point(self.mid_x, self.mid_y)

    def contains(self, point: Point) -> bool:
        return (
            self.min_x <= point.x < self.max_x
            and self.min_y <= point.y < self.max_y
        )


@dataclass(frozen=True)
class Frame:
    """A zone's current screen rectangle."""
    zone: ZoneId
    rect: Rect


class FrameRegistry:
    """
    At most one frame per zone, kept in first-registration order.

    Registering a zone again replaces its rectangle in place, so hit
    testing order stays deterministic across layout updates.
    """

    def __init__(self, frames: list[Frame] | None = None):
        self._frames: IdentifiedList[Frame] = IdentifiedList(
            frames or [], id_of=lambda frame: frame.zone
        )

    def register(self, frame: Frame) -> None:
        self._frames.upsert(frame)

    def frame_for(self, zone: ZoneId) -> Frame | None:
        return self._frames.get(zone)

    def rect_for(self, zone: ZoneId) -> Rect | None:
        frame = self._frames.get(zone)
        return frame.rect if frame else None

    def hit_test(self, point: Point) -> Frame | None:
        """The first registered frame containing ``point``."""
        for frame in self._frames:
            if frame.rect.contains(point):
                return frame
        return None

    @property
    def card_width(self) -> float:
        """Width of the first registered pile frame, or 0 if none."""
        for frame in self._frames:
            if frame.zone.is_pile:
                return frame.rect.width
        return 0.0

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrameRegistry):
            return NotImplemented
        return list(self._frames) == list(other._frames)

    def __repr__(self) -> str:
        return f"FrameRegistry({list(self._frames)!r})"
