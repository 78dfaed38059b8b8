from dataclasses import dataclass
from enum import Enum
import random
from typing import Iterable, List, Optional, Sequence, Union

from errors import InvalidCard

RANKS = ["2", "3", "4", "5", "6", "7", "8", "9", "T", "J", "Q", "K", "A"]
RANK_VALUES = {char: value for value, char in enumerate(RANKS, start=2)}


class Suit(Enum):
    SPADES = "s"
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]


_SUIT_SYMBOLS = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
}
_SYMBOL_SUITS = {symbol: suit for suit, symbol in _SUIT_SYMBOLS.items()}

SUITS = list(Suit)


@dataclass(frozen=True)
class Card:
    rank: int
    suit: Suit

    def __post_init__(self) -> None:
        if not 2 <= self.rank <= 14:
            raise InvalidCard(f"Rank must be between 2 and 14, got {self.rank}")
        if not isinstance(self.suit, Suit):
            raise InvalidCard(f"Unknown suit: {self.suit!r}")

    @property
    def rank_char(self) -> str:
        return RANKS[self.rank - 2]

    def pretty(self) -> str:
        return f"{self.rank_char}{self.suit.symbol}"

    def __str__(self) -> str:
        return f"{self.rank_char}{self.suit.value}"

    def __repr__(self) -> str:
        return str(self)


CardLike = Union[Card, str]


def parse_card(text: CardLike) -> Card:
    """Parse ``'Ah'``, ``'10d'`` or ``'K♠'`` into a :class:`Card`."""

    if isinstance(text, Card):
        return text
    token = text.strip()
    if len(token) < 2:
        raise InvalidCard(f"Cannot parse card: {text!r}")

    rank_part, suit_part = token[:-1].upper(), token[-1]
    if rank_part == "10":
        rank_part = "T"
    if rank_part not in RANK_VALUES:
        raise InvalidCard(f"Unknown rank in card: {text!r}")

    if suit_part in _SYMBOL_SUITS:
        suit = _SYMBOL_SUITS[suit_part]
    else:
        try:
            suit = Suit(suit_part.lower())
        except ValueError as err:
            raise InvalidCard(f"Unknown suit in card: {text!r}") from err
    return Card(RANK_VALUES[rank_part], suit)


def parse_cards(cards: Union[str, Iterable[CardLike]]) -> List[Card]:
    """Parse ``'AhKd'``, ``'Ah Kd'``, ``'Ah,Kd'`` or an iterable of cards."""

    if isinstance(cards, str):
        text = cards.replace(",", " ")
        tokens: List[str] = []
        for chunk in text.split():
            tokens.extend(_split_run(chunk))
        return [parse_card(token) for token in tokens]
    return [parse_card(card) for card in cards]


def _split_run(chunk: str) -> List[str]:
    # "AhKd" or "10hJd" -> ["Ah", "Kd"] / ["10h", "Jd"]
    tokens = []
    i = 0
    while i < len(chunk):
        width = 3 if chunk.startswith("10", i) else 2
        tokens.append(chunk[i:i + width])
        i += width
    return tokens


def full_deck() -> List[Card]:
    return [Card(rank, suit) for suit in SUITS for rank in range(2, 15)]


def excluding(cards: Iterable[Card], known: Iterable[Card]) -> List[Card]:
    """Return a new list without any of ``known``; absent cards are ignored."""

    removed = set(known)
    return [card for card in cards if card not in removed]


def shuffled_copy(cards: Sequence[Card], rng: random.Random) -> List[Card]:
    """Return a Fisher-Yates permutation of ``cards`` leaving the input as is."""

    shuffled = list(cards)
    rng.shuffle(shuffled)
    return shuffled


class Deck:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        exclude: Iterable[Card] = (),
    ) -> None:
        self.rng = rng or random.Random()
        self.cards: List[Card] = excluding(full_deck(), exclude)
        self.shuffle()

    def shuffle(self) -> None:
        self.cards = shuffled_copy(self.cards, self.rng)

    def deal(self, n: int = 1):
        """Return a Card if n=1, otherwise return a list of Cards."""
        if n < 1:
            raise ValueError("Must deal at least one card")
        if n > len(self.cards):
            raise ValueError("Not enough cards left in the deck")

        if n == 1:
            return self.cards.pop()

        dealt = self.cards[-n:]
        del self.cards[-n:]
        return dealt

    def __len__(self) -> int:
        return len(self.cards)
