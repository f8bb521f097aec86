from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_MAX_WIDTH = 800
DEFAULT_MAX_HEIGHT = 480

# Sixel palette registers are limited to 256 by most terminals
MIN_COLORS = 2
MAX_COLORS = 256


class GraphicsProtocol(str, Enum):
    KITTY = "kitty"
    SIXEL = "sixel"


@dataclass(frozen=True)
class TextOptions:
    number: bool = False
    number_nonblank: bool = False
    squeeze_blank: bool = False
    show_ends: bool = False
    show_tabs: bool = False
    show_nonprinting: bool = False

    @property
    def escapes(self) -> bool:
        """Whether any byte can be rewritten; -e and -t both imply -v."""
        return self.show_nonprinting or self.show_ends or self.show_tabs


@dataclass(frozen=True)
class Bounds:
    max_width: int = DEFAULT_MAX_WIDTH
    max_height: int = DEFAULT_MAX_HEIGHT

    def __post_init__(self):
        if self.max_width < 1 or self.max_height < 1:
            raise ValueError(f"Image bounds must be positive, got {self.max_width}x{self.max_height}")


@dataclass(frozen=True)
class RenderConfig:
    text: TextOptions = field(default_factory=TextOptions)
    bounds: Bounds = field(default_factory=Bounds)
    protocol: GraphicsProtocol = GraphicsProtocol.KITTY
    colors: int | None = None
    background: tuple[int, int, int] = (0, 0, 0)
    lock: bool = False
    unbuffered: bool = False
    sniff: bool = True

    def __post_init__(self):
        if self.colors is not None and not MIN_COLORS <= self.colors <= MAX_COLORS:
            raise ValueError(f"Colour count must be between {MIN_COLORS} and {MAX_COLORS}, got {self.colors}")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> RenderConfig:
        text = TextOptions(
            number=args.number,
            number_nonblank=args.number_nonblank,
            squeeze_blank=args.squeeze_blank,
            show_ends=args.show_ends,
            show_tabs=args.show_tabs,
            show_nonprinting=args.show_nonprinting,
        )
        return cls(
            text=text,
            bounds=Bounds(args.max_width, args.max_height),
            protocol=GraphicsProtocol(args.protocol),
            colors=args.colors,
            background=parse_colour(args.background),
            lock=args.lock,
            unbuffered=args.unbuffered,
            sniff=args.sniff,
        )


def parse_colour(value: str) -> tuple[int, int, int]:
    """Parse ``RRGGBB`` (optionally prefixed with ``#``) into an RGB triple."""
    digits = value[1:] if value.startswith("#") else value
    if len(digits) != 6:
        raise ValueError(f"Expected a colour like 000000 or #ff8800, got {value!r}")
    try:
        raw = bytes.fromhex(digits)
    except ValueError:
        raise ValueError(f"Expected a colour like 000000 or #ff8800, got {value!r}") from None
    return (raw[0], raw[1], raw[2])
