# -*- coding: utf-8 -*-
"""
Tincture: XYZ-centred colour conversion for graphics pipelines
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tincture_interop.py — Fixed-width integer colour models and the
conversion boundary between them and ``Color``.

Integer models mirror the pixel formats found in image buffers:

    ============  ==========  ===============  =================
    Model         Bits/chan   Alpha            Decodes as
    ============  ==========  ===============  =================
    RGBA          8           premultiplied    unpremultiplied
    RGBA64        16          premultiplied    unpremultiplied
    NRGBA         8           straight         scaled directly
    NRGBA64       16          straight         scaled directly
    Alpha         8           alpha only       white + alpha
    Alpha16       16          alpha only       white + alpha
    Gray          8           opaque           gray, alpha 1
    Gray16        16          opaque           gray, alpha 1
    ============  ==========  ===============  =================

Anything else that implements the ``IntegerColor`` protocol (an ``rgba()``
method returning premultiplied 16-bit channels) is decoded through that
method. Premultiplied channels are divided by alpha *before* the transfer
function is undone; a fully transparent premultiplied colour carries no
chromatic information and decodes to ``Color()``.

Encoding always produces ``NRGBA64``: straight alpha at 16 bits keeps the
RGB precision that premultiplication would throw away.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Callable,
    ClassVar,
    Optional,
    Protocol,
    Tuple,
    runtime_checkable,
)

from tincture_color import Color
from tincture_transfer import MAX_UINT8, MAX_UINT16, quantize

__all__ = [
    "IntegerColor",
    "RGBA",
    "RGBA64",
    "NRGBA",
    "NRGBA64",
    "Alpha",
    "Alpha16",
    "Gray",
    "Gray16",
    "color_from_srgb_color",
    "color_from_linear_srgb_color",
    "srgb_color",
    "linear_srgb_color",
]

# 8-bit -> 16-bit channel expansion (0xFF -> 0xFFFF).
_EXPAND_8_TO_16: int = 0x101


# ═══════════════════════════════════════════════════════════════════════════════
# 1.  IntegerColor — capability every integer model provides
# ═══════════════════════════════════════════════════════════════════════════════
@runtime_checkable
class IntegerColor(Protocol):
    """
    Minimal interface of an integer colour.

    rgba() → (r, g, b, a), alpha-premultiplied, each in [0, 0xFFFF]
    """
    def rgba(self) -> Tuple[int, int, int, int]: ...


def _check_channels(model: object, max_value: int, **channels: int) -> None:
    for name, value in channels.items():
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(
                f"{type(model).__name__}.{name} must be an int, got {type(value).__name__}."
            )
        if not 0 <= value <= max_value:
            raise ValueError(
                f"{type(model).__name__}.{name}={value} is outside [0, {max_value:#x}]."
            )


# ═══════════════════════════════════════════════════════════════════════════════
# 2.  Concrete models
# ═══════════════════════════════════════════════════════════════════════════════
@dataclass(slots=True, frozen=True)
class RGBA:
    """8-bit premultiplied RGBA (r, g, b are expected to be <= a)."""
    MAX: ClassVar[int] = MAX_UINT8
    r: int
    g: int
    b: int
    a: int

    def __post_init__(self) -> None:
        _check_channels(self, self.MAX, r=self.r, g=self.g, b=self.b, a=self.a)

    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.r * _EXPAND_8_TO_16, self.g * _EXPAND_8_TO_16,
                self.b * _EXPAND_8_TO_16, self.a * _EXPAND_8_TO_16)


@dataclass(slots=True, frozen=True)
class RGBA64:
    """16-bit premultiplied RGBA."""
    MAX: ClassVar[int] = MAX_UINT16
    r: int
    g: int
    b: int
    a: int

    def __post_init__(self) -> None:
        _check_channels(self, self.MAX, r=self.r, g=self.g, b=self.b, a=self.a)

    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)


@dataclass(slots=True, frozen=True)
class NRGBA:
    """8-bit straight (non-premultiplied) RGBA."""
    MAX: ClassVar[int] = MAX_UINT8
    r: int
    g: int
    b: int
    a: int

    def __post_init__(self) -> None:
        _check_channels(self, self.MAX, r=self.r, g=self.g, b=self.b, a=self.a)

    def rgba(self) -> Tuple[int, int, int, int]:
        a = self.a * _EXPAND_8_TO_16
        return (self.r * _EXPAND_8_TO_16 * a // MAX_UINT16,
                self.g * _EXPAND_8_TO_16 * a // MAX_UINT16,
                self.b * _EXPAND_8_TO_16 * a // MAX_UINT16,
                a)


@dataclass(slots=True, frozen=True)
class NRGBA64:
    """16-bit straight (non-premultiplied) RGBA."""
    MAX: ClassVar[int] = MAX_UINT16
    r: int
    g: int
    b: int
    a: int

    def __post_init__(self) -> None:
        _check_channels(self, self.MAX, r=self.r, g=self.g, b=self.b, a=self.a)

    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.r * self.a // MAX_UINT16,
                self.g * self.a // MAX_UINT16,
                self.b * self.a // MAX_UINT16,
                self.a)


@dataclass(slots=True, frozen=True)
class Alpha:
    """8-bit alpha mask over white."""
    MAX: ClassVar[int] = MAX_UINT8
    a: int

    def __post_init__(self) -> None:
        _check_channels(self, self.MAX, a=self.a)

    def rgba(self) -> Tuple[int, int, int, int]:
        a = self.a * _EXPAND_8_TO_16
        return (a, a, a, a)


@dataclass(slots=True, frozen=True)
class Alpha16:
    """16-bit alpha mask over white."""
    MAX: ClassVar[int] = MAX_UINT16
    a: int

    def __post_init__(self) -> None:
        _check_channels(self, self.MAX, a=self.a)

    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.a, self.a, self.a, self.a)


@dataclass(slots=True, frozen=True)
class Gray:
    """8-bit opaque gray."""
    MAX: ClassVar[int] = MAX_UINT8
    y: int

    def __post_init__(self) -> None:
        _check_channels(self, self.MAX, y=self.y)

    def rgba(self) -> Tuple[int, int, int, int]:
        y = self.y * _EXPAND_8_TO_16
        return (y, y, y, MAX_UINT16)


@dataclass(slots=True, frozen=True)
class Gray16:
    """16-bit opaque gray."""
    MAX: ClassVar[int] = MAX_UINT16
    y: int

    def __post_init__(self) -> None:
        _check_channels(self, self.MAX, y=self.y)

    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.y, self.y, self.y, MAX_UINT16)


# ═══════════════════════════════════════════════════════════════════════════════
# 3.  Decoding (integer -> Color)
# ═══════════════════════════════════════════════════════════════════════════════
def _straight_channels(c: object) -> Optional[Tuple[float, float, float, float]]:
    """
    Reduces any integer model to straight-alpha float channels in [0, 1].

    Returns None for a premultiplied colour whose alpha is exactly zero.
    """
    if isinstance(c, (NRGBA, NRGBA64)):
        # Straight alpha is used as-is: after premultiplying, RGB would no
        # longer be exact.
        m = float(c.MAX)
        return (c.r / m, c.g / m, c.b / m, c.a / m)
    if isinstance(c, (Alpha, Alpha16)):
        return (1.0, 1.0, 1.0, c.a / float(c.MAX))
    if isinstance(c, (Gray, Gray16)):
        y = c.y / float(c.MAX)
        return (y, y, y, 1.0)
    if not isinstance(c, IntegerColor):
        raise TypeError(
            f"Expected an integer colour with an rgba() method, got {type(c).__name__}."
        )

    # Premultiplied (RGBA, RGBA64) and generic colours. The transfer function
    # is undone after unpremultiplying, which is exact only for linear data.
    r, g, b, a = c.rgba()
    if a == 0:
        return None
    return (r / a, g / a, b / a, a / float(MAX_UINT16))


def _decode(c: IntegerColor, build: Callable[[float, float, float, float], Color]) -> Color:
    channels = _straight_channels(c)
    if channels is None:
        return Color()
    return build(*channels)


def color_from_srgb_color(c: IntegerColor) -> Color:
    """
    Converts an integer nonlinear-sRGB colour to Color.

    Args:
        c: Any integer model, or an object implementing ``IntegerColor``.

    Returns:
        The decoded colour. A premultiplied colour with zero alpha returns
        ``Color()`` (XYZ all zero, alpha zero).

    Raises:
        TypeError: If ``c`` does not implement ``rgba()``.
    """
    return _decode(c, Color.from_srgb)


def color_from_linear_srgb_color(c: IntegerColor) -> Color:
    """
    Converts an integer linear-sRGB colour to Color.

    Same dispatch and zero-alpha policy as :func:`color_from_srgb_color`.
    """
    return _decode(c, Color.from_linear_srgb)


# ═══════════════════════════════════════════════════════════════════════════════
# 4.  Encoding (Color -> integer)
# ═══════════════════════════════════════════════════════════════════════════════
def _encode(r: float, g: float, b: float, alpha: float) -> NRGBA64:
    return NRGBA64(
        r=quantize(r, MAX_UINT16),
        g=quantize(g, MAX_UINT16),
        b=quantize(b, MAX_UINT16),
        a=quantize(alpha, MAX_UINT16),
    )


def srgb_color(color: Color) -> NRGBA64:
    """Quantizes to 16-bit straight-alpha nonlinear sRGB (clamped to range)."""
    return _encode(*color.srgb())


def linear_srgb_color(color: Color) -> NRGBA64:
    """Quantizes to 16-bit straight-alpha linear sRGB (clamped to range)."""
    return _encode(*color.linear_srgb())
