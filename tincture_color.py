# -*- coding: utf-8 -*-
"""
Tincture: XYZ-centred colour conversion for graphics pipelines
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tincture_color.py — The ``Color`` value type.

A ``Color`` stores exactly one encoding: CIE XYZ under D65 plus a straight
(non-premultiplied) alpha. It does not remember the space it was built from.
Every ``from_*`` constructor converts *into* XYZ and every accessor converts
*out of* it, so a colour can hop between sRGB, Display P3 and OKLab without
being re-encoded through a fixed intermediate such as nonlinear sRGB.

No validation or clamping happens here: negative channels, values above 1
and alpha outside [0, 1] are carried through arithmetically. Clamping only
happens when quantizing to integers (see ``tincture_interop``).

Usage:
    >>> c = Color.from_srgb(1.0, 0.0, 0.0, 1.0)
    >>> l, ch, h, alpha = c.oklch()
    >>> p3 = c.display_p3()
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import NamedTuple

from tincture_matrices import (
    LINEAR_DISPLAY_P3_TO_XYZ,
    LINEAR_SRGB_TO_XYZ,
    LMS_TO_OKLAB,
    LMS_TO_XYZ,
    OKLAB_TO_LMS,
    XYZ_TO_LINEAR_DISPLAY_P3,
    XYZ_TO_LINEAR_SRGB,
    XYZ_TO_LMS,
    apply_matrix,
)
from tincture_transfer import degamma, gamma, signed_cbrt

__all__ = [
    "Color",
    "XYZAlpha",
    "RGBAlpha",
    "LabAlpha",
    "LChAlpha",
]


# ---------------------------------------------------------------------------
# Result tuples
# ---------------------------------------------------------------------------
class XYZAlpha(NamedTuple):
    """CIE XYZ (D65) coordinates and alpha."""
    x: float
    y: float
    z: float
    alpha: float


class RGBAlpha(NamedTuple):
    """RGB channels (linear or nonlinear, sRGB or Display P3) and alpha."""
    r: float
    g: float
    b: float
    alpha: float


class LabAlpha(NamedTuple):
    """OKLab lightness, green-red and blue-yellow axes, and alpha."""
    l: float
    a: float
    b: float
    alpha: float


class LChAlpha(NamedTuple):
    """OKLCh lightness, chroma (>= 0), hue in radians (-pi, pi], and alpha."""
    l: float
    c: float
    h: float
    alpha: float


# ---------------------------------------------------------------------------
# Color
# ---------------------------------------------------------------------------
@dataclass(slots=True, frozen=True)
class Color:
    """
    Immutable colour in CIE XYZ D65 with straight alpha.

    ``Color()`` is transparent black (all zero).
    """
    x:     float = 0.0
    y:     float = 0.0
    z:     float = 0.0
    alpha: float = 0.0

    def with_alpha(self, alpha: float) -> Color:
        """Returns a copy carrying ``alpha`` and the same XYZ."""
        return replace(self, alpha=alpha)

    # --- Construction ---------------------------------------------------

    @classmethod
    def from_xyz(cls, x: float, y: float, z: float, alpha: float) -> Color:
        """Builds a Color from XYZ D65 coordinates and alpha, verbatim."""
        return cls(x, y, z, alpha)

    @classmethod
    def from_linear_srgb(cls, r: float, g: float, b: float, alpha: float) -> Color:
        """Builds a Color from linear sRGB channels and alpha."""
        return cls(*apply_matrix(LINEAR_SRGB_TO_XYZ, r, g, b), alpha)

    @classmethod
    def from_srgb(cls, r: float, g: float, b: float, alpha: float) -> Color:
        """Builds a Color from nonlinear (gamma-encoded) sRGB channels and alpha."""
        return cls.from_linear_srgb(degamma(r), degamma(g), degamma(b), alpha)

    @classmethod
    def from_linear_display_p3(cls, r: float, g: float, b: float, alpha: float) -> Color:
        """Builds a Color from linear Display P3 channels and alpha."""
        return cls(*apply_matrix(LINEAR_DISPLAY_P3_TO_XYZ, r, g, b), alpha)

    @classmethod
    def from_display_p3(cls, r: float, g: float, b: float, alpha: float) -> Color:
        """Builds a Color from nonlinear Display P3 channels and alpha."""
        return cls.from_linear_display_p3(degamma(r), degamma(g), degamma(b), alpha)

    @classmethod
    def from_oklab(cls, l: float, a: float, b: float, alpha: float) -> Color:
        """
        Builds a Color from OKLab components and alpha.

        OKLab -> LMS' (linear mix) -> LMS (cube) -> XYZ (linear mix).
        """
        l_, m_, s_ = apply_matrix(OKLAB_TO_LMS, l, a, b)
        return cls(*apply_matrix(LMS_TO_XYZ, l_ * l_ * l_, m_ * m_ * m_, s_ * s_ * s_), alpha)

    @classmethod
    def from_oklch(cls, l: float, c: float, h: float, alpha: float) -> Color:
        """Builds a Color from OKLCh components (h in radians) and alpha."""
        return cls.from_oklab(l, c * math.cos(h), c * math.sin(h), alpha)

    # --- Accessors ------------------------------------------------------

    def xyz(self) -> XYZAlpha:
        """Returns the stored XYZ D65 coordinates and alpha."""
        return XYZAlpha(self.x, self.y, self.z, self.alpha)

    def linear_srgb(self) -> RGBAlpha:
        """Converts to linear sRGB channels and alpha (unclamped)."""
        return RGBAlpha(*apply_matrix(XYZ_TO_LINEAR_SRGB, self.x, self.y, self.z), self.alpha)

    def srgb(self) -> RGBAlpha:
        """Converts to nonlinear sRGB channels and alpha (unclamped)."""
        r, g, b, alpha = self.linear_srgb()
        return RGBAlpha(gamma(r), gamma(g), gamma(b), alpha)

    def linear_display_p3(self) -> RGBAlpha:
        """Converts to linear Display P3 channels and alpha (unclamped)."""
        return RGBAlpha(*apply_matrix(XYZ_TO_LINEAR_DISPLAY_P3, self.x, self.y, self.z), self.alpha)

    def display_p3(self) -> RGBAlpha:
        """Converts to nonlinear Display P3 channels and alpha (unclamped)."""
        r, g, b, alpha = self.linear_display_p3()
        return RGBAlpha(gamma(r), gamma(g), gamma(b), alpha)

    def oklab(self) -> LabAlpha:
        """
        Converts to OKLab components and alpha.

        Out-of-gamut colours can have negative cone responses; the signed
        cube root keeps those finite and invertible.
        """
        l_, m_, s_ = apply_matrix(XYZ_TO_LMS, self.x, self.y, self.z)
        return LabAlpha(
            *apply_matrix(LMS_TO_OKLAB, signed_cbrt(l_), signed_cbrt(m_), signed_cbrt(s_)),
            self.alpha,
        )

    def oklch(self) -> LChAlpha:
        """Converts to OKLCh components (h in radians) and alpha."""
        l, a, b, alpha = self.oklab()
        return LChAlpha(l, math.hypot(a, b), math.atan2(b, a), alpha)
