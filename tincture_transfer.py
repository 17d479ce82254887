# -*- coding: utf-8 -*-
"""
Tincture: XYZ-centred colour conversion for graphics pipelines
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tincture_transfer.py — Transfer functions, signed cube root and
integer quantization.

sRGB and Display P3 share the same piecewise transfer function
(IEC 61966-2-1, restated by CSS Color 4). Both directions are extended to
negative inputs by odd symmetry, so out-of-gamut channels never hit a
fractional power of a negative number.

Scalar functions serve the ``Color`` value type; the ``*_array`` variants are
Numba kernels for the batch engine and follow the same definitions.

Quantization is the only clamping point of the whole library.
"""

import math
import warnings
from typing import Final

import numpy as np
from numba import njit

from tincture_matrices import ArrayFloat

__all__ = [
    # --- Constants ---
    "DEGAMMA_THRESHOLD",
    "GAMMA_THRESHOLD",
    "MAX_UINT8",
    "MAX_UINT16",

    # --- Scalar ---
    "degamma",
    "gamma",
    "signed_cbrt",
    "quantize",

    # --- Batch ---
    "degamma_array",
    "gamma_array",
    "quantize_array",
]

# --- Constants ---
# Breakpoints of the piecewise sRGB EOTF / OETF.
DEGAMMA_THRESHOLD: Final[float] = 0.04045
GAMMA_THRESHOLD: Final[float] = 0.0031308

MAX_UINT8: Final[int] = 0xFF
MAX_UINT16: Final[int] = 0xFFFF


# =============================================================================
# 1. SCALAR FUNCTIONS
# =============================================================================

def degamma(x: float) -> float:
    """
    sRGB / Display P3 EOTF (nonlinear -> linear), sign preserving.

    |x| <= 0.04045 is the linear toe ``x / 12.92``; above it the 2.4 power
    segment is applied to |x| and the sign of x restored.
    """
    a = abs(x)
    if a <= DEGAMMA_THRESHOLD:
        return x / 12.92
    return math.copysign(((a + 0.055) / 1.055) ** 2.4, x)

def gamma(x: float) -> float:
    """
    sRGB / Display P3 OETF (linear -> nonlinear), sign preserving.

    Exact inverse of :func:`degamma`, including for negative inputs.
    """
    a = abs(x)
    if a <= GAMMA_THRESHOLD:
        return 12.92 * x
    # The offset is subtracted before the sign is restored. Applying the sign
    # to the power term only (-1.055*|x|^(1/2.4) - 0.055) is not the inverse
    # of degamma for x < 0.
    return math.copysign(1.055 * a ** (1.0 / 2.4) - 0.055, x)

def signed_cbrt(x: float) -> float:
    """Real cube root defined on the whole real line (cbrt(-8) == -2)."""
    return math.copysign(abs(x) ** (1.0 / 3.0), x)

def quantize(v: float, max_value: int = MAX_UINT16) -> int:
    """
    Maps a [0, 1] channel to an integer in [0, max_value].

    Rounds half away from zero and clamps. NaN has no meaningful integer
    value; it is mapped to 0 with a ``RuntimeWarning``.

    Args:
        v: Channel value, nominally in [0, 1].
        max_value: Largest representable integer (0xFF, 0xFFFF, ...).

    Returns:
        The quantized channel.
    """
    if math.isnan(v):
        warnings.warn(
            "NaN channel value quantized to 0.", RuntimeWarning, stacklevel=2
        )
        return 0
    scaled = v * max_value + 0.5
    if scaled <= 0.0:
        return 0
    if scaled >= max_value:
        return max_value
    return math.floor(scaled)


# =============================================================================
# 2. BATCH KERNELS (Numba Optimized)
# =============================================================================
# NOTE: fastmath=True allows reassociation and relaxed IEEE compliance.
# Results may differ from the scalar path in the last few ulps.

@njit(cache=True, fastmath=True)
def _fast_degamma(encoded: ArrayFloat) -> ArrayFloat:
    """
    Sign-preserving sRGB EOTF over a contiguous array.

    Explicit loop instead of ``np.where``: no boolean mask allocation and no
    evaluation of the power branch on the toe.
    """
    out = np.empty_like(encoded)
    enc_flat = encoded.ravel()
    out_flat = out.ravel()

    for i in range(encoded.size):
        v = enc_flat[i]
        a = abs(v)
        if a <= 0.04045:
            out_flat[i] = v / 12.92
        else:
            out_flat[i] = math.copysign(((a + 0.055) / 1.055) ** 2.4, v)
    return out

@njit(cache=True, fastmath=True)
def _fast_gamma(linear: ArrayFloat) -> ArrayFloat:
    """Sign-preserving sRGB OETF over a contiguous array."""
    out = np.empty_like(linear)
    lin_flat = linear.ravel()
    out_flat = out.ravel()

    for i in range(linear.size):
        v = lin_flat[i]
        a = abs(v)
        if a <= 0.0031308:
            out_flat[i] = 12.92 * v
        else:
            out_flat[i] = math.copysign(1.055 * (a ** (1.0 / 2.4)) - 0.055, v)
    return out


# --- Strict IEEE 754 kernel variants (fastmath=False) ---

@njit(cache=True, fastmath=False)
def _fast_degamma_strict(encoded: ArrayFloat) -> ArrayFloat:
    """sRGB EOTF — strict IEEE 754 variant."""
    out = np.empty_like(encoded)
    enc_flat = encoded.ravel()
    out_flat = out.ravel()
    for i in range(encoded.size):
        v = enc_flat[i]
        a = abs(v)
        if a <= 0.04045:
            out_flat[i] = v / 12.92
        else:
            out_flat[i] = math.copysign(((a + 0.055) / 1.055) ** 2.4, v)
    return out

@njit(cache=True, fastmath=False)
def _fast_gamma_strict(linear: ArrayFloat) -> ArrayFloat:
    """sRGB OETF — strict IEEE 754 variant."""
    out = np.empty_like(linear)
    lin_flat = linear.ravel()
    out_flat = out.ravel()
    for i in range(linear.size):
        v = lin_flat[i]
        a = abs(v)
        if a <= 0.0031308:
            out_flat[i] = 12.92 * v
        else:
            out_flat[i] = math.copysign(1.055 * (a ** (1.0 / 2.4)) - 0.055, v)
    return out


# --- Kernel dispatchers ---
# ``strict=True`` selects the fastmath=False kernels, which preserve strict
# IEEE 754 semantics (inf / NaN propagation, no FP reassociation). The choice
# is per call; there is no module-level mode.

def degamma_array(encoded: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
    """
    Applies :func:`degamma` element-wise.

    Args:
        encoded: Nonlinear channel values of any shape.
        strict: Use the strict IEEE 754 kernel instead of the fastmath one.

    Returns:
        Linear channel values, float64, same shape.
    """
    arr = np.ascontiguousarray(encoded, dtype=np.float64)
    if strict:
        return _fast_degamma_strict(arr)
    return _fast_degamma(arr)

def gamma_array(linear: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
    """
    Applies :func:`gamma` element-wise.

    Args:
        linear: Linear channel values of any shape.
        strict: Use the strict IEEE 754 kernel instead of the fastmath one.

    Returns:
        Nonlinear channel values, float64, same shape.
    """
    arr = np.ascontiguousarray(linear, dtype=np.float64)
    if strict:
        return _fast_gamma_strict(arr)
    return _fast_gamma(arr)

def quantize_array(values: ArrayFloat, max_value: int = MAX_UINT16) -> np.ndarray:
    """
    Vectorised :func:`quantize`.

    The output dtype is the narrowest unsigned type holding ``max_value``
    (uint8 for 0xFF, uint16 for 0xFFFF, uint32 otherwise).
    """
    arr = np.asarray(values, dtype=np.float64)
    nan_mask = np.isnan(arr)
    if np.any(nan_mask):
        warnings.warn(
            f"{int(np.count_nonzero(nan_mask))} NaN channel value(s) quantized to 0.",
            RuntimeWarning,
            stacklevel=2,
        )
        arr = np.where(nan_mask, 0.0, arr)

    if max_value <= MAX_UINT8:
        dtype = np.uint8
    elif max_value <= MAX_UINT16:
        dtype = np.uint16
    else:
        dtype = np.uint32

    scaled = np.floor(arr * max_value + 0.5)
    return np.clip(scaled, 0, max_value).astype(dtype)
