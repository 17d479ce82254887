# -*- coding: utf-8 -*-
"""
Tincture: XYZ-centred colour conversion for graphics pipelines
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Batch Color Engine
==================
Vectorised counterpart of ``tincture_color.Color`` for images and palettes.

Arrays are row vectors of channels: the last axis holds either 3 colour
channels or 3 colour channels followed by alpha. Alpha is carried through
untouched. Any leading shape is accepted, so single pixels ``(3,)``,
batches ``(N, 4)`` and images ``(H, W, 4)`` all go through the same code.

The canonical space is XYZ D65, exactly as for ``Color``; every conversion
is a pair ``xyz_to_<space>`` / ``<space>_to_xyz`` and the convenience
pipelines simply chain two of them through the ``_raw`` fast path.

Results agree with the scalar ``Color`` path to ~1e-12. Methods that run a
Numba kernel accept ``strict=True`` to use the fastmath=False variant; fast
mode may move the last few ulps.

References:
    - IEC 61966-2-1:1999 (sRGB Standard)
    - CSS Color Module Level 4, section 18 (conversion code)
    - Ottosson, B. (2020). "A perceptual color space for image processing".
"""

import functools
import time
from typing import Any, Callable, Iterable, List

import numpy as np
from numba import njit

from tincture_color import Color
from tincture_matrices import (
    ArrayFloat,
    M_LINEAR_DISPLAY_P3_TO_XYZ_T,
    M_LINEAR_SRGB_TO_XYZ_T,
    M_LMS_TO_OKLAB_T,
    M_LMS_TO_XYZ_T,
    M_OKLAB_TO_LMS_T,
    M_XYZ_TO_LINEAR_DISPLAY_P3_T,
    M_XYZ_TO_LINEAR_SRGB_T,
    M_XYZ_TO_LMS_T,
)
from tincture_transfer import (
    MAX_UINT16,
    degamma_array,
    gamma_array,
    quantize_array,
)

__all__ = [
    # --- Decorators ---
    "handle_shapes",

    # --- Classes ---
    "ColorSpaceEngine",
]


# =============================================================================
# 1. ROBUST DECORATORS
# =============================================================================

def handle_shapes(func: Callable[..., ArrayFloat]) -> Callable[..., ArrayFloat]:
    """
    Decorator to normalize inputs to a contiguous (M, 3) float64 block.

    The wrapped function only ever sees the three colour channels. When the
    input carries a fourth (alpha) channel, it is split off before the call
    and re-attached unchanged afterwards. Extra arguments (``strict=...``)
    are forwarded to the wrapped function as given.

    Args:
        func: The function to decorate.

    Returns:
        The wrapped function with shape handling. The result has the same
        shape as the input: (3,) -> (3,), (N, 4) -> (N, 4), (H, W, 3) ->
        (H, W, 3) ...
    """
    @functools.wraps(func)
    def wrapper(arr: ArrayFloat, *args: Any, **kwargs: Any) -> ArrayFloat:
        arr_in = np.asarray(arr, dtype=np.float64)

        if arr_in.ndim == 0 or arr_in.shape[-1] not in (3, 4):
            shape = arr_in.shape[-1] if arr_in.ndim else "scalar"
            raise ValueError(f"Expected last dimension size 3 or 4, got {shape}")

        block = arr_in.reshape(-1, arr_in.shape[-1])
        colour = np.ascontiguousarray(block[:, :3])

        res = func(colour, *args, **kwargs)

        if block.shape[1] == 4:
            out = np.empty_like(block)
            out[:, :3] = res
            out[:, 3] = block[:, 3]
        else:
            out = res
        return out.reshape(arr_in.shape)
    return wrapper


# =============================================================================
# 2. LOW-LEVEL MATH KERNELS (Numba Optimized)
# =============================================================================

@njit(cache=True, fastmath=True)
def _oklab_to_oklch_kernel(lab: ArrayFloat) -> ArrayFloat:
    """
    Low-level kernel for OKLab -> OKLCh conversion.
    Input shape (N, 3), Output shape (N, 3). Hue in radians, (-pi, pi].
    """
    n = lab.shape[0]
    lch = np.empty_like(lab)

    for i in range(n):
        L, a, b = lab[i, 0], lab[i, 1], lab[i, 2]
        lch[i, 0] = L
        lch[i, 1] = np.hypot(a, b)
        lch[i, 2] = np.arctan2(b, a)
    return lch

@njit(cache=True, fastmath=True)
def _oklch_to_oklab_kernel(lch: ArrayFloat) -> ArrayFloat:
    """
    Low-level kernel for OKLCh -> OKLab conversion.
    Input shape (N, 3), Output shape (N, 3). Hue in radians.
    """
    n = lch.shape[0]
    lab = np.empty_like(lch)

    for i in range(n):
        L, C, h = lch[i, 0], lch[i, 1], lch[i, 2]
        lab[i, 0] = L
        lab[i, 1] = C * np.cos(h)
        lab[i, 2] = C * np.sin(h)
    return lab


# --- Strict IEEE 754 kernel variants (fastmath=False) ---

@njit(cache=True, fastmath=False)
def _oklab_to_oklch_kernel_strict(lab: ArrayFloat) -> ArrayFloat:
    """OKLab -> OKLCh — strict IEEE 754 variant."""
    n = lab.shape[0]
    lch = np.empty_like(lab)
    for i in range(n):
        L, a, b = lab[i, 0], lab[i, 1], lab[i, 2]
        lch[i, 0] = L
        lch[i, 1] = np.hypot(a, b)
        lch[i, 2] = np.arctan2(b, a)
    return lch

@njit(cache=True, fastmath=False)
def _oklch_to_oklab_kernel_strict(lch: ArrayFloat) -> ArrayFloat:
    """OKLCh -> OKLab — strict IEEE 754 variant."""
    n = lch.shape[0]
    lab = np.empty_like(lch)
    for i in range(n):
        L, C, h = lch[i, 0], lch[i, 1], lch[i, 2]
        lab[i, 0] = L
        lab[i, 1] = C * np.cos(h)
        lab[i, 2] = C * np.sin(h)
    return lab


# =============================================================================
# 3. COLOR SPACE ENGINE
# =============================================================================

class ColorSpaceEngine:
    """Static utility class for batch colour space transformations.

    Architecture Note:
        Core transforms provide both a public ``@handle_shapes`` decorated API
        and an internal ``_raw`` fast-path that assumes pre-validated (N, 3)
        float64 input.  Convenience pipelines (e.g. ``srgb_to_oklab``) call
        the ``_raw`` variants to avoid redundant shape checks at each stage.

        Methods that go through a transfer function or the OKLCh polar
        kernels take a keyword-only ``strict`` flag and hand it down to every
        kernel they call. Pure matrix transforms have no kernel to choose.
    """

    # =====================================================================
    #  Internal _raw fast-path methods  (assume validated (N, 3) float64)
    # =====================================================================

    @staticmethod
    def _linear_srgb_to_xyz_raw(rgb_array: ArrayFloat) -> ArrayFloat:
        """Raw linear sRGB → XYZ."""
        return np.dot(rgb_array, M_LINEAR_SRGB_TO_XYZ_T)

    @staticmethod
    def _xyz_to_linear_srgb_raw(xyz_array: ArrayFloat) -> ArrayFloat:
        """Raw XYZ → linear sRGB."""
        return np.dot(xyz_array, M_XYZ_TO_LINEAR_SRGB_T)

    @staticmethod
    def _srgb_to_xyz_raw(rgb_array: ArrayFloat, strict: bool = False) -> ArrayFloat:
        """Raw sRGB → XYZ."""
        return np.dot(degamma_array(rgb_array, strict=strict), M_LINEAR_SRGB_TO_XYZ_T)

    @staticmethod
    def _xyz_to_srgb_raw(xyz_array: ArrayFloat, strict: bool = False) -> ArrayFloat:
        """Raw XYZ → sRGB."""
        return gamma_array(np.dot(xyz_array, M_XYZ_TO_LINEAR_SRGB_T), strict=strict)

    @staticmethod
    def _linear_display_p3_to_xyz_raw(rgb_array: ArrayFloat) -> ArrayFloat:
        """Raw linear Display P3 → XYZ."""
        return np.dot(rgb_array, M_LINEAR_DISPLAY_P3_TO_XYZ_T)

    @staticmethod
    def _xyz_to_linear_display_p3_raw(xyz_array: ArrayFloat) -> ArrayFloat:
        """Raw XYZ → linear Display P3."""
        return np.dot(xyz_array, M_XYZ_TO_LINEAR_DISPLAY_P3_T)

    @staticmethod
    def _display_p3_to_xyz_raw(rgb_array: ArrayFloat, strict: bool = False) -> ArrayFloat:
        """Raw Display P3 → XYZ."""
        return np.dot(degamma_array(rgb_array, strict=strict), M_LINEAR_DISPLAY_P3_TO_XYZ_T)

    @staticmethod
    def _xyz_to_display_p3_raw(xyz_array: ArrayFloat, strict: bool = False) -> ArrayFloat:
        """Raw XYZ → Display P3."""
        return gamma_array(np.dot(xyz_array, M_XYZ_TO_LINEAR_DISPLAY_P3_T), strict=strict)

    @staticmethod
    def _xyz_to_oklab_raw(xyz_array: ArrayFloat) -> ArrayFloat:
        """Raw XYZ → OKLab.  ``np.cbrt`` is the real (signed) cube root."""
        lms = np.dot(xyz_array, M_XYZ_TO_LMS_T)
        return np.dot(np.cbrt(lms), M_LMS_TO_OKLAB_T)

    @staticmethod
    def _oklab_to_xyz_raw(oklab_array: ArrayFloat) -> ArrayFloat:
        """Raw OKLab → XYZ."""
        lms_prime = np.dot(oklab_array, M_OKLAB_TO_LMS_T)
        return np.dot(lms_prime * lms_prime * lms_prime, M_LMS_TO_XYZ_T)

    @staticmethod
    def _oklab_to_oklch_raw(oklab_array: ArrayFloat, strict: bool = False) -> ArrayFloat:
        """Raw OKLab → OKLCh (dispatches fast / strict kernel)."""
        lab = np.ascontiguousarray(oklab_array)
        if strict:
            return _oklab_to_oklch_kernel_strict(lab)
        return _oklab_to_oklch_kernel(lab)

    @staticmethod
    def _oklch_to_oklab_raw(oklch_array: ArrayFloat, strict: bool = False) -> ArrayFloat:
        """Raw OKLCh → OKLab (dispatches fast / strict kernel)."""
        lch = np.ascontiguousarray(oklch_array)
        if strict:
            return _oklch_to_oklab_kernel_strict(lch)
        return _oklch_to_oklab_kernel(lch)

    # =====================================================================
    #  Public API  (shape-safe wrappers)
    # =====================================================================

    @staticmethod
    @handle_shapes
    def linear_srgb_to_xyz(rgb_array: ArrayFloat) -> ArrayFloat:
        """
        Converts linear sRGB to XYZ (D65).

        Args:
            rgb_array: Linear sRGB data, shape (..., 3) or (..., 4) with alpha.
                Values outside [0, 1] are accepted.

        Returns:
            XYZ coordinates, same shape.
        """
        return ColorSpaceEngine._linear_srgb_to_xyz_raw(rgb_array)

    @staticmethod
    @handle_shapes
    def xyz_to_linear_srgb(xyz_array: ArrayFloat) -> ArrayFloat:
        """
        Converts XYZ (D65) to linear sRGB. No clipping is applied.
        """
        return ColorSpaceEngine._xyz_to_linear_srgb_raw(xyz_array)

    @staticmethod
    @handle_shapes
    def srgb_to_xyz(rgb_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """
        Converts gamma-encoded sRGB to XYZ (D65).

        Args:
            rgb_array: sRGB data, shape (..., 3) or (..., 4) with alpha.
                Negative channels are decoded by odd symmetry.
            strict: Use the strict IEEE 754 transfer kernel.

        Returns:
            XYZ coordinates, same shape.
        """
        return ColorSpaceEngine._srgb_to_xyz_raw(rgb_array, strict)

    @staticmethod
    @handle_shapes
    def xyz_to_srgb(xyz_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """
        Converts XYZ (D65) to gamma-encoded sRGB.

        Out-of-gamut colours keep their negative or >1 channels; use
        :meth:`quantize` to clamp at the integer boundary.
        """
        return ColorSpaceEngine._xyz_to_srgb_raw(xyz_array, strict)

    @staticmethod
    @handle_shapes
    def linear_display_p3_to_xyz(rgb_array: ArrayFloat) -> ArrayFloat:
        """Converts linear Display P3 to XYZ (D65)."""
        return ColorSpaceEngine._linear_display_p3_to_xyz_raw(rgb_array)

    @staticmethod
    @handle_shapes
    def xyz_to_linear_display_p3(xyz_array: ArrayFloat) -> ArrayFloat:
        """Converts XYZ (D65) to linear Display P3."""
        return ColorSpaceEngine._xyz_to_linear_display_p3_raw(xyz_array)

    @staticmethod
    @handle_shapes
    def display_p3_to_xyz(rgb_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """
        Converts gamma-encoded Display P3 to XYZ (D65).

        Display P3 uses the sRGB transfer function with its own primaries.
        """
        return ColorSpaceEngine._display_p3_to_xyz_raw(rgb_array, strict)

    @staticmethod
    @handle_shapes
    def xyz_to_display_p3(xyz_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """Converts XYZ (D65) to gamma-encoded Display P3."""
        return ColorSpaceEngine._xyz_to_display_p3_raw(xyz_array, strict)

    @staticmethod
    @handle_shapes
    def xyz_to_oklab(xyz_array: ArrayFloat) -> ArrayFloat:
        """
        Converts XYZ (D65) directly to OKLab.

        XYZ -> LMS (M1) -> signed cube root -> OKLab (M2).

        Args:
            xyz_array: Input XYZ data, shape (..., 3) or (..., 4).

        Returns:
            OKLab coordinates (L, a, b).
        """
        return ColorSpaceEngine._xyz_to_oklab_raw(xyz_array)

    @staticmethod
    @handle_shapes
    def oklab_to_xyz(oklab_array: ArrayFloat) -> ArrayFloat:
        """
        Converts OKLab directly to XYZ (D65).

        OKLab -> LMS' (M2 inverse) -> cube -> XYZ (M1 inverse).
        """
        return ColorSpaceEngine._oklab_to_xyz_raw(oklab_array)

    @staticmethod
    @handle_shapes
    def xyz_to_oklch(xyz_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """
        Converts XYZ (D65) to OKLCh.

        Returns:
            (L, C, h) with C >= 0 and h = atan2(b, a) in radians.
        """
        lab = ColorSpaceEngine._xyz_to_oklab_raw(xyz_array)
        return ColorSpaceEngine._oklab_to_oklch_raw(lab, strict)

    @staticmethod
    @handle_shapes
    def oklch_to_xyz(oklch_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """Converts OKLCh (h in radians) to XYZ (D65)."""
        lab = ColorSpaceEngine._oklch_to_oklab_raw(oklch_array, strict)
        return ColorSpaceEngine._oklab_to_xyz_raw(lab)

    # =====================================================================
    #  Convenience pipelines
    # =====================================================================

    @staticmethod
    @handle_shapes
    def srgb_to_oklab(rgb_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """sRGB → XYZ → OKLab."""
        xyz = ColorSpaceEngine._srgb_to_xyz_raw(rgb_array, strict)
        return ColorSpaceEngine._xyz_to_oklab_raw(xyz)

    @staticmethod
    @handle_shapes
    def oklab_to_srgb(oklab_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """OKLab → XYZ → sRGB (unclipped)."""
        xyz = ColorSpaceEngine._oklab_to_xyz_raw(oklab_array)
        return ColorSpaceEngine._xyz_to_srgb_raw(xyz, strict)

    @staticmethod
    @handle_shapes
    def srgb_to_oklch(rgb_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """sRGB → XYZ → OKLab → OKLCh."""
        xyz = ColorSpaceEngine._srgb_to_xyz_raw(rgb_array, strict)
        lab = ColorSpaceEngine._xyz_to_oklab_raw(xyz)
        return ColorSpaceEngine._oklab_to_oklch_raw(lab, strict)

    @staticmethod
    @handle_shapes
    def oklch_to_srgb(oklch_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """OKLCh → OKLab → XYZ → sRGB (unclipped)."""
        lab = ColorSpaceEngine._oklch_to_oklab_raw(oklch_array, strict)
        xyz = ColorSpaceEngine._oklab_to_xyz_raw(lab)
        return ColorSpaceEngine._xyz_to_srgb_raw(xyz, strict)

    @staticmethod
    @handle_shapes
    def srgb_to_display_p3(rgb_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """
        sRGB → XYZ → Display P3.

        The sRGB gamut lies inside P3, so input in [0, 1] stays in [0, 1].
        Extended-range input (negative or >1 channels) is not clamped and can
        map outside [0, 1].
        """
        xyz = ColorSpaceEngine._srgb_to_xyz_raw(rgb_array, strict)
        return ColorSpaceEngine._xyz_to_display_p3_raw(xyz, strict)

    @staticmethod
    @handle_shapes
    def display_p3_to_srgb(rgb_array: ArrayFloat, *, strict: bool = False) -> ArrayFloat:
        """Display P3 → XYZ → sRGB. Saturated P3 colours fall outside [0, 1]."""
        xyz = ColorSpaceEngine._display_p3_to_xyz_raw(rgb_array, strict)
        return ColorSpaceEngine._xyz_to_srgb_raw(xyz, strict)

    # =====================================================================
    #  Interop with Color and integer buffers
    # =====================================================================

    @staticmethod
    def from_colors(colors: Iterable[Color]) -> ArrayFloat:
        """
        Packs Color values into an (N, 4) XYZ + alpha array.
        """
        rows = [(c.x, c.y, c.z, c.alpha) for c in colors]
        return np.array(rows, dtype=np.float64).reshape(-1, 4)

    @staticmethod
    def to_colors(xyza_array: ArrayFloat) -> List[Color]:
        """
        Unpacks an (..., 4) XYZ + alpha array into a flat list of Color.

        Raises:
            ValueError: If the last dimension is not 4.
        """
        arr = np.asarray(xyza_array, dtype=np.float64)
        if arr.ndim == 0 or arr.shape[-1] != 4:
            raise ValueError(f"Expected last dimension size 4, got {arr.shape}")
        return [Color(*map(float, row)) for row in arr.reshape(-1, 4)]

    @staticmethod
    def quantize(values: ArrayFloat, max_value: int = MAX_UINT16) -> np.ndarray:
        """
        Quantizes [0, 1] channels (alpha included) to unsigned integers.

        This is the only place where the engine clamps.
        """
        return quantize_array(values, max_value)


# =============================================================================
# 4. VERIFICATION & BENCHMARK
# =============================================================================
if __name__ == "__main__":
    print("--- Tincture Batch Engine Self-Check ---")
    rng = np.random.default_rng(7)

    # 1. Round-trips through every space
    print("1. Testing Round-Trips...")
    rgba_in = rng.random((10_000, 4))
    xyza = ColorSpaceEngine.srgb_to_xyz(rgba_in)
    for name, fwd, inv in (
        ("sRGB", ColorSpaceEngine.xyz_to_srgb, ColorSpaceEngine.srgb_to_xyz),
        ("Display P3", ColorSpaceEngine.xyz_to_display_p3, ColorSpaceEngine.display_p3_to_xyz),
        ("OKLab", ColorSpaceEngine.xyz_to_oklab, ColorSpaceEngine.oklab_to_xyz),
        ("OKLCh", ColorSpaceEngine.xyz_to_oklch, ColorSpaceEngine.oklch_to_xyz),
    ):
        max_err = np.max(np.abs(inv(fwd(xyza)) - xyza))
        print(f"   Max Error (XYZ->{name}->XYZ): {max_err:.2e} "
              f"{'[PASS]' if max_err < 1e-12 else '[FAIL]'}")

    # 2. Batch vs scalar
    print("2. Testing Batch vs Scalar Color...")
    ref = np.array([Color.from_srgb(*row).oklab() for row in rgba_in[:100]])
    batch = ColorSpaceEngine.srgb_to_oklab(rgba_in[:100])
    err = np.max(np.abs(ref - batch))
    print(f"   Max Error (batch vs scalar): {err:.2e} "
          f"{'[PASS]' if err < 1e-9 else '[FAIL]'}")

    # 3. Benchmark
    print("3. Benchmarking sRGB -> OKLCh (1920x1080 RGBA)...")
    image = rng.random((1080, 1920, 4))
    ColorSpaceEngine.srgb_to_oklch(image[:1])
    t0 = time.perf_counter()
    _ = ColorSpaceEngine.srgb_to_oklch(image)
    t1 = time.perf_counter()
    print(f"   Processed {image.shape[0] * image.shape[1]:,} pixels in {(t1 - t0) * 1000:.2f} ms")
