# -*- coding: utf-8 -*-
"""
Tincture: XYZ-centred colour conversion for graphics pipelines
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: tincture_matrices.py — Conversion matrices between XYZ D65 and the
supported colour spaces.

All RGB matrices are written as exact rational fractions taken from
CSS Color Module Level 4 (section 18, "Sample code for color conversions").
The fractions are evaluated once at import time in IEEE 754 double
precision, so each forward/inverse pair round-trips at machine precision.
Inverses are stored explicitly and are *never* re-derived with
``np.linalg.inv``.

OKLab matrices are Björn Ottosson's coefficients recomputed for the
CSS D65 white point, kept at 16 significant digits.

Every matrix is provided in two forms:
    * ``Matrix3`` tuple-of-tuples for the scalar ``Color`` path.
    * ``M_..._T`` pre-transposed C-contiguous float64 arrays for the batch
      engine, so that row-vector data is transformed with ``rows @ M_T``.
"""

from typing import Final, Tuple, TypeAlias

import numpy as np
from numpy.typing import NDArray

__all__ = [
    # --- Type Aliases ---
    "Matrix3",
    "ArrayFloat",

    # --- Scalar matrices ---
    "LINEAR_SRGB_TO_XYZ",
    "XYZ_TO_LINEAR_SRGB",
    "LINEAR_DISPLAY_P3_TO_XYZ",
    "XYZ_TO_LINEAR_DISPLAY_P3",
    "XYZ_TO_LMS",
    "LMS_TO_XYZ",
    "LMS_TO_OKLAB",
    "OKLAB_TO_LMS",

    # --- Pre-transposed arrays ---
    "M_LINEAR_SRGB_TO_XYZ_T",
    "M_XYZ_TO_LINEAR_SRGB_T",
    "M_LINEAR_DISPLAY_P3_TO_XYZ_T",
    "M_XYZ_TO_LINEAR_DISPLAY_P3_T",
    "M_XYZ_TO_LMS_T",
    "M_LMS_TO_XYZ_T",
    "M_LMS_TO_OKLAB_T",
    "M_OKLAB_TO_LMS_T",

    # --- Function ---
    "apply_matrix",
]

# --- Type Aliases ---
Matrix3: TypeAlias = Tuple[
    Tuple[float, float, float],
    Tuple[float, float, float],
    Tuple[float, float, float],
]
ArrayFloat: TypeAlias = NDArray[np.floating]


def _transposed(m: Matrix3) -> ArrayFloat:
    """Pre-transpose for row-vector multiplication (``rows @ M_T``)."""
    return np.array(m, dtype=np.float64).T.copy()


# =============================================================================
# 1. LINEAR sRGB <-> XYZ D65
# =============================================================================

LINEAR_SRGB_TO_XYZ: Final[Matrix3] = (
    (506752 / 1228815, 87881 / 245763, 12673 / 70218),
    (87098 / 409605, 175762 / 245763, 12673 / 175545),
    (7918 / 409605, 87881 / 737289, 1001167 / 1053270),
)

XYZ_TO_LINEAR_SRGB: Final[Matrix3] = (
    (12831 / 3959, -329 / 214, -1974 / 3959),
    (-851781 / 878810, 1648619 / 878810, 36519 / 878810),
    (705 / 12673, -2585 / 12673, 705 / 667),
)

# =============================================================================
# 2. LINEAR DISPLAY P3 <-> XYZ D65
# =============================================================================

LINEAR_DISPLAY_P3_TO_XYZ: Final[Matrix3] = (
    (608311 / 1250200, 189793 / 714400, 198249 / 1000160),
    (35783 / 156275, 247089 / 357200, 198249 / 2500400),
    (0.0, 32229 / 714400, 5220557 / 5000800),
)

XYZ_TO_LINEAR_DISPLAY_P3: Final[Matrix3] = (
    (446124 / 178915, -333277 / 357830, -72051 / 178915),
    (-14852 / 17905, 63121 / 35810, 423 / 17905),
    (11844 / 330415, -50337 / 660830, 316169 / 330415),
)

# =============================================================================
# 3. OKLAB (XYZ oriented)
# =============================================================================
# M1: XYZ to cone response (LMS). The nonlinearity sits between M1 and M2.

XYZ_TO_LMS: Final[Matrix3] = (
    (0.8190224379967030, 0.3619062600528904, -0.1288737815209879),
    (0.0329836539323885, 0.9292868615863434, 0.0361446663506424),
    (0.0481771893596242, 0.2642395317527308, 0.6335478284694309),
)

LMS_TO_XYZ: Final[Matrix3] = (
    (1.2268798758459243, -0.5578149944602171, 0.2813910456659647),
    (-0.0405757452148008, 1.1122868032803170, -0.0717110580655164),
    (-0.0763729366746601, -0.4214933324022432, 1.5869240198367816),
)

# M2: cube-rooted LMS to OKLab.
LMS_TO_OKLAB: Final[Matrix3] = (
    (0.2104542683093140, 0.7936177747023054, -0.0040720430116193),
    (1.9779985324311684, -2.4285922420485799, 0.4505937096174110),
    (0.0259040424655478, 0.7827717124575296, -0.8086757549230774),
)

OKLAB_TO_LMS: Final[Matrix3] = (
    (1.0, 0.3963377773761749, 0.2158037573099136),
    (1.0, -0.1055613458156586, -0.0638541728258133),
    (1.0, -0.0894841775298119, -1.2914855480194092),
)

# --- Pre-Transposed Matrices (batch engine) ---
M_LINEAR_SRGB_TO_XYZ_T: Final[ArrayFloat] = _transposed(LINEAR_SRGB_TO_XYZ)
M_XYZ_TO_LINEAR_SRGB_T: Final[ArrayFloat] = _transposed(XYZ_TO_LINEAR_SRGB)
M_LINEAR_DISPLAY_P3_TO_XYZ_T: Final[ArrayFloat] = _transposed(LINEAR_DISPLAY_P3_TO_XYZ)
M_XYZ_TO_LINEAR_DISPLAY_P3_T: Final[ArrayFloat] = _transposed(XYZ_TO_LINEAR_DISPLAY_P3)
M_XYZ_TO_LMS_T: Final[ArrayFloat] = _transposed(XYZ_TO_LMS)
M_LMS_TO_XYZ_T: Final[ArrayFloat] = _transposed(LMS_TO_XYZ)
M_LMS_TO_OKLAB_T: Final[ArrayFloat] = _transposed(LMS_TO_OKLAB)
M_OKLAB_TO_LMS_T: Final[ArrayFloat] = _transposed(OKLAB_TO_LMS)


def apply_matrix(m: Matrix3, a: float, b: float, c: float) -> Tuple[float, float, float]:
    """
    Multiplies a 3x3 matrix with the column vector (a, b, c).

    Row-major: ``out[i] = m[i][0]*a + m[i][1]*b + m[i][2]*c``.
    """
    r0, r1, r2 = m
    return (
        r0[0] * a + r0[1] * b + r0[2] * c,
        r1[0] * a + r1[1] * b + r1[2] * c,
        r2[0] * a + r2[1] * b + r2[2] * c,
    )
