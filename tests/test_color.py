"""Tests for the Color value type and its conversions."""

import dataclasses
import math

import numpy as np
import pytest

from tincture_color import Color, LabAlpha, LChAlpha, RGBAlpha, XYZAlpha

TOL = 1e-6


def assert_channels(got, want, atol=TOL):
    np.testing.assert_allclose(np.asarray(got), np.asarray(want), rtol=0, atol=atol)


def _random_channels(seed, n=50, low=0.0, high=1.0):
    rng = np.random.default_rng(seed)
    return [tuple(map(float, row)) for row in rng.uniform(low, high, size=(n, 4))]


class TestColorValue:

    def test_default_is_transparent_black(self):
        assert Color().xyz() == (0.0, 0.0, 0.0, 0.0)

    def test_xyz_roundtrip_is_exact(self):
        c = Color.from_xyz(0.3, 0.4, 0.5, 0.6)
        assert c.xyz() == (0.3, 0.4, 0.5, 0.6)

    @pytest.mark.parametrize("x, y, z, alpha", _random_channels(0, n=10, low=-2.0, high=2.0))
    def test_xyz_storage_is_verbatim(self, x, y, z, alpha):
        assert Color.from_xyz(x, y, z, alpha).xyz() == (x, y, z, alpha)

    def test_alpha_getter(self):
        assert Color.from_srgb(0.1, 0.2, 0.3, 0.4).alpha == 0.4

    def test_with_alpha_returns_new_color(self):
        c = Color.from_xyz(0.1, 0.2, 0.3, 1.0)
        d = c.with_alpha(0.25)
        assert d.xyz() == (0.1, 0.2, 0.3, 0.25)
        assert c.alpha == 1.0

    def test_is_immutable(self):
        c = Color.from_xyz(0.1, 0.2, 0.3, 1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            c.x = 0.5  # type: ignore[misc]

    def test_value_equality_and_hash(self):
        a = Color.from_xyz(0.1, 0.2, 0.3, 1.0)
        b = Color.from_xyz(0.1, 0.2, 0.3, 1.0)
        assert a == b
        assert hash(a) == hash(b)

    def test_alpha_is_not_clamped(self):
        assert Color.from_srgb(0.5, 0.5, 0.5, 1.5).alpha == 1.5
        assert Color.from_oklab(0.5, 0.0, 0.0, -0.25).srgb().alpha == -0.25

    def test_accessors_return_named_tuples(self):
        c = Color.from_srgb(0.2, 0.4, 0.6, 0.8)
        assert isinstance(c.xyz(), XYZAlpha)
        assert isinstance(c.srgb(), RGBAlpha)
        assert isinstance(c.display_p3(), RGBAlpha)
        assert isinstance(c.oklab(), LabAlpha)
        assert isinstance(c.oklch(), LChAlpha)
        assert c.oklch().alpha == 0.8


class TestRoundTrips:

    def test_srgb_example(self):
        c = Color.from_srgb(0.2, 0.4, 0.6, 0.8)
        assert_channels(c.srgb(), (0.2, 0.4, 0.6, 0.8))

    def test_display_p3_example(self):
        c = Color.from_display_p3(0.1, 0.7, 0.3, 0.5)
        assert_channels(c.display_p3(), (0.1, 0.7, 0.3, 0.5))

    def test_oklab_example(self):
        c = Color.from_oklab(0.5, 0.1, -0.2, 0.9)
        assert_channels(c.oklab(), (0.5, 0.1, -0.2, 0.9))

    @pytest.mark.parametrize("channels", _random_channels(1))
    def test_srgb(self, channels):
        assert_channels(Color.from_srgb(*channels).srgb(), channels)

    @pytest.mark.parametrize("channels", _random_channels(2))
    def test_linear_srgb(self, channels):
        assert_channels(Color.from_linear_srgb(*channels).linear_srgb(), channels, atol=1e-12)

    @pytest.mark.parametrize("channels", _random_channels(3))
    def test_display_p3(self, channels):
        assert_channels(Color.from_display_p3(*channels).display_p3(), channels)

    @pytest.mark.parametrize("channels", _random_channels(4))
    def test_linear_display_p3(self, channels):
        assert_channels(
            Color.from_linear_display_p3(*channels).linear_display_p3(), channels, atol=1e-12
        )

    @pytest.mark.parametrize("l, a, b, alpha", [
        (0.0, 0.0, 0.0, 1.0),
        (1.0, 0.0, 0.0, 1.0),
        (0.5, 0.1, -0.2, 0.9),
        (0.7, -0.4, 0.4, 0.3),
        (0.2, 0.5, 0.5, 0.0),
        (0.9, -0.5, -0.5, 1.0),
    ])
    def test_oklab(self, l, a, b, alpha):
        assert_channels(Color.from_oklab(l, a, b, alpha).oklab(), (l, a, b, alpha))

    @pytest.mark.parametrize("l, c, h, alpha", [
        (0.5, 0.1, 1.0, 1.0),
        (0.7, 0.2, -2.5, 0.5),
        (0.3, 0.05, 3.0, 0.25),
    ])
    def test_oklch(self, l, c, h, alpha):
        assert_channels(Color.from_oklch(l, c, h, alpha).oklch(), (l, c, h, alpha))

    def test_chained_cross_space(self):
        r0, g0, b0, a0 = 0.15, 0.35, 0.55, 0.75

        p3 = Color.from_srgb(r0, g0, b0, a0).display_p3()
        lab = Color.from_display_p3(*p3).oklab()
        rgb = Color.from_oklab(*lab).srgb()

        assert_channels(rgb, (r0, g0, b0, a0))

    def test_chained_through_linear_spaces(self):
        c0 = Color.from_srgb(0.9, 0.1, 0.45, 1.0)
        lin = c0.linear_display_p3()
        lch = Color.from_linear_display_p3(*lin).oklch()
        lin_srgb = Color.from_oklch(*lch).linear_srgb()
        assert_channels(Color.from_linear_srgb(*lin_srgb).srgb(), c0.srgb())


class TestKnownValues:

    def test_srgb_white_is_d65(self):
        x, y, z, _ = Color.from_srgb(1.0, 1.0, 1.0, 1.0).xyz()
        assert y == pytest.approx(1.0, abs=1e-12)
        assert x == pytest.approx(0.95046, abs=1e-4)
        assert z == pytest.approx(1.08906, abs=1e-4)

    def test_p3_white_equals_srgb_white(self):
        assert_channels(
            Color.from_display_p3(1.0, 1.0, 1.0, 1.0).xyz(),
            Color.from_srgb(1.0, 1.0, 1.0, 1.0).xyz(),
            atol=1e-12,
        )

    def test_white_oklab(self):
        l, a, b, _ = Color.from_srgb(1.0, 1.0, 1.0, 1.0).oklab()
        assert l == pytest.approx(1.0, abs=1e-6)
        assert a == pytest.approx(0.0, abs=1e-6)
        assert b == pytest.approx(0.0, abs=1e-6)

    def test_black_is_zero_everywhere(self):
        c = Color.from_srgb(0.0, 0.0, 0.0, 1.0)
        assert c.xyz() == (0.0, 0.0, 0.0, 1.0)
        assert c.oklab() == (0.0, 0.0, 0.0, 1.0)
        assert c.display_p3() == (0.0, 0.0, 0.0, 1.0)

    def test_red_oklab(self):
        l, a, b, _ = Color.from_srgb(1.0, 0.0, 0.0, 1.0).oklab()
        assert l == pytest.approx(0.62796, abs=1e-4)
        assert a == pytest.approx(0.22486, abs=1e-4)
        assert b == pytest.approx(0.12585, abs=1e-4)

    def test_srgb_red_inside_p3(self):
        r, g, b, _ = Color.from_srgb(1.0, 0.0, 0.0, 1.0).display_p3()
        assert r == pytest.approx(0.9175, abs=1e-3)
        assert g == pytest.approx(0.2003, abs=1e-3)
        assert b == pytest.approx(0.1386, abs=1e-3)


class TestOutOfGamut:

    def test_p3_green_is_negative_in_srgb(self):
        c = Color.from_display_p3(0.0, 1.0, 0.0, 1.0)
        r, g, b, _ = c.srgb()
        assert r < 0.0
        assert g > 1.0
        assert b < 0.0

    def test_p3_green_survives_srgb_roundtrip(self):
        c = Color.from_display_p3(0.0, 1.0, 0.0, 1.0)
        back = Color.from_srgb(*c.srgb())
        assert_channels(back.xyz(), c.xyz(), atol=1e-12)
        assert_channels(back.display_p3(), (0.0, 1.0, 0.0, 1.0))

    def test_negative_xyz_oklab_roundtrip(self):
        c = Color.from_xyz(-0.1, 0.2, 0.3, 1.0)
        back = Color.from_oklab(*c.oklab())
        assert_channels(back.xyz(), c.xyz(), atol=1e-12)

    def test_extended_range_srgb_roundtrip(self):
        channels = (-0.3, 1.4, 0.5, 1.0)
        assert_channels(Color.from_srgb(*channels).srgb(), channels)


class TestOKLChPolar:

    @pytest.mark.parametrize("channels", _random_channels(5, n=30, low=-0.2, high=1.2))
    def test_polar_consistency(self, channels):
        c = Color.from_srgb(*channels)
        l, a, b, alpha = c.oklab()
        l2, ch, h, alpha2 = c.oklch()

        assert l2 == l
        assert alpha2 == alpha
        assert ch >= 0.0
        assert ch == pytest.approx(math.hypot(a, b), abs=1e-15)
        assert h == pytest.approx(math.atan2(b, a), abs=1e-15)
        assert -math.pi <= h <= math.pi

    def test_from_oklch_matches_cartesian(self):
        l, c, h = 0.6, 0.15, 2.0
        assert_channels(
            Color.from_oklch(l, c, h, 1.0).xyz(),
            Color.from_oklab(l, c * math.cos(h), c * math.sin(h), 1.0).xyz(),
            atol=1e-15,
        )

    def test_achromatic_hue_is_atan2_convention(self):
        _, ch, h, _ = Color.from_oklab(0.5, 0.0, 0.0, 1.0).oklch()
        assert ch == pytest.approx(0.0, abs=1e-12)
        assert -math.pi <= h <= math.pi

    def test_exact_zero_chroma(self):
        _, ch, h, _ = Color().oklch()
        assert ch == 0.0
        assert h == 0.0
