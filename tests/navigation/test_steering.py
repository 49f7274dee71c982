from __future__ import annotations

import math

import pytest

from tacnav.navigation.obstacles import Obstacle
from tacnav.navigation.steering import (
    DEFAULT_AVOIDANCE,
    AvoidanceConfig,
    apply_obstacle_avoidance,
    calculate_avoidance_vector,
    detect_obstacles_ahead,
    is_stuck,
)
from tacnav.util import vectors

EAST = (100.0, 0.0)


def _rock(x: float, y: float) -> Obstacle:
    return Obstacle(x, y, 16, 16)


class TestAvoidanceConfig:
    def test_defaults(self) -> None:
        settings = AvoidanceConfig()
        assert settings.look_ahead_distance == 60
        assert settings.avoidance_radius == 50
        assert settings.avoidance_force == 0.4
        assert settings.max_avoidance_angle == pytest.approx(math.pi / 3)

    @pytest.mark.parametrize("force", [-0.1, 1.5])
    def test_force_outside_unit_range_raises(self, force: float) -> None:
        with pytest.raises(ValueError, match="avoidance_force"):
            AvoidanceConfig(avoidance_force=force)

    def test_with_overrides_returns_modified_copy(self) -> None:
        tweaked = DEFAULT_AVOIDANCE.with_overrides(avoidance_radius=35)
        assert tweaked.avoidance_radius == 35
        assert tweaked.avoidance_force == DEFAULT_AVOIDANCE.avoidance_force
        assert DEFAULT_AVOIDANCE.avoidance_radius == 50
        assert DEFAULT_AVOIDANCE.with_overrides() is DEFAULT_AVOIDANCE


class TestDetection:
    def test_stationary_agent_detects_nothing(self) -> None:
        assert detect_obstacles_ahead((0, 0), (0, 0), [_rock(10, 0)]) == []

    def test_obstacle_ahead_within_radius(self) -> None:
        rock = _rock(20, 0)
        assert detect_obstacles_ahead((0, 0), EAST, [rock]) == [rock]

    def test_obstacle_beyond_radius_is_ignored(self) -> None:
        assert detect_obstacles_ahead((0, 0), EAST, [_rock(51, 0)]) == []

    def test_obstacle_behind_is_ignored_unless_close(self) -> None:
        far_behind = _rock(-40, 0)
        close_behind = _rock(-20, 0)
        detected = detect_obstacles_ahead((0, 0), EAST, [far_behind, close_behind])
        assert detected == [close_behind]

    def test_obstacle_exactly_sideways_needs_close_range(self) -> None:
        # dot == 0 is not "ahead"; only the close-range rule can flag it.
        assert detect_obstacles_ahead((0, 0), EAST, [_rock(0, 40)]) == []
        assert len(detect_obstacles_ahead((0, 0), EAST, [_rock(0, 30)])) == 1


class TestAvoidanceVector:
    def test_head_on_obstacle_is_clamped_to_max_angle(self) -> None:
        avoidance = calculate_avoidance_vector((0, 0), [_rock(20, 0)], EAST)
        assert vectors.length(avoidance) == pytest.approx(0.4)
        assert vectors.angle_between(avoidance, EAST) == pytest.approx(math.pi / 3)

    def test_clamp_turns_toward_the_repulsion_side(self) -> None:
        # Slightly below the path: the repulsion points up-left (negative y
        # side of the perpendicular), so the clamped vector turns that way.
        avoidance = calculate_avoidance_vector((0, 0), [_rock(20, 5)], EAST)
        assert avoidance[1] < 0

    def test_opposing_repulsions_cancel_to_zero(self) -> None:
        obstacles = [_rock(0, 20), _rock(0, -20)]
        assert calculate_avoidance_vector((0, 0), obstacles, EAST) == (0.0, 0.0)

    def test_obstacle_on_agent_position_is_skipped(self) -> None:
        assert calculate_avoidance_vector((5, 5), [_rock(5, 5)], EAST) == (0.0, 0.0)

    def test_closer_obstacles_weigh_more(self) -> None:
        near_up = _rock(10, -10)
        far_down = _rock(30, 30)
        unclamped = AvoidanceConfig(max_avoidance_angle=math.pi)
        avoidance = calculate_avoidance_vector(
            (0, 0), [near_up, far_down], EAST, unclamped
        )
        assert avoidance[1] > 0  # Pushed away from the near obstacle


class TestApplyAvoidance:
    def test_no_obstacles_returns_desired_velocity_unchanged(self) -> None:
        desired = (30.0, -40.0)
        assert apply_obstacle_avoidance((0, 0), desired, []) is desired

    def test_undetected_obstacles_leave_velocity_unchanged(self) -> None:
        desired = (100.0, 0.0)
        result = apply_obstacle_avoidance((0, 0), desired, [_rock(-40, 0)])
        assert result is desired

    def test_head_on_obstacle_keeps_speed_and_bends_path(self) -> None:
        result = apply_obstacle_avoidance((0, 0), EAST, [_rock(20, 0)])

        assert vectors.length(result) == pytest.approx(100.0)
        assert abs(result[1]) > 0
        assert vectors.angle_between(result, EAST) <= math.pi / 3 + 1e-9
        # unit(desired) * 0.6 + 0.4 * (cos 60, sin 60)
        blend = (0.8, 0.4 * math.sin(math.pi / 3))
        expected = vectors.scale(vectors.normalize(blend), 100)
        assert result == pytest.approx(expected)

    @pytest.mark.parametrize(
        "obstacle_pos",
        [(20, 0), (25, 10), (15, -20), (5, 25), (-10, 15), (30, 30)],
    )
    def test_speed_is_preserved_and_deviation_bounded(
        self, obstacle_pos: tuple[float, float]
    ) -> None:
        result = apply_obstacle_avoidance((0, 0), EAST, [_rock(*obstacle_pos)])
        assert vectors.length(result) == pytest.approx(100.0)
        assert vectors.angle_between(result, EAST) <= math.pi / 3 + 1e-9

    def test_keyword_overrides_apply(self) -> None:
        # Outside the tighter 35 px radius, so nothing is detected.
        desired = (100.0, 0.0)
        result = apply_obstacle_avoidance(
            (0, 0), desired, [_rock(40, 0)], avoidance_radius=35
        )
        assert result is desired

    def test_zero_blend_falls_back_to_perpendicular(self) -> None:
        result = apply_obstacle_avoidance(
            (0, 0),
            EAST,
            [_rock(20, 0)],
            avoidance_force=0.5,
            max_avoidance_angle=math.pi,
        )
        assert result == pytest.approx((0.0, 50.0))


class TestIsStuck:
    def test_slow_for_too_long_is_stuck(self) -> None:
        assert is_stuck((1.0, 1.0), 1001)

    def test_slow_but_not_for_long_enough(self) -> None:
        assert not is_stuck((0.0, 0.0), 1000)

    def test_moving_is_never_stuck(self) -> None:
        assert not is_stuck((10.0, 0.0), 5000)

    def test_custom_thresholds(self) -> None:
        assert is_stuck((8.0, 0.0), 300, threshold_ms=200, min_speed=10)
