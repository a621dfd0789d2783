# src/tests/level_unit.py
import pytest

from src.dockjumper.config import (
    GAP_MIN, GAP_MAX, PLATFORM_MIN_W, PLATFORM_MAX_W, PLATFORM_SIDE_MARGIN,
    MOVING_EVERY, MIN_TRAVEL_SPAN, MOTION_PADDING, START_LAYOUT, Playfield
)
from src.dockjumper.level import (
    LevelGen, MotionKind, MotionParams, motion_kind, motion_params
)
from src.dockjumper.physics import PhysicsWorld


def make_level(seed=7, playfield=None):
    return LevelGen(PhysicsWorld(), playfield or Playfield(), seed)


def test_opening_layout_is_fixed():
    level = make_level()
    got = [(p.x, p.y, p.width) for p in level.platforms]
    assert got == [(float(x), float(y), float(w)) for x, y, w in START_LAYOUT]
    assert all(not p.moving and not p.scored for p in level.platforms)
    top = max(y for _, y, _ in START_LAYOUT)
    assert top + GAP_MIN <= level.next_platform_y <= top + GAP_MAX


def test_extend_spacing_and_placement_bounds():
    pf = Playfield()
    level = make_level(seed=3, playfield=pf)
    level.extend(5000.0, score=0)
    assert level.next_platform_y >= 5000.0
    ys = [p.y for p in level.platforms]
    gaps = [b - a for a, b in zip(ys, ys[1:])]
    assert all(GAP_MIN <= g <= GAP_MAX for g in gaps[len(START_LAYOUT):])
    for p in level.platforms[len(START_LAYOUT):]:
        assert PLATFORM_MIN_W <= p.width <= PLATFORM_MAX_W
        assert p.body.left >= -pf.half_width + PLATFORM_SIDE_MARGIN - 1e-9
        assert p.body.right <= pf.half_width - PLATFORM_SIDE_MARGIN + 1e-9


def test_force_extend_spawns_at_least_one():
    level = make_level()
    assert level.extend(-1000.0) == 0
    assert level.extend(-1000.0, force=True) == 1


def test_every_fifth_platform_moves():
    level = make_level(seed=11)
    level.extend(3000.0, score=0)
    for index, platform in enumerate(level.platforms, start=1):
        if index % MOVING_EVERY == 0:
            assert platform.kind is MotionKind.HORIZONTAL
        else:
            assert not platform.moving


def test_motion_kind_table():
    assert motion_kind(0, 5) is MotionKind.HORIZONTAL
    assert motion_kind(14, 10) is MotionKind.HORIZONTAL
    assert motion_kind(16, 10) is MotionKind.VERTICAL
    assert motion_kind(16, 15) is MotionKind.HORIZONTAL
    assert motion_kind(25, 30) is MotionKind.DIAGONAL
    assert motion_kind(25, 25) is MotionKind.VERTICAL
    assert motion_kind(25, 35) is MotionKind.HORIZONTAL


def test_motion_params_grow_then_saturate():
    scores = range(0, 80)
    params = [motion_params(s) for s in scores]
    for a, b in zip(params, params[1:]):
        assert b.horizontal_travel >= a.horizontal_travel
        assert b.vertical_travel >= a.vertical_travel
        assert b.speed >= a.speed
    assert motion_params(0).vertical_travel == 0.0
    assert motion_params(12).vertical_travel > 0.0
    assert motion_params(40) == motion_params(79)


def test_short_horizontal_span_falls_back_to_static():
    level = make_level()
    platform = level.add_platform(0.0, 500.0, 120, score=0)
    motion = level._plan_motion(platform, MotionKind.HORIZONTAL,
                                MotionParams(MIN_TRAVEL_SPAN / 4, 0.0, 100.0))
    assert motion is None


def test_vertical_without_travel_falls_back_to_horizontal():
    level = make_level()
    platform = level.add_platform(0.0, 500.0, 120, score=0)
    motion = level._plan_motion(platform, MotionKind.VERTICAL, motion_params(0))
    assert motion is not None and motion.kind is MotionKind.HORIZONTAL
    motion = level._plan_motion(platform, MotionKind.DIAGONAL, motion_params(0))
    assert motion is not None and motion.kind is MotionKind.HORIZONTAL


def test_horizontal_platform_stays_inside_travel_bounds():
    pf = Playfield()
    level = make_level(seed=5, playfield=pf)
    platform = level.add_platform(100.0, 500.0, 120, score=0)
    platform.motion = level._plan_motion(platform, MotionKind.HORIZONTAL, motion_params(30))
    limit = pf.half_width - platform.width / 2 - MOTION_PADDING
    xs = []
    for _ in range(60 * 20):
        platform.update_movement(1 / 60)
        xs.append(platform.x)
    assert min(xs) >= -limit - 1e-6
    assert max(xs) <= limit + 1e-6
    assert max(xs) - min(xs) > MIN_TRAVEL_SPAN
    assert platform.y == 500.0


def test_cull_is_idempotent_and_safe_when_empty():
    level = make_level()
    level.extend(1000.0)
    removed = level.cull(50.0)
    assert removed > 0
    assert all(p.y >= 50.0 for p in level.platforms)
    assert level.cull(50.0) == 0

    level.cull(1.0e9)
    assert level.platforms == []
    assert level.cull(1.0e9) == 0


def test_handle_goes_stale_after_cull_and_reset():
    level = make_level()
    first = level.platforms[0]
    handle = level.handle(first)
    assert level.resolve(handle) is first
    level.cull(first.y + 1)
    assert level.resolve(handle) is None

    keep = level.platforms[-1]
    handle = level.handle(keep)
    level.reset()
    assert level.resolve(handle) is None


def test_cull_removes_bodies_from_physics():
    level = make_level()
    bodies_before = len(level.world.bodies)
    removed = level.cull(1.0e9)
    assert len(level.world.bodies) == bodies_before - removed


def test_narrow_playfield_is_rejected():
    with pytest.raises(ValueError):
        Playfield(width=PLATFORM_MAX_W)
    with pytest.raises(ValueError):
        Playfield(height=0)


def test_clouds_stream_ahead_and_cull_behind():
    level = make_level()
    level.reset_clouds(0.0, 400.0)
    assert level.clouds
    assert level.next_cloud_y >= 400.0
    level.cull_clouds(1.0e9)
    assert level.clouds == []
