# src/tests/carrier_unit.py
from src.dockjumper.carrier import MovingPlatformCarrier
from src.dockjumper.config import CARRY_GRACE_S, CARRY_RELEASE_VY, Playfield
from src.dockjumper.level import LevelGen, MotionKind, MotionParams
from src.dockjumper.physics import PhysicsWorld
from src.dockjumper.player import Player


def setup_carried(now=1.0):
    level = LevelGen(PhysicsWorld(), Playfield(), seed=1)
    platform = level.add_platform(0.0, 200.0, 120, score=0)
    # travel target [-50, +50]
    platform.motion = level._plan_motion(platform, MotionKind.HORIZONTAL,
                                         MotionParams(50.0, 0.0, 100.0))
    player = Player.spawn(x=0.0, y=platform.body.top + 17)
    player.touch_ground(now)
    carrier = MovingPlatformCarrier(level)
    carrier.attach(player, platform)
    return level, platform, player, carrier


def test_player_follows_platform_delta():
    level, platform, player, carrier = setup_carried()
    player.vx = 30.0
    x0, y0 = player.x, player.y
    platform.body.x += 10.0
    assert carrier.sync(player, now=1.0)
    assert player.x == x0 + 10.0
    assert player.y == y0
    assert player.vx == 30.0

    # next tick without platform motion: nothing to apply
    assert not carrier.sync(player, now=1.0 + 1 / 60)
    assert player.x == x0 + 10.0


def test_vertical_carry_cancels_downward_velocity():
    level, platform, player, carrier = setup_carried()
    player.vy = -7.0
    platform.body.y += 4.0
    carrier.sync(player, now=1.0)
    assert player.vy == 0.0


def test_fast_vertical_motion_releases_instead_of_carrying():
    level, platform, player, carrier = setup_carried()
    player.vy = CARRY_RELEASE_VY + 1.0
    x0 = player.x
    platform.body.x += 10.0
    assert not carrier.sync(player, now=1.0)
    assert player.carrying is None
    assert player.x == x0


def test_grace_window_then_release():
    level, platform, player, carrier = setup_carried(now=1.0)
    player.leave_ground(now=1.0)
    platform.body.x += 5.0
    assert carrier.sync(player, now=1.0 + CARRY_GRACE_S / 2)
    assert player.carrying is not None

    platform.body.x += 5.0
    assert not carrier.sync(player, now=1.0 + CARRY_GRACE_S * 2)
    assert player.carrying is None


def test_culled_platform_clears_reference():
    level, platform, player, carrier = setup_carried()
    level.cull(platform.y + 1)
    assert not carrier.sync(player, now=1.0)
    assert player.carrying is None
