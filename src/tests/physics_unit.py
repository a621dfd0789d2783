# src/tests/physics_unit.py
from src.dockjumper.config import DT, GRAVITY, MAX_FALL_SPEED, MAX_RISE_SPEED, MOVE_SPEED
from src.dockjumper.physics import Body, Category, PhysicsWorld
from src.dockjumper.player import Player


def make_world():
    world = PhysicsWorld()
    player = Player.spawn(x=0.0, y=100.0)
    world.add(player.body)
    return world, player


def slab(x=0.0, y=0.0, w=200.0, h=16.0, category=Category.GROUND):
    return Body(x=x, y=y, width=w, height=h, category=category)


def test_free_fall_is_semi_implicit_euler():
    world, player = make_world()
    world.step(DT)
    assert player.vy == GRAVITY * DT
    assert abs(player.y - (100.0 + GRAVITY * DT * DT)) < 1e-9


def test_velocity_clamps():
    world, player = make_world()
    player.vy = 10_000.0
    player.vx = -10_000.0
    world.step(DT)
    assert player.vy <= MAX_RISE_SPEED
    assert player.vx == -MOVE_SPEED

    player.vy = -10_000.0
    world.step(DT)
    assert player.vy == MAX_FALL_SPEED


def test_landing_emits_single_begin_and_rests_on_top():
    world, player = make_world()
    ground = world.add(slab(y=50.0))
    begins = []
    for _ in range(120):
        events = world.step(DT)
        begins.extend(e for e in events if e.began)
    assert len(begins) == 1
    assert begins[0].body_b is ground
    assert begins[0].categories == (Category.PLAYER, Category.GROUND)
    assert abs(player.body.bottom - ground.top) < 1e-6
    assert ground in world.touching(player.body)


def test_leaving_ground_emits_end():
    world, player = make_world()
    ground = world.add(slab(y=50.0))
    for _ in range(60):
        world.step(DT)
    player.vy = MAX_RISE_SPEED
    ended = []
    for _ in range(10):
        ended.extend(e for e in world.step(DT) if not e.began)
    assert [e.body_b for e in ended] == [ground]


def test_hazard_reports_contact_without_blocking():
    world, player = make_world()
    hazard = world.add(slab(y=80.0, h=20.0, category=Category.HAZARD))
    events = []
    for _ in range(30):
        events.extend(world.step(DT))
    assert any(e.began and e.involves(Category.HAZARD) for e in events)
    # fell straight through
    assert player.body.top < hazard.bottom


def test_wall_blocks_sideways_but_is_not_a_contact():
    world, player = make_world()
    world.add(slab(y=50.0, w=1000.0))
    wall = world.add(Body(x=40.0, y=0.0, width=16.0, height=1.0e6, category=Category.WALL))
    events = []
    for _ in range(120):
        player.vx = MOVE_SPEED
        events.extend(world.step(DT))
    assert player.body.right <= wall.left + 1e-6
    assert not any(e.body_b is wall for e in events)


def test_removed_body_ends_contact_on_next_step():
    world, player = make_world()
    ground = world.add(slab(y=50.0))
    for _ in range(60):
        world.step(DT)
    world.remove(ground)
    events = world.step(DT)
    assert any((not e.began) and e.body_b is ground for e in events)


def test_forget_contacts_drops_pending_events():
    world, player = make_world()
    ground = world.add(slab(y=50.0))
    for _ in range(60):
        world.step(DT)
    world.remove(ground)
    world.forget_contacts()
    player.body.y = 1000.0
    assert world.step(DT) == []
