from taxi_sim.sim.clock import ShiftClock, ms_to_s, seconds


def test_unit_helpers():
    assert seconds(1.5) == 1500.0
    assert ms_to_s(250.0) == 0.25


def test_rush_hour_window_and_end():
    clock = ShiftClock.of_seconds(180.0)  # default 30 s rush hour
    clock.advance(seconds(149.0))
    assert not clock.rush_hour
    clock.advance(seconds(1.0))
    assert clock.remaining_ms == 30_000.0
    assert clock.rush_hour and not clock.over

    clock.advance(seconds(40.0))
    assert clock.remaining_ms == 0.0
    assert clock.over and not clock.rush_hour


def test_paused_clock_holds_and_reset():
    clock = ShiftClock.of_seconds(60.0)
    clock.advance(1000.0)
    clock.paused = True
    assert clock.advance(5000.0) == 1000.0
    clock.reset()
    assert clock.elapsed_ms == 0.0 and not clock.paused
