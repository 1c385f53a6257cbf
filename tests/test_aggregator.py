import pytest

from slottracker.catalog.slots import SlotCatalog, SlotConfig
from slottracker.errors import EmptyBatch, UnknownAsset
from slottracker.simulation.outcome import SpinResult, make_rng, simulate_batch
from slottracker.state.aggregator import BatchAggregator, apply_batch
from slottracker.state.slot_stats import SlotStats, Trend


def make_config(rtp=96.0, hit_freq=0.25, slot_id="test-slot"):
    return SlotConfig(id=slot_id, name="Test Slot", rtp=rtp, hit_freq=hit_freq, volatility=1.0)


def spin(stake, multiplier):
    return SpinResult.from_multiplier(stake, multiplier)


def make_aggregator(seed=123):
    catalog = SlotCatalog([make_config(), make_config(slot_id="other-slot", rtp=94.0)])
    aggregator = BatchAggregator(catalog, rng=make_rng(seed))
    aggregator.seed()
    return aggregator


def test_initial_stats_fall_back_to_theoretical_rtp():
    config = make_config()
    stats = SlotStats.initial(config)

    assert stats.live_rtp == config.rtp
    assert stats.total_spins == 0
    assert stats.total_stakes == 0.0
    assert stats.history == ()
    assert stats.recent_rtp_history == ()


def test_batch_of_100_fills_history_exactly():
    config = make_config()
    batch = simulate_batch(config, 100, 1.0, rng=make_rng(2024))
    stats = apply_batch(SlotStats.initial(config), config, batch)

    assert stats.total_stakes == pytest.approx(100.0)
    assert stats.total_spins == 100
    assert stats.total_wins >= 0
    assert len(stats.history) == 100
    assert list(stats.history) == batch
    assert stats.recent_rtp_history == (stats.live_rtp,)
    # Very wide band at this sample size
    assert 0.0 <= stats.live_rtp < 1000.0


def test_five_batches_of_30_evict_oldest():
    config = make_config()
    stats = SlotStats.initial(config)
    all_spins = []

    for i in range(5):
        batch = [spin(1.0, float(i * 30 + j)) for j in range(30)]
        all_spins.extend(batch)
        stats = apply_batch(stats, config, batch)

    assert stats.total_spins == 150
    assert stats.total_stakes == pytest.approx(150.0)
    assert len(stats.history) == 100
    assert list(stats.history) == all_spins[50:]


def test_totals_are_lifetime_while_history_is_windowed():
    config = make_config()
    stats = SlotStats.initial(config)
    for _ in range(3):
        stats = apply_batch(stats, config, [spin(2.0, 1.0)] * 60)

    assert stats.total_stakes == pytest.approx(360.0)
    assert sum(r.stake for r in stats.history) == pytest.approx(200.0)


def test_rtp_history_is_bounded_to_30():
    config = make_config()
    stats = SlotStats.initial(config)
    snapshots = []

    for i in range(45):
        stats = apply_batch(stats, config, [spin(1.0, (i % 3) * 0.5)])
        snapshots.append(stats.live_rtp)

    assert len(stats.recent_rtp_history) == 30
    assert list(stats.recent_rtp_history) == snapshots[-30:]


def test_accumulators_never_decrease():
    config = make_config()
    stats = SlotStats.initial(config)
    rng = make_rng(77)

    for _ in range(25):
        prev = stats
        stats = apply_batch(stats, config, simulate_batch(config, 40, 0.5, rng=rng))
        assert stats.total_spins > prev.total_spins
        assert stats.total_stakes >= prev.total_stakes
        assert stats.total_wins >= prev.total_wins
        assert stats.max_multiplier >= prev.max_multiplier
        assert len(stats.history) <= 100
        assert len(stats.recent_rtp_history) <= 30


def test_max_multiplier_is_running_max():
    config = make_config()
    stats = apply_batch(SlotStats.initial(config), config, [spin(1.0, 0.0), spin(1.0, 250.0)])
    stats = apply_batch(stats, config, [spin(1.0, 3.0)])
    assert stats.max_multiplier == pytest.approx(250.0)


def test_live_rtp_uses_wagered_amounts():
    config = make_config()
    batch = [spin(1.0, 0.0), spin(3.0, 2.0)]
    stats = apply_batch(SlotStats.initial(config), config, batch)
    assert stats.live_rtp == pytest.approx(6.0 / 4.0 * 100)


def test_trend_up_and_down():
    config = make_config(rtp=50.0)
    stats = SlotStats.initial(config)

    stats = apply_batch(stats, config, [spin(1.0, 2.0)])
    assert stats.trend == Trend.UP

    stats = apply_batch(stats, config, [spin(1.0, 0.0)])
    assert stats.trend == Trend.DOWN


def test_trend_tie_resolves_down():
    config = make_config()
    stats = SlotStats(
        slot_id=config.id,
        live_rtp=50.0,
        total_spins=100,
        total_stakes=100.0,
        total_wins=50.0,
        trend=Trend.UP,
    )

    stats = apply_batch(stats, config, [spin(2.0, 0.5)])

    assert stats.live_rtp == 50.0
    assert stats.trend == Trend.DOWN


def test_apply_batch_does_not_mutate_input():
    config = make_config()
    before = SlotStats.initial(config)
    apply_batch(before, config, [spin(1.0, 1.0)])
    assert before.total_spins == 0
    assert before.history == ()


def test_empty_batch_is_rejected():
    config = make_config()
    with pytest.raises(EmptyBatch):
        apply_batch(SlotStats.initial(config), config, [])


def test_aggregator_tick_updates_only_that_slot():
    aggregator = make_aggregator()
    updated = aggregator.tick("test-slot", stake=1.0, batch_size=100)

    assert updated.total_spins == 100
    assert aggregator.snapshot("test-slot") == updated
    assert aggregator.snapshot("other-slot").total_spins == 0
    assert aggregator.total_wagered() == pytest.approx(100.0)


def test_aggregator_tick_many_uses_one_stake():
    aggregator = make_aggregator()
    result = aggregator.tick_many(["test-slot", "other-slot"], stake=2.0, batch_size=10)

    assert set(result) == {"test-slot", "other-slot"}
    for stats in result.values():
        assert stats.total_stakes == pytest.approx(20.0)
        assert all(r.stake == 2.0 for r in stats.history)


def test_aggregator_unknown_slot_creates_no_record():
    aggregator = make_aggregator()

    with pytest.raises(UnknownAsset):
        aggregator.tick("missing", stake=1.0)
    with pytest.raises(UnknownAsset):
        aggregator.snapshot("missing")

    assert "missing" not in aggregator.snapshots()


def test_aggregator_rejects_zero_batch_size():
    aggregator = make_aggregator()
    with pytest.raises(EmptyBatch):
        aggregator.tick("test-slot", stake=1.0, batch_size=0)
    assert aggregator.snapshot("test-slot").total_spins == 0


def test_unseeded_aggregator_has_no_records():
    catalog = SlotCatalog([make_config()])
    aggregator = BatchAggregator(catalog)

    assert aggregator.snapshots() == {}
    with pytest.raises(UnknownAsset):
        aggregator.apply("test-slot", [spin(1.0, 1.0)])


def test_zero_stake_batches_keep_theoretical_rtp():
    config = make_config()
    stats = SlotStats.initial(config)

    for _ in range(2):
        stats = apply_batch(stats, config, [spin(0.0, 4.0)] * 10)

    assert stats.total_spins == 20
    assert stats.total_stakes == 0.0
    assert stats.live_rtp == config.rtp
    assert stats.recent_rtp_history == (config.rtp, config.rtp)
    assert stats.max_multiplier == 0.0
    assert stats.trend == Trend.DOWN
