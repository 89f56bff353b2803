from __future__ import annotations

import random
import unittest
from unittest import mock

from notification_dispatch.domain.channels import EmailChannel
from notification_dispatch.domain.outcomes import Delivered, Failed
from notification_dispatch.domain import simulator
from notification_dispatch.domain.simulator import make_simulator, simulate_delivery


class SequenceRandom(random.Random):
    """Random source that replays fixed draws and counts them."""

    def __init__(self, draws: list[float]) -> None:
        super().__init__()
        self.draws = list(draws)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.draws.pop(0)


class SimulatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.channel = EmailChannel("person@example.com")

    def test_first_successful_probe_delivers(self) -> None:
        rng = SequenceRandom([0.5, 0.9, 0.1])
        simulate = make_simulator(0.2, 3, rng)

        outcome = simulate(self.channel, "hello", "person@example.com")

        self.assertIsInstance(outcome, Delivered)
        self.assertEqual(rng.calls, 3)

    def test_stops_probing_after_success(self) -> None:
        rng = SequenceRandom([0.05, 0.9, 0.9])
        simulate = make_simulator(0.2, 3, rng)

        simulate(self.channel, "hello", "person@example.com")

        self.assertEqual(rng.calls, 1)

    def test_all_probes_failing_returns_failed_with_context(self) -> None:
        rng = SequenceRandom([0.5, 0.5, 0.5])
        simulate = make_simulator(0.2, 3, rng)

        outcome = simulate(self.channel, "hello", "person@example.com")

        self.assertIsInstance(outcome, Failed)
        self.assertIn("email", outcome.reason)
        self.assertIn("person@example.com", outcome.reason)

    def test_certain_and_impossible_probabilities(self) -> None:
        always = make_simulator(1.0, 1, random.Random(1))
        never = make_simulator(0.0, 3, random.Random(1))

        for _ in range(20):
            self.assertTrue(always(self.channel, "m", "r").ok)
            self.assertFalse(never(self.channel, "m", "r").ok)

    def test_seeded_simulators_are_reproducible(self) -> None:
        first = make_simulator(rng=random.Random(7))
        second = make_simulator(rng=random.Random(7))

        first_run = [first(self.channel, "m", "r").ok for _ in range(30)]
        second_run = [second(self.channel, "m", "r").ok for _ in range(30)]

        self.assertEqual(first_run, second_run)

    def test_rejects_invalid_tuning(self) -> None:
        with self.assertRaises(ValueError):
            make_simulator(success_probability=1.5)
        with self.assertRaises(ValueError):
            make_simulator(probes=0)

    def test_default_simulator_returns_an_outcome(self) -> None:
        outcome = simulate_delivery(self.channel, "hello", "person@example.com")
        self.assertIsInstance(outcome, (Delivered, Failed))

    def test_default_simulator_delegates_to_configured_simulator(self) -> None:
        configured = mock.Mock(return_value=Delivered())
        with mock.patch.object(simulator, "_default_simulator", configured):
            outcome = simulate_delivery(self.channel, "hello", "person@example.com")

        self.assertIsInstance(outcome, Delivered)
        configured.assert_called_once_with(self.channel, "hello", "person@example.com")


if __name__ == "__main__":
    unittest.main()
