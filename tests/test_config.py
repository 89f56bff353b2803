from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from notification_dispatch.config import DispatchSettings, _env_bool, load_env_file
from notification_dispatch.domain.channels import EmailChannel


class DispatchSettingsTests(unittest.TestCase):
    def test_defaults_when_environment_is_empty(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = DispatchSettings.from_env()

        self.assertIsNone(settings.deadline_seconds)
        self.assertEqual(settings.success_probability, 0.2)
        self.assertEqual(settings.probes, 3)
        self.assertIsNone(settings.seed)

    def test_reads_values_from_environment(self) -> None:
        env = {
            "DISPATCH_DEADLINE_SECONDS": "2.5",
            "DELIVERY_SUCCESS_PROBABILITY": "1",
            "DELIVERY_PROBES": "1",
            "DELIVERY_SEED": "42",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = DispatchSettings.from_env()

        self.assertEqual(settings.deadline_seconds, 2.5)
        self.assertEqual(settings.success_probability, 1.0)
        self.assertEqual(settings.probes, 1)
        self.assertEqual(settings.seed, 42)

    def test_invalid_number_raises(self) -> None:
        with mock.patch.dict(os.environ, {"DELIVERY_PROBES": "three"}, clear=True):
            with self.assertRaises(RuntimeError):
                DispatchSettings.from_env()

    def test_non_positive_deadline_raises(self) -> None:
        with mock.patch.dict(os.environ, {"DISPATCH_DEADLINE_SECONDS": "0"}, clear=True):
            with self.assertRaises(RuntimeError):
                DispatchSettings.from_env()

    def test_built_simulator_and_service_work_together(self) -> None:
        settings = DispatchSettings(success_probability=1.0, probes=1, seed=3)
        service = settings.build_service(log=lambda _line: None)
        channel = EmailChannel("person@example.com", transport=settings.build_simulator())

        result = service.send(channel, "hello", "person@example.com")

        self.assertTrue(result.ok)
        self.assertEqual(channel.attempts_made, 1)


class EnvHelperTests(unittest.TestCase):
    def test_env_bool_parses_common_spellings(self) -> None:
        with mock.patch.dict(os.environ, {"FLAG": "Yes"}, clear=True):
            self.assertTrue(_env_bool("FLAG", default=False))
        with mock.patch.dict(os.environ, {"FLAG": "off"}, clear=True):
            self.assertFalse(_env_bool("FLAG", default=True))
        with mock.patch.dict(os.environ, {"FLAG": "maybe"}, clear=True):
            with self.assertRaises(RuntimeError):
                _env_bool("FLAG", default=True)

    def test_load_env_file_does_not_override_existing_values(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            env_path = Path(tmp) / ".env"
            env_path.write_text(
                "# comment\nDELIVERY_SEED=11\nDELIVERY_PROBES='4'\nKAFKA_GROUP_ID=from-file\n",
                encoding="utf-8",
            )
            with mock.patch.dict(os.environ, {"KAFKA_GROUP_ID": "from-env"}, clear=True):
                load_env_file(env_path)

                self.assertEqual(os.environ["DELIVERY_SEED"], "11")
                self.assertEqual(os.environ["DELIVERY_PROBES"], "4")
                self.assertEqual(os.environ["KAFKA_GROUP_ID"], "from-env")

    def test_load_env_file_ignores_missing_file(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            load_env_file(Path("/nonexistent/.env"))
            self.assertEqual(dict(os.environ), {})


if __name__ == "__main__":
    unittest.main()
