import logging
import tempfile
import time
import unittest
from pathlib import Path
import sys

import numpy as np

# Allow `import trotgait.*` from repo root.
_ROOT_DIR = Path(__file__).resolve().parents[1]
if str(_ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(_ROOT_DIR))

from trotgait.core import (
    Config, FixedStepClock, FrameClock, FrameTimer, get_logger, setup_logging,
)
from trotgait.core.logging import ColoredFormatter, ROOT_LOGGER_NAME


CONFIG_TEXT = """\
app:
  log_level: DEBUG
placement:
  max_dimension: 2.0
  default_position: [1.0, 2.0, 3.0]
  bad_position: [1.0, 2.0]
animation:
  fps: 30
"""


class TestConfig(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "config.yaml"
        self.path.write_text(CONFIG_TEXT)
        Config.reset()
        self.config = Config(str(self.path))

    def tearDown(self) -> None:
        Config.reset()
        self._tmp.cleanup()

    def test_dot_notation(self) -> None:
        self.assertEqual(self.config.get("animation.fps"), 30)
        self.assertEqual(self.config.get("placement.max_dimension"), 2.0)
        self.assertIsNone(self.config.get("animation.missing"))
        self.assertEqual(self.config.get("export.output_dir", "./output"), "./output")
        self.assertEqual(self.config.placement["max_dimension"], 2.0)
        self.assertEqual(self.config.export, {})

    def test_singleton(self) -> None:
        self.assertIs(Config(), self.config)
        self.assertEqual(Config().get("animation.fps"), 30)

    def test_set_creates_sections(self) -> None:
        self.config.set("export.output_dir", "/tmp/clips")
        self.config.set("animation.fps", 120)
        self.assertEqual(self.config.get("export.output_dir"), "/tmp/clips")
        self.assertEqual(self.config.get("animation.fps"), 120)

    def test_get_vector(self) -> None:
        vector = self.config.get_vector("placement.default_position", (0.0, 0.0, 0.0))
        self.assertTrue(np.array_equal(vector, [1.0, 2.0, 3.0]))
        self.assertEqual(vector.dtype, np.float64)

        fallback = self.config.get_vector("placement.nowhere", (0.0, 0.5, 0.0))
        self.assertTrue(np.array_equal(fallback, [0.0, 0.5, 0.0]))

        with self.assertRaises(ValueError):
            self.config.get_vector("placement.bad_position", (0.0, 0.0, 0.0))

    def test_save_and_reload(self) -> None:
        self.config.set("animation.fps", 24)
        out = Path(self._tmp.name) / "saved.yaml"
        self.config.save(str(out))

        Config.reset()
        self.assertEqual(Config(str(out)).get("animation.fps"), 24)

    def test_empty_file(self) -> None:
        empty = Path(self._tmp.name) / "empty.yaml"
        empty.write_text("")
        Config.reset()
        self.assertEqual(Config(str(empty)).get("app.log_level", "INFO"), "INFO")

    def test_missing_file(self) -> None:
        Config.reset()
        with self.assertRaises(FileNotFoundError):
            Config(str(Path(self._tmp.name) / "nope.yaml"))


def _drop_handlers() -> None:
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.NOTSET)


class TestLogging(unittest.TestCase):
    def tearDown(self) -> None:
        _drop_handlers()

    def test_logger_namespace(self) -> None:
        self.assertEqual(get_logger("motion.pose").name, "trotgait.motion.pose")

    def test_setup_is_applied_once(self) -> None:
        logger = setup_logging("DEBUG", color=False)
        handlers = list(logger.handlers)
        self.assertEqual(logger.level, logging.DEBUG)

        again = setup_logging("WARNING", color=False)
        self.assertIs(again, logger)
        self.assertEqual(again.handlers, handlers)
        self.assertEqual(again.level, logging.WARNING)

    def test_log_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            setup_logging("INFO", log_file="run", log_dir=tmp, color=False)
            self.assertEqual(len(list(Path(tmp).glob("run_*.log"))), 1)
            _drop_handlers()

    def test_colored_formatter_leaves_record_plain(self) -> None:
        record = logging.LogRecord("trotgait.x", logging.INFO, __file__, 1, "hello", None, None)
        text = ColoredFormatter("%(levelname)s %(name)s %(message)s").format(record)
        self.assertIn("\033[32mINFO", text)
        self.assertIn("hello", text)
        self.assertEqual(record.levelname, "INFO")
        self.assertEqual(record.name, "trotgait.x")


class TestTiming(unittest.TestCase):
    def test_frame_timer(self) -> None:
        timer = FrameTimer(window_size=3)
        self.assertEqual(timer.stop(), 0.0)
        for _ in range(5):
            timer.start()
            timer.stop()
        self.assertGreaterEqual(timer.average_frame_time, 0.0)
        self.assertGreaterEqual(timer.max_frame_time, timer.last_frame_time)

        timer.reset()
        self.assertEqual(timer.average_frame_time, 0.0)

    def test_frame_clock(self) -> None:
        clock = FrameClock(target_fps=50.0)
        self.assertAlmostEqual(clock.target_frame_duration, 0.02)

        clock.start()
        first = clock.tick()
        self.assertEqual(first.frame_number, 0)
        self.assertGreaterEqual(first.delta, 0.0)

        clock.pause()
        self.assertTrue(clock.is_paused)
        with self.assertRaises(RuntimeError):
            clock.tick()
        time.sleep(0.05)
        clock.resume()

        second = clock.tick()
        self.assertEqual(second.frame_number, 1)
        self.assertLess(second.delta, 0.05)
        self.assertLess(second.timestamp, 0.05)
        self.assertEqual(clock.frame_count, 2)

    def test_fixed_step_clock(self) -> None:
        clock = FixedStepClock(fps=4.0)
        frames = [clock.tick() for _ in range(3)]
        self.assertEqual([frame.frame_number for frame in frames], [0, 1, 2])
        self.assertEqual([frame.timestamp for frame in frames], [0.25, 0.5, 0.75])
        self.assertTrue(all(frame.delta == 0.25 for frame in frames))
        self.assertEqual(clock.frame_count, 3)

        with self.assertRaises(ValueError):
            FixedStepClock(fps=0.0)


if __name__ == "__main__":
    unittest.main()
