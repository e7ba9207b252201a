import json
import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock
import sys

import yaml

# Allow `import main` and `import trotgait.*` from repo root.
_ROOT_DIR = Path(__file__).resolve().parents[1]
if str(_ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(_ROOT_DIR))

import main as cli
from trotgait.core import Config
from trotgait.skeleton import quadruped_description


class TestMain(unittest.TestCase):
    def setUp(self) -> None:
        Config.reset()
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        Config.reset()
        self._tmp.cleanup()
        root_logger = logging.getLogger("trotgait")
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

    def _run(self, *argv: str) -> int:
        with mock.patch.object(sys, "argv", ["trotgait", *argv]):
            return cli.main()

    def test_headless_run_exports_clip(self) -> None:
        code = self._run("--frames", "12", "--fps", "30", "--output", str(self.tmp))
        self.assertEqual(code, 0)

        with open(self.tmp / "trot.json") as f:
            data = json.load(f)
        self.assertEqual(data["frame_count"], 12)
        self.assertEqual(data["fps"], 30.0)
        self.assertIn("calf/FL_calf", data["tracks"])

    def test_skeleton_file(self) -> None:
        skeleton = self.tmp / "dog.yaml"
        skeleton.write_text(yaml.safe_dump(quadruped_description(name="dog")))
        code = self._run("--skeleton", str(skeleton), "--frames", "3", "--no-export")
        self.assertEqual(code, 0)

    def test_missing_skeleton_file(self) -> None:
        code = self._run("--skeleton", str(self.tmp / "nope.yaml"), "--no-export")
        self.assertEqual(code, 1)

    def test_missing_config(self) -> None:
        code = self._run("--config", str(self.tmp / "nope.yaml"))
        self.assertEqual(code, 1)

    def test_load_robot_defaults_to_quadruped(self) -> None:
        robot = cli.load_robot(Config())
        self.assertEqual(len(robot.movable_joints), 12)


if __name__ == "__main__":
    unittest.main()
