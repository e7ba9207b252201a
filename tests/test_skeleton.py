import math
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
import sys

import numpy as np
import yaml

# Allow `import trotgait.*` from repo root.
_ROOT_DIR = Path(__file__).resolve().parents[1]
if str(_ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(_ROOT_DIR))

from trotgait.skeleton import (
    Joint, JointActuator, Link, Robot, RobotPlacer, SkeletonBuilder,
    build_quadruped, compute_bounds, quadruped_description,
)


class TestSkeletonBuilder(unittest.TestCase):
    def test_quadruped_structure(self) -> None:
        robot = build_quadruped()
        self.assertEqual(len(robot.links), 17)
        self.assertEqual(len(robot.joints), 16)
        self.assertEqual(len(robot.movable_joints), 12)

        calf_joint = robot.joints["FL_calf_joint"]
        self.assertIs(calf_joint.link, robot.links["FL_calf"])
        self.assertIs(robot.links["FL_calf"].joint, calf_joint)
        self.assertIs(calf_joint.parent, robot.links["FL_thigh"])
        self.assertIs(robot.links["base"].parent, robot)

    def test_quadruped_with_rotors(self) -> None:
        robot = build_quadruped(rotors=True)
        self.assertEqual(len(robot.links), 25)
        self.assertEqual(len(robot.joints), 24)
        self.assertEqual(len(robot.movable_joints), 12)
        self.assertIs(robot.links["FL_calf_rotor"].parent.parent, robot.links["FL_thigh"])

    def test_forward_kinematics(self) -> None:
        robot = build_quadruped()
        foot = robot.links["FL_foot"]
        self.assertTrue(np.allclose(foot.world_position, [0.4, 0.25, -0.7]))

        robot.joints["FL_calf_joint"].set_value(math.pi / 2)
        robot.update_matrix_world()
        self.assertTrue(np.allclose(foot.world_position, [0.05, 0.25, -0.35]))

    def test_fixed_joint_ignores_values(self) -> None:
        joint = build_quadruped().joints["FL_foot_joint"]
        self.assertFalse(joint.set_value(1.0))
        self.assertEqual(joint.value, 0.0)

    def test_prismatic_joint_translates(self) -> None:
        joint = Joint("slider", joint_type="prismatic", axis=(1.0, 0.0, 0.0))
        self.assertTrue(joint.set_value(0.5))
        joint.update()
        self.assertTrue(np.allclose(joint.matrix[:3, 3], [0.5, 0.0, 0.0]))

    def test_duplicate_link(self) -> None:
        with self.assertRaises(ValueError):
            SkeletonBuilder().build({"links": [{"name": "a"}, {"name": "a"}]})

    def test_unknown_link_reference(self) -> None:
        description = {
            "links": [{"name": "a"}],
            "joints": [{"name": "j", "parent": "a", "child": "b"}],
        }
        with self.assertRaises(ValueError):
            SkeletonBuilder().build(description)

    def test_link_driven_twice(self) -> None:
        description = {
            "links": [{"name": "a"}, {"name": "b"}, {"name": "c"}],
            "joints": [
                {"name": "j1", "parent": "a", "child": "c"},
                {"name": "j2", "parent": "b", "child": "c"},
            ],
        }
        with self.assertRaises(ValueError):
            SkeletonBuilder().build(description)

    def test_root_resolution(self) -> None:
        with self.assertRaises(ValueError):
            SkeletonBuilder().build({"links": [{"name": "a"}, {"name": "b"}]})

        driven_root = {
            "root": "b",
            "links": [{"name": "a"}, {"name": "b"}],
            "joints": [{"name": "j", "parent": "a", "child": "b"}],
        }
        with self.assertRaises(ValueError):
            SkeletonBuilder().build(driven_root)

        inferred = dict(driven_root, root=None)
        robot = SkeletonBuilder().build(inferred)
        self.assertIs(robot.links["a"].parent, robot)

    def test_bad_vector(self) -> None:
        description = {"links": [{"name": "a", "origin": {"xyz": [1.0, 2.0]}}]}
        with self.assertRaises(ValueError):
            SkeletonBuilder().build(description)

    def test_empty_description(self) -> None:
        robot = SkeletonBuilder().build({})
        self.assertEqual(len(robot.links), 0)
        self.assertEqual(robot.link_positions().shape, (0, 3))

    def test_load_yaml(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "dog.yaml"
            path.write_text(yaml.safe_dump(quadruped_description(name="dog")))
            robot = SkeletonBuilder().load(path)
        self.assertEqual(robot.name, "dog")
        self.assertEqual(len(robot.joints), 16)

    def test_load_rejects_non_mapping(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "list.yaml"
            path.write_text("- a\n- b\n")
            with self.assertRaises(ValueError):
                SkeletonBuilder().load(path)


class TestGraph(unittest.TestCase):
    def test_add_reparents(self) -> None:
        a, b, c = Link("a"), Link("b"), Link("c")
        a.add(c)
        b.add(c)
        self.assertNotIn(c, a.children)
        self.assertIs(c.parent, b)

    def test_traverse_is_pre_order(self) -> None:
        root = Robot("r")
        a = root.add(Link("a"))
        a.add(Link("a1"))
        root.add(Link("b"))
        self.assertEqual([node.name for node in root.traverse()], ["r", "a", "a1", "b"])

    def test_joint_actuator_protocol(self) -> None:
        self.assertIsInstance(Joint("j"), JointActuator)
        self.assertNotIsInstance(SimpleNamespace(value=0.0), JointActuator)


class TestPlacement(unittest.TestCase):
    def test_small_robot_is_centred_unscaled(self) -> None:
        robot = build_quadruped()
        placement = RobotPlacer().place(robot)

        self.assertFalse(placement.degenerate)
        self.assertEqual(placement.scale, 1.0)
        bounds_min, bounds_max = compute_bounds(robot)
        self.assertTrue(np.allclose((bounds_min + bounds_max) / 2, 0.0))
        self.assertTrue(np.allclose(placement.position, robot.position))

    def test_converts_to_y_up(self) -> None:
        robot = build_quadruped()
        RobotPlacer().place(robot)
        self.assertTrue(np.allclose(robot.rotation, [-math.pi / 2, 0.0, 0.0]))
        base_y = robot.links["base"].world_position[1]
        foot_y = robot.links["FL_foot"].world_position[1]
        self.assertLess(foot_y, base_y)

    def test_large_robot_is_scaled_down(self) -> None:
        robot = build_quadruped(body_length=10.0)
        placement = RobotPlacer().place(robot)

        self.assertLess(placement.scale, 1.0)
        bounds_min, bounds_max = compute_bounds(robot)
        self.assertAlmostEqual(float((bounds_max - bounds_min).max()), 3.0)
        self.assertTrue(np.allclose((bounds_min + bounds_max) / 2, 0.0))

    def test_zero_extent_falls_back_to_default(self) -> None:
        for robot in (Robot("empty"), SkeletonBuilder().build({"links": [{"name": "base"}]})):
            placement = RobotPlacer().place(robot)
            self.assertTrue(placement.degenerate)
            self.assertTrue(np.allclose(robot.position, [0.0, 0.5, 0.0]))
            self.assertTrue(np.allclose(placement.size, 0.0))

    def test_placement_resets_previous_transform(self) -> None:
        robot = build_quadruped()
        placer = RobotPlacer()
        first = placer.place(robot)
        second = placer.place(robot)
        self.assertTrue(np.allclose(first.position, second.position))


if __name__ == "__main__":
    unittest.main()
