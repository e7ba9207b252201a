#!/usr/bin/env python3
"""
Trot gait animator - main entry point

Loads a quadruped skeleton, puts it into its standing pose and drives the
trot animation, either headless for a fixed number of frames (recording a
JSON clip) or in real time against the wall clock.
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from trotgait.core import Config, FixedStepClock, FrameClock, FrameTimer, setup_logging, get_logger
from trotgait.export import ClipRecorder
from trotgait.motion import GaitSession
from trotgait.skeleton import Robot, SkeletonBuilder, quadruped_description


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Standing pose and trot gait animation for quadruped skeletons"
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--skeleton", "-s",
        type=str,
        help="YAML skeleton description (overrides config)"
    )
    parser.add_argument(
        "--frames", "-n",
        type=int,
        help="Number of frames to run (overrides config)"
    )
    parser.add_argument(
        "--fps",
        type=float,
        help="Frame rate (overrides config)"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output directory (overrides config)"
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Tick against the wall clock instead of a fixed step"
    )
    parser.add_argument(
        "--no-export",
        action="store_true",
        help="Do not write the recorded clip"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args()


def main() -> int:
    """Main application entry point."""
    args = parse_args()

    config_path = Path(args.config)
    if not config_path.is_absolute():
        config_path = Path(__file__).parent / config_path

    try:
        config = Config(str(config_path))
    except FileNotFoundError:
        print(f"Error: Config file not found: {config_path}")
        return 1

    log_level = "DEBUG" if args.debug else config.get("app.log_level", "INFO")
    setup_logging(level=log_level, log_file=config.get("app.log_file"))
    logger = get_logger("main")

    logger.info("=" * 50)
    logger.info(f"trotgait v{config.get('app.version', '0.1.0')}")
    logger.info("=" * 50)

    if args.skeleton:
        config.set("skeleton.description", args.skeleton)
    if args.frames is not None:
        config.set("animation.frames", args.frames)
    if args.fps is not None:
        config.set("animation.fps", args.fps)
    if args.output:
        config.set("export.output_dir", args.output)
        logger.info(f"Output override: {args.output}")

    try:
        robot = load_robot(config)
    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Failed to load skeleton: {e}")
        return 1

    session = GaitSession(config)
    session.on_skeleton_ready(robot)
    session.initialize_pose()

    recorder = ClipRecorder(session.links, root=robot, config=config)

    if args.realtime:
        run_realtime(session, recorder, config)
    else:
        run_headless(session, recorder, config)

    if not args.no_export:
        try:
            recorder.export_json(config.get("export.clip_name", "trot"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to export clip: {e}")
            return 1

    return 0


def load_robot(config: Config) -> Robot:
    """Skeleton from the configured description, or the built-in quadruped."""
    builder = SkeletonBuilder()
    description_path = config.get("skeleton.description")
    if description_path:
        return builder.load(description_path)
    return builder.build(quadruped_description(rotors=bool(config.get("skeleton.rotors", True))))


def run_headless(session: GaitSession, recorder: ClipRecorder, config: Config) -> None:
    """Fixed-step run for the configured number of frames."""
    logger = get_logger("main")

    clock = FixedStepClock(float(config.get("animation.fps", 60)))
    frames = int(config.get("animation.frames", 240))
    log_every = int(config.get("animation.log_every", 60))

    timer = FrameTimer()
    logger.info(f"Running {frames} frames at {clock.fps:g} fps (headless)")

    while clock.frame_count < frames:
        frame_data = clock.tick()

        timer.start()
        sample = session.tick(frame_data.delta)
        timer.stop()
        if sample is None:
            continue
        recorder.record(frame_data.timestamp, sample)

        if log_every and frame_data.frame_number % log_every == 0:
            logger.debug(
                f"frame {frame_data.frame_number}: cycle={sample.cycle_position:.3f} "
                f"ease=({sample.ease_a:.3f}, {sample.ease_b:.3f})"
            )

    logger.info(
        f"Done: avg tick {timer.average_frame_time * 1000:.3f} ms, "
        f"max {timer.max_frame_time * 1000:.3f} ms"
    )


def run_realtime(session: GaitSession, recorder: ClipRecorder, config: Config) -> None:
    """Wall-clock run; stops after the configured frame count or on Ctrl+C."""
    logger = get_logger("main")

    clock = FrameClock(target_fps=float(config.get("animation.fps", 60)))
    frames = int(config.get("animation.frames", 240))
    timer = FrameTimer()

    logger.info(f"Running in real time at {clock.target_fps:g} fps, Ctrl+C to stop")
    clock.start()
    try:
        while frames <= 0 or clock.frame_count < frames:
            clock.wait_for_next_frame()
            frame_data = clock.tick()

            timer.start()
            sample = session.tick(frame_data.delta)
            timer.stop()

            if sample is not None:
                recorder.record(frame_data.timestamp, sample)
    except KeyboardInterrupt:
        logger.info("Interrupted")

    logger.info(
        f"Ran {clock.frame_count} frames, avg tick {timer.average_frame_time * 1000:.3f} ms"
    )


if __name__ == "__main__":
    sys.exit(main())
