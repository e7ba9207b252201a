"""Record animated link rotations into a clip and export it as JSON"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from trotgait.core import get_logger, Config
from trotgait.motion import GaitSample, LinkRegistry, ROTATION_AXIS


@dataclass
class ClipFrame:
    """One recorded frame."""
    frame: int
    timestamp: float
    cycle_position: float
    ease_a: float
    ease_b: float
    root_position: List[float]
    links: Dict[str, float]  # track name -> rotation about the animation axis

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frame": self.frame,
            "timestamp": self.timestamp,
            "cycle_position": self.cycle_position,
            "ease": [self.ease_a, self.ease_b],
            "root_position": self.root_position,
            "links": self.links,
        }


@dataclass
class AnimationClip:
    """Container for recorded animation data."""
    name: str
    fps: float
    tracks: List[str]
    frames: List[ClipFrame] = field(default_factory=list)

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def duration(self) -> float:
        return self.frames[-1].timestamp if self.frames else 0.0

    @property
    def is_valid(self) -> bool:
        return len(self.frames) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "fps": self.fps,
            "frame_count": self.frame_count,
            "duration": self.duration,
            "rotation_axis": "xyz"[ROTATION_AXIS],
            "tracks": self.tracks,
            "frames": [frame.to_dict() for frame in self.frames],
        }


class ClipRecorder:
    """Samples the tracked links after each tick."""

    def __init__(
        self,
        links: LinkRegistry,
        root: Optional[Any] = None,
        config: Optional[Config] = None,
    ):
        self.logger = get_logger("export.clip")
        self.config = config or Config()

        export_config = self.config.export
        self._output_dir = Path(export_config.get("output_dir", "./output"))
        self._fps = float(self.config.get("animation.fps", 60))

        self.links = links
        self.root = root
        self._tracks = self._track_names()
        self._frames: List[ClipFrame] = []

        self.logger.info(f"Recording {len(self._tracks)} link tracks")

    def _track_names(self) -> Dict[int, str]:
        names: Dict[int, str] = {}
        for index, (group, link, _) in enumerate(self.links.items()):
            if id(link) in names:
                continue
            names[id(link)] = f"{group.value}/{getattr(link, 'name', None) or f'link_{index}'}"
        return names

    def record(self, timestamp: float, sample: GaitSample) -> ClipFrame:
        link_rotations = {}
        for _, link, _ in self.links.items():
            name = self._tracks.get(id(link))
            if name is not None:
                link_rotations[name] = float(link.rotation[ROTATION_AXIS])

        root_position = [] if self.root is None else [float(v) for v in self.root.position]
        frame = ClipFrame(
            frame=len(self._frames),
            timestamp=timestamp,
            cycle_position=sample.cycle_position,
            ease_a=sample.ease_a,
            ease_b=sample.ease_b,
            root_position=root_position,
            links=link_rotations,
        )
        self._frames.append(frame)
        return frame

    def clip(self, name: str) -> AnimationClip:
        return AnimationClip(
            name=name,
            fps=self._fps,
            tracks=list(self._tracks.values()),
            frames=list(self._frames),
        )

    def export_json(self, filename: str, clip_name: Optional[str] = None) -> Path:
        """
        Write the recorded clip to ``<output_dir>/<filename>.json``.

        Raises:
            ValueError: if nothing has been recorded
        """
        if not self._frames:
            raise ValueError("No frames to export")

        clip = self.clip(clip_name or filename)
        self._output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self._output_dir / f"{filename}.json"

        with open(output_path, "w") as f:
            json.dump(clip.to_dict(), f, indent=2)

        self.logger.info(f"Exported clip to {output_path}")
        self.logger.info(f"  Frames: {clip.frame_count}, Duration: {clip.duration:.2f}s")
        return output_path

    def set_output_dir(self, path: str) -> None:
        self._output_dir = Path(path)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def frames(self) -> List[ClipFrame]:
        return list(self._frames)
