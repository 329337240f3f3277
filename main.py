import os
import sys
import json
import argparse
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.logging_config import setup_logging
from hydraulics.parameters import SceneConfig
from visualization.scene import HydraulicScene


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Hydraulic diagram frame geometry")
    parser.add_argument("--frame", type=int, default=None,
                        help="Evaluate a single frame (overrides --start/--end)")
    parser.add_argument("--start", type=int, default=0,
                        help="First frame (default: 0)")
    parser.add_argument("--end", type=int, default=None,
                        help="End frame, exclusive (default: duration)")
    parser.add_argument("--step", type=int, default=1,
                        help="Frame step (default: 1)")
    parser.add_argument("--fps", type=int, default=60,
                        help="Composition FPS (default: 60)")
    parser.add_argument("--duration", type=int, default=600,
                        help="Composition length in frames (default: 600)")
    parser.add_argument("--width", type=int, default=1920,
                        help="Scene width (default: 1920)")
    parser.add_argument("--height", type=int, default=1080,
                        help="Scene height (default: 1080)")
    parser.add_argument("--max-pressure", type=float, default=300.0,
                        help="Pressure mapped to the top of the color ramp (default: 300)")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        default="WARNING", help="Logging level (default: WARNING)")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Also write logs to this file")
    parser.add_argument("--output", type=str, default=None,
                        help="Write JSON lines here instead of stdout")
    return parser.parse_args(argv)


def build_scene(args) -> HydraulicScene:
    config = SceneConfig(
        scene_width=args.width,
        scene_height=args.height,
        fps=args.fps,
        duration_in_frames=args.duration,
        max_pressure=args.max_pressure,
    )
    return HydraulicScene(config)


def frame_range(args, scene):
    if args.frame is not None:
        return [args.frame]
    return scene.clock.frames(args.start, args.end, args.step)


def write_frames(scene, frames, out):
    """One JSON object per line; returns the number written."""
    count = 0
    total = len(frames)
    every = max(1, scene.config.fps)
    for frame in frames:
        out.write(json.dumps(scene.evaluate(frame).to_dict()))
        out.write("\n")
        count += 1
        if out is not sys.stdout and (count % every == 0 or count == total):
            print(f"  [{count}/{total}] frame {frame}")
            sys.stdout.flush()
    return count


def main(argv=None):
    args = parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    scene = build_scene(args)
    frames = frame_range(args, scene)

    if args.output:
        print(f"=== Evaluating {len(frames)} frames @ {args.fps}fps ===")
        print(f"  Size   : {args.width}x{args.height}")
        print(f"  Output : {args.output}")
        with open(args.output, "w", encoding="utf-8") as f:
            n = write_frames(scene, frames, f)
        print(f"\nDone. {n} frames written to {args.output}")
    else:
        write_frames(scene, frames, sys.stdout)
    return 0


if __name__ == '__main__':
    sys.exit(main())
