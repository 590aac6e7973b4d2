"""
__main__.py — play an animation and log every frame
---------------------------------------------------

Usage:
    python -m value_animator --list
    python -m value_animator --preset fade_in
    python -m value_animator --config my.yaml --preset slide --debug
    python -m value_animator --start 0 --end 100 --duration 1000 --easing ease_out_cubic
"""

import argparse
import asyncio
import sys
from typing import List, Optional

# Set UTF-8 encoding for output (fixes Unicode symbol rendering)
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore

from value_animator.engine.animator import Animator
from value_animator.engine.clock import AsyncioClock
from value_animator.errors import AnimatorError
from value_animator.managers.config_manager import ConfigManager
from value_animator.models.easing import EASINGS, get_easing
from value_animator.models.enums import LogCategory, LogLevel
from value_animator.models.events import AnimationEvent
from value_animator.services.animation_runner import AnimationRunner
from value_animator.services.event_bus import EventBus
from value_animator.services.middleware import log_middleware
from value_animator.utils.logger import get_logger, configure_logger

log = get_logger().for_category(LogCategory.SYSTEM)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="value-animator", description="Play a scalar animation and log its frames")
    parser.add_argument("--config", help="YAML config file (default: factory defaults)")
    parser.add_argument("--preset", help="Preset name from the config")
    parser.add_argument("--list", action="store_true", help="List presets and exit")
    parser.add_argument("--start", type=float, help="Start value (ad-hoc animation)")
    parser.add_argument("--end", type=float, help="End value (ad-hoc animation)")
    parser.add_argument("--duration", type=float, help="Duration in ms (ad-hoc animation)")
    parser.add_argument("--easing", default="linear", choices=sorted(EASINGS), help="Easing function")
    parser.add_argument("--fps", type=float, help="Ticks per second")
    parser.add_argument("--timeout", type=float, help="Give up after this many seconds")
    parser.add_argument("--debug", action="store_true", help="Log every event and frame detail")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    return parser


async def play(animator: Animator, timeout: Optional[float]) -> Optional[float]:
    frames: List[float] = []

    def on_frame(event: AnimationEvent) -> None:
        frames.append(event.value)
        log.info(f"frame {len(frames):>4}", value=round(event.value, 4))

    animator.on("frame", on_frame)
    end_value = await AnimationRunner().run(animator, timeout=timeout)
    log.info("Done", frames=len(frames), end_value=end_value)
    return end_value


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = ConfigManager(args.config)
    try:
        config.load()
    except AnimatorError as ex:
        log.error("Configuration failed", error=ex.message)
        return 2

    # Command line flags win over the config file's logging section
    if args.debug or args.no_color:
        configure_logger(
            LogLevel.DEBUG if args.debug else get_logger().min_level,
            use_colors=not args.no_color and get_logger().use_colors,
        )

    if args.list:
        for name in config.list_presets():
            print(name)
        return 0

    bus = EventBus()
    if args.debug:
        bus.add_middleware(log_middleware)
    clock = AsyncioClock()

    try:
        if args.preset:
            animator = config.create_animator(args.preset, event_bus=bus, clock=clock)
        else:
            animator = Animator(
                start_value=args.start,
                end_value=args.end,
                duration=args.duration,
                delta=get_easing(args.easing),
                fps=args.fps,
                event_bus=bus,
                clock=clock,
            )
    except AnimatorError as ex:
        log.error("Cannot build animation", error=ex.message, code=ex.code)
        return 2

    try:
        asyncio.run(play(animator, args.timeout))
    except asyncio.TimeoutError:
        log.error("Animation timed out")
        return 1
    except KeyboardInterrupt:
        log.warn("Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
