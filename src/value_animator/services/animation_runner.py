"""Animation runner - await an Animator to completion on the asyncio loop"""

import asyncio
from typing import Optional, TYPE_CHECKING

from value_animator.models.enums import AnimatorState
from value_animator.utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from value_animator.engine.animator import Animator

log = get_logger().for_category(LogCategory.ANIMATION)


class AnimationRunner:
    """
    Bridges the callback-driven Animator and async code.

    Example:
        animator = Animator(start_value=0, end_value=1, duration=300)
        end_value = await AnimationRunner().run(animator)
    """

    async def run(self, animator: "Animator", timeout: Optional[float] = None) -> Optional[float]:
        """
        Start the animator (if not started yet) and wait until it ends or is stopped.

        Args:
            animator: Animator driven by an AsyncioClock on the running loop
            timeout: Seconds to wait before stopping the animator

        Returns:
            The end value, or None if the animator was stopped externally

        Raises:
            asyncio.TimeoutError: Duration did not elapse within timeout
        """
        if animator.state is AnimatorState.END:
            return animator.get_end_value()
        if animator.state is AnimatorState.STOPPED:
            return None

        loop = asyncio.get_running_loop()
        finished: asyncio.Future = loop.create_future()

        def on_done(done: "Animator") -> None:
            if finished.done():
                return
            if done.state is AnimatorState.END:
                finished.set_result(done.get_end_value())
            else:
                log.info("Animation stopped before end")
                finished.set_result(None)

        animator.add_done_callback(on_done)
        try:
            if animator.state is AnimatorState.INITIAL:
                animator.start()
            return await asyncio.wait_for(finished, timeout)
        except asyncio.TimeoutError:
            if animator.is_running:
                animator.stop()
            log.warn("Animation timed out", timeout_s=timeout)
            raise
        finally:
            animator.remove_done_callback(on_done)


async def run_animation(animator: "Animator", timeout: Optional[float] = None) -> Optional[float]:
    """Module-level shortcut for AnimationRunner().run()"""
    return await AnimationRunner().run(animator, timeout)
