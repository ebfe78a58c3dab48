"""Game loop with fixed timestep physics and variable framerate.

Each frame the loop runs the frame callback once (input polling, cursor
mapping, look-direction update, drawing) and then zero or more fixed physics
steps. A physics step is ``FlightLoop.fixed_update(dt)`` followed by
``IRigidBody.step(dt)``.

Typical usage example:
    from aerotrack.core.game_loop import GameLoop

    loop = GameLoop(flight_loop, body, frame_callback=app.frame, physics_hz=50)
    loop.run()
"""

import logging
import time
from collections.abc import Callable
from typing import Protocol

from aerotrack.physics.flight_model.base import IRigidBody

logger = logging.getLogger(__name__)

# Accumulator never holds more than this many physics steps
MAX_STEPS_PER_FRAME = 5


class FixedUpdateTarget(Protocol):
    def fixed_update(self, dt: float) -> None: ...


class GameLoop:  # pylint: disable=too-many-instance-attributes
    """Main loop with fixed timestep physics.

    Physics runs at ``physics_hz`` regardless of frame rate. Frame time is
    accumulated and consumed in fixed steps; the accumulator is clamped to
    five steps so a slow frame cannot trigger a spiral of catch-up work.

    Examples:
        >>> loop = GameLoop(flight_loop, body, frame_callback=on_frame)
        >>> loop.run(max_duration=10.0)
    """

    def __init__(
        self,
        flight_loop: FixedUpdateTarget,
        body: IRigidBody,
        frame_callback: Callable[[float], None] | None = None,
        target_fps: int = 60,
        physics_hz: int = 50,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the game loop.

        Args:
            flight_loop: Object stepped once per physics tick before the body.
            body: Integrator stepped after the flight loop.
            frame_callback: Called once per frame with the frame time.
            target_fps: Frame rate cap (0 disables the cap).
            physics_hz: Physics update rate in Hz.
            clock: Monotonic time source in seconds.
            sleep: Sleep function used for the frame cap.

        Raises:
            ValueError: If physics_hz is not positive.
        """
        if physics_hz <= 0:
            raise ValueError(f"physics_hz must be positive (got {physics_hz})")

        self.flight_loop = flight_loop
        self.body = body
        self.frame_callback = frame_callback
        self.target_fps = target_fps
        self.physics_hz = physics_hz

        self.physics_dt = 1.0 / physics_hz
        self.frame_time_target = 1.0 / target_fps if target_fps > 0 else 0.0
        self._clock = clock
        self._sleep = sleep

        self.running = False
        self.paused = False

        self.frame_count = 0
        self.physics_steps = 0
        self.simulated_time = 0.0
        self.physics_accumulator = 0.0

        self.last_time = 0.0
        self.last_fps_time = 0.0
        self._fps_frames = 0
        self.fps = 0.0

    def run(self, max_duration: float | None = None) -> None:
        """Run until ``stop()`` is called or ``max_duration`` seconds have been simulated.

        Raises:
            Exception: Any error raised by a callback is logged and re-raised.
        """
        self.running = True
        self.last_time = self._clock()
        self.last_fps_time = self.last_time

        logger.info(
            "Game loop started (%d Hz physics, %d fps target)", self.physics_hz, self.target_fps
        )

        try:
            while self.running:
                now = self._clock()
                frame_time = now - self.last_time
                self.last_time = now

                self.advance(frame_time)
                self._update_fps(now)
                self._limit_framerate()

                if max_duration is not None and self.simulated_time >= max_duration:
                    self.running = False

        except KeyboardInterrupt:
            logger.info("Game loop interrupted by user")

        except Exception:
            logger.exception("Game loop error")
            raise

        finally:
            self.running = False
            logger.info(
                "Game loop stopped after %d frames, %d physics steps",
                self.frame_count,
                self.physics_steps,
            )

    def advance(self, frame_time: float) -> int:
        """Execute one frame.

        Args:
            frame_time: Wall time since the previous frame (seconds).

        Returns:
            Number of physics steps taken.
        """
        if self.frame_callback is not None:
            self.frame_callback(frame_time)

        steps = 0
        if not self.paused:
            self.physics_accumulator += max(0.0, frame_time)

            max_accumulator = self.physics_dt * MAX_STEPS_PER_FRAME
            if self.physics_accumulator > max_accumulator:
                logger.warning("Physics accumulator clamped: %.3fs", self.physics_accumulator)
                self.physics_accumulator = max_accumulator

            # Tolerance keeps float residue from dropping a step
            while self.physics_accumulator >= self.physics_dt - 1e-9:
                self._step_physics(self.physics_dt)
                self.physics_accumulator = max(0.0, self.physics_accumulator - self.physics_dt)
                steps += 1

        self.frame_count += 1
        self._fps_frames += 1
        return steps

    def _step_physics(self, dt: float) -> None:
        self.flight_loop.fixed_update(dt)
        self.body.step(dt)
        self.physics_steps += 1
        self.simulated_time += dt

    def _update_fps(self, now: float) -> None:
        elapsed = now - self.last_fps_time
        if elapsed >= 1.0:
            self.fps = self._fps_frames / elapsed
            self._fps_frames = 0
            self.last_fps_time = now

    def _limit_framerate(self) -> None:
        if self.frame_time_target <= 0.0:
            return
        sleep_time = self.frame_time_target - (self._clock() - self.last_time)
        if sleep_time > 0:
            self._sleep(sleep_time)

    def stop(self) -> None:
        """Stop the loop at the end of the current frame."""
        self.running = False
        logger.info("Game loop stop requested")

    def pause(self) -> None:
        """Pause physics. Frames (input, drawing) keep running."""
        self.paused = True
        logger.info("Game loop paused")

    def resume(self) -> None:
        """Resume physics without catching up on paused time."""
        self.paused = False
        self.physics_accumulator = 0.0
        logger.info("Game loop resumed")

    def toggle_pause(self) -> None:
        if self.paused:
            self.resume()
        else:
            self.pause()

    def get_fps(self) -> float:
        return self.fps

    def is_running(self) -> bool:
        return self.running

    def is_paused(self) -> bool:
        return self.paused
