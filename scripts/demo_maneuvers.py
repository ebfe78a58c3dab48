#!/usr/bin/env python3
"""Scripted maneuver demo.

Runs the AeroTrack application headless and feeds the look-direction rig
a fixed sequence of pointer commands instead of mouse input, logging the
flight telemetry at the end of each phase.

Phases:
1. Level cruise (3s)
2. Pull up (2s)
3. Roll right (1.5s)
4. Hold the bank (3s)
5. Roll back to level (1.5s)
6. Push over (2s)

Usage:
    python scripts/demo_maneuvers.py [--aircraft attacker_a10]
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aerotrack.core.logging_system import get_logger
from aerotrack.main import AeroTrackApp, parse_args

logger = get_logger(__name__)


class ManeuverDemo(AeroTrackApp):
    """Headless demo driving the look rig through scripted phases."""

    def __init__(self, argv: list[str]):
        super().__init__(parse_args(["--headless", *argv]))

        # (name, duration, pitch command, roll command)
        self.phases = [
            ("Level cruise", 3.0, 0.0, 0.0),
            ("Pull up", 2.0, 0.5, 0.0),
            ("Roll right", 1.5, 0.0, 0.6),
            ("Hold bank", 3.0, 0.2, 0.0),
            ("Roll back", 1.5, 0.0, -0.6),
            ("Push over", 2.0, -0.4, 0.0),
        ]
        self.demo_phase = 0
        self.demo_time = 0.0

        logger.info("Demo initialized with %d phases", len(self.phases))

    @property
    def total_duration(self) -> float:
        return sum(duration for _, duration, _, _ in self.phases)

    def run(self) -> None:
        """Run every phase, then shut down."""
        logger.info("=== PHASE 1: %s ===", self.phases[0][0])
        try:
            self.run_headless(self.total_duration)
        finally:
            self._shutdown()

    def _frame(self, dt: float) -> None:
        super()._frame(dt)

        if self.demo_phase >= len(self.phases):
            return

        name, duration, pitch, roll = self.phases[self.demo_phase]
        self.look_rig.apply_input(pitch, roll, dt)
        self.demo_time += dt

        if self.demo_time >= duration:
            self._log_phase(name)
            self.demo_phase += 1
            self.demo_time = 0.0
            if self.demo_phase < len(self.phases):
                logger.info(
                    "=== PHASE %d: %s ===", self.demo_phase + 1, self.phases[self.demo_phase][0]
                )
            else:
                logger.info("=== DEMO COMPLETE ===")

    def _log_phase(self, name: str) -> None:
        telemetry = self.flight_loop.get_telemetry()
        logger.info(
            "%s done: speed %.1f, altitude %.0f, AoA %.1f, stall %.2f, limiter %s",
            name,
            telemetry.speed,
            telemetry.altitude,
            telemetry.current_aoa,
            telemetry.stall_intensity,
            telemetry.limiter_mode.value,
        )


def main() -> int:
    """Run the maneuver demo."""
    demo = ManeuverDemo(sys.argv[1:])
    demo.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
