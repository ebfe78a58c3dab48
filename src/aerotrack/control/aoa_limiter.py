"""Angle-of-attack limiter with hold-to-disable and cooldown.

The limiter is normally active and pushes the nose back toward the flight
path when AoA exceeds the profile ceiling. Holding the disable input turns
it off; releasing the input forces it back on for a cooldown period during
which the input is ignored.

    NORMAL --held--> DISABLED --released--> COOLDOWN --expired--> NORMAL

Typical usage example:
    limiter = AoALimiter(profile)

    # Once per physics tick
    limiter.update(held=input_source.is_aoa_held(), dt=dt)
    correction = limiter.correction(aoa, speed)
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum

from aerotrack.aircraft.profile import AerodynamicProfile

logger = logging.getLogger(__name__)

# The limiter does not correct below this airspeed
MIN_CORRECTION_SPEED = 5.0

# Cooldown counts as expired within this tolerance
COOLDOWN_EPSILON = 1e-9


class LimiterMode(Enum):
    """Limiter state as seen by consumers."""

    NORMAL = "normal"  # Limiter active
    DISABLED = "disabled"  # Disable input held
    COOLDOWN = "cooldown"  # Forced active after release


@dataclass
class AoALimiterState:
    """Raw limiter state.

    Attributes:
        held: Disable input held this tick (forced False during cooldown).
        held_prev_tick: Disable input held on the previous tick.
        on_cooldown: Whether the cooldown is running.
        cooldown_remaining: Seconds of cooldown left (0 when not cooling down).
    """

    held: bool = False
    held_prev_tick: bool = False
    on_cooldown: bool = False
    cooldown_remaining: float = 0.0

    @property
    def mode(self) -> LimiterMode:
        if self.on_cooldown:
            return LimiterMode.COOLDOWN
        if self.held:
            return LimiterMode.DISABLED
        return LimiterMode.NORMAL


class AoALimiter:
    """Hold-to-disable AoA limiter state machine.

    Examples:
        >>> limiter = AoALimiter(AerodynamicProfile(cooldown_seconds=5.0))
        >>> limiter.update(held=True, dt=0.02)
        >>> limiter.mode
        <LimiterMode.DISABLED: 'disabled'>
        >>> limiter.update(held=False, dt=0.02)
        >>> limiter.cooldown_remaining
        5.0
    """

    def __init__(self, profile: AerodynamicProfile) -> None:
        self.profile = profile
        self.state = AoALimiterState()

    @property
    def mode(self) -> LimiterMode:
        return self.state.mode

    @property
    def cooldown_remaining(self) -> float:
        return self.state.cooldown_remaining

    def is_limiter_active(self) -> bool:
        """True unless the disable input is currently honored."""
        return self.mode != LimiterMode.DISABLED

    def is_limiter_disabled(self) -> bool:
        return self.mode == LimiterMode.DISABLED

    def is_on_cooldown(self) -> bool:
        return self.state.on_cooldown

    def current_max_aoa(self) -> float:
        """AoA ceiling currently in force (degrees)."""
        if self.is_limiter_disabled():
            return self.profile.max_aoa_without_limiter
        return self.profile.max_aoa_with_limiter

    def reset(self) -> None:
        self.state = AoALimiterState()

    def update(self, held: bool, dt: float) -> None:
        """Advance the state machine by one tick.

        The cooldown is decremented first, so a held input is honored in the
        same tick the cooldown expires. The tick that latches a cooldown does
        not decrement it.

        Args:
            held: Whether the disable input is held this tick.
            dt: Tick length in seconds.
        """
        state = self.state
        previous = state.mode

        if state.on_cooldown:
            state.cooldown_remaining -= dt
            if state.cooldown_remaining <= COOLDOWN_EPSILON:
                state.on_cooldown = False
                state.cooldown_remaining = 0.0

        if state.on_cooldown:
            state.held = False
            state.held_prev_tick = False
        else:
            if state.held_prev_tick and not held and self.profile.cooldown_seconds > 0.0:
                state.on_cooldown = True
                state.cooldown_remaining = self.profile.cooldown_seconds
            state.held = held and not state.on_cooldown
            state.held_prev_tick = state.held

        if state.mode != previous:
            logger.info("AoA limiter %s -> %s", previous.value, state.mode.value)

    def correction(self, aoa: float, speed: float) -> float:
        """Corrective angular acceleration about the body right axis.

        Args:
            aoa: Current angle of attack (degrees, positive when the velocity
                is above the nose).
            speed: Current airspeed.

        Returns:
            Angular acceleration in deg/s^2 about body right. Positive pitches
            the nose down. Zero while disabled, below the minimum speed, or
            within the ceiling.
        """
        if not self.is_limiter_active() or speed < MIN_CORRECTION_SPEED:
            return 0.0
        excess = abs(aoa) - self.profile.max_aoa_with_limiter
        if excess <= 0.0:
            return 0.0
        # Rotate the nose toward the velocity vector
        return -math.copysign(excess * self.profile.limiter_strength, aoa)
