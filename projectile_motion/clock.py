"""Simulation clock: converts frame deltas into simulated time."""

from .constants import SPEED_SCALES, STEP_DELTA, check_speed_scales
from .exceptions import InvalidParameter


class SimulationClock:
    """
    Paused, or Playing at a named speed ('normal' or 'slow').

    ``advance`` scales the frame delta while playing and returns 0 while
    paused; ``step`` always returns one fixed frame delta.
    """

    def __init__(self, playing: bool = True, speed: str = 'normal',
                 step_delta: float = STEP_DELTA, speed_scales=None):
        self.speed_scales = check_speed_scales(
            SPEED_SCALES if speed_scales is None else speed_scales)
        self.step_delta = step_delta
        self.playing = playing
        self.speed = 'normal'
        self.set_speed(speed)

    @property
    def speed_scale(self) -> float:
        return self.speed_scales[self.speed]

    def play(self):
        self.playing = True

    def pause(self):
        self.playing = False

    def toggle(self):
        self.playing = not self.playing

    def set_speed(self, speed: str):
        if speed not in self.speed_scales:
            raise InvalidParameter(
                'speed', f"{speed!r} (available: {list(self.speed_scales)})")
        self.speed = speed

    def advance(self, frame_delta: float) -> float:
        """Simulated seconds corresponding to ``frame_delta`` wall seconds."""
        if frame_delta < 0:
            raise InvalidParameter('frame_delta', frame_delta)
        if not self.playing:
            return 0.0
        return frame_delta * self.speed_scale

    def step(self) -> float:
        """One fixed frame, regardless of play state and speed."""
        return self.step_delta

    def __repr__(self):
        state = f"Playing({self.speed_scale})" if self.playing else "Paused"
        return f"SimulationClock({state})"
