"""
Landing Evaluation & Score
==========================
Resolves where a landed trajectory crossed y = 0 and tests the crossing
against the target zone.

The stored landing point is not clamped to the ground; the crossing is
found by linear interpolation between the landing point and the point
recorded just before it. This is exact for a straight segment and a
controlled approximation along the curved path near touchdown.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .constants import TARGET_WIDTH, TARGET_X_DEFAULT
from .exceptions import IllegalOperation, InvalidParameter
from .logger import logger


@dataclass(frozen=True)
class TargetZone:
    """Ground target spanning [center - half_width, center + half_width]."""
    center: float = TARGET_X_DEFAULT       # m downrange
    half_width: float = TARGET_WIDTH / 2   # m

    def __post_init__(self):
        if not self.half_width > 0:
            raise InvalidParameter('half_width', self.half_width)

    @property
    def left(self) -> float:
        return self.center - self.half_width

    @property
    def right(self) -> float:
        return self.center + self.half_width

    def contains(self, x: float) -> bool:
        return self.left <= x <= self.right


@dataclass(frozen=True)
class ScoreEvent:
    """Outcome of one landing."""
    hit: bool
    landing_x: float           # m, interpolated at y = 0
    landing_time: float        # s since launch, interpolated at y = 0
    target: TargetZone


def interpolate_landing(previous, landing):
    """
    Linearly interpolate (x, t) where the segment previous → landing
    crosses y = 0. Returns the landing point's own (x, t) when the segment
    is horizontal.
    """
    y0, y1 = previous.y, landing.y
    if y0 == y1:
        return landing.x, landing.time
    fraction = y0 / (y0 - y1)
    fraction = min(max(fraction, 0.0), 1.0)
    x = previous.x + fraction * (landing.x - previous.x)
    t = previous.time + fraction * (landing.time - previous.time)
    return x, t


def landing_crossing(trajectory):
    """(x, t) where a landed trajectory crosses y = 0."""
    landing = trajectory.landing_point
    if landing is None:
        raise IllegalOperation("trajectory has not landed")
    points = trajectory.data_points
    previous = points[-2] if len(points) > 1 else landing
    return interpolate_landing(previous, landing)


def evaluate_landing(trajectory, target: TargetZone) -> ScoreEvent:
    """Score a trajectory that has just landed against ``target``."""
    x, t = landing_crossing(trajectory)
    return ScoreEvent(hit=target.contains(x), landing_x=x, landing_time=t,
                      target=target)


@dataclass
class Score:
    """Running tally of landings and hits."""
    landings: int = 0
    hits: int = 0
    events: List[ScoreEvent] = field(default_factory=list)

    @property
    def last_event(self) -> Optional[ScoreEvent]:
        return self.events[-1] if self.events else None

    def record(self, event: ScoreEvent) -> ScoreEvent:
        self.events.append(event)
        self.landings += 1
        if event.hit:
            self.hits += 1
        logger.info("landing at x=%.3f m: %s", event.landing_x,
                    'HIT' if event.hit else 'miss')
        return event

    def reset(self):
        self.landings = 0
        self.hits = 0
        self.events.clear()
