"""Static clinic layout: resources, waypoints and corridor routes.

Coordinates are grid units in the clinic floor plan. The isometric
projection used to draw them is owned by the rendering layer.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from clinicflow.core.entities import ResourceKind


@dataclass(frozen=True)
class Point:
    """A 2-D grid coordinate."""
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Resource:
    """A clinical room with a fixed footprint.

    Attributes:
        id: Unique resource identifier (e.g. "nurse1").
        kind: Resource type.
        capacity: Concurrent patients (1 for nurse/hepatologist rooms,
            0 meaning unbounded for the monitoring grid).
        x, y: Grid origin of the room footprint.
        width, height: Room footprint in grid units.
        station: Where the clinician receives patients, if fixed.
    """
    id: str
    kind: ResourceKind
    capacity: int
    x: float
    y: float
    width: float
    height: float
    station: Optional[Point] = None

    @property
    def anchor(self) -> Point:
        return Point(self.x, self.y)

    @property
    def centre(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class Topology:
    """The fixed set of resources and routing waypoints for one clinic.

    Attributes:
        resources: All rooms in the clinic.
        spawn_point: Entry waypoint where new patients appear.
        waiting_point: Waypoint inside the waiting room.
        north_room_id: Nurse room whose patients leave by the north corridor.
        north_route: Corridor waypoints to the monitoring entry (north side).
        south_route: Corridor waypoints to the monitoring entry (south side).
        monitoring_offset: Origin of the bed grid relative to the
            monitoring room anchor.
    """
    resources: Tuple[Resource, ...]
    spawn_point: Point
    waiting_point: Point
    north_room_id: Optional[str] = None
    north_route: Tuple[Point, ...] = field(default_factory=tuple)
    south_route: Tuple[Point, ...] = field(default_factory=tuple)
    monitoring_offset: Point = Point(15.0, 12.0)

    def __post_init__(self) -> None:
        ids = [r.id for r in self.resources]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Resource ids must be unique, got {ids}")
        monitoring = [r for r in self.resources if r.kind == ResourceKind.MONITORING]
        if len(monitoring) != 1:
            raise ValueError(
                f"Topology needs exactly one monitoring room, got {len(monitoring)}"
            )

    def get(self, resource_id: str) -> Resource:
        """Look up a resource by id.

        Raises:
            KeyError: If no resource has this id.
        """
        for resource in self.resources:
            if resource.id == resource_id:
                return resource
        raise KeyError(resource_id)

    def of_kind(self, kind: ResourceKind) -> List[Resource]:
        """Resources of one kind, ascending id."""
        return sorted(
            (r for r in self.resources if r.kind == kind), key=lambda r: r.id
        )

    def nurse_rooms(self) -> List[Resource]:
        return self.of_kind(ResourceKind.NURSE)

    def hepatologist_rooms(self) -> List[Resource]:
        return self.of_kind(ResourceKind.HEPATOLOGIST)

    def monitoring_room(self) -> Resource:
        return self.of_kind(ResourceKind.MONITORING)[0]

    def capacity_by_kind(self) -> Dict[ResourceKind, int]:
        """Number of rooms per kind."""
        counts: Dict[ResourceKind, int] = {kind: 0 for kind in ResourceKind}
        for resource in self.resources:
            counts[resource.kind] += 1
        return counts


# Rooms of the reference clinic floor plan
_NURSE_ROOMS = [
    (77.0, 33.5, 12.0, 12.0),  # nurse1 (south)
    (76.0, 22.0, 13.0, 12.0),  # nurse2
    (74.0, 10.0, 13.0, 11.0),  # nurse3 (north)
]
_NURSE_STACK_PITCH = 12.0

_HEPA_ROOM = (77.0, 23.0, 33.0, 12.0)
_HEPA_STATION = Point(93.0, 29.0)
_HEPA_STACK_PITCH = 24.0


def standard_topology(n_nurses: int = 3, n_hepatologists: int = 1) -> Topology:
    """Build the reference clinic layout.

    The first three nurse rooms follow the reference floor plan; extra
    rooms are stacked north of nurse3 so the highest-numbered room is
    always the northernmost. Extra hepatologist rooms are stacked south.

    Args:
        n_nurses: Number of nurse rooms ("nurse1".."nurseN").
        n_hepatologists: Number of hepatologist rooms ("hepatologist",
            "hepatologist2", ...).

    Returns:
        A Topology with waiting, nurse, hepatologist and monitoring rooms.
    """
    if n_nurses < 0 or n_hepatologists < 0:
        raise ValueError("Room counts must be non-negative")

    resources = [
        Resource("waiting", ResourceKind.WAITING, 0, 53.0, 20.0, 34.0, 10.0),
        Resource("monitoring", ResourceKind.MONITORING, 0, 94.0, 12.0, 58.0, 40.0),
    ]

    for i in range(n_nurses):
        if i < len(_NURSE_ROOMS):
            x, y, w, h = _NURSE_ROOMS[i]
        else:
            x, y, w, h = _NURSE_ROOMS[-1]
            y -= _NURSE_STACK_PITCH * (i - len(_NURSE_ROOMS) + 1)
        resources.append(Resource(f"nurse{i + 1}", ResourceKind.NURSE, 1, x, y, w, h))

    for i in range(n_hepatologists):
        x, y, w, h = _HEPA_ROOM
        dy = _HEPA_STACK_PITCH * i
        room_id = "hepatologist" if i == 0 else f"hepatologist{i + 1}"
        resources.append(Resource(
            room_id, ResourceKind.HEPATOLOGIST, 1, x, y + dy, w, h,
            station=_HEPA_STATION.offset(0.0, dy),
        ))

    # Only a three-room (or larger) layout has a room north of the waiting area
    north_room_id = f"nurse{n_nurses}" if n_nurses >= 3 else None

    return Topology(
        resources=tuple(resources),
        spawn_point=Point(30.0, 19.0),
        waiting_point=Point(70.0, 22.0),
        north_room_id=north_room_id,
        north_route=(Point(72.0, 10.0), Point(120.0, 12.0)),
        south_route=(Point(72.0, 45.0), Point(120.0, 50.0)),
    )
