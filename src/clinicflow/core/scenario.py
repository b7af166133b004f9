"""Clinic scenario configuration dataclass."""

import math
from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np

from clinicflow.core.entities import OriginCategory
from clinicflow.core.topology import Topology, standard_topology


DEFAULT_ORIGIN_WEIGHTS: Dict[OriginCategory, float] = {
    OriginCategory.REFERRED: 0.2,
    OriginCategory.PRE_CONSULT: 0.4,
    OriginCategory.TELE_PRE: 0.4,
}


@dataclass
class ClinicScenario:
    """Configuration for one clinic engine instance.

    Timers are in ticks; one tick is one call to ClinicEngine.step().
    The clock converts real elapsed milliseconds into ticks and ticks
    into simulated minutes.

    Attributes:
        name: Display name for summaries and comparisons.
        n_nurses: Number of nurse rooms in the default layout.
        n_hepatologists: Number of hepatologist rooms in the default layout.
        topology: Clinic layout. Built from n_nurses/n_hepatologists if None.
        session_minutes: Simulated session length; None runs uncapped.
        minutes_per_tick: Simulated minutes per tick.
        ms_per_tick: Real milliseconds per tick.
        spawn_every_ticks: Spawn cadence.
        spawn_batch_size: Patients created per spawn.
        origin_weights: Origin category distribution (must sum to 1.0).
        waiting_ticks: Time in the waiting room before the first nurse call.
        nurse_ticks: Nurse consultation length.
        doctor_ticks: Hepatologist consultation length.
        nurse_retry_ticks: Re-poll interval when every nurse room is busy.
        doctor_retry_ticks: Re-poll interval when the hepatologist is busy.
        escalation_probability: Chance a nurse patient needs the hepatologist.
        speed: Grid units walked per tick.
        monitoring_cols: Columns in the monitoring bed grid.
        monitoring_pitch: Spacing between monitoring beds (grid units).
        nurse_jitter: Width of the random offset inside a nurse room.
        doctor_jitter: Width of the random offset at the hepatologist.
        random_seed: Master seed for reproducibility.
    """

    name: str = "Clinic"

    # Resources
    n_nurses: int = 3
    n_hepatologists: int = 1
    topology: Optional[Topology] = None

    # Clock
    session_minutes: Optional[float] = 540.0  # 9 hours, 09:00-18:00
    minutes_per_tick: float = 0.05
    ms_per_tick: float = 1000.0 / 60.0  # one animation frame

    # Arrivals
    spawn_every_ticks: int = 180
    spawn_batch_size: int = 1
    origin_weights: Dict[OriginCategory, float] = field(
        default_factory=lambda: dict(DEFAULT_ORIGIN_WEIGHTS)
    )

    # Timers (ticks)
    waiting_ticks: int = 120
    nurse_ticks: int = 300
    doctor_ticks: int = 300
    nurse_retry_ticks: int = 30
    doctor_retry_ticks: int = 30

    # Routing
    escalation_probability: float = 1 / 9

    # Movement and placement
    speed: float = 0.15
    monitoring_cols: int = 12
    monitoring_pitch: float = 2.0
    nurse_jitter: float = 2.0
    doctor_jitter: float = 1.0

    # Reproducibility
    random_seed: int = 42

    # RNG streams (created in __post_init__)
    rng_origin: Optional[np.random.Generator] = None
    rng_escalation: Optional[np.random.Generator] = None
    rng_jitter: Optional[np.random.Generator] = None

    def __post_init__(self) -> None:
        """Validate parameters, build the layout and RNG streams."""
        self._validate()

        if self.topology is None:
            self.topology = standard_topology(self.n_nurses, self.n_hepatologists)

        self.origin_weights = {
            OriginCategory(k): float(v) for k, v in self.origin_weights.items()
        }

        self.rng_origin = np.random.default_rng(self.random_seed)
        self.rng_escalation = np.random.default_rng(self.random_seed + 1)
        self.rng_jitter = np.random.default_rng(self.random_seed + 2)

    def _validate(self) -> None:
        if self.session_minutes is not None and self.session_minutes <= 0:
            raise ValueError(f"session_minutes must be positive, got {self.session_minutes}")
        if self.minutes_per_tick <= 0:
            raise ValueError(f"minutes_per_tick must be positive, got {self.minutes_per_tick}")
        if self.ms_per_tick <= 0:
            raise ValueError(f"ms_per_tick must be positive, got {self.ms_per_tick}")
        if self.spawn_every_ticks <= 0:
            raise ValueError(f"spawn_every_ticks must be positive, got {self.spawn_every_ticks}")
        if self.spawn_batch_size < 0:
            raise ValueError(f"spawn_batch_size must be >= 0, got {self.spawn_batch_size}")
        if self.speed <= 0:
            raise ValueError(f"speed must be positive, got {self.speed}")
        if self.monitoring_cols <= 0:
            raise ValueError(f"monitoring_cols must be positive, got {self.monitoring_cols}")
        if not 0.0 <= self.escalation_probability <= 1.0:
            raise ValueError(
                f"escalation_probability must be in [0, 1], got {self.escalation_probability}"
            )

        for timer in ("waiting_ticks", "nurse_ticks", "doctor_ticks"):
            if getattr(self, timer) < 0:
                raise ValueError(f"{timer} must be >= 0, got {getattr(self, timer)}")
        for timer in ("nurse_retry_ticks", "doctor_retry_ticks"):
            if getattr(self, timer) < 1:
                raise ValueError(f"{timer} must be >= 1, got {getattr(self, timer)}")

        total = sum(self.origin_weights.values())
        if abs(total - 1.0) > 0.001:
            raise ValueError(f"origin_weights must sum to 1.0, got {total}")

    @property
    def session_ticks(self) -> Optional[int]:
        """Ticks until the session ends, or None when uncapped."""
        if self.session_minutes is None:
            return None
        # Tolerate float error in minutes_per_tick (0.1 * 5400 != 540.0)
        return int(math.ceil(self.session_minutes / self.minutes_per_tick - 1e-9))

    @property
    def spawns_per_hour(self) -> float:
        """Nominal arrival rate in patients per simulated hour."""
        ticks_per_hour = 60.0 / self.minutes_per_tick
        return self.spawn_batch_size * ticks_per_hour / self.spawn_every_ticks

    def clone_with_seed(self, new_seed: int) -> "ClinicScenario":
        """Create a copy of this scenario with a different seed.

        Args:
            new_seed: The new random seed to use.

        Returns:
            A new ClinicScenario with the same parameters and fresh RNGs.
        """
        return ClinicScenario(
            name=self.name,
            n_nurses=self.n_nurses,
            n_hepatologists=self.n_hepatologists,
            topology=self.topology,
            session_minutes=self.session_minutes,
            minutes_per_tick=self.minutes_per_tick,
            ms_per_tick=self.ms_per_tick,
            spawn_every_ticks=self.spawn_every_ticks,
            spawn_batch_size=self.spawn_batch_size,
            origin_weights=dict(self.origin_weights),
            waiting_ticks=self.waiting_ticks,
            nurse_ticks=self.nurse_ticks,
            doctor_ticks=self.doctor_ticks,
            nurse_retry_ticks=self.nurse_retry_ticks,
            doctor_retry_ticks=self.doctor_retry_ticks,
            escalation_probability=self.escalation_probability,
            speed=self.speed,
            monitoring_cols=self.monitoring_cols,
            monitoring_pitch=self.monitoring_pitch,
            nurse_jitter=self.nurse_jitter,
            doctor_jitter=self.doctor_jitter,
            random_seed=new_seed,
        )

    def reseed(self) -> None:
        """Recreate the RNG streams from random_seed (used on engine reset)."""
        self.rng_origin = np.random.default_rng(self.random_seed)
        self.rng_escalation = np.random.default_rng(self.random_seed + 1)
        self.rng_jitter = np.random.default_rng(self.random_seed + 2)


def ai_clinic_scenario(random_seed: int = 42) -> ClinicScenario:
    """AI-augmented clinic: three expert nurses, AI pre-screening.

    AI triage keeps hepatologist referrals near 1 in 12 and the
    queueing retries short.
    """
    return ClinicScenario(
        name="AI Clinic",
        n_nurses=3,
        n_hepatologists=1,
        minutes_per_tick=0.1,
        spawn_every_ticks=200,
        spawn_batch_size=2,
        waiting_ticks=50,
        nurse_ticks=100,
        doctor_ticks=150,
        nurse_retry_ticks=10,
        doctor_retry_ticks=15,
        escalation_probability=1 / 12,
        speed=0.2,
        random_seed=random_seed,
    )


def standard_clinic_scenario(random_seed: int = 42) -> ClinicScenario:
    """Standard clinic: one nurse, manual triage, two hepatologists.

    Same arrivals as the AI clinic, slower processing and a one in
    three referral rate.
    """
    return ClinicScenario(
        name="Standard Clinic",
        n_nurses=1,
        n_hepatologists=2,
        minutes_per_tick=0.1,
        spawn_every_ticks=200,
        spawn_batch_size=2,
        waiting_ticks=230,
        nurse_ticks=220,
        doctor_ticks=350,
        nurse_retry_ticks=60,
        doctor_retry_ticks=30,
        escalation_probability=1 / 3,
        speed=0.2,
        random_seed=random_seed,
    )
