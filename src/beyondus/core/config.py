"""Game configuration dataclass.

Defaults follow the Beyond Us prototype: five sabotage units to escape,
ship repairs only at the Crash Site and Warehouse, bots acting every
2.5-6.5 seconds.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .enums import Zone

TIE_BREAK_METHODS = ("lowest_id", "no_capture")


@dataclass
class GameConfig:
    """Configuration for game rules, bots and logging."""

    # ===========================================
    # PLAYER SETUP
    # ===========================================
    min_players: int = 3  # One Saboteur, one Decoy, at least one Investigator

    # ===========================================
    # SABOTAGE
    # ===========================================
    sabotage_units_required: int = 5
    task_eligible_zones: Tuple[Zone, ...] = (Zone.CRASH_SITE, Zone.WAREHOUSE)

    # ===========================================
    # INVESTIGATION
    # ===========================================
    # Chance an investigation reports "suspicious evidence"
    suspicious_rate_saboteur: float = 0.7
    suspicious_rate_other: float = 0.2

    # ===========================================
    # VOTING / CAPTURE
    # ===========================================
    # "lowest_id" = capture the lowest participant id among tied leaders
    # "no_capture" = a tie captures nobody and starts the next round
    tie_break_method: str = "lowest_id"

    # ===========================================
    # BOTS
    # ===========================================
    bot_interval_min: float = 2.5  # seconds
    bot_interval_max: float = 6.5
    bot_name_prefix: str = "Bot"

    # ===========================================
    # EVENTS / LOGGING
    # ===========================================
    event_log_limit: int = 100
    verbose: bool = True
    save_to_file: bool = False
    log_dir: str = "data/games"

    # Seed for role deals, investigations and bots (None = nondeterministic)
    seed: Optional[int] = None

    def __post_init__(self):
        if self.min_players < 3:
            raise ValueError("min_players must be at least 3")
        if self.sabotage_units_required <= 0:
            raise ValueError("sabotage_units_required must be positive")
        for rate in (self.suspicious_rate_saboteur, self.suspicious_rate_other):
            if not 0.0 <= rate <= 1.0:
                raise ValueError(f"Investigation rate out of range: {rate}")
        if self.tie_break_method not in TIE_BREAK_METHODS:
            raise ValueError(
                f"tie_break_method must be one of {TIE_BREAK_METHODS}, "
                f"got {self.tie_break_method!r}"
            )
        if not 0 < self.bot_interval_min <= self.bot_interval_max:
            raise ValueError("Bot interval bounds must satisfy 0 < min <= max")
        if self.event_log_limit <= 0:
            raise ValueError("event_log_limit must be positive")
        self.task_eligible_zones = tuple(Zone(z) for z in self.task_eligible_zones)
