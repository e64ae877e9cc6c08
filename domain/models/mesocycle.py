"""
Mesocycle (periodization block) state.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MesocyclePhase(str, Enum):
    """Phases of a mesocycle, in order."""

    INTRO = "intro"
    ACCUMULATION = "accumulation"
    OVERREACHING = "overreaching"
    DELOAD = "deload"


class Mesocycle(BaseModel):
    """A running training block."""

    model_config = ConfigDict(frozen=True)

    id: str
    week_number: int = Field(default=1, ge=1)
    total_weeks: int = Field(default=6, ge=2)
    phase: MesocyclePhase = MesocyclePhase.INTRO
    volume_multiplier: float = Field(default=0.7, gt=0)
    start_date: dt.date
    split_id: str = ""


class MesocycleState(BaseModel):
    """A mesocycle plus per-week workout bookkeeping."""

    model_config = ConfigDict(frozen=True)

    mesocycle: Mesocycle
    current_week_start: dt.date
    workouts_this_week: int = Field(default=0, ge=0)
    last_workout_date: Optional[dt.date] = None
