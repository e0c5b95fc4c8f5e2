"""Badge catalog types"""
from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Any


class AchievementId(str, Enum):
    """Stable badge identifiers; these strings are what gets persisted"""
    CALM_STARTER = "CALM_STARTER"
    MINDFUL_7_DAY = "MINDFUL_7_DAY"
    CONSISTENCY_CHAMP = "CONSISTENCY_CHAMP"
    FOCUS_MASTER = "FOCUS_MASTER"


class AchievementCategory(str, Enum):
    MILESTONES = "milestones"
    CONSISTENCY = "consistency"
    FOCUS = "focus"


class AchievementTier(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


class Achievement(BaseModel):
    """
    One catalog entry

    `criteria["type"]` selects the unlock check in the achievement system;
    the remaining keys are that check's parameters.
    """
    model_config = ConfigDict(frozen=True)

    id: AchievementId
    name: str
    description: str
    icon: str
    category: AchievementCategory
    criteria: dict[str, Any]
    tier: AchievementTier
