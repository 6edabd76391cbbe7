from .milestone import Milestone, UserMilestone
from .user import User
from .steps import StepRecord
from .achievement import Achievement, UserAchievement


__all__ = [
    "User",
    "StepRecord",
    "Milestone",
    "UserMilestone",
    "Achievement",
    "UserAchievement",
]
