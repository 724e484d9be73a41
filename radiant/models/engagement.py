"""
Usage counters for Radiant's notification research.

Kept in the observation store's cache under a single key, in the same
camelCase shape the mobile app writes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class UserEngagement:
    """How the user interacts with the app.

    Attributes:
        app_opens: Number of app launches.
        notification_interactions: Number of reminder notifications acted on.
        showers_viewed: Shower ids the user has opened, first view first.
        last_active: Time of the most recent launch (None if never opened).
        total_time_spent: Minutes spent in the app.
        survey_completed: Whether the research survey was submitted.
        research_participation: Whether the user opted into the study.
    """
    app_opens: int = 0
    notification_interactions: int = 0
    showers_viewed: list[str] = field(default_factory=list)
    last_active: Optional[datetime] = None
    total_time_spent: int = 0
    survey_completed: bool = False
    research_participation: bool = False

    def to_dict(self) -> dict:
        return {
            "appOpens": self.app_opens,
            "notificationInteractions": self.notification_interactions,
            "showersViewed": list(self.showers_viewed),
            "lastActiveDate": self.last_active.isoformat() if self.last_active else None,
            "totalTimeSpent": self.total_time_spent,
            "surveyCompleted": self.survey_completed,
            "researchParticipation": self.research_participation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserEngagement":
        last_active = data.get("lastActiveDate")
        return cls(
            app_opens=int(data.get("appOpens", 0)),
            notification_interactions=int(data.get("notificationInteractions", 0)),
            showers_viewed=list(data.get("showersViewed", [])),
            last_active=datetime.fromisoformat(last_active) if last_active else None,
            total_time_spent=int(data.get("totalTimeSpent", 0)),
            survey_completed=bool(data.get("surveyCompleted", False)),
            research_participation=bool(data.get("researchParticipation", False)),
        )
