from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for authorization."""

    ADMIN = "admin"
    STAFF = "staff"
    COACH = "coach"
    PLAYER = "player"


STAFF_ROLES = frozenset({Role.ADMIN, Role.STAFF, Role.COACH})


class PlayerStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    ALUMNI = "alumni"
    CANCELLED = "cancelled"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    def next(self) -> "TaskStatus":
        """Status reached by the cycling button (completed wraps to pending)."""
        order = list(TaskStatus)
        return order[(order.index(self) + 1) % len(order)]


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskCategory(str, Enum):
    TRAINING = "training"
    ADMIN = "admin"
    VISA = "visa"
    MEDICAL = "medical"
    HOUSING = "housing"
    OTHER = "other"


class EventType(str, Enum):
    TEAM_TRAINING = "team_training"
    INDIVIDUAL_TRAINING = "individual_training"
    VIDEO_SESSION = "video_session"
    GYM = "gym"
    RECOVERY = "recovery"
    MATCH = "match"
    TOURNAMENT = "tournament"
    SCHOOL = "school"
    LANGUAGE_CLASS = "language_class"
    AIRPORT_PICKUP = "airport_pickup"
    TEAM_ACTIVITY = "team_activity"
    MEETING = "meeting"
    MEDICAL = "medical"
    OTHER = "other"
    # derived / legacy
    TRIAL = "trial"
    PROSPECT_TRIAL = "prospect_trial"
    TRAINING = "training"


TRAINING_COMPETITION_TYPES = frozenset(
    {
        EventType.TEAM_TRAINING,
        EventType.INDIVIDUAL_TRAINING,
        EventType.GYM,
        EventType.MATCH,
        EventType.TOURNAMENT,
        EventType.TRAINING,
    }
)


class RecurrenceRule(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class SeriesScope(str, Enum):
    """Which members of a recurring series an edit or delete touches."""

    THIS = "this"
    FOLLOWING = "following"
    ALL = "all"


class ProspectStatus(str, Enum):
    INQUIRY = "inquiry"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    EVALUATION = "evaluation"
    DECISION_PENDING = "decision_pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    PLACED = "placed"


ACTIVE_PROSPECT_STATUSES = (
    ProspectStatus.INQUIRY,
    ProspectStatus.SCHEDULED,
    ProspectStatus.IN_PROGRESS,
    ProspectStatus.EVALUATION,
    ProspectStatus.DECISION_PENDING,
)
COMPLETED_PROSPECT_STATUSES = (
    ProspectStatus.ACCEPTED,
    ProspectStatus.REJECTED,
    ProspectStatus.WITHDRAWN,
    ProspectStatus.PLACED,
)


class PlayerTrialStatus(str, Enum):
    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TrialOutcome(str, Enum):
    PENDING = "pending"
    OFFER_RECEIVED = "offer_received"
    NO_OFFER = "no_offer"
    PLAYER_DECLINED = "player_declined"


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class DoctorType(str, Enum):
    GENERAL = "general"
    ORTHOPEDIC = "orthopedic"
    PHYSIOTHERAPY = "physiotherapy"
    DENTIST = "dentist"
    SPECIALIST = "specialist"
    OTHER = "other"


class InsuranceClaimStatus(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


class GroceryOrderStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class TrainingAttendanceStatus(str, Enum):
    PRESENT = "present"
    LATE = "late"
    EXCUSED = "excused"
    ABSENT = "absent"


class WellPassStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    EXPIRED = "expired"


class BugReportStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class DocumentCategory(str, Enum):
    IDENTITY = "identity"
    CONSENT = "consent"
    MEDICAL = "medical"
    CONTRACT = "contract"
    OTHER = "other"


class PickupLocationType(str, Enum):
    AIRPORT = "airport"
    TRAIN_STATION = "train_station"


class PickupTransport(str, Enum):
    WARUBI_CAR = "warubi_car"
    KOLN_VAN = "koln_van"
    RENTAL = "rental"
    PUBLIC_TRANSPORT = "public_transport"


class PickupStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class WhereaboutsStatus(str, Enum):
    AT_ACADEMY = "at_academy"
    ON_TRIAL = "on_trial"
    HOME_LEAVE = "home_leave"
    INJURED = "injured"
    SCHOOL = "school"
    TRAVELING = "traveling"


class VisaDocumentStatus(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    RECEIVED = "received"
    NOT_REQUIRED = "not_required"
    EXPIRED = "expired"

    def next(self) -> "VisaDocumentStatus":
        """Status reached by clicking a checklist entry; expired restarts at pending."""
        cycle = (
            VisaDocumentStatus.PENDING,
            VisaDocumentStatus.SUBMITTED,
            VisaDocumentStatus.RECEIVED,
            VisaDocumentStatus.NOT_REQUIRED,
        )
        if self not in cycle:
            return VisaDocumentStatus.PENDING
        return cycle[(cycle.index(self) + 1) % len(cycle)]


class VisaApplicationStatus(str, Enum):
    NOT_STARTED = "not_started"
    DOCUMENTS_PENDING = "documents_pending"
    APPLIED = "applied"
    PROCESSING = "processing"
    APPROVED = "approved"
    DENIED = "denied"
    NOT_REQUIRED = "not_required"
