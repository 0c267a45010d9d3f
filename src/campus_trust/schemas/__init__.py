"""Public schema exports."""

from .admin import (
	HandoverRequest,
	HandoverResponse,
	PromotionRequest,
	PromotionResponse,
	RegistrationClaim,
	StudentIdCreate,
	StudentIdRead,
	SuccessionRead,
)
from .common import Message, UserSummary
from .digital_key import AccessCheck, DigitalKeyRead, UnlockRequest, UnlockResponse
from .scope import ScopeAdminRead, ScopeCreate, ScopeRead
from .trust import (
	AccuracyRatingCreate,
	AccuracyRatingResponse,
	EventCreate,
	EventRead,
	PostCreate,
	PostRead,
	PunishmentQuery,
	PunishmentRead,
	ReputationRead,
	RsvpRequest,
	RsvpResponse,
	ScheduleRead,
	ScheduleUpsert,
)

__all__ = [
	"AccessCheck",
	"AccuracyRatingCreate",
	"AccuracyRatingResponse",
	"DigitalKeyRead",
	"EventCreate",
	"EventRead",
	"HandoverRequest",
	"HandoverResponse",
	"Message",
	"PostCreate",
	"PostRead",
	"PromotionRequest",
	"PromotionResponse",
	"PunishmentQuery",
	"PunishmentRead",
	"RegistrationClaim",
	"ReputationRead",
	"RsvpRequest",
	"RsvpResponse",
	"ScheduleRead",
	"ScheduleUpsert",
	"ScopeAdminRead",
	"ScopeCreate",
	"ScopeRead",
	"StudentIdCreate",
	"StudentIdRead",
	"SuccessionRead",
	"UnlockRequest",
	"UnlockResponse",
	"UserSummary",
]
