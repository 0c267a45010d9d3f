"""Service layer exports."""

from . import (
	content_service,
	credibility_service,
	digital_key_service,
	moderation_service,
	reputation_service,
	scope_service,
	student_id_service,
	succession_service,
)

__all__ = [
	"content_service",
	"credibility_service",
	"digital_key_service",
	"moderation_service",
	"reputation_service",
	"scope_service",
	"student_id_service",
	"succession_service",
]
