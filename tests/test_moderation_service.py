import pytest

from campus_trust.models import AccountStatus, Punishment, PunishmentType, Severity, Violation, ViolationType
from campus_trust.services import moderation_service
from campus_trust.services.errors import ServiceUnavailable
from campus_trust.services.moderation_service import (
    FAIL_OPEN_REASONING,
    ModerationVerdict,
    calculate_punishment,
    classify_content,
)

RANK = {
    PunishmentType.WARNING: 0,
    PunishmentType.CREDIBILITY_REDUCTION: 1,
    PunishmentType.TEMP_BAN: 2,
    PunishmentType.PERMANENT_BAN: 3,
}


@pytest.mark.parametrize(
    "vtype, severity, priors, expected_type, penalty, hours",
    [
        (ViolationType.SPAM, Severity.LOW, 0, PunishmentType.WARNING, 2.0, None),
        (ViolationType.OFFENSIVE, Severity.MEDIUM, 0, PunishmentType.CREDIBILITY_REDUCTION, 10.0, None),
        (ViolationType.SPAM, Severity.LOW, 2, PunishmentType.CREDIBILITY_REDUCTION, 2.8, None),
        (ViolationType.HARASSMENT, Severity.HIGH, 0, PunishmentType.TEMP_BAN, 30.0, 168),
        (ViolationType.OFFENSIVE, Severity.LOW, 3, PunishmentType.TEMP_BAN, 8.0, 72),
        (ViolationType.HATE_SPEECH, Severity.CRITICAL, 0, PunishmentType.PERMANENT_BAN, 50.0, None),
        (ViolationType.SPAM, Severity.LOW, 5, PunishmentType.PERMANENT_BAN, 4.0, None),
        (ViolationType.INAPPROPRIATE, Severity.MEDIUM, 1, PunishmentType.CREDIBILITY_REDUCTION, 19.2, None),
    ],
)
def test_punishment_matrix(vtype, severity, priors, expected_type, penalty, hours):
    decision = calculate_punishment(vtype, severity, priors)

    assert decision.punishment_type == expected_type
    assert decision.credibility_penalty == pytest.approx(penalty)
    assert decision.ban_duration_hours == hours


def test_string_inputs_and_unknown_values():
    assert calculate_punishment("spam", "low", 0) == calculate_punishment(ViolationType.SPAM, Severity.LOW, 0)

    unknown = calculate_punishment("gossip", "mild", 0)
    assert unknown.punishment_type == PunishmentType.WARNING
    assert unknown.credibility_penalty == pytest.approx(5.0)


@pytest.mark.parametrize("vtype", list(ViolationType))
@pytest.mark.parametrize("severity", list(Severity))
def test_more_priors_never_lighten_the_punishment(vtype, severity):
    ranks = [RANK[calculate_punishment(vtype, severity, priors).punishment_type] for priors in range(10)]

    assert ranks == sorted(ranks)
    if severity == Severity.CRITICAL:
        assert set(ranks) == {RANK[PunishmentType.PERMANENT_BAN]}


def test_classifier_absent_allows_content():
    verdict = classify_content(None, "hello", "post")

    assert not verdict.is_violation


def _broken_classifier(content, content_type):
    raise ConnectionError("classifier offline")


def test_classifier_failure_fails_open():
    verdict = classify_content(_broken_classifier, "hello", "post")

    assert not verdict.is_violation
    assert verdict.confidence == 0.0
    assert verdict.reasoning == FAIL_OPEN_REASONING


def test_classifier_failure_can_fail_closed(settings_override):
    settings_override(moderation_fail_open=False)

    with pytest.raises(ServiceUnavailable) as excinfo:
        classify_content(_broken_classifier, "hello", "post")
    assert excinfo.value.status_code == 503


def test_verdict_needs_type_and_severity_to_act():
    assert not ModerationVerdict(is_violation=True).actionable
    assert ModerationVerdict(True, ViolationType.SPAM, Severity.LOW).actionable


def test_enforce_records_and_escalates(db, make_user):
    user = make_user()
    verdict = ModerationVerdict(True, ViolationType.SPAM, Severity.LOW, confidence=0.9, reasoning="link farm")

    first = moderation_service.enforce(db, user_id=user.user_id, verdict=verdict, content_type="post")
    assert first.punishment_type == PunishmentType.WARNING
    assert user.credibility_score == pytest.approx(48.0)

    moderation_service.enforce(db, user_id=user.user_id, verdict=verdict, content_type="post")
    third = moderation_service.enforce(db, user_id=user.user_id, verdict=verdict, content_type="post")

    assert third.punishment_type == PunishmentType.CREDIBILITY_REDUCTION
    assert moderation_service.violation_count(db, user_id=user.user_id) == 3
    assert db.query(Violation).filter_by(author_id=user.user_id).count() == 3
    punishments = db.query(Punishment).filter_by(user_id=user.user_id).all()
    assert len(punishments) == 3
    assert all(p.violation_id is not None for p in punishments)


def test_temp_ban_sets_window(db, make_user):
    user = make_user()
    verdict = ModerationVerdict(True, ViolationType.HARASSMENT, Severity.HIGH)

    moderation_service.enforce(db, user_id=user.user_id, verdict=verdict, content_type="post")

    assert user.ban_until is not None
    assert moderation_service.is_banned(user)
    assert user.account_status == AccountStatus.THREATENED
    assert user.credibility_score == pytest.approx(20.0)


def test_permanent_ban_suspends_and_floors_credibility(db, make_user):
    user = make_user(credibility=30.0)
    verdict = ModerationVerdict(True, ViolationType.HATE_SPEECH, Severity.CRITICAL)

    decision = moderation_service.enforce(db, user_id=user.user_id, verdict=verdict, content_type="comment")

    assert decision.punishment_type == PunishmentType.PERMANENT_BAN
    assert user.credibility_score == 0.0
    assert user.account_status == AccountStatus.SUSPENDED
    assert moderation_service.is_banned(user)
