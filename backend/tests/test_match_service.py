"""
Tests for MatchService orchestration
"""
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from application.services.matching.impl import MatchService
from core.exceptions import (
    AuthorizationException,
    DuplicateResourceException,
    InvalidStateTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from domain.enums import EducationLevel, MatchSort, MatchStatus, NotificationType, UserRole
from domain.value_objects import (
    EducationFactor,
    ExperienceFactor,
    LocationFactor,
    MatchFactors,
    SkillsFactor,
)
from infrastructure.services.tfidf_similarity_service import TfidfSimilarityService

from conftest import make_job, make_user


@pytest.fixture
async def world(user_repo, job_repo, employer, candidate):
    await user_repo.create(employer)
    await user_repo.create(candidate)
    job = make_job(
        employer,
        description="Python developer with Django and PostgreSQL",
        requirements=["Python", "Django", "AWS"],
        min_experience_years=4,
        education_level=EducationLevel.BACHELOR,
        location="Berlin",
    )
    await job_repo.create(job)
    return job


@pytest.fixture
def service(match_repo, job_repo, user_repo, dispatcher):
    return MatchService(
        match_repo,
        job_repo,
        user_repo,
        TfidfSimilarityService(),
        dispatcher,
        default_ttl_hours=24,
        max_page_size=50,
    )


class TestCreateMatch:
    @pytest.mark.asyncio
    async def test_creates_pending_match_scored_by_tfidf(self, service, world, employer, candidate):
        match = await service.create_match(employer, world.id, candidate.id, "direct")

        assert match.status is MatchStatus.PENDING
        assert match.employer_id == employer.id
        assert match.candidate_id == candidate.id
        assert 0 < match.score.value <= 100
        assert match.match_factors is None

    @pytest.mark.asyncio
    async def test_default_expiry_uses_ttl(self, service, world, employer, candidate):
        before = datetime.now(timezone.utc)
        match = await service.create_match(employer, world.id, candidate.id, "direct")
        assert before + timedelta(hours=24) <= match.expires_at <= datetime.now(timezone.utc) + timedelta(hours=24)

    @pytest.mark.asyncio
    async def test_supplied_factors_drive_the_score(self, service, world, employer, candidate):
        factors = MatchFactors(
            skills=SkillsFactor(percentage=100),
            experience=ExperienceFactor(percentage=100),
            education=EducationFactor(percentage=0),
            location=LocationFactor(percentage=0),
        )
        match = await service.create_match(employer, world.id, candidate.id, "direct", match_factors=factors)
        assert match.score.value == pytest.approx(65.0)
        assert match.match_factors == factors

    @pytest.mark.asyncio
    async def test_auto_factors_derived_from_profiles(self, service, world, employer, candidate):
        match = await service.create_match(employer, world.id, candidate.id, "direct", auto_factors=True)
        # skills 2/3, experience 4/4, education met, same city
        expected = (200 / 3) * 0.4 + 100 * 0.25 + 100 * 0.2 + 100 * 0.15
        assert match.score.value == pytest.approx(expected, abs=0.01)
        assert match.match_factors.skills.missing == ["AWS"]

    @pytest.mark.asyncio
    async def test_notifies_candidate(self, service, world, employer, candidate, dispatcher):
        match = await service.create_match(employer, world.id, candidate.id, "direct")

        assert len(dispatcher.requests) == 1
        request = dispatcher.requests[0]
        assert request.type is NotificationType.MATCH_CREATED
        assert request.recipient_id == candidate.id
        assert request.sender_id == employer.id
        assert request.data["match_id"] == str(match.id)

    @pytest.mark.asyncio
    async def test_duplicate_pair_conflicts(self, service, world, employer, candidate, dispatcher):
        await service.create_match(employer, world.id, candidate.id, "direct")
        with pytest.raises(DuplicateResourceException):
            await service.create_match(employer, world.id, candidate.id, "direct")
        assert len(dispatcher.requests) == 1

    @pytest.mark.asyncio
    async def test_unknown_job(self, service, world, employer, candidate):
        with pytest.raises(ResourceNotFoundException):
            await service.create_match(employer, uuid4(), candidate.id, "direct")

    @pytest.mark.asyncio
    async def test_unknown_candidate(self, service, world, employer):
        with pytest.raises(ResourceNotFoundException):
            await service.create_match(employer, world.id, uuid4(), "direct")

    @pytest.mark.asyncio
    async def test_only_job_owner_can_match(self, service, world, user_repo, candidate):
        other_employer = make_user(UserRole.EMPLOYER)
        await user_repo.create(other_employer)
        with pytest.raises(AuthorizationException):
            await service.create_match(other_employer, world.id, candidate.id, "direct")

    @pytest.mark.asyncio
    async def test_type_required(self, service, world, employer, candidate):
        with pytest.raises(ValidationException):
            await service.create_match(employer, world.id, candidate.id, "  ")

    @pytest.mark.asyncio
    async def test_expiry_in_past_rejected(self, service, world, employer, candidate):
        with pytest.raises(ValidationException):
            await service.create_match(
                employer, world.id, candidate.id, "direct",
                expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
            )

    @pytest.mark.asyncio
    async def test_dispatch_failure_does_not_fail_create(self, match_repo, job_repo, user_repo, world, employer, candidate):
        class ExplodingDispatcher:
            def dispatch(self, request):
                raise RuntimeError("broker down")

        service = MatchService(match_repo, job_repo, user_repo, TfidfSimilarityService(), ExplodingDispatcher())
        match = await service.create_match(employer, world.id, candidate.id, "direct")
        assert await match_repo.get_by_id(match.id) is not None


class TestLifecycle:
    @pytest.fixture
    async def match(self, service, world, employer, candidate, dispatcher):
        created = await service.create_match(employer, world.id, candidate.id, "direct")
        dispatcher.requests.clear()
        return created

    @pytest.mark.asyncio
    async def test_candidate_accepts_and_employer_is_notified(self, service, match, candidate, employer, dispatcher):
        accepted = await service.accept_match(candidate, match.id)

        assert accepted.status is MatchStatus.ACCEPTED
        assert accepted.expires_at is None
        assert [r.type for r in dispatcher.requests] == [NotificationType.MATCH_ACCEPTED]
        assert dispatcher.requests[0].recipient_id == employer.id

    @pytest.mark.asyncio
    async def test_employer_rejects_and_candidate_is_notified(self, service, match, candidate, employer, dispatcher):
        rejected = await service.reject_match(employer, match.id)

        assert rejected.status is MatchStatus.REJECTED
        assert dispatcher.requests[0].type is NotificationType.MATCH_REJECTED
        assert dispatcher.requests[0].recipient_id == candidate.id

    @pytest.mark.asyncio
    async def test_accept_twice_is_idempotent_without_second_notification(self, service, match, candidate, dispatcher):
        await service.accept_match(candidate, match.id)
        again = await service.accept_match(candidate, match.id)

        assert again.status is MatchStatus.ACCEPTED
        assert len(dispatcher.requests) == 1

    @pytest.mark.asyncio
    async def test_reject_after_accept_conflicts(self, service, match, candidate):
        await service.accept_match(candidate, match.id)
        with pytest.raises(InvalidStateTransitionException):
            await service.reject_match(candidate, match.id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["accept_match", "reject_match"])
    async def test_overdue_match_cannot_be_answered(self, service, match, candidate, match_repo, dispatcher, answer):
        overdue = replace(match, expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
        match_repo.matches[match.id] = overdue

        with pytest.raises(InvalidStateTransitionException) as exc:
            await getattr(service, answer)(candidate, match.id)

        assert exc.value.current == MatchStatus.EXPIRED.value
        assert match_repo.matches[match.id].status is MatchStatus.PENDING
        assert dispatcher.requests == []

    @pytest.mark.asyncio
    async def test_accept_loses_to_concurrent_reject(self, service, match, candidate, match_repo, dispatcher):
        # The other party's reject lands between our read and our write
        original_transition = match_repo.transition

        async def reject_first(match_id, target, now):
            match_repo.matches[match_id] = replace(
                match_repo.matches[match_id], status=MatchStatus.REJECTED, expires_at=None
            )
            return await original_transition(match_id, target, now)

        match_repo.transition = reject_first

        with pytest.raises(InvalidStateTransitionException) as exc:
            await service.accept_match(candidate, match.id)

        assert exc.value.current == MatchStatus.REJECTED.value
        assert match_repo.matches[match.id].status is MatchStatus.REJECTED
        assert dispatcher.requests == []

    @pytest.mark.asyncio
    async def test_concurrent_identical_answer_is_idempotent(self, service, match, candidate, match_repo, dispatcher):
        original_transition = match_repo.transition

        async def accept_first(match_id, target, now):
            await original_transition(match_id, target, now)
            return await original_transition(match_id, target, now)

        match_repo.transition = accept_first

        accepted = await service.accept_match(candidate, match.id)

        assert accepted.status is MatchStatus.ACCEPTED
        assert dispatcher.requests == []

    @pytest.mark.asyncio
    async def test_stranger_cannot_touch_match(self, service, match):
        stranger = make_user()
        for operation in (service.get_match, service.accept_match, service.reject_match,
                          service.mark_viewed, service.delete_match):
            with pytest.raises(AuthorizationException):
                await operation(stranger, match.id)

    @pytest.mark.asyncio
    async def test_missing_match(self, service, candidate):
        with pytest.raises(ResourceNotFoundException):
            await service.get_match(candidate, uuid4())

    @pytest.mark.asyncio
    async def test_mark_viewed_sets_callers_flag(self, service, match, candidate, employer):
        viewed = await service.mark_viewed(candidate, match.id)
        assert viewed.viewed_by_candidate and not viewed.viewed_by_employer

        viewed = await service.mark_viewed(employer, match.id)
        assert viewed.viewed_by_candidate and viewed.viewed_by_employer

    @pytest.mark.asyncio
    async def test_update_editable_fields(self, service, match, employer):
        updated = await service.update_match(employer, match.id, match_type="referral", message="Let's talk")
        assert updated.type == "referral"
        assert updated.message == "Let's talk"
        assert updated.status is MatchStatus.PENDING

    @pytest.mark.asyncio
    async def test_update_rejects_past_expiry(self, service, match, employer):
        with pytest.raises(ValidationException):
            await service.update_match(
                employer, match.id, expires_at=datetime.now(timezone.utc) - timedelta(hours=1)
            )

    @pytest.mark.asyncio
    async def test_delete(self, service, match, candidate, match_repo):
        await service.delete_match(candidate, match.id)
        assert await match_repo.get_by_id(match.id) is None


class TestListMatches:
    @pytest.mark.asyncio
    async def test_lists_only_callers_matches(self, service, job_repo, user_repo, employer, world):
        candidates = [make_user() for _ in range(3)]
        for c in candidates:
            await user_repo.create(c)
            await service.create_match(employer, world.id, c.id, "direct")

        other_employer = make_user(UserRole.EMPLOYER)
        other_job = make_job(other_employer)
        await user_repo.create(other_employer)
        await job_repo.create(other_job)
        await service.create_match(other_employer, other_job.id, candidates[0].id, "direct")

        employer_view, employer_total = await service.list_matches(employer)
        assert employer_total == 3
        assert all(m.employer_id == employer.id for m in employer_view)

        candidate_view, candidate_total = await service.list_matches(candidates[0])
        assert candidate_total == 2

    @pytest.mark.asyncio
    async def test_pagination_and_status_filter(self, service, user_repo, employer, world):
        for _ in range(5):
            c = make_user()
            await user_repo.create(c)
            await service.create_match(employer, world.id, c.id, "direct")

        page, total = await service.list_matches(employer, page=2, limit=2)
        assert total == 5
        assert len(page) == 2

        accepted, total_accepted = await service.list_matches(employer, status=MatchStatus.ACCEPTED)
        assert (accepted, total_accepted) == ([], 0)

    @pytest.mark.asyncio
    async def test_sort_by_score(self, service, user_repo, employer, world):
        for cv in ("python django postgresql", "gardening", "python"):
            c = make_user(cv_text=cv)
            await user_repo.create(c)
            await service.create_match(employer, world.id, c.id, "direct")

        matches, _ = await service.list_matches(employer, sort=MatchSort.SCORE)
        scores = [m.score.value for m in matches]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_limit_bounds(self, service, employer):
        with pytest.raises(ValidationException):
            await service.list_matches(employer, limit=51)
        with pytest.raises(ValidationException):
            await service.list_matches(employer, page=0)


class TestExpireDueMatches:
    @pytest.mark.asyncio
    async def test_expires_overdue_pending_matches_once(self, service, world, employer, candidate, dispatcher):
        match = await service.create_match(employer, world.id, candidate.id, "direct")
        dispatcher.requests.clear()
        later = match.expires_at + timedelta(seconds=1)

        expired = await service.expire_due_matches(later)
        assert [m.id for m in expired] == [match.id]
        assert expired[0].status is MatchStatus.EXPIRED
        recipients = {r.recipient_id for r in dispatcher.requests}
        assert recipients == {employer.id, candidate.id}
        assert all(r.type is NotificationType.MATCH_EXPIRED for r in dispatcher.requests)

        assert await service.expire_due_matches(later) == []
        assert len(dispatcher.requests) == 2

    @pytest.mark.asyncio
    async def test_answered_matches_never_expire(self, service, world, employer, candidate):
        match = await service.create_match(employer, world.id, candidate.id, "direct")
        await service.accept_match(candidate, match.id)
        assert await service.expire_due_matches(datetime.now(timezone.utc) + timedelta(days=365)) == []
