"""
Error taxonomy for competency requirements and competency sets.

Validation failures subclass django's ValidationError so the views' existing
`except ValidationError` handling reports them as 400s with a message_dict.
Missing records subclass ObjectDoesNotExist. ConflictStale and
PartialApplyError are not validation problems and derive from
CompetencySetError.
"""
from django.core.exceptions import ObjectDoesNotExist, ValidationError


class CompetencySetError(Exception):
    """Base class for non-validation competency set errors."""


class NotFound(ObjectDoesNotExist):
    """A set, item, position, competency, requirement or assignment is missing."""

    status_code = 404

    def __init__(self, entity, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")


class DuplicateItem(ValidationError):
    """The same competency appears more than once in a set."""

    def __init__(self, competency_ids, field='items'):
        self.competency_ids = sorted(set(competency_ids))
        ids = ', '.join(str(pk) for pk in self.competency_ids)
        super().__init__({field: f"Competency {ids} appears more than once in the set"})


class InvalidLevel(ValidationError):
    """A required level falls outside the configured scale."""

    def __init__(self, level, low, high, field='required_level'):
        self.level = level
        self.low = low
        self.high = high
        super().__init__({field: f"Required level {level!r} must be an integer between {low} and {high}"})


class PreconditionFailed(ValidationError):
    """A mutating call was made without an acting user."""

    status_code = 412

    def __init__(self, message='An acting user is required for this operation'):
        super().__init__({'acting_user': message})


class ConflictStale(CompetencySetError):
    """The stored row changed since the caller last read it."""

    status_code = 409

    def __init__(self, entity, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} was modified by someone else; reload and retry")


class PartialApplyError(CompetencySetError):
    """
    Some per-item writes of an apply or sync failed.

    `result` is the MergeResult (apply) or SyncResult (sync) describing what
    succeeded and what failed. Already-applied items are not rolled back;
    callers re-invoke for the failed subset. `retryable` is set when the
    failures came from a timeout or cancellation rather than bad data.
    """

    status_code = 207

    def __init__(self, result, retryable=False):
        self.result = result
        self.retryable = retryable
        failed = result.failed_count
        succeeded = result.succeeded_count
        super().__init__(f"Partially applied: {failed} failed, {succeeded} succeeded")


def ensure_acting_user(user):
    """
    Return `user` if it identifies an authenticated caller.

    Raises:
        PreconditionFailed: user is missing or anonymous
    """
    if user is None or not getattr(user, 'is_authenticated', False) or user.pk is None:
        raise PreconditionFailed()
    return user
