import logging
from collections import Counter
from typing import Dict, List, Sequence

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.db.models import QuerySet

from HR.competency_config import validate_required_level
from HR.competency_sets.dtos import (
    CompetencySetCreateDTO,
    CompetencySetUpdateDTO,
    CompetencySetItemDTO,
    CompetencySetItemUpdateDTO,
    CopyFromPositionDTO,
)
from HR.competency_sets.models import CompetencySet, CompetencySetItem, VisibilityChoices
from HR.exceptions import NotFound, DuplicateItem, ConflictStale, ensure_acting_user
from HR.person.models import Competency
from HR.person.services.position_requirement_service import PositionRequirementService

logger = logging.getLogger(__name__)

MOVE_UP = 'up'
MOVE_DOWN = 'down'

VISIBILITY_FILTERS = ('public', 'private', 'all')


def reorder_items(items: Sequence, index: int, direction: str) -> list:
    """
    Swap items[index] with its neighbour in `direction` and return a new list.

    Moving the first item up or the last item down returns the list unchanged.
    """
    items = list(items)
    if direction not in (MOVE_UP, MOVE_DOWN):
        raise ValidationError({'direction': f"Direction must be '{MOVE_UP}' or '{MOVE_DOWN}'"})
    if index < 0 or index >= len(items):
        raise ValidationError({'index': f'Index {index} is out of range'})

    target = index - 1 if direction == MOVE_UP else index + 1
    if target < 0 or target >= len(items):
        return items

    items[index], items[target] = items[target], items[index]
    return items


class CompetencySetService:
    """Service for CompetencySet catalog business logic"""

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @staticmethod
    def get_set(user, set_id) -> CompetencySet:
        """
        Active set visible to `user`, with its item count annotated and items
        prefetched.

        Raises:
            NotFound: set missing, inactive or private to someone else
        """
        try:
            return (
                CompetencySet.objects.active()
                .visible_to(user)
                .with_item_count()
                .select_related('owner')
                .prefetch_related('items__competency')
                .get(pk=set_id)
            )
        except CompetencySet.DoesNotExist:
            raise NotFound('Competency set', set_id)

    @staticmethod
    def get_editable_set(user, set_id) -> CompetencySet:
        competency_set = CompetencySetService.get_set(user, set_id)
        if not competency_set.can_edit(user):
            raise PermissionDenied(f"Only the owner or an admin can change competency set '{competency_set.name}'")
        return competency_set

    @staticmethod
    def list_sets(user, visibility: str = 'all', search: str = None) -> QuerySet:
        """
        Active sets visible to the user, ordered by name.

        Args:
            visibility: 'public' (public sets), 'private' (the user's own
                private sets) or 'all' (both)
            search: optional substring matched against name and description
        """
        visibility = visibility or 'all'
        if visibility not in VISIBILITY_FILTERS:
            raise ValidationError({'visibility': f"Visibility filter must be one of {', '.join(VISIBILITY_FILTERS)}"})

        queryset = CompetencySet.objects.active().visible_to(user)
        if visibility == 'public':
            queryset = queryset.filter(visibility=VisibilityChoices.PUBLIC)
        elif visibility == 'private':
            queryset = queryset.filter(visibility=VisibilityChoices.PRIVATE, owner=user)

        if search:
            queryset = queryset.filter_by_search_params({'search': search})

        return queryset.select_related('owner').with_item_count().order_by('name')

    @staticmethod
    def get_items(user, set_id) -> QuerySet:
        competency_set = CompetencySetService.get_set(user, set_id)
        return competency_set.items.select_related('competency').order_by('display_order', 'id')

    # ------------------------------------------------------------------
    # Set lifecycle
    # ------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def create(user, dto: CompetencySetCreateDTO) -> CompetencySet:
        """
        Create a competency set with its items.

        Validates:
        - Acting user is present
        - Name is not empty, visibility is public/private
        - Levels are on the configured scale
        - No competency appears twice
        - All competencies exist and are active

        Items get display_order 1..n in the order given.
        """
        ensure_acting_user(user)
        _validate_visibility(dto.visibility)
        _validate_name(dto.name)
        _validate_items(dto.items)

        competency_set = CompetencySet(
            name=dto.name.strip(),
            description=dto.description or '',
            visibility=dto.visibility,
            owner=user,
        )
        competency_set.stamp(user)
        competency_set.full_clean()
        competency_set.save()

        CompetencySetItem.objects.bulk_create([
            CompetencySetItem(
                competency_set=competency_set,
                competency_id=item.competency_id,
                required_level=item.required_level,
                is_mandatory=item.is_mandatory,
                display_order=order,
            )
            for order, item in enumerate(dto.items, start=1)
        ])

        logger.info(
            "User %s created competency set %s (%s) with %d item(s)",
            user.pk, competency_set.pk, competency_set.name, len(dto.items)
        )
        return competency_set

    @staticmethod
    @transaction.atomic
    def update(user, dto: CompetencySetUpdateDTO) -> CompetencySet:
        """
        Update metadata and, when dto.items is given, reconcile the item list.

        Reconciliation is keyed by competency id: new competencies are
        inserted, missing ones deleted, the rest updated in place with the
        level, mandatory flag and display order taken from the new list.
        """
        ensure_acting_user(user)
        competency_set = CompetencySetService.get_editable_set(user, dto.set_id)

        if dto.expected_updated_at is not None and competency_set.updated_at != dto.expected_updated_at:
            raise ConflictStale('Competency set', competency_set.pk)

        field_updates = {}
        if dto.name is not None:
            _validate_name(dto.name)
            field_updates['name'] = dto.name.strip()
        if dto.description is not None:
            field_updates['description'] = dto.description
        if dto.visibility is not None:
            _validate_visibility(dto.visibility)
            field_updates['visibility'] = dto.visibility
        if dto.items is not None:
            _validate_items(dto.items, stored_ids=competency_set.items.values_list('competency_id', flat=True))

        competency_set.stamp(user).update_fields(field_updates)

        if dto.items is not None:
            inserted, updated, deleted = _reconcile_items(competency_set, dto.items)
            logger.info(
                "User %s updated competency set %s: %d inserted, %d updated, %d deleted",
                user.pk, competency_set.pk, inserted, updated, deleted
            )

        return CompetencySetService.get_set(user, competency_set.pk)

    @staticmethod
    @transaction.atomic
    def delete(user, set_id) -> bool:
        """
        Delete a set.

        Sets referenced by assignments are deactivated (soft delete) so the
        assignment history survives; unreferenced sets are removed together
        with their items.

        Returns:
            True if the set was physically deleted, False if deactivated
        """
        ensure_acting_user(user)
        competency_set = CompetencySetService.get_editable_set(user, set_id)

        if competency_set.assignments.exists():
            competency_set.stamp(user)
            competency_set.save(update_fields=['updated_by', 'updated_at'])
            competency_set.deactivate()
            logger.info("User %s deactivated competency set %s", user.pk, competency_set.pk)
            return False

        competency_set.hard_delete()
        logger.info("User %s deleted competency set %s", user.pk, set_id)
        return True

    @staticmethod
    def copy_from_position(user, dto: CopyFromPositionDTO) -> CompetencySet:
        """Create a new set from a position's current requirements."""
        ensure_acting_user(user)
        requirements = list(PositionRequirementService.get_requirements(dto.position_id))
        if not requirements:
            raise ValidationError({'position_id': 'No competencies found for the specified position'})

        return CompetencySetService.create(user, CompetencySetCreateDTO(
            name=dto.name,
            description=dto.description,
            visibility=dto.visibility,
            items=[
                CompetencySetItemDTO(
                    competency_id=requirement.competency_id,
                    required_level=requirement.required_level,
                    is_mandatory=requirement.is_mandatory,
                )
                for requirement in requirements
            ],
        ))

    # ------------------------------------------------------------------
    # Item operations
    # ------------------------------------------------------------------

    @staticmethod
    @transaction.atomic
    def add_item(user, set_id, dto: CompetencySetItemDTO) -> CompetencySetItem:
        """Append a competency to the end of the set."""
        ensure_acting_user(user)
        competency_set = CompetencySetService.get_editable_set(user, set_id)
        validate_required_level(dto.required_level)
        competency = PositionRequirementService.get_competency(dto.competency_id)

        if competency_set.items.filter(competency=competency).exists():
            raise DuplicateItem([competency.pk], field='competency_id')

        item = CompetencySetItem.objects.create(
            competency_set=competency_set,
            competency=competency,
            required_level=dto.required_level,
            is_mandatory=dto.is_mandatory,
            display_order=competency_set.items.count() + 1,
        )
        _touch(competency_set, user)
        return item

    @staticmethod
    @transaction.atomic
    def update_item(user, set_id, item_id, dto: CompetencySetItemUpdateDTO) -> CompetencySetItem:
        ensure_acting_user(user)
        competency_set = CompetencySetService.get_editable_set(user, set_id)
        item = _get_item(competency_set, item_id)

        update_fields = ['updated_at']
        if dto.required_level is not None:
            validate_required_level(dto.required_level)
            item.required_level = dto.required_level
            update_fields.append('required_level')
        if dto.is_mandatory is not None:
            item.is_mandatory = dto.is_mandatory
            update_fields.append('is_mandatory')

        item.save(update_fields=update_fields)
        _touch(competency_set, user)
        return item

    @staticmethod
    @transaction.atomic
    def remove_item(user, set_id, item_id) -> None:
        ensure_acting_user(user)
        competency_set = CompetencySetService.get_editable_set(user, set_id)
        item = _get_item(competency_set, item_id)
        item.delete()
        _renumber(competency_set.items.order_by('display_order', 'id'))
        _touch(competency_set, user)

    @staticmethod
    @transaction.atomic
    def move_item(user, set_id, item_id, direction: str) -> List[CompetencySetItem]:
        """
        Move an item one place up or down and renumber the set densely.

        Returns:
            The set's items in their new order
        """
        ensure_acting_user(user)
        competency_set = CompetencySetService.get_editable_set(user, set_id)
        items = list(competency_set.items.select_related('competency').order_by('display_order', 'id'))

        index = next((i for i, item in enumerate(items) if item.pk == int(item_id)), None)
        if index is None:
            raise NotFound('Competency set item', item_id)

        reordered = reorder_items(items, index, direction)
        if _renumber(reordered):
            _touch(competency_set, user)
        return reordered


def _validate_name(name):
    if not name or not name.strip():
        raise ValidationError({'name': 'Competency set name cannot be empty'})


def _validate_visibility(visibility):
    if visibility not in VisibilityChoices.values:
        raise ValidationError({'visibility': f"Visibility must be one of {', '.join(VisibilityChoices.values)}"})


def _validate_items(items: Sequence[CompetencySetItemDTO], stored_ids=()) -> Dict[int, Competency]:
    """
    Run every item check before anything is written.

    Competencies in `stored_ids` are already on the set and may have been
    deactivated since; only newly added competencies must be active.
    """
    for item in items:
        validate_required_level(item.required_level, field='items')

    counts = Counter(item.competency_id for item in items)
    duplicates = [competency_id for competency_id, count in counts.items() if count > 1]
    if duplicates:
        raise DuplicateItem(duplicates)

    stored_ids = set(stored_ids)
    new_ids = [competency_id for competency_id in counts if competency_id not in stored_ids]
    competencies = Competency.objects.active().in_bulk(new_ids)
    for competency_id in new_ids:
        if competency_id not in competencies:
            raise NotFound('Competency', competency_id)
    return competencies


def _reconcile_items(competency_set, items: Sequence[CompetencySetItemDTO]):
    stored = {item.competency_id: item for item in competency_set.items.all()}
    incoming = {item.competency_id for item in items}

    stale = [item.pk for competency_id, item in stored.items() if competency_id not in incoming]
    if stale:
        CompetencySetItem.objects.filter(pk__in=stale).delete()

    inserted = updated = 0
    for order, entry in enumerate(items, start=1):
        existing = stored.get(entry.competency_id)
        if existing is None:
            CompetencySetItem.objects.create(
                competency_set=competency_set,
                competency_id=entry.competency_id,
                required_level=entry.required_level,
                is_mandatory=entry.is_mandatory,
                display_order=order,
            )
            inserted += 1
            continue

        if (existing.required_level, existing.is_mandatory, existing.display_order) != \
                (entry.required_level, entry.is_mandatory, order):
            existing.required_level = entry.required_level
            existing.is_mandatory = entry.is_mandatory
            existing.display_order = order
            existing.save(update_fields=['required_level', 'is_mandatory', 'display_order', 'updated_at'])
            updated += 1

    return inserted, updated, len(stale)


def _renumber(items) -> bool:
    changed = False
    for order, item in enumerate(items, start=1):
        if item.display_order != order:
            item.display_order = order
            item.save(update_fields=['display_order', 'updated_at'])
            changed = True
    return changed


def _get_item(competency_set, item_id) -> CompetencySetItem:
    try:
        return competency_set.items.select_related('competency').get(pk=item_id)
    except CompetencySetItem.DoesNotExist:
        raise NotFound('Competency set item', item_id)


def _touch(competency_set, user):
    competency_set.stamp(user)
    competency_set.save(update_fields=['updated_by', 'updated_at'])
