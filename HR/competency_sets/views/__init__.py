from .set_views import (
    competency_set_list,
    competency_set_copy_from_position,
    competency_set_detail,
    competency_set_items,
    competency_set_item_detail,
    competency_set_item_move
)
from .assignment_views import (
    competency_set_apply,
    competency_set_assignments,
    competency_set_assignment_detail,
    competency_set_available_positions,
    competency_set_changes,
    competency_set_sync,
    position_applicable_sets
)
