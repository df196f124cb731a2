from .requirement_views import (
    position_requirement_list,
    position_requirement_detail
)
