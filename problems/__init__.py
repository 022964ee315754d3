"""
problems/
---------
Problem instances and the validator that builds them from raw input.

    from problems import validate_graph, validate_word_ladder, validate_tour
"""

from problems.instances import City, InstanceKind, TourInstance, WordLadderInstance
from problems.validator import (
    instance_to_dict,
    validate_graph,
    validate_instance,
    validate_start,
    validate_tour,
    validate_word_ladder,
)

__all__ = [
    "City",
    "InstanceKind",
    "TourInstance",
    "WordLadderInstance",
    "instance_to_dict",
    "validate_graph",
    "validate_instance",
    "validate_start",
    "validate_tour",
    "validate_word_ladder",
]
