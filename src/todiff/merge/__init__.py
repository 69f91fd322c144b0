"""Three-way merge of task lists."""

from todiff.merge.three_way import (
    extract_merge_result,
    merge_3way,
    merge_successful,
    merge_to_string,
)

__all__ = [
    "merge_3way",
    "merge_to_string",
    "merge_successful",
    "extract_merge_result",
]
