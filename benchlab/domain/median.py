from .contracts.results import TOTAL_SCORE, ScoreRecord, SelectionResult
from .errors import EmptyBatchError


def median_index(count: int) -> int:
    """Index of the middle element in a sorted batch of ``count`` rounds.

    Rounds half up: ``round_half_up((count - 1) / 2)`` which is ``count // 2``.
    For even counts this picks the upper of the two middle elements.
    """
    if count < 1:
        raise EmptyBatchError("Cannot select a median from an empty batch")
    return count // 2


def select_median(
    batch: list[ScoreRecord], field: str = TOTAL_SCORE
) -> SelectionResult:
    if not batch:
        raise EmptyBatchError("Cannot select a median from an empty batch")

    # Parse every value before ordering so bad records fail the whole batch.
    values = [record.value(field) for record in batch]

    ordered = sorted((value, index) for index, value in enumerate(values))
    median_value, _ = ordered[median_index(len(ordered))]

    # Equal values resolve to the earliest round.
    selected_round = values.index(median_value)

    return SelectionResult(
        middle_score=batch[selected_round],
        selected_round=selected_round,
        detailed_scores=list(batch),
    )
