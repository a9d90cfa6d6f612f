from typing import Callable, Dict, List, Optional, Tuple

from eduresults.config.settings import settings
from eduresults.domain.entities import (
    CalculationMethod,
    DerivedSubjectScore,
    GradeConfiguration,
    Letter,
    MarkedAbsent,
    ScoreSlot,
    Scored,
    Status,
    StudentRosterEntry,
    SubjectAssessment,
)


# Fixed tiers above the configurable pass mark, highest first.
LETTER_TIERS: Tuple[Tuple[float, Letter], ...] = (
    (80, Letter.A),
    (70, Letter.B),
    (60, Letter.C),
)


def resolve_pass_mark(config: Optional[GradeConfiguration]) -> int:
    if config is None or config.pass_mark is None:
        return settings.default_pass_mark
    return config.pass_mark


def grade_for(score: float, pass_mark: Optional[float] = None) -> Letter:
    if pass_mark is None:
        pass_mark = settings.default_pass_mark
    for lower_bound, letter in LETTER_TIERS:
        if score >= lower_bound:
            return letter
    if score >= pass_mark:
        return Letter.D
    return Letter.F


def status_for(letter: Letter) -> Status:
    return Status.FAILED if letter is Letter.F else Status.PASSED


def slot_value(slot: ScoreSlot) -> float:
    return slot.value if isinstance(slot, Scored) else 0.0


def is_positive(slot: ScoreSlot) -> bool:
    return isinstance(slot, Scored) and slot.value > 0


def has_outcome(slot: ScoreSlot) -> bool:
    return isinstance(slot, (Scored, MarkedAbsent))


def _average_all(subject: SubjectAssessment, config: Optional[GradeConfiguration]) -> float:
    return sum(slot_value(slot) for slot in subject.slots) / 3


def _end_of_term_only(subject: SubjectAssessment, config: Optional[GradeConfiguration]) -> float:
    return slot_value(subject.end_of_term)


def _weighted_average(subject: SubjectAssessment, config: Optional[GradeConfiguration]) -> float:
    weights = (
        (config.weight_qa1 or 0) if config else 0,
        (config.weight_qa2 or 0) if config else 0,
        (config.weight_end_of_term or 0) if config else 0,
    )
    return sum(slot_value(slot) * weight / 100 for slot, weight in zip(subject.slots, weights))


POLICIES: Dict[CalculationMethod, Callable[[SubjectAssessment, Optional[GradeConfiguration]], float]] = {
    CalculationMethod.AVERAGE_ALL: _average_all,
    CalculationMethod.WEIGHTED_AVERAGE: _weighted_average,
    CalculationMethod.END_OF_TERM_ONLY: _end_of_term_only,
}


def subject_final_score(subject: SubjectAssessment, config: Optional[GradeConfiguration]) -> float:
    if config is None:
        return _average_all(subject, None)
    method = CalculationMethod.from_value(config.calculation_method)
    return POLICIES[method](subject, config)


def derive_subject_scores(
    student: StudentRosterEntry,
    config: Optional[GradeConfiguration],
) -> List[DerivedSubjectScore]:
    pass_mark = resolve_pass_mark(config)
    derived = []
    for subject in student.subjects:
        score = subject_final_score(subject, config)
        derived.append(
            DerivedSubjectScore(
                subject_id=subject.subject_id,
                subject_name=subject.subject_name,
                final_score=score,
                grade=grade_for(score, pass_mark),
            )
        )
    return derived
