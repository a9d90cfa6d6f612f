from typing import Iterable, List, Optional

from eduresults.core.grades import is_positive, slot_value, subject_final_score
from eduresults.domain.entities import (
    AssessmentType,
    GradeConfiguration,
    StudentRosterEntry,
    SubjectAssessment,
)


def is_valid_subject(subject: SubjectAssessment) -> bool:
    """A subject counts towards the overall average once any slot holds a positive score."""
    return any(is_positive(slot) for slot in subject.slots)


def qualifies(subject: SubjectAssessment, assessment_type: AssessmentType) -> bool:
    if assessment_type == AssessmentType.OVERALL:
        return is_valid_subject(subject)
    return is_positive(subject.slot(assessment_type))


def valid_subjects(subjects: Iterable[SubjectAssessment]) -> List[SubjectAssessment]:
    return [subject for subject in subjects if is_valid_subject(subject)]


def scored_subject_count(subjects: Iterable[SubjectAssessment], assessment_type: AssessmentType) -> int:
    return sum(1 for subject in subjects if qualifies(subject, assessment_type))


def student_overall_average(
    subjects: Iterable[SubjectAssessment],
    config: Optional[GradeConfiguration],
) -> float:
    """
    Mean of subject final scores over valid subjects only.
    Returns 0 when no subject is valid; callers tell "no data" apart
    from a real zero through the valid-subject count.
    """
    counted = valid_subjects(subjects)
    if not counted:
        return 0.0
    return sum(subject_final_score(subject, config) for subject in counted) / len(counted)


def student_assessment_average(
    subjects: Iterable[SubjectAssessment],
    assessment_type: AssessmentType,
) -> float:
    """
    Mean of one raw slot (QA1, QA2 or end of term) over subjects where it is positive.
    """
    scores = [
        slot_value(subject.slot(assessment_type))
        for subject in subjects
        if is_positive(subject.slot(assessment_type))
    ]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def student_average(
    student: StudentRosterEntry,
    assessment_type: AssessmentType,
    config: Optional[GradeConfiguration],
) -> float:
    if assessment_type == AssessmentType.OVERALL:
        return student_overall_average(student.subjects, config)
    return student_assessment_average(student.subjects, assessment_type)


def total_marks(
    student: StudentRosterEntry,
    assessment_type: AssessmentType,
    config: Optional[GradeConfiguration],
) -> float:
    """
    Overall: overall average times the valid-subject count (a derived total, not a raw sum).
    Single assessment: sum of the positive scores in that slot.
    """
    if assessment_type == AssessmentType.OVERALL:
        count = len(valid_subjects(student.subjects))
        return student_overall_average(student.subjects, config) * count
    return float(
        sum(
            slot_value(subject.slot(assessment_type))
            for subject in student.subjects
            if is_positive(subject.slot(assessment_type))
        )
    )
