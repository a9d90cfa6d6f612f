from typing import List, Optional, Sequence

from eduresults.core.grades import derive_subject_scores
from eduresults.core.results import build_result_set
from eduresults.domain.entities import (
    AssessmentStanding,
    AssessmentType,
    GradeConfiguration,
    StudentReportCard,
    StudentRosterEntry,
)


REPORT_VIEWS = (
    AssessmentType.QA1,
    AssessmentType.QA2,
    AssessmentType.END_OF_TERM,
    AssessmentType.OVERALL,
)


def build_report_card(
    roster: Sequence[StudentRosterEntry],
    student_id: str,
    config: Optional[GradeConfiguration],
) -> Optional[StudentReportCard]:
    """
    Class standing of one student in every assessment view, plus subject final scores.

    Each view is ranked against the same roster snapshot, so the ranks match
    what the class results table shows for that view. Returns None when the
    student is not on the roster.
    """
    roster = list(roster)
    student = next((entry for entry in roster if entry.student_id == student_id), None)
    if student is None:
        return None

    standings: List[AssessmentStanding] = []
    for assessment_type in REPORT_VIEWS:
        result_set = build_result_set(roster, assessment_type, config)
        row = next(row for row in result_set.rows if row.student_id == student_id)
        standings.append(
            AssessmentStanding(
                assessment_type=assessment_type,
                class_rank=row.rank,
                average=row.average,
                grade=row.grade,
                status=row.status,
                total_students=result_set.summary.total_students,
            )
        )

    return StudentReportCard(
        student_id=student.student_id,
        name=student.name,
        exam_number=student.exam_number,
        class_id=student.class_id,
        subjects=tuple(derive_subject_scores(student, config)),
        standings=tuple(standings),
    )
