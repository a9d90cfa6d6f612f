import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from eduresults.config.settings import settings
from eduresults.core.averages import qualifies, scored_subject_count, student_average, total_marks
from eduresults.core.grades import grade_for, has_outcome, resolve_pass_mark, status_for, subject_final_score
from eduresults.core.ranking import RankInput, rank
from eduresults.domain.entities import (
    AssessmentType,
    CellState,
    DerivedStudentRow,
    GradeConfiguration,
    Letter,
    MarkedAbsent,
    ResultCell,
    ResultSet,
    ResultSummary,
    Scored,
    StudentRosterEntry,
    SubjectAssessment,
    SubjectColumn,
)

logger = logging.getLogger(__name__)


def _format_score(score: float) -> str:
    return f"{score:.{settings.score_decimals}f}"


def _missing_cell(subject_id: str) -> ResultCell:
    return ResultCell(
        subject_id=subject_id,
        state=CellState.NOT_ENTERED,
        score=None,
        grade=None,
        display=settings.missing_marker,
    )


def _absent_cell(subject_id: str) -> ResultCell:
    return ResultCell(
        subject_id=subject_id,
        state=CellState.ABSENT,
        score=None,
        grade=None,
        display=settings.absent_marker,
    )


def _scored_cell(subject_id: str, score: float, pass_mark: int) -> ResultCell:
    return ResultCell(
        subject_id=subject_id,
        state=CellState.SCORED,
        score=score,
        grade=grade_for(score, pass_mark),
        display=_format_score(score),
    )


def build_cell(
    subject: Optional[SubjectAssessment],
    subject_id: str,
    assessment_type: AssessmentType,
    config: Optional[GradeConfiguration],
) -> ResultCell:
    """
    One table cell. Absent and not-yet-entered slots get their own markers
    so they never read as a score of 0.
    """
    if subject is None:
        return _missing_cell(subject_id)

    pass_mark = resolve_pass_mark(config)
    if assessment_type == AssessmentType.OVERALL:
        if any(isinstance(slot, Scored) for slot in subject.slots):
            return _scored_cell(subject_id, subject_final_score(subject, config), pass_mark)
        if any(has_outcome(slot) for slot in subject.slots):
            return _absent_cell(subject_id)
        return _missing_cell(subject_id)

    slot = subject.slot(assessment_type)
    if isinstance(slot, Scored):
        return _scored_cell(subject_id, slot.value, pass_mark)
    if isinstance(slot, MarkedAbsent):
        return _absent_cell(subject_id)
    return _missing_cell(subject_id)


def visible_columns(
    roster: Sequence[StudentRosterEntry],
    assessment_type: AssessmentType,
) -> List[SubjectColumn]:
    """Subjects, in first-seen order, that hold a qualifying score for at least one student."""
    names: Dict[str, str] = {}
    shown = set()
    for student in roster:
        for subject in student.subjects:
            names.setdefault(subject.subject_id, subject.subject_name)
            if qualifies(subject, assessment_type):
                shown.add(subject.subject_id)
    return [SubjectColumn(subject_id=sid, subject_name=name) for sid, name in names.items() if sid in shown]


def _subjects_by_id(student: StudentRosterEntry) -> Dict[str, SubjectAssessment]:
    by_id: Dict[str, SubjectAssessment] = {}
    for subject in student.subjects:
        by_id.setdefault(subject.subject_id, subject)
    return by_id


def _summarize(
    roster: Sequence[StudentRosterEntry],
    rows: Sequence[DerivedStudentRow],
) -> ResultSummary:
    total_students = len(roster)
    with_scores = 0
    average_sum = 0.0
    passed = 0
    top_name = settings.no_performer_label
    top_score: Optional[float] = None

    for row in rows:
        if row.grade is not Letter.F:
            passed += 1
        if row.scored_subject_count == 0:
            continue
        with_scores += 1
        average_sum += row.average
        if top_score is None or row.average > top_score:
            top_score = row.average
            top_name = row.name

    return ResultSummary(
        total_students=total_students,
        students_with_scores=with_scores,
        students_with_scores_ratio=f"{with_scores}/{total_students}",
        class_average=average_sum / with_scores if with_scores else 0.0,
        pass_rate=(passed / total_students) * 100 if total_students else 0.0,
        passed_count=passed,
        failed_count=total_students - passed,
        top_performer_name=top_name,
        top_performer_score=top_score if top_score is not None else 0.0,
    )


def build_student_row(
    student: StudentRosterEntry,
    columns: Sequence[SubjectColumn],
    assessment_type: AssessmentType,
    config: Optional[GradeConfiguration],
) -> DerivedStudentRow:
    """Derived values for one student; rank is filled in once the whole class is known."""
    by_id = _subjects_by_id(student)
    average = student_average(student, assessment_type, config)
    scored = scored_subject_count(student.subjects, assessment_type)
    # No qualifying score fails regardless of the pass mark.
    grade = grade_for(average, resolve_pass_mark(config)) if scored else Letter.F
    return DerivedStudentRow(
        student_id=student.student_id,
        name=student.name,
        exam_number=student.exam_number,
        total_marks=total_marks(student, assessment_type, config),
        average=average,
        grade=grade,
        status=status_for(grade),
        rank=0,
        scored_subject_count=scored,
        cells=tuple(
            build_cell(by_id.get(column.subject_id), column.subject_id, assessment_type, config)
            for column in columns
        ),
    )


def build_result_set(
    roster: Sequence[StudentRosterEntry],
    assessment_type: AssessmentType,
    config: Optional[GradeConfiguration],
) -> ResultSet:
    assessment_type = AssessmentType(assessment_type)
    roster = list(roster)
    columns = visible_columns(roster, assessment_type)

    unranked = [build_student_row(student, columns, assessment_type, config) for student in roster]

    # Ranking and the summary need every row; ids are roster positions.
    ranked = rank(RankInput(id=index, ordering_key=row.total_marks) for index, row in enumerate(unranked))
    rows = tuple(replace(unranked[entry.id], rank=entry.rank) for entry in ranked)
    summary = _summarize(roster, unranked)

    logger.debug(
        f"Built {assessment_type.value} results: {len(rows)} students, "
        f"{len(columns)} subject columns, pass rate {summary.pass_rate:.1f}%"
    )

    return ResultSet(
        assessment_type=assessment_type,
        configuration_name=config.configuration_name if config else "",
        rows=rows,
        columns=tuple(columns),
        summary=summary,
    )
