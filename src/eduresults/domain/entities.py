from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class CalculationMethod(str, Enum):
    AVERAGE_ALL = "average_all"
    WEIGHTED_AVERAGE = "weighted_average"
    END_OF_TERM_ONLY = "end_of_term_only"

    @classmethod
    def from_value(cls, value: object) -> "CalculationMethod":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value == text:
                return member
        # Unknown methods score like a plain average of all tests.
        return cls.AVERAGE_ALL


class AssessmentType(str, Enum):
    QA1 = "qa1"
    QA2 = "qa2"
    END_OF_TERM = "end_of_term"
    OVERALL = "overall"


class Letter(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


class Status(str, Enum):
    PASSED = "Passed"
    FAILED = "Failed"


class CellState(str, Enum):
    SCORED = "scored"
    ABSENT = "absent"
    NOT_ENTERED = "not_entered"


@dataclass(frozen=True)
class Scored:
    value: float


@dataclass(frozen=True)
class NotEntered:
    pass


@dataclass(frozen=True)
class MarkedAbsent:
    pass


ScoreSlot = Union[Scored, NotEntered, MarkedAbsent]

NOT_ENTERED = NotEntered()
MARKED_ABSENT = MarkedAbsent()


@dataclass(frozen=True)
class GradeConfiguration:
    calculation_method: CalculationMethod = CalculationMethod.AVERAGE_ALL
    weight_qa1: Optional[float] = None
    weight_qa2: Optional[float] = None
    weight_end_of_term: Optional[float] = None
    pass_mark: Optional[int] = None
    configuration_name: str = ""


DEFAULT_GRADE_CONFIGURATION = GradeConfiguration(
    calculation_method=CalculationMethod.WEIGHTED_AVERAGE,
    weight_qa1=30,
    weight_qa2=30,
    weight_end_of_term=40,
    pass_mark=50,
    configuration_name="Default Weighting (30-30-40)",
)


@dataclass(frozen=True)
class SubjectAssessment:
    subject_id: str
    subject_name: str
    qa1: ScoreSlot = NOT_ENTERED
    qa2: ScoreSlot = NOT_ENTERED
    end_of_term: ScoreSlot = NOT_ENTERED

    def slot(self, assessment_type: AssessmentType) -> ScoreSlot:
        if assessment_type == AssessmentType.QA1:
            return self.qa1
        if assessment_type == AssessmentType.QA2:
            return self.qa2
        if assessment_type == AssessmentType.END_OF_TERM:
            return self.end_of_term
        raise ValueError(f"{assessment_type} does not name a single score slot")

    @property
    def slots(self) -> Tuple[ScoreSlot, ScoreSlot, ScoreSlot]:
        return self.qa1, self.qa2, self.end_of_term


@dataclass(frozen=True)
class StudentRosterEntry:
    student_id: str
    name: str
    exam_number: str = ""
    class_id: str = ""
    subjects: Tuple[SubjectAssessment, ...] = ()


@dataclass(frozen=True)
class DerivedSubjectScore:
    subject_id: str
    subject_name: str
    final_score: float
    grade: Letter


@dataclass(frozen=True)
class SubjectColumn:
    subject_id: str
    subject_name: str


@dataclass(frozen=True)
class ResultCell:
    subject_id: str
    state: CellState
    score: Optional[float]
    grade: Optional[Letter]
    display: str


@dataclass(frozen=True)
class DerivedStudentRow:
    student_id: str
    name: str
    exam_number: str
    total_marks: float
    average: float
    grade: Letter
    status: Status
    rank: int
    scored_subject_count: int
    cells: Tuple[ResultCell, ...] = ()


@dataclass(frozen=True)
class ResultSummary:
    total_students: int
    students_with_scores: int
    students_with_scores_ratio: str
    class_average: float
    pass_rate: float
    passed_count: int
    failed_count: int
    top_performer_name: str
    top_performer_score: float


@dataclass(frozen=True)
class ResultSet:
    assessment_type: AssessmentType
    configuration_name: str
    rows: Tuple[DerivedStudentRow, ...]
    columns: Tuple[SubjectColumn, ...]
    summary: ResultSummary


@dataclass(frozen=True)
class AssessmentStanding:
    assessment_type: AssessmentType
    class_rank: int
    average: float
    grade: Letter
    status: Status
    total_students: int


@dataclass(frozen=True)
class StudentReportCard:
    student_id: str
    name: str
    exam_number: str
    class_id: str
    subjects: Tuple[DerivedSubjectScore, ...]
    standings: Tuple[AssessmentStanding, ...]
