import logging
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from eduresults.domain.entities import (
    MARKED_ABSENT,
    NOT_ENTERED,
    CalculationMethod,
    GradeConfiguration,
    ResultSet,
    ScoreSlot,
    Scored,
    StudentReportCard,
    StudentRosterEntry,
    SubjectAssessment,
)

logger = logging.getLogger(__name__)


class RecordValidationError(ValueError):
    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


def _aliases(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def _as_identifier(value: Any) -> Any:
    if isinstance(value, dict):
        value = value.get("id")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class GradeConfigPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    configuration_name: str = Field(default="", validation_alias=_aliases("configuration_name", "configurationName"))
    calculation_method: Optional[str] = Field(
        default=None, validation_alias=_aliases("calculation_method", "calculationMethod")
    )
    weight_qa1: Optional[float] = Field(default=None, ge=0, le=100, validation_alias=_aliases("weight_qa1", "weightQa1"))
    weight_qa2: Optional[float] = Field(default=None, ge=0, le=100, validation_alias=_aliases("weight_qa2", "weightQa2"))
    weight_end_of_term: Optional[float] = Field(
        default=None, ge=0, le=100, validation_alias=_aliases("weight_end_of_term", "weightEndOfTerm")
    )
    pass_mark: Optional[int] = Field(default=None, ge=0, le=100, validation_alias=_aliases("pass_mark", "passMark"))


class SubjectPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    subject_id: Optional[str] = Field(default=None, validation_alias=_aliases("subject_id", "subjectId", "id"))
    subject_name: str = Field(default="", validation_alias=_aliases("subject_name", "subjectName", "name"))
    qa1: Optional[float] = Field(default=None, ge=0, le=100)
    qa2: Optional[float] = Field(default=None, ge=0, le=100)
    end_of_term: Optional[float] = Field(default=None, ge=0, le=100, validation_alias=_aliases("end_of_term", "endOfTerm"))
    qa1_absent: bool = Field(default=False, validation_alias=_aliases("qa1_absent", "qa1Absent"))
    qa2_absent: bool = Field(default=False, validation_alias=_aliases("qa2_absent", "qa2Absent"))
    end_of_term_absent: bool = Field(
        default=False, validation_alias=_aliases("end_of_term_absent", "endOfTermAbsent", "endOfTerm_absent")
    )

    @field_validator("subject_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return _as_identifier(value)

    @field_validator("qa1_absent", "qa2_absent", "end_of_term_absent", mode="before")
    @classmethod
    def _none_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class StudentPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    student_id: str = Field(validation_alias=_aliases("student_id", "studentId", "id"))
    name: str = ""
    exam_number: str = Field(default="", validation_alias=_aliases("exam_number", "examNumber"))
    class_id: str = Field(default="", validation_alias=_aliases("class_id", "classId", "class"))
    subjects: List[SubjectPayload] = Field(default_factory=list)

    @field_validator("student_id", "class_id", "exam_number", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        value = _as_identifier(value)
        return "" if value is None else value


def _slot(score: Optional[float], absent: bool) -> ScoreSlot:
    if absent:
        return MARKED_ABSENT
    if score is None:
        return NOT_ENTERED
    return Scored(float(score))


def _validation_error(label: str, exc: ValidationError) -> RecordValidationError:
    return RecordValidationError(f"Invalid {label}: {exc.error_count()} error(s)", exc.errors())


def parse_grade_configuration(data: Optional[Dict[str, Any]]) -> Optional[GradeConfiguration]:
    if not data:
        return None
    try:
        payload = GradeConfigPayload.model_validate(data)
    except ValidationError as exc:
        raise _validation_error("grade configuration", exc) from exc

    method = CalculationMethod.from_value(payload.calculation_method)
    raw_method = (payload.calculation_method or "").strip().lower()
    if raw_method and raw_method != method.value:
        logger.warning(
            f"Unknown calculation method '{payload.calculation_method}' in "
            f"'{payload.configuration_name}', using {method.value}"
        )

    return GradeConfiguration(
        calculation_method=method,
        weight_qa1=payload.weight_qa1,
        weight_qa2=payload.weight_qa2,
        weight_end_of_term=payload.weight_end_of_term,
        pass_mark=payload.pass_mark,
        configuration_name=payload.configuration_name,
    )


def _to_subject(payload: SubjectPayload) -> SubjectAssessment:
    return SubjectAssessment(
        subject_id=payload.subject_id or payload.subject_name,
        subject_name=payload.subject_name,
        qa1=_slot(payload.qa1, payload.qa1_absent),
        qa2=_slot(payload.qa2, payload.qa2_absent),
        end_of_term=_slot(payload.end_of_term, payload.end_of_term_absent),
    )


def parse_student(data: Dict[str, Any]) -> StudentRosterEntry:
    try:
        payload = StudentPayload.model_validate(data)
    except ValidationError as exc:
        raise _validation_error("roster entry", exc) from exc

    return StudentRosterEntry(
        student_id=payload.student_id,
        name=payload.name,
        exam_number=payload.exam_number,
        class_id=payload.class_id,
        subjects=tuple(_to_subject(subject) for subject in payload.subjects),
    )


def parse_roster(items: Iterable[Dict[str, Any]]) -> List[StudentRosterEntry]:
    roster = []
    for position, item in enumerate(items):
        try:
            roster.append(parse_student(item))
        except RecordValidationError as exc:
            raise RecordValidationError(f"Roster entry {position}: {exc}", exc.errors) from exc
    return roster


def _plain_dict(items: List[Tuple[str, Any]]) -> Dict[str, Any]:
    plain = {}
    for key, value in items:
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, tuple):
            value = [item.value if isinstance(item, Enum) else item for item in value]
        plain[key] = value
    return plain


def result_set_to_dict(result_set: ResultSet) -> Dict[str, Any]:
    return asdict(result_set, dict_factory=_plain_dict)


def report_card_to_dict(report_card: StudentReportCard) -> Dict[str, Any]:
    return asdict(report_card, dict_factory=_plain_dict)
