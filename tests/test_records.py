import json
import unittest

from eduresults.core.report_card import build_report_card
from eduresults.core.results import build_result_set
from eduresults.domain.entities import (
    MARKED_ABSENT,
    NOT_ENTERED,
    AssessmentType,
    CalculationMethod,
    Scored,
)
from eduresults.services.records import (
    RecordValidationError,
    parse_grade_configuration,
    parse_roster,
    report_card_to_dict,
    result_set_to_dict,
)


DASHBOARD_STUDENT = {
    "id": 17,
    "name": "Ama Mensah",
    "examNumber": 20240017,
    "class": {"id": "jhs-2", "name": "JHS 2"},
    "subjects": [
        {"name": "Mathematics", "qa1": 78, "qa2": None, "endOfTerm": 64, "qa2_absent": True},
        {"name": "English", "qa1": 55, "qa2": 61, "endOfTerm": 90, "endOfTerm_absent": True},
        {"subjectId": 4, "name": "Science"},
    ],
}


class GradeConfigurationParsingTests(unittest.TestCase):
    def test_missing_configuration(self):
        self.assertIsNone(parse_grade_configuration(None))
        self.assertIsNone(parse_grade_configuration({}))

    def test_snake_case_payload(self):
        config = parse_grade_configuration(
            {
                "id": "cfg-1",
                "configuration_name": "Term 1",
                "calculation_method": "weighted_average",
                "weight_qa1": 20,
                "weight_qa2": 20,
                "weight_end_of_term": 60,
                "pass_mark": 45,
                "is_active": True,
            }
        )
        self.assertEqual(config.calculation_method, CalculationMethod.WEIGHTED_AVERAGE)
        self.assertEqual(config.weight_end_of_term, 60)
        self.assertEqual(config.pass_mark, 45)
        self.assertEqual(config.configuration_name, "Term 1")

    def test_camel_case_payload(self):
        config = parse_grade_configuration({"calculationMethod": "end_of_term_only", "passMark": 40})
        self.assertEqual(config.calculation_method, CalculationMethod.END_OF_TERM_ONLY)
        self.assertEqual(config.pass_mark, 40)
        self.assertIsNone(config.weight_qa1)

    def test_unknown_method_falls_back_with_warning(self):
        with self.assertLogs("eduresults.services.records", level="WARNING") as logs:
            config = parse_grade_configuration({"calculation_method": "best_two_of_three"})
        self.assertEqual(config.calculation_method, CalculationMethod.AVERAGE_ALL)
        self.assertIn("best_two_of_three", logs.output[0])

    def test_out_of_range_values_are_rejected(self):
        with self.assertRaises(RecordValidationError) as ctx:
            parse_grade_configuration({"pass_mark": 120, "weight_qa1": -5})
        self.assertEqual(len(ctx.exception.errors), 2)
        self.assertIsInstance(ctx.exception, ValueError)


class RosterParsingTests(unittest.TestCase):
    def test_dashboard_payload(self):
        [student] = parse_roster([DASHBOARD_STUDENT])
        self.assertEqual(student.student_id, "17")
        self.assertEqual(student.exam_number, "20240017")
        self.assertEqual(student.class_id, "jhs-2")

        math, english, science = student.subjects
        self.assertEqual(math.subject_id, "Mathematics")
        self.assertEqual(math.qa1, Scored(78.0))
        self.assertEqual(math.qa2, MARKED_ABSENT)
        self.assertEqual(english.end_of_term, MARKED_ABSENT)
        self.assertEqual(science.subject_id, "4")
        self.assertEqual(science.qa1, NOT_ENTERED)

    def test_snake_case_payload(self):
        [student] = parse_roster(
            [
                {
                    "student_id": "s1",
                    "name": "Kojo",
                    "exam_number": "E1",
                    "class_id": "c1",
                    "subjects": [
                        {"subject_id": "m", "subject_name": "Maths", "qa1": 0, "end_of_term": 50, "qa1_absent": None}
                    ],
                }
            ]
        )
        subject = student.subjects[0]
        self.assertEqual(subject.qa1, Scored(0.0))
        self.assertEqual(subject.qa2, NOT_ENTERED)
        self.assertEqual(subject.end_of_term, Scored(50.0))

    def test_score_out_of_range_names_position(self):
        bad = {"id": "x", "subjects": [{"name": "Maths", "qa1": 101}]}
        with self.assertRaises(RecordValidationError) as ctx:
            parse_roster([DASHBOARD_STUDENT, bad])
        self.assertIn("Roster entry 1", str(ctx.exception))
        self.assertEqual(ctx.exception.errors[0]["type"], "less_than_equal")

    def test_student_id_is_required(self):
        with self.assertRaises(RecordValidationError):
            parse_roster([{"name": "Nobody"}])


class SerializationTests(unittest.TestCase):
    def test_result_set_is_plain_json(self):
        roster = parse_roster([DASHBOARD_STUDENT])
        config = parse_grade_configuration({"calculation_method": "average_all", "pass_mark": 50})
        data = result_set_to_dict(build_result_set(roster, AssessmentType.QA2, config))

        self.assertEqual(data["assessment_type"], "qa2")
        row = data["rows"][0]
        self.assertEqual(row["grade"], "C")
        self.assertAlmostEqual(row["average"], 61.0)
        self.assertEqual(row["status"], "Passed")
        self.assertEqual(row["rank"], 1)
        self.assertEqual([cell["subject_id"] for cell in row["cells"]], ["English"])
        self.assertEqual(row["cells"][0]["state"], "scored")
        self.assertEqual(data["summary"]["students_with_scores_ratio"], "1/1")
        json.dumps(data)

    def test_report_card_is_plain_json(self):
        roster = parse_roster([DASHBOARD_STUDENT])
        data = report_card_to_dict(build_report_card(roster, "17", None))
        self.assertEqual([s["assessment_type"] for s in data["standings"]], ["qa1", "qa2", "end_of_term", "overall"])
        self.assertEqual(data["subjects"][0]["subject_name"], "Mathematics")
        json.dumps(data)


if __name__ == "__main__":
    unittest.main()
