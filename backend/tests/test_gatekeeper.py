import pytest

from petition_app import gatekeeper
from petition_app.errors import MethodNotAllowed, Unauthorized
from petition_app.schemas import PetitionSubmission, as_text


def test_only_post_passes():
    gatekeeper.ensure_method("POST")
    gatekeeper.ensure_method("post")
    for method in ("GET", "PUT", "DELETE", "PATCH", "HEAD"):
        with pytest.raises(MethodNotAllowed):
            gatekeeper.ensure_method(method)


def test_api_key_check_skipped_when_unset():
    gatekeeper.check_api_key(None, "")
    gatekeeper.check_api_key("anything", None)


def test_api_key_requires_exact_match():
    gatekeeper.check_api_key("s3cret", "s3cret")
    for supplied in (None, "", "S3CRET", "s3cret "):
        with pytest.raises(Unauthorized):
            gatekeeper.check_api_key(supplied, "s3cret")


@pytest.mark.parametrize(
    "raw, expected",
    [
        (b'{"ad": "Ali"}', {"ad": "Ali"}),
        ('{"ad": "Ali"}', {"ad": "Ali"}),
        ('"{\\"ad\\": \\"Ali\\"}"', {"ad": "Ali"}),
        ({"ad": "Ali"}, {"ad": "Ali"}),
        (b"", {}),
        (None, {}),
        (b"[1, 2]", {}),
        (b"null", {}),
    ],
)
def test_parse_body_shapes(raw, expected):
    assert gatekeeper.parse_body(raw) == expected


def test_parse_body_rejects_invalid_json():
    with pytest.raises(ValueError):
        gatekeeper.parse_body(b"{broken")


def test_as_text_coercion():
    assert as_text(None) == ""
    assert as_text(0) == ""
    assert as_text(False) == ""
    assert as_text([1]) == ""
    assert as_text({"a": 1}) == ""
    assert as_text(2024123) == "2024123"
    assert as_text(True) == "true"
    assert as_text("Ayşe") == "Ayşe"


def test_missing_fields_default_to_empty():
    s = gatekeeper.normalize({})
    assert isinstance(s, PetitionSubmission)
    for field in ("given_name", "family_name", "student_number", "email", "phone", "department", "description"):
        assert getattr(s, field) == ""
    assert s.courses == []


def test_malformed_fields_are_substituted():
    s = gatekeeper.normalize({
        "ad": None,
        "soyad": ["x"],
        "ogrno": 20231234,
        "telefon": {"home": "1"},
        "dersler": {"alinanAdKod": "MAT101"},
        "unexpected": "ignored",
    })
    assert s.given_name == ""
    assert s.family_name == ""
    assert s.student_number == "20231234"
    assert s.phone == ""
    assert s.courses == []


def test_course_items_are_normalized_in_order():
    s = gatekeeper.normalize({
        "dersler": [
            {"alinanAdKod": "MAT101", "alinanGrup": 2, "cakisanAdKod": "IST201", "cakisanHoca": None},
            "garbage",
            {"cakisanTarihSaat": "12.01.2026 10:00"},
        ]
    })
    assert len(s.courses) == 3
    first, blank, last = s.courses
    assert first.taken_course == "MAT101"
    assert first.taken_section == "2"
    assert first.conflicting_course == "IST201"
    assert first.conflicting_instructor == ""
    assert blank.model_dump() == {k: "" for k in blank.model_dump()}
    assert last.conflicting_schedule == "12.01.2026 10:00"


def test_storage_row_uses_form_column_names():
    s = gatekeeper.parse_submission(b'{"ad": "Ali", "mail": "ali@std.yildiz.edu.tr", "dersler": [{"alinanAdKod": "MAT101"}]}')
    row = s.to_row()
    assert set(row) == {"ad", "soyad", "ogrno", "mail", "telefon", "bolum", "aciklama", "dersler_json"}
    assert row["mail"] == "ali@std.yildiz.edu.tr"
    assert row["dersler_json"][0]["alinanAdKod"] == "MAT101"
    assert row["dersler_json"][0]["cakisanAdKod"] == ""


def test_integer_valued_floats_drop_the_fraction():
    assert as_text(1.0) == "1"
    assert as_text(21052001.0) == "21052001"
    assert as_text(2.5) == "2.5"
    s = gatekeeper.normalize({"ogrno": 123.0, "dersler": [{"alinanGrup": 2.0}]})
    assert s.student_number == "123"
    assert s.courses[0].taken_section == "2"


def test_only_wire_field_names_are_accepted():
    s = gatekeeper.normalize({
        "given_name": "X",
        "student_number": "999",
        "courses": [{"taken_course": "Y"}],
        "dersler": [{"taken_course": "Y", "alinanAdKod": "MAT101"}],
    })
    assert s.given_name == ""
    assert s.student_number == ""
    assert len(s.courses) == 1
    assert s.courses[0].taken_course == "MAT101"
