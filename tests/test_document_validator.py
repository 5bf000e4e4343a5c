import io
import pytest
from fastapi import UploadFile

from app.core.config import MEGABYTE
from app.core.exceptions import (
    DocumentTooLargeError,
    DocumentValidationError,
    InvalidCategoryError,
    InvalidDocumentNameError,
    MissingRequiredDocumentError,
    UnsupportedDocumentTypeError,
)
from app.enums.document_role import DocumentRole
from app.enums.miner_type import MinerType
from app.services.documents.policy import applicable_roles, get_policy, required_roles
from app.services.documents.uploaded import UploadedDocument
from app.services.documents.validator import DocumentValidator
from tests.factories import make_document, subsistence_documents, titular_documents


POLICY_TABLE = [
    # category, role, required, max units, sample content type
    (MinerType.subsistencia, DocumentRole.id_front, True, 5, "image/jpeg"),
    (MinerType.subsistencia, DocumentRole.id_back, True, 5, "image/png"),
    (MinerType.subsistencia, DocumentRole.facial_photo, True, 5, "image/jpeg"),
    (MinerType.subsistencia, DocumentRole.rucon, True, 2, "application/pdf"),
    (MinerType.subsistencia, DocumentRole.other_doc, False, 10, "application/pdf"),
    (MinerType.titular, DocumentRole.id_front, True, 5, "image/jpeg"),
    (MinerType.titular, DocumentRole.id_back, True, 5, "image/png"),
    (MinerType.titular, DocumentRole.facial_photo, True, 5, "image/png"),
    (MinerType.titular, DocumentRole.exploitation_contract, True, 15, "application/pdf"),
    (MinerType.titular, DocumentRole.environmental_permit, True, 75, "application/pdf"),
    (MinerType.titular, DocumentRole.technical_permit, True, 50, "application/pdf"),
]


@pytest.mark.parametrize("category,role,required,max_units,content_type", POLICY_TABLE)
def test_policy_table(category, role, required, max_units, content_type):
    policy = get_policy(category, role)
    assert policy is not None
    assert policy.required is required
    assert policy.max_size == max_units * MEGABYTE


def test_category_specific_roles_not_applicable_to_other_category():
    assert get_policy(MinerType.titular, DocumentRole.rucon) is None
    assert get_policy(MinerType.titular, DocumentRole.other_doc) is None
    assert get_policy(MinerType.subsistencia, DocumentRole.exploitation_contract) is None
    assert DocumentRole.rucon not in applicable_roles(MinerType.titular)
    assert DocumentRole.other_doc not in required_roles(MinerType.subsistencia)


@pytest.mark.parametrize("category,role,required,max_units,content_type", POLICY_TABLE)
def test_size_boundary(category, role, required, max_units, content_type):
    """size == max passes, max + 1 byte fails"""
    max_size = max_units * MEGABYTE
    DocumentValidator.validate(role, category, make_document(role, max_size, content_type))

    with pytest.raises(DocumentTooLargeError) as exc_info:
        DocumentValidator.validate(role, category, make_document(role, max_size + 1, content_type))
    assert exc_info.value.role == role
    assert exc_info.value.actual_size == max_size + 1
    assert exc_info.value.max_size == max_size


@pytest.mark.parametrize("category,role,required,max_units,content_type", POLICY_TABLE)
def test_absent_document(category, role, required, max_units, content_type):
    if required:
        with pytest.raises(MissingRequiredDocumentError) as exc_info:
            DocumentValidator.validate(role, category, None)
        assert exc_info.value.role == role
    else:
        assert DocumentValidator.validate(role, category, None) is None


@pytest.mark.parametrize("content_type,filename,ok", [
    ("application/pdf", "rucon.pdf", True),
    ("APPLICATION/PDF", "rucon.bin", True),
    ("application/pdf; charset=binary", "rucon", True),
    ("application/octet-stream", "RUCON.PDF", True),
    (None, "rucon.pdf", True),
    ("application/octet-stream", "rucon.docx", False),
    ("image/jpeg", "rucon.jpg", False),
    (None, "rucon", False),
])
def test_pdf_type_matching(content_type, filename, ok):
    document = make_document(DocumentRole.rucon, 1024, content_type, filename)
    if ok:
        DocumentValidator.validate(DocumentRole.rucon, MinerType.subsistencia, document)
    else:
        with pytest.raises(UnsupportedDocumentTypeError) as exc_info:
            DocumentValidator.validate(DocumentRole.rucon, MinerType.subsistencia, document)
        assert exc_info.value.declared_type == content_type
        assert "application/pdf" in exc_info.value.allowed


@pytest.mark.parametrize("content_type,ok", [
    ("image/jpeg", True),
    ("image/PNG", True),
    ("image/gif", False),
    ("application/pdf", False),
])
def test_image_type_matching(content_type, ok):
    document = make_document(DocumentRole.facial_photo, 1024, content_type, "face.img")
    if ok:
        DocumentValidator.validate(DocumentRole.facial_photo, MinerType.titular, document)
    else:
        with pytest.raises(UnsupportedDocumentTypeError):
            DocumentValidator.validate(DocumentRole.facial_photo, MinerType.titular, document)


def test_size_checked_before_type():
    document = make_document(DocumentRole.rucon, 3 * MEGABYTE, "text/plain", "rucon.txt")
    with pytest.raises(DocumentTooLargeError):
        DocumentValidator.validate(DocumentRole.rucon, MinerType.subsistencia, document)


@pytest.mark.parametrize("category", ["minero", "", "TITULAR", None])
def test_invalid_category(category):
    with pytest.raises(InvalidCategoryError):
        DocumentValidator.validate_all(category, subsistence_documents())

    with pytest.raises(InvalidCategoryError):
        DocumentValidator.validate(DocumentRole.id_front, category, None)


def test_validate_all_accepts_complete_sets():
    assert DocumentValidator.validate_all("subsistencia", subsistence_documents()) == MinerType.subsistencia
    assert DocumentValidator.validate_all(MinerType.titular, titular_documents()) == MinerType.titular


@pytest.mark.parametrize("category,documents", [
    (MinerType.subsistencia, subsistence_documents),
    (MinerType.titular, titular_documents),
])
def test_missing_each_required_role_is_reported(category, documents):
    for role in required_roles(category):
        with pytest.raises(DocumentValidationError) as exc_info:
            DocumentValidator.validate_all(category, documents(**{role.value: None}))

        violations = exc_info.value.violations
        assert len(violations) == 1
        assert isinstance(violations[0], MissingRequiredDocumentError)
        assert violations[0].role == role


def test_validate_all_aggregates_violations_in_role_order():
    documents = titular_documents(
        id_back=None,
        exploitation_contract=make_document(DocumentRole.exploitation_contract, 16 * MEGABYTE),
        technical_permit=make_document(DocumentRole.technical_permit, 1024, "image/png", "permit.png"),
    )

    with pytest.raises(DocumentValidationError) as exc_info:
        DocumentValidator.validate_all(MinerType.titular, documents)

    violations = exc_info.value.violations
    assert [type(v) for v in violations] == [
        MissingRequiredDocumentError,
        DocumentTooLargeError,
        UnsupportedDocumentTypeError,
    ]
    assert [v.role for v in violations] == [
        DocumentRole.id_back,
        DocumentRole.exploitation_contract,
        DocumentRole.technical_permit,
    ]


def test_documents_for_other_category_are_not_validated():
    """A titular request carrying an invalid rucon still passes; rucon is ignored"""
    documents = titular_documents(rucon=make_document(DocumentRole.rucon, 100 * MEGABYTE, "text/plain"))
    assert DocumentValidator.validate_all(MinerType.titular, documents) == MinerType.titular


def test_violation_to_dict():
    error = DocumentTooLargeError(DocumentRole.exploitation_contract, 16 * MEGABYTE, 15 * MEGABYTE)
    assert error.to_dict() == {
        "error": "DocumentTooLargeError",
        "message": str(error),
        "role": "exploitation_contract",
        "actual_size": 16 * MEGABYTE,
        "max_size": 15 * MEGABYTE,
    }


@pytest.mark.parametrize("filename", ["", "   ", ".", ".."])
def test_unusable_filename_is_a_violation(filename):
    documents = subsistence_documents(rucon=make_document(DocumentRole.rucon, 1024, "application/pdf", filename))

    with pytest.raises(DocumentValidationError) as exc_info:
        DocumentValidator.validate_all(MinerType.subsistencia, documents)

    [violation] = exc_info.value.violations
    assert isinstance(violation, InvalidDocumentNameError)
    assert violation.role == DocumentRole.rucon
    assert violation.to_dict()["filename"] == filename


@pytest.mark.parametrize("filename,expected", [
    ("rucon.pdf", "rucon.pdf"),
    ("scans/2024/rucon.pdf", "rucon.pdf"),
    ("C:\\scans\\rucon.pdf", "rucon.pdf"),
    ("scans/", ""),
    (None, ""),
])
def test_uploaded_document_keeps_only_basename(filename, expected):
    upload = UploadFile(io.BytesIO(b"%PDF-1.4"), filename=filename)

    document = UploadedDocument.from_upload(DocumentRole.rucon, upload)

    assert document.filename == expected
    assert document.size == 8
    assert document.stream.read() == b"%PDF-1.4"
