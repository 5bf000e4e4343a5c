from dataclasses import dataclass

from app.core.config import MEGABYTE
from app.enums.document_role import DocumentRole
from app.enums.miner_type import MinerType

IMAGE_TYPES = ("image/jpeg", "image/png")
PDF_TYPES = ("application/pdf", "pdf")


@dataclass(frozen=True)
class DocumentPolicy:
    required: bool
    max_size: int
    allowed_types: tuple[str, ...]
    # подкаталог в хранилище, куда сохраняется документ
    subdir: str


_ID_FRONT = DocumentPolicy(True, 5 * MEGABYTE, IMAGE_TYPES, "cedulas")
_ID_BACK = DocumentPolicy(True, 5 * MEGABYTE, IMAGE_TYPES, "cedulas")
_FACIAL = DocumentPolicy(True, 5 * MEGABYTE, IMAGE_TYPES, "facial")

# (категория, роль) -> политика. Роли без записи для категории к ней не применимы.
DOCUMENT_POLICIES: dict[tuple[MinerType, DocumentRole], DocumentPolicy] = {
    (MinerType.subsistencia, DocumentRole.id_front): _ID_FRONT,
    (MinerType.subsistencia, DocumentRole.id_back): _ID_BACK,
    (MinerType.subsistencia, DocumentRole.facial_photo): _FACIAL,
    (MinerType.subsistencia, DocumentRole.rucon): DocumentPolicy(True, 2 * MEGABYTE, PDF_TYPES, "subsistencia/rucon"),
    (MinerType.subsistencia, DocumentRole.other_doc): DocumentPolicy(False, 10 * MEGABYTE, PDF_TYPES, "subsistencia/otros"),

    (MinerType.titular, DocumentRole.id_front): _ID_FRONT,
    (MinerType.titular, DocumentRole.id_back): _ID_BACK,
    (MinerType.titular, DocumentRole.facial_photo): _FACIAL,
    (MinerType.titular, DocumentRole.exploitation_contract): DocumentPolicy(True, 15 * MEGABYTE, PDF_TYPES, "titular/contrato"),
    (MinerType.titular, DocumentRole.environmental_permit): DocumentPolicy(True, 75 * MEGABYTE, PDF_TYPES, "titular/ambiental"),
    (MinerType.titular, DocumentRole.technical_permit): DocumentPolicy(True, 50 * MEGABYTE, PDF_TYPES, "titular/tecnica"),
}


def get_policy(category: MinerType, role: DocumentRole) -> DocumentPolicy | None:
    return DOCUMENT_POLICIES.get((category, role))


def applicable_roles(category: MinerType) -> list[DocumentRole]:
    """Роли, применимые к категории, в порядке объявления DocumentRole"""
    return [role for role in DocumentRole if (category, role) in DOCUMENT_POLICIES]


def required_roles(category: MinerType) -> list[DocumentRole]:
    return [role for role in applicable_roles(category) if DOCUMENT_POLICIES[(category, role)].required]
