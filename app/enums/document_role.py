# app/enums/document_role.py
from enum import Enum


class DocumentRole(str, Enum):
    # порядок объявления = порядок проверки и сохранения
    id_front = "id_front"
    id_back = "id_back"
    facial_photo = "facial_photo"
    rucon = "rucon"
    other_doc = "other_doc"
    exploitation_contract = "exploitation_contract"
    environmental_permit = "environmental_permit"
    technical_permit = "technical_permit"

    @property
    def path_field(self) -> str:
        """Имя колонки модели Miner, в которой хранится путь к документу"""
        return f"{self.value}_path"
