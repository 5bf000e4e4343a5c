from enum import Enum


class MinerType(str, Enum):
    titular = "titular"  # Minero titular (título minero)
    subsistencia = "subsistencia"  # Minero de subsistencia
