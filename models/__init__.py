from .user import User
from .class_model import Classe
from .student import Eleve
from .periode_stage import PeriodeStage
from .evaluation import Evaluation
__all__ = ["User", "Classe", "Eleve", "PeriodeStage", "Evaluation"]
