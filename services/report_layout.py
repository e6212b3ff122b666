"""
Report content shared by the PDF and spreadsheet renderers.

``ReportData`` gathers the records one report is about. ``build_layout``
turns it into an ordered list of blocks; the PDF renderer only knows how to
draw block roles, never which competency goes where.
"""
from dataclasses import dataclass, field

from services.data_access import classe_service, eleve_service, evaluation_store, periode_service
from services.rubric import LEVELS, CompetencyRating, iter_rubric
from utils.errors import ReportPreconditionError

HEADER = "header"
LEGEND = "legend"
TABLE_ROW = "table-row"
FREE_TEXT = "free-text"
SIGNATURE = "signature"

NO_CLASS = "Non assignée"


def format_date_fr(value):
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")


@dataclass
class ReportData:
    eleve: object
    periode: object
    classe: object = None
    evaluation: object = None

    def __post_init__(self):
        if self.eleve is None:
            raise ReportPreconditionError("Élève introuvable pour ce rapport")
        if self.periode is None:
            raise ReportPreconditionError("Période de stage introuvable pour ce rapport")

    @property
    def classe_nom(self):
        return self.classe.nom if self.classe is not None else NO_CLASS

    def rating(self, key):
        if self.evaluation is None:
            return CompetencyRating()
        return self.evaluation.rating(key)

    def text(self, attr):
        if self.evaluation is None:
            return ""
        return getattr(self.evaluation, attr) or ""


def load_report_data(eleve_id, periode_id):
    eleve = eleve_service.get_by_id(eleve_id)
    periode = periode_service.get_by_id(periode_id)
    data = ReportData(eleve=eleve, periode=periode)
    data.classe = classe_service.get_by_id(eleve.classe_id)
    data.evaluation = evaluation_store.find_for_pair(eleve_id, periode_id)
    return data


def report_filename(data, extension):
    return f"PFMP_{data.eleve.nom}_{data.eleve.prenom}_{data.periode.nom}.{extension}"


@dataclass(frozen=True)
class Block:
    role: str
    content: dict = field(default_factory=dict)


def build_layout(data):
    eleve, periode = data.eleve, data.periode

    blocks = [
        Block(HEADER, {
            "subtitle": [
                "Document de suivi et d'évaluation :",
                "Situations de travail spécifiées et réalisées en milieu professionnel",
            ],
            "title": f"PFMP N° {periode.nom}",
            "dates": f"Du {format_date_fr(periode.date_debut)} au {format_date_fr(periode.date_fin)}",
            "candidate_label": "NOM, PRÉNOM DU CANDIDAT",
            "candidate": f"{eleve.nom.upper()} - {eleve.prenom}",
            "details": [
                ("Classe", data.classe_nom),
                ("Entreprise", data.text("nom_entreprise")),
                ("Domaine d'activité", data.text("domaine_activite")),
                ("Tuteur", data.text("nom_tuteur")),
            ],
            "section": "ÉVALUATION DES COMPÉTENCES ACQUISES EN PFMP :",
        }),
        Block(LEGEND, {
            "criteria": "Critères d'évaluation : " + ", ".join(
                f"{level.symbol}-{level.short_label}" for level in LEVELS if level.symbol
            ),
            "levels": LEVELS,
        }),
    ]

    for cluster, item, is_first in iter_rubric():
        rating = data.rating(item.key)
        blocks.append(Block(TABLE_ROW, {
            "cluster": cluster,
            "first_of_cluster": is_first,
            "item": item,
            "level": rating.level,
            "commentaire": rating.commentaire,
        }))

    blocks.append(Block(FREE_TEXT, {"title": "OBSERVATIONS :", "text": data.text("commentaire_general")}))
    blocks.append(Block(FREE_TEXT, {"title": "RECOMMANDATIONS :", "text": data.text("recommandations")}))
    blocks.append(Block(SIGNATURE, {
        "labels": [
            "Date et signature du tuteur en entreprise :",
            "Date et signature de l'enseignant :",
        ],
    }))
    return blocks
