"""
Competency rubric and rating vocabulary shared by the evaluation editor,
the PDF renderer and the spreadsheet renderer.

Changing a level or a sub-competency is an edit to this module only.
"""
from dataclasses import dataclass

from utils.errors import ValidationError


@dataclass(frozen=True)
class Level:
    code: str
    rank: int
    label: str
    short_label: str
    symbol: str
    color: str

    @property
    def rgb(self):
        value = self.color.lstrip("#")
        return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


LEVELS = (
    Level("non_evaluee", 0, "Non évaluée", "Non évaluée", "", "#c8c8c8"),
    Level("non_acquise", 1, "Non acquise", "Non acquise", "1", "#ff4444"),
    Level("en_cours", 2, "En cours d'acquisition", "En cours", "2", "#ff8800"),
    Level("partiellement_acquise", 3, "Partiellement acquise", "Partiellement acquise", "3", "#ffaa00"),
    Level("acquise", 4, "Acquise", "Acquise", "4", "#00aa44"),
)

UNRATED = LEVELS[0]

_BY_CODE = {level.code: level for level in LEVELS}
_BY_SYMBOL = {level.symbol: level for level in LEVELS}
_BY_COLOR = {level.color: level for level in LEVELS}


def get_level(code):
    try:
        return _BY_CODE[code]
    except KeyError:
        raise ValidationError(f"Niveau d'évaluation inconnu : {code}")


def level_from_symbol(symbol):
    try:
        return _BY_SYMBOL[str(symbol).strip()]
    except KeyError:
        raise ValidationError(f"Symbole de niveau inconnu : {symbol}")


def level_from_color(color):
    try:
        return _BY_COLOR[str(color).strip().lower()]
    except KeyError:
        raise ValidationError(f"Couleur de niveau inconnue : {color}")


# =========================================================
# RUBRIC
# =========================================================

@dataclass(frozen=True)
class SubCompetency:
    key: str
    label: str
    short_label: str


@dataclass(frozen=True)
class Cluster:
    code: str
    title: str
    short_title: str
    items: tuple

    @property
    def heading(self):
        return f"{self.code} - {self.title}"

    @property
    def export_label(self):
        return f"{self.code} - {self.short_title}"


RUBRIC = (
    Cluster("CC1", "S'informer sur l'intervention ou la réalisation", "S'informer", (
        SubCompetency(
            "cc1_collecter_donnees",
            "Collecter les données nécessaires à l'intervention ou à la réalisation "
            "en utilisant les outils numériques",
            "Collecter les données",
        ),
    )),
    Cluster("CC2", "Organiser la réalisation ou l'intervention", "Organiser", (
        SubCompetency(
            "cc2_ordonner_donnees",
            "Ordonner les données nécessaires à l'intervention ou à la réalisation "
            "en tenant compte des interactions avec les autres intervenants",
            "Ordonner les données",
        ),
        SubCompetency(
            "cc2_reperer_contraintes",
            "Repérer les contraintes liées à l'efficacité énergétique",
            "Repérer les contraintes",
        ),
    )),
    Cluster("CC3", "Analyser et exploiter les données", "Analyser", (
        SubCompetency(
            "cc3_identifier_elements",
            "Identifier les éléments d'un système énergétique, de son installation "
            "électrique et de son environnement numérique",
            "Identifier les éléments",
        ),
        SubCompetency(
            "cc3_identifier_grandeurs",
            "Identifier les grandeurs physiques nominales associées à l'installation "
            "(températures, pressions, puissances, intensités, tensions, ...)",
            "Identifier les grandeurs",
        ),
        SubCompetency(
            "cc3_representer_installation",
            "Représenter tout ou partie d'une installation, manuellement ou avec un outil numérique",
            "Représenter l'installation",
        ),
    )),
    Cluster("CC4", "Réaliser une installation ou une intervention", "Réaliser", (
        SubCompetency(
            "cc4_implanter_cabler",
            "Implanter, câbler, raccorder les matériels, les supports, les appareillages "
            "et les équipements d'interconnexion",
            "Implanter, câbler",
        ),
        SubCompetency(
            "cc4_realiser_installation",
            "Réaliser l'installation et/ou les modifications des réseaux fluidiques "
            "et/ou les câblages électriques",
            "Réaliser l'installation",
        ),
        SubCompetency(
            "cc4_operer_attitude",
            "Opérer avec une attitude écoresponsable",
            "Attitude écoresponsable",
        ),
    )),
    Cluster("CC7", "Établir un pré-diagnostic à distance", "Maintenance", (
        SubCompetency(
            "cc7_controler_donnees",
            "Contrôler les données d'exploitation (indicateurs, voyants, ...) par rapport aux attendus",
            "Contrôler les données",
        ),
        SubCompetency(
            "cc7_constater_defaillance",
            "Constater la défaillance",
            "Constater les défaillances",
        ),
        SubCompetency(
            "cc7_lister_hypotheses",
            "Lister des hypothèses de panne(s) et/ou de dysfonctionnement(s)",
            "Lister les hypothèses",
        ),
    )),
    Cluster("CC8", "Renseigner les documents", "Communication", (
        SubCompetency(
            "cc8_completer_documents",
            "Compléter les documents techniques et administratifs",
            "Compléter les documents",
        ),
        SubCompetency(
            "cc8_expliquer_avancement",
            "Expliquer l'état d'avancement des opérations, leurs contraintes et leurs difficultés",
            "Expliquer l'avancement",
        ),
        SubCompetency(
            "cc8_rediger_compte_rendu",
            "Rédiger un compte-rendu, un rapport d'activité",
            "Rédiger compte rendu",
        ),
    )),
    Cluster("CC9", "Communiquer avec le client et/ou l'usager", "Client/Usager", (
        SubCompetency(
            "cc9_interpreter_informations",
            "Interpréter les informations du client et/ou l'exploitant sur ses besoins",
            "Interpréter les informations",
        ),
        SubCompetency(
            "cc9_expliquer_fonctionnement",
            "Expliquer le fonctionnement et l'utilisation de l'installation au client "
            "et/ou à l'exploitant",
            "Expliquer le fonctionnement",
        ),
        SubCompetency(
            "cc9_informer_consignes",
            "Informer oralement des consignes de sécurité",
            "Informer sur les consignes",
        ),
    )),
)

COMPETENCY_KEYS = tuple(item.key for cluster in RUBRIC for item in cluster.items)


def iter_rubric():
    """Yield ``(cluster, sub_competency, is_first_of_cluster)`` in form order."""
    for cluster in RUBRIC:
        for index, item in enumerate(cluster.items):
            yield cluster, item, index == 0


# =========================================================
# RATINGS
# =========================================================

@dataclass(frozen=True)
class CompetencyRating:
    niveau: str = UNRATED.code
    commentaire: str = ""

    @property
    def level(self):
        return get_level(self.niveau)

    def to_document(self):
        return {"niveau": self.niveau, "commentaire": self.commentaire}


def empty_competences():
    return {key: CompetencyRating().to_document() for key in COMPETENCY_KEYS}


def normalize_competences(value):
    """Validate a ``competences`` mapping and fill missing keys as unrated."""
    if value is None:
        return empty_competences()
    if not isinstance(value, dict):
        raise ValidationError("Le champ competences doit être un objet")

    unknown = sorted(set(value) - set(COMPETENCY_KEYS))
    if unknown:
        raise ValidationError(f"Compétence(s) inconnue(s) : {', '.join(unknown)}")

    result = {}
    for key in COMPETENCY_KEYS:
        raw = value.get(key) or {}
        if not isinstance(raw, dict):
            raise ValidationError(f"Évaluation invalide pour {key}")
        niveau = raw.get("niveau") or UNRATED.code
        get_level(niveau)
        commentaire = raw.get("commentaire") or ""
        result[key] = CompetencyRating(niveau, str(commentaire)).to_document()
    return result


def rubric_document():
    """Rubric description for clients building the evaluation form."""
    return {
        "levels": [
            {
                "niveau": level.code,
                "rank": level.rank,
                "label": level.label,
                "shortLabel": level.short_label,
                "symbol": level.symbol,
                "color": level.color,
            }
            for level in LEVELS
        ],
        "clusters": [
            {
                "code": cluster.code,
                "title": cluster.heading,
                "competences": [
                    {"key": item.key, "label": item.label, "shortLabel": item.short_label}
                    for item in cluster.items
                ],
            }
            for cluster in RUBRIC
        ],
    }
