import copy
import uuid
from datetime import date, datetime, timezone

from utils.errors import ValidationError


def new_id():
    return uuid.uuid4().hex


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_iso_date(value, field):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValidationError(f"Date invalide pour {field} : {value}")


def parse_iso_datetime(value, field):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc).replace(tzinfo=None) if value.tzinfo else value
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Date invalide pour {field} : {value}")
    return parse_iso_datetime(parsed, field)


def clean_text(value):
    if value is None:
        return None
    return str(value).strip()


def _serialize(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return copy.deepcopy(value)
    return value


class DocumentMixin:
    """
    Maps a row to and from its document shape.

    DOCUMENT_FIELDS: wire key -> attribute, writable through apply_document.
    TIMESTAMP_FIELDS: wire key -> attribute, stamped by the application.
    REQUIRED_FIELDS: wire keys that may not be empty.
    """

    DOCUMENT_FIELDS = {}
    TIMESTAMP_FIELDS = {}
    REQUIRED_FIELDS = ()
    READ_ONLY_FIELDS = ("id", "createdAt", "updatedAt")

    def convert_field(self, key, value):
        return clean_text(value) if isinstance(value, str) else value

    def apply_document(self, fields, partial=False):
        if not isinstance(fields, dict):
            raise ValidationError("Document invalide")

        unknown = sorted(
            k for k in fields
            if k not in self.DOCUMENT_FIELDS and k not in self.READ_ONLY_FIELDS
        )
        if unknown:
            raise ValidationError(f"Champ(s) inconnu(s) : {', '.join(unknown)}")

        for key, value in fields.items():
            if key in self.READ_ONLY_FIELDS:
                continue
            setattr(self, self.DOCUMENT_FIELDS[key], self.convert_field(key, value))

        checked = [k for k in self.REQUIRED_FIELDS if not partial or k in fields]
        missing = [k for k in checked if getattr(self, self.DOCUMENT_FIELDS[k]) in (None, "")]
        if missing:
            raise ValidationError(f"Champ(s) obligatoire(s) manquant(s) : {', '.join(missing)}")
        return self

    def to_document(self):
        document = {"id": self.id}
        for key, attr in self.DOCUMENT_FIELDS.items():
            document[key] = _serialize(getattr(self, attr))
        for key, attr in self.TIMESTAMP_FIELDS.items():
            document[key] = _serialize(getattr(self, attr))
        return document
