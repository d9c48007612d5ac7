import enum


class PrintMediaType(str, enum.Enum):
    FOLIO = "folio"
    MAGAZINE = "magazine"
    TABLOID = "tabloid"
    NEWSLETTER = "newsletter"
    OTHER = "other"


class RequestableKind(str, enum.Enum):
    PUBLICATION = "publication"
    PRINT_MEDIA = "print_media"
