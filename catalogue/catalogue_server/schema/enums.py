"""
Closed value sets used by catalogue entities.

Enum values are the strings stored in the database. Values may be appended,
never renamed or removed, since stored rows and history snapshots hold them.
"""

from __future__ import annotations

from enum import Enum


class WorkType(Enum):
    BOOK_CHAPTER = "book-chapter"
    MONOGRAPH = "monograph"
    EDITED_BOOK = "edited-book"
    TEXTBOOK = "textbook"
    JOURNAL_ISSUE = "journal-issue"
    BOOK_SET = "book-set"


class WorkStatus(Enum):
    UNSPECIFIED = "unspecified"
    CANCELLED = "cancelled"
    FORTHCOMING = "forthcoming"
    POSTPONED_INDEFINITELY = "postponed-indefinitely"
    ACTIVE = "active"
    NO_LONGER_OUR_PRODUCT = "no-longer-our-product"
    OUT_OF_STOCK_INDEFINITELY = "out-of-stock-indefinitely"
    OUT_OF_PRINT = "out-of-print"
    INACTIVE = "inactive"
    UNKNOWN = "unknown"
    REMAINDERED = "remaindered"
    WITHDRAWN_FROM_SALE = "withdrawn-from-sale"
    RECALLED = "recalled"


class PublicationType(Enum):
    PAPERBACK = "Paperback"
    HARDBACK = "Hardback"
    PDF = "PDF"
    HTML = "HTML"
    XML = "XML"
    EPUB = "Epub"
    MOBI = "Mobi"
    AZW3 = "AZW3"
    DOCX = "DOCX"
    FICTION_BOOK = "FictionBook"

    @property
    def is_physical(self) -> bool:
        return self in (PublicationType.PAPERBACK, PublicationType.HARDBACK)

    @property
    def is_digital(self) -> bool:
        return not self.is_physical


class ContributionType(Enum):
    AUTHOR = "author"
    EDITOR = "editor"
    TRANSLATOR = "translator"
    PHOTOGRAPHER = "photographer"
    ILLUSTRATOR = "illustrator"
    MUSIC_EDITOR = "music-editor"
    FOREWORD_BY = "foreword-by"
    INTRODUCTION_BY = "introduction-by"
    AFTERWORD_BY = "afterword-by"
    PREFACE_BY = "preface-by"


class SeriesType(Enum):
    JOURNAL = "journal"
    BOOK_SERIES = "book-series"


class LanguageRelation(Enum):
    ORIGINAL = "original"
    TRANSLATED_FROM = "translated-from"
    TRANSLATED_INTO = "translated-into"


class SubjectType(Enum):
    BIC = "bic"
    BISAC = "bisac"
    THEMA = "thema"
    LCC = "lcc"
    CUSTOM = "custom"
    KEYWORD = "keyword"


class LocationPlatform(Enum):
    PROJECT_MUSE = "Project MUSE"
    OAPEN = "OAPEN"
    DOAB = "DOAB"
    JSTOR = "JSTOR"
    EBSCO_HOST = "EBSCO Host"
    OCLC_KB = "OCLC KB"
    PROQUEST_KB = "ProQuest KB"
    PROQUEST_EXLIBRIS = "ProQuest ExLibris"
    EBSCO_KB = "EBSCO KB"
    JISC_KB = "JISC KB"
    OTHER = "Other"
