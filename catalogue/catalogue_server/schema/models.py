"""
Entity dataclasses and their projections.

For every catalogue entity this module defines:
- the read model (all stored columns),
- the New projection accepted by create (no key when it is generated, no
  timestamps),
- the Patch projection accepted by update (key plus every mutable column;
  update is a full replacement, so None clears an optional column),
- the closed *Field enum of sortable columns.

Field names are column names. The static EntityDef declarations in
entities.py tie each dataclass to its table.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from .enums import (
    ContributionType,
    LanguageRelation,
    LocationPlatform,
    PublicationType,
    SeriesType,
    SubjectType,
    WorkStatus,
    WorkType,
)

# ---------------------------------------------------------------------------
# Publisher
# ---------------------------------------------------------------------------


@dataclass
class Publisher:
    """An organisation that produces and distributes written texts."""

    publisher_id: UUID
    publisher_name: str
    publisher_shortname: Optional[str]
    publisher_url: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class NewPublisher:
    publisher_name: str
    publisher_shortname: Optional[str] = None
    publisher_url: Optional[str] = None


@dataclass
class PatchPublisher:
    publisher_id: UUID
    publisher_name: str
    publisher_shortname: Optional[str] = None
    publisher_url: Optional[str] = None


class PublisherField(Enum):
    PUBLISHER_ID = "publisher_id"
    PUBLISHER_NAME = "publisher_name"
    PUBLISHER_SHORTNAME = "publisher_shortname"
    PUBLISHER_URL = "publisher_url"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Imprint
# ---------------------------------------------------------------------------


@dataclass
class Imprint:
    """The brand under which a publisher issues works."""

    imprint_id: UUID
    publisher_id: UUID
    imprint_name: str
    imprint_url: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class NewImprint:
    publisher_id: UUID
    imprint_name: str
    imprint_url: Optional[str] = None


@dataclass
class PatchImprint:
    imprint_id: UUID
    publisher_id: UUID
    imprint_name: str
    imprint_url: Optional[str] = None


class ImprintField(Enum):
    IMPRINT_ID = "imprint_id"
    IMPRINT_NAME = "imprint_name"
    IMPRINT_URL = "imprint_url"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Work
# ---------------------------------------------------------------------------


@dataclass
class Work:
    """A written text that can be published (book, chapter, journal issue, ...)."""

    work_id: UUID
    work_type: WorkType
    work_status: WorkStatus
    full_title: str
    title: str
    subtitle: Optional[str]
    reference: Optional[str]
    edition: Optional[int]
    imprint_id: UUID
    doi: Optional[str]
    publication_date: Optional[date]
    place: Optional[str]
    width: Optional[int]
    height: Optional[int]
    page_count: Optional[int]
    page_breakdown: Optional[str]
    image_count: Optional[int]
    table_count: Optional[int]
    audio_count: Optional[int]
    video_count: Optional[int]
    license: Optional[str]
    copyright_holder: str
    landing_page: Optional[str]
    lccn: Optional[str]
    oclc: Optional[str]
    short_abstract: Optional[str]
    long_abstract: Optional[str]
    general_note: Optional[str]
    toc: Optional[str]
    cover_url: Optional[str]
    cover_caption: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class NewWork:
    work_type: WorkType
    work_status: WorkStatus
    full_title: str
    title: str
    imprint_id: UUID
    copyright_holder: str
    subtitle: Optional[str] = None
    reference: Optional[str] = None
    edition: Optional[int] = None
    doi: Optional[str] = None
    publication_date: Optional[date] = None
    place: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    page_count: Optional[int] = None
    page_breakdown: Optional[str] = None
    image_count: Optional[int] = None
    table_count: Optional[int] = None
    audio_count: Optional[int] = None
    video_count: Optional[int] = None
    license: Optional[str] = None
    landing_page: Optional[str] = None
    lccn: Optional[str] = None
    oclc: Optional[str] = None
    short_abstract: Optional[str] = None
    long_abstract: Optional[str] = None
    general_note: Optional[str] = None
    toc: Optional[str] = None
    cover_url: Optional[str] = None
    cover_caption: Optional[str] = None


@dataclass
class PatchWork:
    work_id: UUID
    work_type: WorkType
    work_status: WorkStatus
    full_title: str
    title: str
    imprint_id: UUID
    copyright_holder: str
    subtitle: Optional[str] = None
    reference: Optional[str] = None
    edition: Optional[int] = None
    doi: Optional[str] = None
    publication_date: Optional[date] = None
    place: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    page_count: Optional[int] = None
    page_breakdown: Optional[str] = None
    image_count: Optional[int] = None
    table_count: Optional[int] = None
    audio_count: Optional[int] = None
    video_count: Optional[int] = None
    license: Optional[str] = None
    landing_page: Optional[str] = None
    lccn: Optional[str] = None
    oclc: Optional[str] = None
    short_abstract: Optional[str] = None
    long_abstract: Optional[str] = None
    general_note: Optional[str] = None
    toc: Optional[str] = None
    cover_url: Optional[str] = None
    cover_caption: Optional[str] = None


class WorkField(Enum):
    WORK_ID = "work_id"
    WORK_TYPE = "work_type"
    WORK_STATUS = "work_status"
    FULL_TITLE = "full_title"
    TITLE = "title"
    SUBTITLE = "subtitle"
    REFERENCE = "reference"
    EDITION = "edition"
    DOI = "doi"
    PUBLICATION_DATE = "publication_date"
    PLACE = "place"
    WIDTH = "width"
    HEIGHT = "height"
    PAGE_COUNT = "page_count"
    PAGE_BREAKDOWN = "page_breakdown"
    IMAGE_COUNT = "image_count"
    TABLE_COUNT = "table_count"
    AUDIO_COUNT = "audio_count"
    VIDEO_COUNT = "video_count"
    LICENSE = "license"
    COPYRIGHT_HOLDER = "copyright_holder"
    LANDING_PAGE = "landing_page"
    LCCN = "lccn"
    OCLC = "oclc"
    SHORT_ABSTRACT = "short_abstract"
    LONG_ABSTRACT = "long_abstract"
    GENERAL_NOTE = "general_note"
    TOC = "toc"
    COVER_URL = "cover_url"
    COVER_CAPTION = "cover_caption"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Publication
# ---------------------------------------------------------------------------


@dataclass
class Publication:
    """A manifestation of a work in one format."""

    publication_id: UUID
    publication_type: PublicationType
    work_id: UUID
    isbn: Optional[str]
    publication_url: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class NewPublication:
    publication_type: PublicationType
    work_id: UUID
    isbn: Optional[str] = None
    publication_url: Optional[str] = None


@dataclass
class PatchPublication:
    publication_id: UUID
    publication_type: PublicationType
    work_id: UUID
    isbn: Optional[str] = None
    publication_url: Optional[str] = None


class PublicationField(Enum):
    PUBLICATION_ID = "publication_id"
    PUBLICATION_TYPE = "publication_type"
    WORK_ID = "work_id"
    ISBN = "isbn"
    PUBLICATION_URL = "publication_url"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Contributor
# ---------------------------------------------------------------------------


@dataclass
class Contributor:
    """A person who has been involved in the production of a written text."""

    contributor_id: UUID
    first_name: Optional[str]
    last_name: str
    full_name: str
    orcid: Optional[str]
    website: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class NewContributor:
    last_name: str
    full_name: str
    first_name: Optional[str] = None
    orcid: Optional[str] = None
    website: Optional[str] = None


@dataclass
class PatchContributor:
    contributor_id: UUID
    last_name: str
    full_name: str
    first_name: Optional[str] = None
    orcid: Optional[str] = None
    website: Optional[str] = None


class ContributorField(Enum):
    CONTRIBUTOR_ID = "contributor_id"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    FULL_NAME = "full_name"
    ORCID = "orcid"
    WEBSITE = "website"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Contribution
# ---------------------------------------------------------------------------


@dataclass
class Contribution:
    """A contributor's involvement in one work, keyed by (work, contributor, type)."""

    work_id: UUID
    contributor_id: UUID
    contribution_type: ContributionType
    main_contribution: bool
    biography: Optional[str]
    institution: Optional[str]
    first_name: Optional[str]
    last_name: str
    full_name: str
    contribution_ordinal: int
    created_at: datetime
    updated_at: datetime


@dataclass
class NewContribution:
    work_id: UUID
    contributor_id: UUID
    contribution_type: ContributionType
    main_contribution: bool
    last_name: str
    full_name: str
    contribution_ordinal: int
    biography: Optional[str] = None
    institution: Optional[str] = None
    first_name: Optional[str] = None


@dataclass
class PatchContribution:
    work_id: UUID
    contributor_id: UUID
    contribution_type: ContributionType
    main_contribution: bool
    last_name: str
    full_name: str
    contribution_ordinal: int
    biography: Optional[str] = None
    institution: Optional[str] = None
    first_name: Optional[str] = None


class ContributionField(Enum):
    WORK_ID = "work_id"
    CONTRIBUTOR_ID = "contributor_id"
    CONTRIBUTION_TYPE = "contribution_type"
    MAIN_CONTRIBUTION = "main_contribution"
    BIOGRAPHY = "biography"
    INSTITUTION = "institution"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    FULL_NAME = "full_name"
    CONTRIBUTION_ORDINAL = "contribution_ordinal"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Series
# ---------------------------------------------------------------------------


@dataclass
class Series:
    """A periodical or book series an imprint publishes works in."""

    series_id: UUID
    series_type: SeriesType
    series_name: str
    issn_print: str
    issn_digital: str
    series_url: Optional[str]
    imprint_id: UUID
    created_at: datetime
    updated_at: datetime


@dataclass
class NewSeries:
    series_type: SeriesType
    series_name: str
    issn_print: str
    issn_digital: str
    imprint_id: UUID
    series_url: Optional[str] = None


@dataclass
class PatchSeries:
    series_id: UUID
    series_type: SeriesType
    series_name: str
    issn_print: str
    issn_digital: str
    imprint_id: UUID
    series_url: Optional[str] = None


class SeriesField(Enum):
    SERIES_ID = "series_id"
    SERIES_TYPE = "series_type"
    SERIES_NAME = "series_name"
    ISSN_PRINT = "issn_print"
    ISSN_DIGITAL = "issn_digital"
    SERIES_URL = "series_url"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Issue
# ---------------------------------------------------------------------------


@dataclass
class Issue:
    """A work's place in a series, keyed by (series, work)."""

    series_id: UUID
    work_id: UUID
    issue_ordinal: int
    created_at: datetime
    updated_at: datetime


@dataclass
class NewIssue:
    series_id: UUID
    work_id: UUID
    issue_ordinal: int


@dataclass
class PatchIssue:
    series_id: UUID
    work_id: UUID
    issue_ordinal: int


class IssueField(Enum):
    SERIES_ID = "series_id"
    WORK_ID = "work_id"
    ISSUE_ORDINAL = "issue_ordinal"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Language
# ---------------------------------------------------------------------------


@dataclass
class Language:
    """A language a work is written in or translated from/into."""

    language_id: UUID
    work_id: UUID
    language_code: str
    language_relation: LanguageRelation
    main_language: bool
    created_at: datetime
    updated_at: datetime


@dataclass
class NewLanguage:
    work_id: UUID
    language_code: str
    language_relation: LanguageRelation
    main_language: bool


@dataclass
class PatchLanguage:
    language_id: UUID
    work_id: UUID
    language_code: str
    language_relation: LanguageRelation
    main_language: bool


class LanguageField(Enum):
    LANGUAGE_ID = "language_id"
    WORK_ID = "work_id"
    LANGUAGE_CODE = "language_code"
    LANGUAGE_RELATION = "language_relation"
    MAIN_LANGUAGE = "main_language"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Price
# ---------------------------------------------------------------------------


@dataclass
class Price:
    """The amount, in one currency, a publication costs."""

    price_id: UUID
    publication_id: UUID
    currency_code: str
    unit_price: float
    created_at: datetime
    updated_at: datetime


@dataclass
class NewPrice:
    publication_id: UUID
    currency_code: str
    unit_price: float


@dataclass
class PatchPrice:
    price_id: UUID
    publication_id: UUID
    currency_code: str
    unit_price: float


class PriceField(Enum):
    PRICE_ID = "price_id"
    PUBLICATION_ID = "publication_id"
    CURRENCY_CODE = "currency_code"
    UNIT_PRICE = "unit_price"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Subject
# ---------------------------------------------------------------------------


@dataclass
class Subject:
    """A discipline or term classifying a work."""

    subject_id: UUID
    work_id: UUID
    subject_type: SubjectType
    subject_code: str
    subject_ordinal: int
    created_at: datetime
    updated_at: datetime


@dataclass
class NewSubject:
    work_id: UUID
    subject_type: SubjectType
    subject_code: str
    subject_ordinal: int


@dataclass
class PatchSubject:
    subject_id: UUID
    work_id: UUID
    subject_type: SubjectType
    subject_code: str
    subject_ordinal: int


class SubjectField(Enum):
    SUBJECT_ID = "subject_id"
    WORK_ID = "work_id"
    SUBJECT_TYPE = "subject_type"
    SUBJECT_CODE = "subject_code"
    SUBJECT_ORDINAL = "subject_ordinal"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Funder
# ---------------------------------------------------------------------------


@dataclass
class Funder:
    """An organisation that pays for the publication of works."""

    funder_id: UUID
    funder_name: str
    funder_doi: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class NewFunder:
    funder_name: str
    funder_doi: Optional[str] = None


@dataclass
class PatchFunder:
    funder_id: UUID
    funder_name: str
    funder_doi: Optional[str] = None


class FunderField(Enum):
    FUNDER_ID = "funder_id"
    FUNDER_NAME = "funder_name"
    FUNDER_DOI = "funder_doi"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Funding
# ---------------------------------------------------------------------------


@dataclass
class Funding:
    """A grant awarded by a funder towards the publication of a work."""

    funding_id: UUID
    work_id: UUID
    funder_id: UUID
    program: Optional[str]
    project_name: Optional[str]
    project_shortname: Optional[str]
    grant_number: Optional[str]
    jurisdiction: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass
class NewFunding:
    work_id: UUID
    funder_id: UUID
    program: Optional[str] = None
    project_name: Optional[str] = None
    project_shortname: Optional[str] = None
    grant_number: Optional[str] = None
    jurisdiction: Optional[str] = None


@dataclass
class PatchFunding:
    funding_id: UUID
    work_id: UUID
    funder_id: UUID
    program: Optional[str] = None
    project_name: Optional[str] = None
    project_shortname: Optional[str] = None
    grant_number: Optional[str] = None
    jurisdiction: Optional[str] = None


class FundingField(Enum):
    FUNDING_ID = "funding_id"
    WORK_ID = "work_id"
    FUNDER_ID = "funder_id"
    PROGRAM = "program"
    PROJECT_NAME = "project_name"
    PROJECT_SHORTNAME = "project_shortname"
    GRANT_NUMBER = "grant_number"
    JURISDICTION = "jurisdiction"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------


@dataclass
class Location:
    """A URL where a publication can be accessed or bought."""

    location_id: UUID
    publication_id: UUID
    landing_page: Optional[str]
    full_text_url: Optional[str]
    location_platform: LocationPlatform
    canonical: bool
    created_at: datetime
    updated_at: datetime


@dataclass
class NewLocation:
    publication_id: UUID
    location_platform: LocationPlatform
    canonical: bool
    landing_page: Optional[str] = None
    full_text_url: Optional[str] = None


@dataclass
class PatchLocation:
    location_id: UUID
    publication_id: UUID
    location_platform: LocationPlatform
    canonical: bool
    landing_page: Optional[str] = None
    full_text_url: Optional[str] = None


class LocationField(Enum):
    LOCATION_ID = "location_id"
    PUBLICATION_ID = "publication_id"
    LANDING_PAGE = "landing_page"
    FULL_TEXT_URL = "full_text_url"
    LOCATION_PLATFORM = "location_platform"
    CANONICAL = "canonical"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
