"""
Static entity declarations.

One EntityDef per catalogue table. Parent links describe the ownership
hierarchy:

    Publisher -> Imprint -> Work -> {Publication -> {Price, Location},
                                     Contribution, Language, Subject,
                                     Funding, Issue}
    Imprint -> Series

Publisher owns itself. Contributor and Funder are shared across
publishers and carry no parent.
"""

from __future__ import annotations

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
from .models import (
    Contribution,
    ContributionField,
    Contributor,
    ContributorField,
    Funder,
    FunderField,
    Funding,
    FundingField,
    Imprint,
    ImprintField,
    Issue,
    IssueField,
    Language,
    LanguageField,
    Location,
    LocationField,
    NewContribution,
    NewContributor,
    NewFunder,
    NewFunding,
    NewImprint,
    NewIssue,
    NewLanguage,
    NewLocation,
    NewPrice,
    NewPublication,
    NewPublisher,
    NewSeries,
    NewSubject,
    NewWork,
    PatchContribution,
    PatchContributor,
    PatchFunder,
    PatchFunding,
    PatchImprint,
    PatchIssue,
    PatchLanguage,
    PatchLocation,
    PatchPrice,
    PatchPublication,
    PatchPublisher,
    PatchSeries,
    PatchSubject,
    PatchWork,
    Price,
    PriceField,
    Publication,
    PublicationField,
    Publisher,
    PublisherField,
    Series,
    SeriesField,
    Subject,
    SubjectField,
    Work,
    WorkField,
)
from .types import ColumnDef, EntityDef, OrderBy, ParentLink, column


def _id(name: str) -> ColumnDef:
    return column(name, "uuid", generated=True)


def _ref(name: str) -> ColumnDef:
    return column(name, "uuid")


def _stamps() -> tuple[ColumnDef, ColumnDef]:
    return (
        column("created_at", "timestamp", generated=True),
        column("updated_at", "timestamp", generated=True),
    )


PUBLISHER = EntityDef(
    name="publisher",
    table="publisher",
    key=("publisher_id",),
    columns=(
        _id("publisher_id"),
        column("publisher_name", "str"),
        column("publisher_shortname", "str", nullable=True),
        column("publisher_url", "str", nullable=True),
        *_stamps(),
    ),
    entity_cls=Publisher,
    new_cls=NewPublisher,
    patch_cls=PatchPublisher,
    order_fields=PublisherField,
    default_order=OrderBy(PublisherField.PUBLISHER_NAME),
    text_columns=("publisher_name", "publisher_shortname"),
    description="Organisation that produces and distributes written texts",
)

IMPRINT = EntityDef(
    name="imprint",
    table="imprint",
    key=("imprint_id",),
    columns=(
        _id("imprint_id"),
        _ref("publisher_id"),
        column("imprint_name", "str"),
        column("imprint_url", "str", nullable=True),
        *_stamps(),
    ),
    entity_cls=Imprint,
    new_cls=NewImprint,
    patch_cls=PatchImprint,
    order_fields=ImprintField,
    default_order=OrderBy(ImprintField.IMPRINT_NAME),
    text_columns=("imprint_name", "imprint_url"),
    scope_columns=("publisher_id",),
    parent=ParentLink("publisher_id", "publisher"),
)

WORK = EntityDef(
    name="work",
    table="work",
    key=("work_id",),
    columns=(
        _id("work_id"),
        column("work_type", "enum", enum_type=WorkType),
        column("work_status", "enum", enum_type=WorkStatus),
        column("full_title", "str"),
        column("title", "str"),
        column("subtitle", "str", nullable=True),
        column("reference", "str", nullable=True),
        column("edition", "int", nullable=True),
        _ref("imprint_id"),
        column("doi", "str", nullable=True),
        column("publication_date", "date", nullable=True),
        column("place", "str", nullable=True),
        column("width", "int", nullable=True),
        column("height", "int", nullable=True),
        column("page_count", "int", nullable=True),
        column("page_breakdown", "str", nullable=True),
        column("image_count", "int", nullable=True),
        column("table_count", "int", nullable=True),
        column("audio_count", "int", nullable=True),
        column("video_count", "int", nullable=True),
        column("license", "str", nullable=True),
        column("copyright_holder", "str"),
        column("landing_page", "str", nullable=True),
        column("lccn", "str", nullable=True),
        column("oclc", "str", nullable=True),
        column("short_abstract", "str", nullable=True),
        column("long_abstract", "str", nullable=True),
        column("general_note", "str", nullable=True),
        column("toc", "str", nullable=True),
        column("cover_url", "str", nullable=True),
        column("cover_caption", "str", nullable=True),
        *_stamps(),
    ),
    entity_cls=Work,
    new_cls=NewWork,
    patch_cls=PatchWork,
    order_fields=WorkField,
    default_order=OrderBy(WorkField.FULL_TITLE),
    text_columns=(
        "full_title",
        "doi",
        "reference",
        "short_abstract",
        "long_abstract",
        "landing_page",
    ),
    type_filter_columns=("work_type", "work_status"),
    scope_columns=("imprint_id",),
    parent=ParentLink("imprint_id", "imprint"),
)

PUBLICATION = EntityDef(
    name="publication",
    table="publication",
    key=("publication_id",),
    columns=(
        _id("publication_id"),
        column("publication_type", "enum", enum_type=PublicationType),
        _ref("work_id"),
        column("isbn", "str", nullable=True),
        column("publication_url", "str", nullable=True),
        *_stamps(),
    ),
    entity_cls=Publication,
    new_cls=NewPublication,
    patch_cls=PatchPublication,
    order_fields=PublicationField,
    default_order=OrderBy(PublicationField.PUBLICATION_TYPE),
    text_columns=("isbn", "publication_url"),
    type_filter_columns=("publication_type",),
    scope_columns=("work_id",),
    parent=ParentLink("work_id", "work"),
)

CONTRIBUTOR = EntityDef(
    name="contributor",
    table="contributor",
    key=("contributor_id",),
    columns=(
        _id("contributor_id"),
        column("first_name", "str", nullable=True),
        column("last_name", "str"),
        column("full_name", "str"),
        column("orcid", "str", nullable=True),
        column("website", "str", nullable=True),
        *_stamps(),
    ),
    entity_cls=Contributor,
    new_cls=NewContributor,
    patch_cls=PatchContributor,
    order_fields=ContributorField,
    default_order=OrderBy(ContributorField.FULL_NAME),
    text_columns=("full_name", "orcid"),
    owned=False,
)

CONTRIBUTION = EntityDef(
    name="contribution",
    table="contribution",
    key=("work_id", "contributor_id", "contribution_type"),
    columns=(
        _ref("work_id"),
        _ref("contributor_id"),
        column("contribution_type", "enum", enum_type=ContributionType),
        column("main_contribution", "bool"),
        column("biography", "str", nullable=True),
        column("institution", "str", nullable=True),
        column("first_name", "str", nullable=True),
        column("last_name", "str"),
        column("full_name", "str"),
        column("contribution_ordinal", "int"),
        *_stamps(),
    ),
    entity_cls=Contribution,
    new_cls=NewContribution,
    patch_cls=PatchContribution,
    order_fields=ContributionField,
    default_order=OrderBy(ContributionField.CONTRIBUTION_TYPE),
    type_filter_columns=("contribution_type",),
    scope_columns=("work_id", "contributor_id"),
    parent=ParentLink("work_id", "work"),
)

SERIES = EntityDef(
    name="series",
    table="series",
    key=("series_id",),
    columns=(
        _id("series_id"),
        column("series_type", "enum", enum_type=SeriesType),
        column("series_name", "str"),
        column("issn_print", "str"),
        column("issn_digital", "str"),
        column("series_url", "str", nullable=True),
        _ref("imprint_id"),
        *_stamps(),
    ),
    entity_cls=Series,
    new_cls=NewSeries,
    patch_cls=PatchSeries,
    order_fields=SeriesField,
    default_order=OrderBy(SeriesField.SERIES_NAME),
    text_columns=("series_name", "issn_print", "issn_digital", "series_url"),
    type_filter_columns=("series_type",),
    scope_columns=("imprint_id",),
    parent=ParentLink("imprint_id", "imprint"),
)

ISSUE = EntityDef(
    name="issue",
    table="issue",
    key=("series_id", "work_id"),
    columns=(
        _ref("series_id"),
        _ref("work_id"),
        column("issue_ordinal", "int"),
        *_stamps(),
    ),
    entity_cls=Issue,
    new_cls=NewIssue,
    patch_cls=PatchIssue,
    order_fields=IssueField,
    default_order=OrderBy(IssueField.ISSUE_ORDINAL),
    scope_columns=("series_id", "work_id"),
    parent=ParentLink("work_id", "work"),
)

LANGUAGE = EntityDef(
    name="language",
    table="language",
    key=("language_id",),
    columns=(
        _id("language_id"),
        _ref("work_id"),
        column("language_code", "str"),
        column("language_relation", "enum", enum_type=LanguageRelation),
        column("main_language", "bool"),
        *_stamps(),
    ),
    entity_cls=Language,
    new_cls=NewLanguage,
    patch_cls=PatchLanguage,
    order_fields=LanguageField,
    default_order=OrderBy(LanguageField.LANGUAGE_CODE),
    type_filter_columns=("language_relation",),
    scope_columns=("work_id",),
    parent=ParentLink("work_id", "work"),
)

PRICE = EntityDef(
    name="price",
    table="price",
    key=("price_id",),
    columns=(
        _id("price_id"),
        _ref("publication_id"),
        column("currency_code", "str"),
        column("unit_price", "float"),
        *_stamps(),
    ),
    entity_cls=Price,
    new_cls=NewPrice,
    patch_cls=PatchPrice,
    order_fields=PriceField,
    default_order=OrderBy(PriceField.CURRENCY_CODE),
    scope_columns=("publication_id",),
    parent=ParentLink("publication_id", "publication"),
)

SUBJECT = EntityDef(
    name="subject",
    table="subject",
    key=("subject_id",),
    columns=(
        _id("subject_id"),
        _ref("work_id"),
        column("subject_type", "enum", enum_type=SubjectType),
        column("subject_code", "str"),
        column("subject_ordinal", "int"),
        *_stamps(),
    ),
    entity_cls=Subject,
    new_cls=NewSubject,
    patch_cls=PatchSubject,
    order_fields=SubjectField,
    default_order=OrderBy(SubjectField.SUBJECT_TYPE),
    text_columns=("subject_code",),
    type_filter_columns=("subject_type",),
    scope_columns=("work_id",),
    parent=ParentLink("work_id", "work"),
)

FUNDER = EntityDef(
    name="funder",
    table="funder",
    key=("funder_id",),
    columns=(
        _id("funder_id"),
        column("funder_name", "str"),
        column("funder_doi", "str", nullable=True),
        *_stamps(),
    ),
    entity_cls=Funder,
    new_cls=NewFunder,
    patch_cls=PatchFunder,
    order_fields=FunderField,
    default_order=OrderBy(FunderField.FUNDER_NAME),
    text_columns=("funder_name", "funder_doi"),
    owned=False,
)

FUNDING = EntityDef(
    name="funding",
    table="funding",
    key=("funding_id",),
    columns=(
        _id("funding_id"),
        _ref("work_id"),
        _ref("funder_id"),
        column("program", "str", nullable=True),
        column("project_name", "str", nullable=True),
        column("project_shortname", "str", nullable=True),
        column("grant_number", "str", nullable=True),
        column("jurisdiction", "str", nullable=True),
        *_stamps(),
    ),
    entity_cls=Funding,
    new_cls=NewFunding,
    patch_cls=PatchFunding,
    order_fields=FundingField,
    default_order=OrderBy(FundingField.PROGRAM),
    scope_columns=("work_id", "funder_id"),
    parent=ParentLink("work_id", "work"),
)

LOCATION = EntityDef(
    name="location",
    table="location",
    key=("location_id",),
    columns=(
        _id("location_id"),
        _ref("publication_id"),
        column("landing_page", "str", nullable=True),
        column("full_text_url", "str", nullable=True),
        column("location_platform", "enum", enum_type=LocationPlatform),
        column("canonical", "bool"),
        *_stamps(),
    ),
    entity_cls=Location,
    new_cls=NewLocation,
    patch_cls=PatchLocation,
    order_fields=LocationField,
    default_order=OrderBy(LocationField.LOCATION_PLATFORM),
    type_filter_columns=("location_platform",),
    scope_columns=("publication_id",),
    parent=ParentLink("publication_id", "publication"),
)

# Registration order: parents before children.
ALL_ENTITIES: tuple[EntityDef, ...] = (
    PUBLISHER,
    IMPRINT,
    WORK,
    PUBLICATION,
    CONTRIBUTOR,
    CONTRIBUTION,
    SERIES,
    ISSUE,
    LANGUAGE,
    PRICE,
    SUBJECT,
    FUNDER,
    FUNDING,
    LOCATION,
)
