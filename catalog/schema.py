"""
Collections read by the directory and the columns each one exposes.

Sort and filter fields are checked against these before a query is sent.
"""

from .query import Collection


JOURNALS = Collection(
    name="journals",
    columns=frozenset({
        "id",
        "full_title",
        "short_title",
        "acronym",
        "description",
        "aims_scope",
        "cover_image_url",
        "banner_image_url",
        "subject_area",
        "publisher_org_id",
        "society_org_id",
        "journal_type",
        "peer_review_type",
        "issn_print",
        "issn_online",
        "e_issn",
        "language",
        "publication_frequency",
        "first_publication_year",
        "is_featured",
        "is_indexed",
        "views_count",
        "downloads_count",
        "website_url",
        "email",
        "status",
        "created_at",
        "updated_at",
        "deleted_at",
    }),
)

USER_PROFILES = Collection(
    name="user_profiles",
    columns=frozenset({
        "id",
        "full_name",
        "email",
        "role",
        "approval_status",
        "created_at",
    }),
)

JOURNAL_EDITORIAL_TEAM = Collection(
    name="journal_editorial_team",
    columns=frozenset({
        "id",
        "journal_id",
        "person_id",
        "role",
        "role_type",
        "is_active",
        "created_at",
    }),
)
