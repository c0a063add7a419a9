from expo_bot.services.attendee_service import (
    upsert_user, get_user,
    register_delegate, list_attendees, count_attendees,
    register_marathon_runner, count_marathon_entries,
)
from expo_bot.services.package_service import (
    Package, PackageCatalog, CatalogStatus,
    fetch_active_packages, get_package, seed_default_packages,
)
from expo_bot.services.comparison_service import (
    SelectionSet, ComparisonMatrix, MAX_COMPARED,
    compute_benefit_rows, build_comparison, render_comparison,
)
from expo_bot.services.draft_service import (
    RegistrationDraft, DraftAggregator, LogoFile, SocialMedia,
    WIZARD_STEPS, STEP_IDS,
    get_aggregator, save_aggregator, dump_aggregator, load_aggregator,
)
from expo_bot.services.registration_service import (
    SubmissionResult, RegistrationSubmitter,
    build_registration_payload, insert_registration, submit_registration,
    list_recent_registrations, count_registrations,
)
from expo_bot.services.storage_service import (
    StorageError, StoredFile, FileStorage, LocalFileStorage,
)

__all__ = [
    # users / attendees
    "upsert_user", "get_user",
    "register_delegate", "list_attendees", "count_attendees",
    "register_marathon_runner", "count_marathon_entries",
    # package catalog
    "Package", "PackageCatalog", "CatalogStatus",
    "fetch_active_packages", "get_package", "seed_default_packages",
    # comparison
    "SelectionSet", "ComparisonMatrix", "MAX_COMPARED",
    "compute_benefit_rows", "build_comparison", "render_comparison",
    # wizard draft
    "RegistrationDraft", "DraftAggregator", "LogoFile", "SocialMedia",
    "WIZARD_STEPS", "STEP_IDS",
    "get_aggregator", "save_aggregator", "dump_aggregator", "load_aggregator",
    # submission
    "SubmissionResult", "RegistrationSubmitter",
    "build_registration_payload", "insert_registration", "submit_registration",
    "list_recent_registrations", "count_registrations",
    # storage
    "StorageError", "StoredFile", "FileStorage", "LocalFileStorage",
]
