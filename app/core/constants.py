"""Core constants: document collection names and shared literal values.

The store has no DDL; collections appear on first write. These names are
the single source of truth for the "schema" shared by use cases and tests.
"""

# Platform entities
COLLECTION_USERS = "users"
COLLECTION_PROGRAMS = "programs"
COLLECTION_EVENTS = "events"
COLLECTION_TASKS = "tasks"
COLLECTION_CERTIFICATES = "certificates"
COLLECTION_ADMISSIONS = "admissionApplications"
COLLECTION_BLOG_POSTS = "blogPosts"

# Sports
COLLECTION_ATHLETES = "athletes"
COLLECTION_TRAINING_SESSIONS = "trainingSessions"

# Collection groups (sub-collections at any depth)
GROUP_SESSIONS = "sessions"
GROUP_ANALYTICS = "analytics"
GROUP_ENROLLMENTS = "enrollments"  # programs/{id}/enrollments
GROUP_COMPLETIONS = "completions"  # programs/{id}/completions

# Shared field names
FIELD_CREATED_AT = "createdAt"
FIELD_UPDATED_AT = "updatedAt"
FIELD_LAST_ACTIVE_AT = "lastActiveAt"
FIELD_START_DATE = "startDate"
FIELD_DUE_DATE = "dueDate"
FIELD_COMPLETED_AT = "completedAt"
FIELD_END_TIME = "endTime"
FIELD_STATUS = "status"
FIELD_TYPE = "type"

PROGRAM_TYPE_TRAINING = "training"
ATHLETE_STATUS_SCOUTED = "scouted"
