"""
Constants
Run statuses, trigger events and ref prefixes shared across the pipeline.
"""
# Non-terminal statuses listed by the collector, in query order
TRACKED_STATUSES = ("queued", "in_progress")
COMPLETED_STATUS = "completed"

# Only runs started by these events are ever considered duplicates
ACCEPTED_EVENTS = frozenset({"push", "pull_request"})

BRANCH_PREFIX = "refs/heads/"
TAG_PREFIX = "refs/tags/"

# Skip reasons reported by the duplicate policy
SKIP_NEWER_OR_SELF = "newer_or_self"
SKIP_COMPLETED = "completed"
SKIP_EVENT_MISMATCH = "event_mismatch"
