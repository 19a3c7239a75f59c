"""Prometheus metrics for DonorHub.

Defines operational metrics for donor matching and the audit trail.
"""

from prometheus_client import Counter, Histogram

# Donor matching metrics
donor_match_requests_total = Counter(
    "donorhub_donor_match_requests_total",
    "Total donor matching runs",
    ["event_focus"]  # fundraising|attendees|engagement
)

donor_match_duration_seconds = Histogram(
    "donorhub_donor_match_duration_seconds",
    "Time spent scoring and ranking a donor pool in seconds",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

donor_match_results = Histogram(
    "donorhub_donor_match_results",
    "Number of donors returned per matching run",
    buckets=[0, 1, 5, 10, 25, 50, 100, 250, 500]
)

# Audit trail metrics
audit_entries_written_total = Counter(
    "donorhub_audit_entries_written_total",
    "Audit log entries persisted",
    ["action", "entity_type"]
)

audit_write_failures_total = Counter(
    "donorhub_audit_write_failures_total",
    "Audit log entries dropped because persistence failed",
    ["error_type"]
)

audit_payload_decode_failures_total = Counter(
    "donorhub_audit_payload_decode_failures_total",
    "Stored audit payloads that could not be decoded"
)
