"""Prometheus counters for the ingestion path."""

from prometheus_client import Counter

# payload: message_detail | event
RECORDS_DECODED = Counter(
    "ebms_records_decoded_total", "Queue records decoded", ["payload"]
)
RECORDS_UNDECODABLE = Counter(
    "ebms_records_undecodable_total",
    "Queue records logged and dropped because they could not be decoded",
    ["payload"],
)
RECORDS_REJECTED = Counter(
    "ebms_records_rejected_total",
    "Queue records logged and dropped because the store refused the write",
    ["topic"],
)
# reason: store_unavailable | unexpected
RECORDS_RETRIED = Counter(
    "ebms_records_retried_total",
    "Queue records left uncommitted for redelivery",
    ["topic", "reason"],
)
RECORDS_COMMITTED = Counter(
    "ebms_records_committed_total", "Queue offsets committed", ["topic"]
)
