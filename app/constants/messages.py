"""Display constants shared by the projections."""

ZONE_ID_OSLO = "Europe/Oslo"

UNKNOWN = "Unknown"
NOT_DEFINED = "Not defined"
NOT_FOUND = "Not found"
UNKNOWN_MESSAGE_STATUS = "Status is unknown"

# Display name of the gateway operator, used for every outbound message
SYSTEM_OPERATOR_NAME = "NAV"
SYSTEM_OPERATOR_CODE = "NAVM"
UNKNOWN_SENDER_CODE = "????"

ACKNOWLEDGMENT_ACTION = "Acknowledgment"
NOT_APPLICABLE_ROLE = "Not applicable"
