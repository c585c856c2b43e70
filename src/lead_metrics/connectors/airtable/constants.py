"""Airtable REST API query parameters and error types."""

# Query parameters
FIELDS_PARAM = "fields[]"
FILTER_PARAM = "filterByFormula"
OFFSET_PARAM = "offset"
PAGE_SIZE_PARAM = "pageSize"

# Response keys
RECORDS_KEY = "records"
OFFSET_KEY = "offset"
ERROR_KEY = "error"

# Error types reported for missing records/tables
NOT_FOUND_TYPES = frozenset({"NOT_FOUND", "MODEL_ID_NOT_FOUND", "TABLE_NOT_FOUND"})

USER_AGENT = "lead-metrics/0.1"
