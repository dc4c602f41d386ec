"""Application constants."""

# Clock-out below this many hours is recorded as an early out
EARLY_OUT_THRESHOLD_HOURS = 6.5

# Announcement ordering (higher first)
PRIORITY_RANK: dict[str, int] = {
    "high": 3,
    "medium": 2,
    "low": 1,
}

DEFAULT_AVERAGE_HOURS_DAYS = 5
DEFAULT_TRENDS_DAYS = 30
DEFAULT_CHAT_LIMIT = 50
MAX_CHAT_LIMIT = 200

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# Titles used when employee documents are attached from the employee form
EMPLOYEE_DOCUMENT_TITLES: dict[str, str] = {
    "id_proof_front": "CNIC Front",
    "id_proof_back": "CNIC Back",
    "offer_letter": "Job Offer Letter",
}
