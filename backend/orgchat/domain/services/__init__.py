"""
DOMAIN SERVICES - Pure messaging rules (no I/O)

- permission_matrix.py → who may message whom
- timeline.py          → snapshot transforms of a conversation list
- day_grouping.py      → calendar-day buckets for rendering
- contact_listing.py   → contact search / grouping
- replies.py           → reply quotes
"""
