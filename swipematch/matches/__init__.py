"""
Swipe ingestion and mutual-match detection.

Responsibilities:
- Accept a swipe, drop the swiped card from the author's recommendations,
  and persist the swipe.
- Detect mutual likes and record one match entry per user.
- Notify the passive user of a new match without blocking the swipe.
- Serve a user's match list a page at a time.
"""
