"""Swipe matching and recommendation engine."""
