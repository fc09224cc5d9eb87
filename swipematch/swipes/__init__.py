"""
Swipe history: recording decisions and answering reciprocity questions.
"""
