"""Spaced-repetition review scheduling for vocabulary cards."""
