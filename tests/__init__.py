"""Test suite for ShareBudget."""
