"""Tests for the Everdell engine."""
