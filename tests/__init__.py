"""Tests - Test suite for primitives and the divisor engine."""
