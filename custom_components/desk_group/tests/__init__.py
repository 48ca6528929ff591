"""Tests for the Desk Group integration."""
