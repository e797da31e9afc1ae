"""Tests for key-smtmgr."""
