"""
Test suite for the DocSpot API.

Contains integration tests for the HTTP endpoints and unit tests for the
access policy.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
