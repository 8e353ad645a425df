"""
Integration tests for the Syndesis REST end-to-end suite.

These tests validate the complete scenario including:
- Account loading and context wiring
- Connection and integration creation on the management API
- Waiting for activation
- Tweet to Salesforce contact verification
- Cleanup of every external artifact
"""
