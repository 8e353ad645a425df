"""
Syndesis REST End-to-End Suite

Drives a Syndesis installation and the third-party services its integrations
talk to (Twitter, Salesforce, GitHub) and checks that configured integrations
move data between them.
"""

__version__ = "1.0.0"
