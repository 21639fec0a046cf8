"""
climatesync - Track Code Climate issues as work items.

Public API:
- WorkItemClient: create/update/get/query work items, provision fields
- IssueSynchronizer: upsert a whole report, keyed by issue fingerprint
- AnalysisIssue / WorkItem / WorkItemField: domain models
"""

__version__ = "0.1.0"
