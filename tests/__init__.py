"""
Test package for Clerk User Sync.

- unit/: unit tests per package module (webhooks, api, repositories, integrations, core, models)
"""
