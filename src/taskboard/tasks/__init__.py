"""
Task subsystem.

Components:
- task_models.py: data structures (Task, DerivedTask, Metrics, enums)
- normalize.py: untrusted records -> Task, per-field sanitizers
- metrics.py: ROI and aggregate metrics
- sorting.py: deterministic presentation order
- task_store.py: in-memory collection, CRUD and single-slot undo
- loader.py / seed.py / export.py: initial data, placeholder data, CSV
"""
