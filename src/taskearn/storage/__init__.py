"""
Local persistence.

- kv_store.py: SQLite key-value store (atomic per-key replace)
- cache_store.py: per-project task cache + completed-task record
"""
