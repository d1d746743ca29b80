"""
Task subsystem.

Components:
- task_models.py: data structures (ProjectType, Task, Annotation, ValidationReport)
- projects.py: static ProjectType -> backend project / storage key / field names table
- normalizer.py: slims upstream payloads into Task records
- annotations.py: builds project-specific annotation payloads
- validation.py: pure pre-render / pre-submission checks
- fixtures.py: bundled task sets (static fallback, survey tasks)
- fallback.py: cache -> bundled fixtures resolution after failed fetches
- quality.py: per-task completion metrics
- task_service.py: orchestration used by the rest of the app
- maintenance.py: operator-run backend data repairs
"""
