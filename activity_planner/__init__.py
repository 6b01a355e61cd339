"""
Young child activity planner.

Purpose:
    Schedules and tracks activities of children aged 3 to 6, keeps the data in a
    plain text file and derives simple progress figures.

Contents:
    - Model layer: dataclasses (`models.py`), recommendation table
    - Persistence: text codec (`codec.py`) and file store (`file_store.py`)
    - Manager layer: child/activity CRUD and business rules (`managers.py`)
    - Analytics: daily progress, comparison, suggestions (`analytics.py`)
    - Service layer: `PlannerService` facade (`services.py`)
    - Front end: command line (`main.py`), text reports (`reports.py`)
"""

__all__ = []
