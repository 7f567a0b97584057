"""Core console logic, independent of any presentation layer.

Module Structure:
    - api/          : HTTP gateway and typed exceptions
    - models.py     : API data models (Session, TenantConfig, AccountSummary, ...)
    - screens.py    : Top-level screen state machine
    - state.py      : Explicit console state (session pair, banner, in-flight flag)
    - session.py    : Login, auto-login and logout
    - search.py     : Directory search and row rendering
    - forms.py      : Create/edit form models
    - validators.py : Local input validation
    - actions.py    : Mutating workflows (unlock, enable, disable, reset, create, edit)
    - modals.py     : Scoped dialog handles
    - controller.py : ConsoleController wiring everything together

Usage Pattern:
    Import explicitly when needed:
        from adminconsole.core.controller import ConsoleController
        from adminconsole.core.models import Filter, StatusFilter
        from adminconsole.core.search import RowAction
"""
