"""
Shared module for code used by the REST API, the CLI and the tests.

STRUCTURE:
- shared.security: Authentication and restaurant scoping
  - auth.py: JWT signing/verification, current_user_context, restaurant_scope

- shared.infrastructure: Database and messaging
  - db.py: SQLAlchemy sessions, safe_commit()
  - correlation.py: request id and restaurant id bound to log records
  - events/: Redis pool, channel names, event envelope

- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging and security audit helpers
  - constants.py: Statuses, order types, limits

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Quantity and free-text checks
  - periods.py: Day and month bounds in the restaurant time zone
  - schemas.py: Shared Pydantic schemas

IMPORT EXAMPLES:
    from shared.security.auth import restaurant_scope, RestaurantScope
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import OrderStatus, TableStatus
    from shared.utils.exceptions import NotFoundError, InvalidTransitionError
"""
