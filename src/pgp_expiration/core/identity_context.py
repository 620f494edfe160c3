"""Identity context variable for logging"""

import contextvars

# Create a context variable to store the identity being evaluated.
# Every asyncio task gets its own copy, so concurrent evaluations don't mix.
identity_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "identity", default=None
)
