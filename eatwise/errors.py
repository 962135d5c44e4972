# -*- coding: utf-8 -*-
"""Engine error taxonomy.

Every error carries a human-readable ``message`` and the HTTP status the API
layer renders it with. All errors are terminal for the request; nothing here
is retried by the engine.
"""

from __future__ import annotations


class EngineError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EntityNotFound(EngineError):
    """User input does not resolve to any known ingredient or condition."""

    status_code = 404


class InvalidFilter(EngineError):
    status_code = 400


class InvalidRequest(EngineError):
    status_code = 400


class DuplicateInteraction(EngineError):
    """The same ordered pair already carries this interaction label."""

    status_code = 409


class StoreUnavailable(EngineError):
    status_code = 503


class StoreTimeout(StoreUnavailable):
    status_code = 504
