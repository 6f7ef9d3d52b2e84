"""Shared fixtures: a small user-signup container and its fake database."""

from __future__ import annotations

import pytest

from opflow import Success


class NotValidError(Exception):
    """Raised by the validate operation when the email is missing."""


@pytest.fixture
def db() -> list:
    return []


@pytest.fixture
def container(db):
    def process(value):
        return {"name": value.get("name"), "email": value.get("email")}

    def verify(value):
        return Success(value)

    def validate(value):
        if value["email"] is None:
            raise NotValidError("email required")
        return value

    def persist(value):
        db.append(value)
        return True

    return {
        "process": process,
        "verify": verify,
        "validate": validate,
        "persist": persist,
    }


@pytest.fixture
def jane() -> dict:
    return {"name": "Jane", "email": "jane@doe.com"}


@pytest.fixture
def not_valid_error() -> type[NotValidError]:
    return NotValidError
