"""Factory Boy definition for :class:`authapp.models.user.User`."""

from __future__ import annotations

import factory
from werkzeug.security import generate_password_hash

from authapp.models.user import User
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "secret1"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`authapp.models.user.User` instances.

    Notes
    -----
    - ``raw_password`` is hashed like the model setter does.
    - ``oauth=True`` builds an identity-provider account without a password.
    """

    class Meta:
        model = User

    class Params:
        oauth = False
        raw_password = DEFAULT_PASSWORD

    id = None  # let autoincrement handle it
    name = factory.Faker("name")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    image = None
    password_hash = factory.LazyAttribute(
        lambda o: None if o.oauth else generate_password_hash(o.raw_password)
    )
