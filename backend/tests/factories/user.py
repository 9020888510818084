"""Factory Boy definition for :class:`tubehub.models.user.User`."""

from __future__ import annotations

import factory
from werkzeug.security import generate_password_hash

from tests.factories import BaseFactory
from tubehub.models.user import User


class UserFactory(BaseFactory):
    """
    Build persisted :class:`tubehub.models.user.User` instances.

    Notes
    -----
    - ``password`` is a factory parameter; only its hash reaches the model.
    - A low-iteration PBKDF2 hash keeps the suite fast; werkzeug verifies it
      like any other method.
    """

    class Meta:
        model = User

    class Params:
        password = "Passw0rd!"

    id = None  # let autoincrement handle it
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    username = factory.Sequence(lambda n: f"user{n}")
    full_name = factory.Faker("name")
    avatar_url = factory.LazyAttribute(lambda o: f"https://cdn.example.com/avatars/{o.username}.png")
    cover_image_url = None
    password_hash = factory.LazyAttribute(
        lambda o: generate_password_hash(o.password, method="pbkdf2:sha256:1000")
    )
    refresh_token = None
