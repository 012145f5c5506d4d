"""Injectable random source backed by Faker.

Everything that needs randomness (value generation, repair placeholders)
takes a RandomSource, so tests can pass a seeded one or a stub.
"""

import string
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

from faker import Faker

ALPHANUMERIC = string.ascii_letters + string.digits
LOWER_ALPHANUMERIC = string.ascii_lowercase + string.digits
PASSWORD_POOL = ALPHANUMERIC + "!@#$%^&*"


class RandomSource:
    """Random primitives plus category helpers for realistic values."""

    def __init__(self, seed: int | None = None, locale: str = "en_US"):
        self.fake = Faker(locale)
        self.fake.seed_instance(seed)
        self.random = self.fake.random

    # -- primitives -----------------------------------------------------------

    def next_int(self, low: int, high: int) -> int:
        """Random integer in [low, high)."""
        return self.random.randrange(low, high)

    def next_float(self, low: float, high: float, digits: int = 2) -> float:
        return round(self.random.uniform(low, high), digits)

    def pick(self, items: Sequence[Any]) -> Any:
        return self.random.choice(items)

    def boolean(self) -> bool:
        return self.random.random() < 0.5

    def uuid(self) -> str:
        return str(uuid.UUID(int=self.random.getrandbits(128), version=4))

    def string(self, length: int, pool: str = ALPHANUMERIC) -> str:
        return "".join(self.random.choices(pool, k=length))

    def timestamp(self, days_ahead: int | None = None) -> str:
        """ISO-8601 UTC timestamp with milliseconds and a ``Z`` suffix."""
        if days_ahead is None:
            moment = self.fake.date_time_between("-30y", "+30y", tzinfo=timezone.utc)
        else:
            moment = datetime.now(timezone.utc) + timedelta(days=days_ahead)
        return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    # -- category helpers -----------------------------------------------------

    def full_name(self) -> str:
        return self.fake.name()

    def first_name(self) -> str:
        return self.fake.first_name()

    def last_name(self) -> str:
        return self.fake.last_name()

    def email(self) -> str:
        return self.fake.email()

    def phone(self) -> str:
        return self.fake.phone_number()

    def street(self) -> str:
        return self.fake.street_address()

    def city(self) -> str:
        return self.fake.city()

    def state(self) -> str:
        return self.fake.state()

    def country(self) -> str:
        return self.fake.country()

    def postcode(self) -> str:
        return self.fake.postcode()

    def company(self) -> str:
        return self.fake.company()

    def job(self) -> str:
        return self.fake.job()

    def username(self) -> str:
        return self.fake.user_name()

    def url(self) -> str:
        return self.fake.url()

    def paragraph(self, sentences: int = 3) -> str:
        return self.fake.paragraph(nb_sentences=sentences)

    def sentence(self, words: int = 6) -> str:
        return self.fake.sentence(nb_words=words)

    def word(self) -> str:
        return self.fake.word()

    def color(self) -> str:
        return self.fake.hex_color()

    def credit_card_number(self) -> str:
        return self.fake.credit_card_number()

    def credit_card_type(self) -> str:
        return self.fake.credit_card_provider()
