"""
Short ID Allocator

Generates random fixed-length short ids and persists new ShortLink rows
under them.

Design Decisions:
- Uniform random ids: `length` characters drawn independently from `alphabet`
  (62^8 ~ 2.2e14 ids with the defaults)
- No existence pre-check: a check-then-insert leaves a window in which two
  writers can pick the same id. The unique index on short_id is the only
  collision signal; an IntegrityError on insert means "taken", and the
  allocator rolls back, draws a new id and inserts again
- Retries are unbounded: with a sparse id space they are rare, and each one
  costs a single insert round trip
- Any other database failure is surfaced as StoreUnavailableError
- Ids that spell a fixed route (/urls, /health, ...) are never issued; they
  only matter when SHORT_ID_LENGTH is configured to 4, 5 or 6
"""

import logging
import secrets
import string
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.core.exceptions import StoreUnavailableError
from shortlinks.db.models import ShortLink

logger = logging.getLogger(__name__)

DEFAULT_ALPHABET = string.ascii_letters + string.digits
DEFAULT_LENGTH = 8

# Paths served by fixed GET routes; an id equal to one of these could never redirect
RESERVED_SHORT_IDS = frozenset({"urls", "health", "docs", "redoc"})


def generate_short_id(length: int = DEFAULT_LENGTH, alphabet: str = DEFAULT_ALPHABET) -> str:
    """
    Generate a random short id.

    Args:
        length: Number of characters (default: 8)
        alphabet: Characters to draw from (default: [A-Za-z0-9])

    Returns:
        Random string of exactly `length` characters from `alphabet`
    """
    if length < 1:
        raise ValueError(f"Short id length must be positive, got {length}")
    if not alphabet:
        raise ValueError("Short id alphabet must not be empty")
    return "".join(secrets.choice(alphabet) for _ in range(length))


class ShortIdAllocator:
    """
    Allocates collision-free short ids by inserting ShortLink rows.

    Args:
        session: Database session used for the insert transactions
        length: Short id length
        alphabet: Short id characters
        generator: Id source, called as generator(length, alphabet);
                   replaceable for deterministic tests
    """

    def __init__(
        self,
        session: AsyncSession,
        length: int = DEFAULT_LENGTH,
        alphabet: str = DEFAULT_ALPHABET,
        generator: Optional[Callable[[int, str], str]] = None
    ):
        self.session = session
        self.length = length
        self.alphabet = alphabet
        self.generator = generator or generate_short_id

    async def allocate(self, owner_id: str, long_url: str) -> ShortLink:
        """
        Insert a new ShortLink under a freshly allocated short id.

        Loops until an insert commits; a duplicate-key rejection triggers
        a new id. The returned link is persisted with click_count 0.

        Args:
            owner_id: Principal creating the link
            long_url: Validated target URL

        Returns:
            The committed ShortLink

        Raises:
            StoreUnavailableError: If the store fails for any other reason
        """
        attempts = 0
        while True:
            attempts += 1
            short_id = self.generator(self.length, self.alphabet)
            if short_id in RESERVED_SHORT_IDS:
                logger.debug(f"Skipping reserved short id '{short_id}'")
                continue

            short_link = ShortLink(
                owner_id=owner_id,
                long_url=long_url,
                short_id=short_id,
                click_count=0
            )

            try:
                self.session.add(short_link)
                await self.session.commit()
            except IntegrityError:
                await self.session.rollback()
                logger.warning(
                    f"Short id collision on '{short_id}' (attempt {attempts}), retrying"
                )
                continue
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(f"Failed to insert short link: {str(e)}", exc_info=True)
                raise StoreUnavailableError(
                    "failed to insert short link",
                    original_error=e
                ) from e

            return short_link
